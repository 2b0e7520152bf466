"""
PLONK Verifier: 선형화 커밋먼트 쿼리 준비
===========================================

  ┌─────────────────────────────────────────────────┐
  │  입력:  검증 키 커밋먼트, 평가값, 챌린지          │
  │  출력:  [D0], [D1], [t], 병합 계수 3개           │
  └─────────────────────────────────────────────────┘

**[D0]**: 몫 다항식 조각의 재결합
    [D0] = [t_0] + z^n·[t_1] + z^(2n)·[t_2] + z^(3n)·[t_3]

**[D1]**: 선형화 다항식 r(x)의 커밋먼트 부분 (v가 곱해진 상태)

  메인 게이트:
    v·q_main(z) · (a·[q_a] + b·[q_b] + c·[q_c] + d·[q_d]
                   + ab·[q_ab] + ac·[q_ac] + [q_const] + d(zω)·[q_d_next])

  Rescue 커스텀 게이트:
    v · (α(a² - b) + α²(b² - c) + α³(ca - d)) · [q_rescue]

  복사 순열의 σ₃ 항:
    - v·α⁴·β·z_perm(zω)·Π_{i=0..2}(w_i + β·σ_i + γ) · [σ₃]

**병합 계수**:
  [z_perm], [s], [z_lookup]은 zω에서도 열리므로 D1에 더하지 않고 계수만
  저장한다. 집계 단계에서 zω 쪽 계수와 합쳐 한 번의 스칼라 곱으로 처리된다.

    [z_perm]:   v·(α⁴·Π_{i=0..3}(w_i + β·z·k_i + γ) + α⁵·L₀(z)),  k = (1, 5, 7, 10)
    [s]:        v·α⁶·(z - ω^(n-1))·z_lookup(zω)
    [z_lookup]: v·(-(f·(β'+1)·(γ'(β'+1) + t(z) + β'·t(zω)))·α⁶·(z - ω^(n-1))
                   + α⁷·L₀(z) + α⁸·L_{n-1}(z))

  여기서 f = (a + η·b + η²·c + η³·table_type)·q_lookup + γ' 는 따로 커밋되지
  않은 룩업 쿼리 다항식의 z에서의 값이다.

**[t]**: 룩업 테이블 열의 η 결합
    [t] = [col_0] + η·[col_1] + η²·[col_2] + η³·[col_3]
"""

from rollup_zkp.plonk.field import FR, ec_add, ec_mul, ec_sub


def quotient_parts_recombination(state):
    """[D0] = Σ z^(jn)·[t_j]"""
    parts = state.proof.quotient_poly_parts
    result = parts[0]
    current_z = state.z_in_domain_size
    for part in parts[1:]:
        result = ec_add(result, ec_mul(part, current_z))
        current_z = current_z * state.z_in_domain_size
    return result


def main_gate_linearisation_contribution_with_v(state):
    vk = state.vk
    proof = state.proof
    a, b, c, d = proof.state_polys_openings_at_z

    scalars = [a, b, c, d, a * b, a * c]
    result = None
    for commitment, scalar in zip(vk.gate_setup[:6], scalars):
        result = ec_add(result, ec_mul(commitment, scalar))
    result = ec_add(result, vk.gate_setup[6])
    result = ec_add(result, ec_mul(vk.gate_setup[7], proof.state_poly_3_opening_at_z_omega))

    coeff = state.v * proof.gate_selector_0_opening_at_z
    return ec_mul(result, coeff)


def rescue_custom_gate_linearisation_contribution_with_v(state):
    a, b, c, d = state.proof.state_polys_openings_at_z
    alpha_powers = state.alpha_powers

    accumulator = (a * a - b) * alpha_powers[1]
    accumulator = accumulator + (b * b - c) * alpha_powers[2]
    accumulator = accumulator + (c * a - d) * alpha_powers[3]
    accumulator = accumulator * state.v
    return ec_mul(state.vk.gate_selectors[1], accumulator)


def permutation_linearisation_contribution_with_v(state):
    """σ₃ 항을 반환하고, [z_perm]의 병합 계수를 저장한다."""
    proof = state.proof
    vk = state.vk
    openings = proof.state_polys_openings_at_z
    sigmas = proof.copy_permutation_polys_openings_at_z
    beta, gamma = state.beta, state.gamma

    # ── σ₃ 항 (D1에서 뺀다) ──
    factor = proof.copy_permutation_grand_product_opening_at_z_omega * beta
    for opening, sigma in zip(openings[:3], sigmas):
        factor = factor * (opening + beta * sigma + gamma)
    factor = factor * state.v * state.alpha_powers[4]
    sigma_3_term = ec_mul(vk.permutation[3], factor)

    # ── [z_perm] 계수 ──
    coset_shifts = (FR(1),) + vk.non_residues
    beta_z = beta * state.z
    factor = FR(1)
    for opening, k in zip(openings, coset_shifts):
        factor = factor * (opening + beta_z * k + gamma)
    factor = factor * state.alpha_powers[4] + state.l_0_at_z * state.alpha_powers[5]
    state.copy_permutation_first_aggregated_commitment_coeff = factor * state.v

    return sigma_3_term


def lookup_linearisation_contribution_with_v(state):
    """[s], [z_lookup]의 병합 계수를 저장한다 (D1에 더하는 점은 없다)."""
    proof = state.proof
    a, b, c, _ = proof.state_polys_openings_at_z
    alpha_6_z_minus_last_omega = state.alpha_powers[6] * state.z_minus_last_omega

    state.lookup_s_first_aggregated_commitment_coeff = (
        proof.lookup_grand_product_opening_at_z_omega
        * alpha_6_z_minus_last_omega
        * state.v
    )

    # f(z) 재구성
    eta = state.eta
    f_reconstructed = a
    current_eta = FR(1)
    for opening in (b, c, proof.lookup_table_type_poly_opening_at_z):
        current_eta = current_eta * eta
        f_reconstructed = f_reconstructed + current_eta * opening
    f_reconstructed = f_reconstructed * proof.lookup_selector_poly_opening_at_z
    f_reconstructed = f_reconstructed + state.gamma_lookup

    factor = (proof.lookup_t_poly_opening_at_z
              + state.beta_lookup * proof.lookup_t_poly_opening_at_z_omega
              + state.beta_gamma_plus_gamma)
    factor = factor * f_reconstructed * state.beta_plus_one
    factor = -factor * alpha_6_z_minus_last_omega
    factor = factor + state.l_0_at_z * state.alpha_powers[7]
    factor = factor + state.l_n_minus_one_at_z * state.alpha_powers[8]
    state.lookup_grand_product_first_aggregated_commitment_coeff = factor * state.v


def lookup_table_aggregation(state):
    """[t] = Σ η^k·[col_k]"""
    columns = state.vk.lookup_table
    result = columns[0]
    current_eta = state.eta
    for column in columns[1:]:
        result = ec_add(result, ec_mul(column, current_eta))
        current_eta = current_eta * state.eta
    return result


def execute(state):
    """[D0], [D1], [t]와 병합 계수를 계산한다.

    Args:
        state: VerifierState — 몫 검사 단계의 α 거듭제곱과 Lagrange 평가값을 읽는다.
    """
    state.queries_at_z_0 = quotient_parts_recombination(state)

    d1 = main_gate_linearisation_contribution_with_v(state)
    d1 = ec_add(d1, rescue_custom_gate_linearisation_contribution_with_v(state))
    d1 = ec_sub(d1, permutation_linearisation_contribution_with_v(state))
    lookup_linearisation_contribution_with_v(state)
    state.queries_at_z_1 = d1

    state.queries_t_poly_aggregated = lookup_table_aggregation(state)
