"""
PLONK Verifier: 몫 다항식 항등식 검사
=======================================

  ┌─────────────────────────────────────────────────┐
  │  입력:  챌린지, 평가값, 공개 입력                 │
  │  출력:  α 거듭제곱, L₀(z), L_{n-1}(z)            │
  │  검사:  t(z)·(z^n - 1) = r(z) + r₀              │
  └─────────────────────────────────────────────────┘

**r₀ 란?**
  선형화 다항식 r(x)에서 커밋먼트 없이 공개된 값만으로 계산할 수 있는
  상수 부분이다. 세 가지 기여분의 합이다.

  1. 메인 게이트 (공개 입력):
       L₀(z) · PI · q_main(z)

  2. 복사 순열 (α⁴, α⁵):
       - α⁴ · z_perm(zω) · Π_{i=0..2}(w_i(z) + β·σ_i(z) + γ) · (d(z) + γ)
       - α⁵ · L₀(z)

  3. 룩업 (α⁶, α⁷, α⁸):
       (s(zω)·β' + γ'(β'+1)) · z_lookup(zω) · α⁶ · (z - ω^(n-1))
       - α⁷ · L₀(z)
       - α⁸ · L_{n-1}(z) · (γ'(β'+1))^(n-1)

**왜 이 검사가 핵심인가?**
  커스텀 게이트, 복사 순열, 룩업 인자가 커밋된 다항식과 교차 검증되는
  유일한 지점이다. 실패하면 QuotientEvaluationError로 중단한다.
"""

from rollup_zkp.plonk.errors import QuotientEvaluationError
from rollup_zkp.plonk.field import FR
from rollup_zkp.plonk.utils import lagrange_basis_eval


def compute_alpha_powers(state):
    """[1, α, α², ..., α⁸]를 반복 곱셈으로 계산한다."""
    powers = [FR(1)]
    for _ in range(8):
        powers.append(powers[-1] * state.alpha)
    state.alpha_powers = powers


def compute_lagrange_evaluations(state):
    """L₀(z), L_{n-1}(z)와 룩업 인자의 공통 스칼라를 계산한다.

    Raises:
        DomainCollisionError: z^n - 1 = 0 일 때
    """
    n = state.n
    state.l_0_at_z = lagrange_basis_eval(0, n, state.omega, state.z)
    state.l_n_minus_one_at_z = lagrange_basis_eval(n - 1, n, state.omega, state.z)

    state.beta_plus_one = state.beta_lookup + FR(1)
    state.beta_gamma_plus_gamma = state.beta_plus_one * state.gamma_lookup
    state.z_minus_last_omega = state.z - state.omega ** (n - 1)


def main_gate_quotient_contribution(state):
    proof = state.proof
    return state.l_0_at_z * proof.public_input * proof.gate_selector_0_opening_at_z


def permutation_quotient_contribution(state):
    """복사 순열의 상수 기여분 (σ₃는 β 없이 +γ 로만 접힌다)."""
    proof = state.proof
    openings = proof.state_polys_openings_at_z
    sigmas = proof.copy_permutation_polys_openings_at_z

    result = state.alpha_powers[4] * proof.copy_permutation_grand_product_opening_at_z_omega
    for opening, sigma in zip(openings[:3], sigmas):
        result = result * (opening + state.beta * sigma + state.gamma)
    result = result * (openings[3] + state.gamma)

    return -result - state.l_0_at_z * state.alpha_powers[5]


def lookup_quotient_contribution(state):
    proof = state.proof
    n = state.n

    result = (proof.lookup_s_poly_opening_at_z_omega * state.beta_lookup
              + state.beta_gamma_plus_gamma)
    result = result * proof.lookup_grand_product_opening_at_z_omega
    result = result * state.alpha_powers[6] * state.z_minus_last_omega

    result = result - state.l_0_at_z * state.alpha_powers[7]

    last_term = state.beta_gamma_plus_gamma ** (n - 1)
    last_term = last_term * state.l_n_minus_one_at_z * state.alpha_powers[8]
    return result - last_term


def linearisation_constant_term(state):
    """r₀ = 메인 게이트 + 복사 순열 + 룩업 기여분.

    compute_alpha_powers()와 compute_lagrange_evaluations()가 먼저 실행되어야 한다.
    """
    return (
        main_gate_quotient_contribution(state)
        + permutation_quotient_contribution(state)
        + lookup_quotient_contribution(state)
    )


def execute(state):
    """몫 다항식 항등식을 검사한다.

    Args:
        state: VerifierState — 챌린지와 평가값을 읽고,
               α 거듭제곱과 Lagrange 평가값을 기록한다.

    Raises:
        DomainCollisionError: z가 평가 도메인 위의 점일 때
        QuotientEvaluationError: t(z)·Z_H(z) ≠ r(z) + r₀
    """
    compute_alpha_powers(state)
    compute_lagrange_evaluations(state)

    proof = state.proof
    rhs = proof.linearisation_poly_opening_at_z + linearisation_constant_term(state)
    lhs = proof.quotient_poly_opening_at_z * (state.z_in_domain_size - FR(1))

    if lhs != rhs:
        raise QuotientEvaluationError("invalid quotient evaluation")
