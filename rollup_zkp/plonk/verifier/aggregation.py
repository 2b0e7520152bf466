"""
PLONK Verifier: 일괄 열기 커밋먼트 집계
=========================================

  ┌─────────────────────────────────────────────────┐
  │  입력:  [D0], [D1], 병합 계수, 평가값, v, u       │
  │  출력:  [F] = F_z + F_zω,  E = E_z + u·E_zω       │
  └─────────────────────────────────────────────────┘

**z 에서의 집계** (v의 연속 거듭제곱):

  F_z = [D0] + [D1] + v²[a] + v³[b] + v⁴[c] + v⁶[q_main]
        + v⁷[σ₀] + v⁸[σ₁] + v⁹[σ₂] + v¹¹[q_lookup] + v¹²[table_type]

  E_z = t(z) + v·r(z) + v²a(z) + v³b(z) + v⁴c(z) + v⁵d(z) + v⁶q_main(z)
        + v⁷σ₀(z) + v⁸σ₁(z) + v⁹σ₂(z) + v¹⁰t_lookup(z)
        + v¹¹q_lookup(z) + v¹²table_type(z)

  [d]와 [t]는 zω 에서도 열리므로 여기서는 계수 v⁵, v¹⁰만 기억해 두고
  점은 zω 쪽에서 한 번에 곱한다.

**zω 에서의 집계** (각 계수에 u를 결합):

  F_zω = (c_perm + v¹³u)[z_perm] + (v⁵ + v¹⁴u)[d] + (c_s + v¹⁵u)[s]
         + (c_lookup + v¹⁶u)[z_lookup] + (v¹⁰ + v¹⁷u)[t]

  E_zω = v¹³z_perm(zω) + v¹⁴d(zω) + v¹⁵s(zω) + v¹⁶z_lookup(zω) + v¹⁷t_lookup(zω)

**최종**:
  [F] = F_z + F_zω
  [E] = (E_z + u·E_zω)·G1
"""

from rollup_zkp.plonk.field import G1, ec_add, ec_mul, ec_sub


def _at_z_queries(state):
    """z 에서 열리는 (커밋먼트, 평가값) 목록.

    커밋먼트 자리의 문자열은 점 대신 현재 집계 챌린지를 저장할 state 속성
    이름이다. 그 점은 zω 쪽에서 병합 계수로 곱해진다.
    """
    proof = state.proof
    vk = state.vk
    return [
        (proof.state_poly_0, proof.state_poly_0_opening_at_z),
        (proof.state_poly_1, proof.state_poly_1_opening_at_z),
        (proof.state_poly_2, proof.state_poly_2_opening_at_z),
        ("first_d_coeff", proof.state_poly_3_opening_at_z),
        (vk.gate_selectors[0], proof.gate_selector_0_opening_at_z),
        (vk.permutation[0], proof.copy_permutation_poly_0_opening_at_z),
        (vk.permutation[1], proof.copy_permutation_poly_1_opening_at_z),
        (vk.permutation[2], proof.copy_permutation_poly_2_opening_at_z),
        ("first_t_coeff", proof.lookup_t_poly_opening_at_z),
        (vk.lookup_selector, proof.lookup_selector_poly_opening_at_z),
        (vk.lookup_table_type, proof.lookup_table_type_poly_opening_at_z),
    ]


def aggregate_at_z(state):
    """F_z, E_z를 계산하고 마지막 집계 챌린지 v^12를 반환한다."""
    proof = state.proof
    v = state.v

    aggregated = ec_add(state.queries_at_z_0, state.queries_at_z_1)
    aggregation_challenge = v
    opening = proof.quotient_poly_opening_at_z + v * proof.linearisation_poly_opening_at_z

    for commitment, value in _at_z_queries(state):
        aggregation_challenge = aggregation_challenge * v
        if isinstance(commitment, str):
            setattr(state, commitment, aggregation_challenge)
        else:
            aggregated = ec_add(aggregated, ec_mul(commitment, aggregation_challenge))
        opening = opening + aggregation_challenge * value

    state.aggregated_at_z = aggregated
    state.aggregated_opening_at_z = opening
    return aggregation_challenge


def aggregate_at_z_omega(state, aggregation_challenge):
    """F_zω, E_zω를 계산한다."""
    proof = state.proof
    v, u = state.v, state.u

    queries = [
        (proof.copy_permutation_grand_product,
         proof.copy_permutation_grand_product_opening_at_z_omega,
         state.copy_permutation_first_aggregated_commitment_coeff),
        (proof.state_poly_3,
         proof.state_poly_3_opening_at_z_omega,
         state.first_d_coeff),
        (proof.lookup_s_poly,
         proof.lookup_s_poly_opening_at_z_omega,
         state.lookup_s_first_aggregated_commitment_coeff),
        (proof.lookup_grand_product,
         proof.lookup_grand_product_opening_at_z_omega,
         state.lookup_grand_product_first_aggregated_commitment_coeff),
        (state.queries_t_poly_aggregated,
         proof.lookup_t_poly_opening_at_z_omega,
         state.first_t_coeff),
    ]

    aggregated = None
    opening = None
    for commitment, value, previous_coeff in queries:
        aggregation_challenge = aggregation_challenge * v
        final_coeff = previous_coeff + aggregation_challenge * u
        aggregated = ec_add(aggregated, ec_mul(commitment, final_coeff))
        term = aggregation_challenge * value
        opening = term if opening is None else opening + term

    state.aggregated_at_z_omega = aggregated
    state.aggregated_opening_at_z_omega = opening


def execute(state):
    """[F] - [E]를 계산하여 state.pair_with_generator에 기록한다.

    Args:
        state: VerifierState — 쿼리 단계의 [D0], [D1], [t], 병합 계수를 읽는다.
    """
    last_challenge = aggregate_at_z(state)
    aggregate_at_z_omega(state, last_challenge)

    aggregated = ec_add(state.aggregated_at_z, state.aggregated_at_z_omega)
    aggregated_value = (state.aggregated_opening_at_z
                        + state.aggregated_opening_at_z_omega * state.u)
    state.pair_with_generator = ec_sub(aggregated, ec_mul(G1, aggregated_value))
