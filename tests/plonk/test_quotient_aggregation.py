"""
Tests for the quotient check, query preparation, aggregation and pairing operands.

Covers:
- α powers, Lagrange values, lookup helper scalars
- quotient identity (holds for a valid proof, fails when r(z) moves)
- [D0], [t], Rescue gate contribution
- merged coefficients equal the unmerged random linear combination
- r₀ terms, [D1] and the [z_perm], [s], [z_lookup] coefficients recomputed in
  closed form from the proof words and challenges
- pairing operands L, R with and without the recursive fold
"""

import pytest

from rollup_zkp.plonk.errors import QuotientEvaluationError
from rollup_zkp.plonk.field import FR, G1, ec_add, ec_mul, ec_sub
from rollup_zkp.plonk.proof import load_proof
from rollup_zkp.plonk.verifier import VerifierState
from rollup_zkp.plonk.verifier import challenges, quotient, queries, aggregation, pairing


def _run_until(vk, words, last_phase):
    state = VerifierState(load_proof(*words, vk), vk)
    for phase in (challenges, quotient, queries, aggregation, pairing):
        if phase is pairing:
            phase.prepare(state)
        else:
            phase.execute(state)
        if phase is last_phase:
            break
    return state


@pytest.fixture(scope="module")
def aggregated_state(vk, valid_proof):
    return _run_until(vk, valid_proof, aggregation)


# ─────────────────────────────────────────────────────────────────────
# 몫 다항식 항등식
# ─────────────────────────────────────────────────────────────────────

class TestQuotient:
    def test_alpha_powers(self, aggregated_state):
        state = aggregated_state
        assert len(state.alpha_powers) == 9
        for k, power in enumerate(state.alpha_powers):
            assert power == state.alpha ** k

    def test_lagrange_l0(self, aggregated_state):
        state = aggregated_state
        n = FR(state.n)
        expected = (state.z_in_domain_size - FR(1)) / (n * (state.z - FR(1)))
        assert state.l_0_at_z == expected

    def test_lookup_scalars(self, aggregated_state):
        state = aggregated_state
        assert state.beta_plus_one == state.beta_lookup + FR(1)
        assert state.beta_gamma_plus_gamma == state.gamma_lookup * (state.beta_lookup + FR(1))
        assert state.z_minus_last_omega == state.z - state.omega ** (state.n - 1)

    def test_identity_holds(self, aggregated_state):
        state = aggregated_state
        proof = state.proof
        lhs = proof.quotient_poly_opening_at_z * (state.z_in_domain_size - FR(1))
        rhs = proof.linearisation_poly_opening_at_z + quotient.linearisation_constant_term(state)
        assert lhs == rhs

    def test_moved_linearisation_opening(self, vk, valid_proof):
        state = VerifierState(load_proof(*valid_proof, vk), vk)
        challenges.execute(state)
        state.proof.linearisation_poly_opening_at_z += FR(1)
        with pytest.raises(QuotientEvaluationError):
            quotient.execute(state)

    def test_main_gate_term_uses_selector(self, aggregated_state):
        state = aggregated_state
        proof = state.proof
        expected = state.l_0_at_z * proof.public_input * proof.gate_selector_0_opening_at_z
        assert quotient.main_gate_quotient_contribution(state) == expected


# ─────────────────────────────────────────────────────────────────────
# 쿼리
# ─────────────────────────────────────────────────────────────────────

class TestQueries:
    def test_quotient_parts_recombination(self, aggregated_state):
        state = aggregated_state
        t0, t1, t2, t3 = state.proof.quotient_poly_parts
        zn = state.z_in_domain_size
        expected = ec_add(t0, ec_mul(t1, zn))
        expected = ec_add(expected, ec_mul(t2, zn * zn))
        expected = ec_add(expected, ec_mul(t3, zn * zn * zn))
        assert state.queries_at_z_0 == expected

    def test_lookup_table_aggregation(self, vk, aggregated_state):
        state = aggregated_state
        eta = state.eta
        expected = vk.lookup_table[0]
        for k in range(1, 4):
            expected = ec_add(expected, ec_mul(vk.lookup_table[k], eta ** k))
        assert state.queries_t_poly_aggregated == expected

    def test_rescue_gate_vanishes_on_satisfied_row(self, vk, valid_proof):
        """a² = b, b² = c, c·a = d 이면 Rescue 게이트 기여분은 0이다."""
        state = _run_until(vk, valid_proof, quotient)
        proof = state.proof
        proof.state_poly_0_opening_at_z = FR(3)
        proof.state_poly_1_opening_at_z = FR(9)
        proof.state_poly_2_opening_at_z = FR(81)
        proof.state_poly_3_opening_at_z = FR(243)
        assert queries.rescue_custom_gate_linearisation_contribution_with_v(state) is None


# ─────────────────────────────────────────────────────────────────────
# 집계: 병합 계수 == 병합하지 않은 선형결합
# ─────────────────────────────────────────────────────────────────────

class TestAggregation:
    def _unmerged(self, vk, state):
        proof = state.proof
        v, u = state.v, state.u

        at_z = [
            (proof.state_poly_0, proof.state_poly_0_opening_at_z),
            (proof.state_poly_1, proof.state_poly_1_opening_at_z),
            (proof.state_poly_2, proof.state_poly_2_opening_at_z),
            (proof.state_poly_3, proof.state_poly_3_opening_at_z),
            (vk.gate_selectors[0], proof.gate_selector_0_opening_at_z),
            (vk.permutation[0], proof.copy_permutation_poly_0_opening_at_z),
            (vk.permutation[1], proof.copy_permutation_poly_1_opening_at_z),
            (vk.permutation[2], proof.copy_permutation_poly_2_opening_at_z),
            (state.queries_t_poly_aggregated, proof.lookup_t_poly_opening_at_z),
            (vk.lookup_selector, proof.lookup_selector_poly_opening_at_z),
            (vk.lookup_table_type, proof.lookup_table_type_poly_opening_at_z),
        ]
        at_z_omega = [
            (proof.copy_permutation_grand_product,
             proof.copy_permutation_grand_product_opening_at_z_omega),
            (proof.state_poly_3, proof.state_poly_3_opening_at_z_omega),
            (proof.lookup_s_poly, proof.lookup_s_poly_opening_at_z_omega),
            (proof.lookup_grand_product, proof.lookup_grand_product_opening_at_z_omega),
            (state.queries_t_poly_aggregated, proof.lookup_t_poly_opening_at_z_omega),
        ]

        # 선형화 커밋먼트 전체 (병합 전)
        point = ec_add(state.queries_at_z_0, state.queries_at_z_1)
        point = ec_add(point, ec_mul(proof.copy_permutation_grand_product,
                                     state.copy_permutation_first_aggregated_commitment_coeff))
        point = ec_add(point, ec_mul(proof.lookup_s_poly,
                                     state.lookup_s_first_aggregated_commitment_coeff))
        point = ec_add(point, ec_mul(proof.lookup_grand_product,
                                     state.lookup_grand_product_first_aggregated_commitment_coeff))
        value = proof.quotient_poly_opening_at_z + v * proof.linearisation_poly_opening_at_z

        power = v
        for commitment, opening in at_z:
            power = power * v
            point = ec_add(point, ec_mul(commitment, power))
            value = value + power * opening
        for commitment, opening in at_z_omega:
            power = power * v
            point = ec_add(point, ec_mul(commitment, power * u))
            value = value + power * u * opening
        return point, value

    def test_merged_equals_unmerged(self, vk, aggregated_state):
        state = aggregated_state
        expected_point, expected_value = self._unmerged(vk, state)

        merged_point = ec_add(state.aggregated_at_z, state.aggregated_at_z_omega)
        merged_value = (state.aggregated_opening_at_z
                        + state.u * state.aggregated_opening_at_z_omega)
        assert merged_point == expected_point
        assert merged_value == expected_value

    def test_pair_with_generator_is_f_minus_e(self, aggregated_state):
        state = aggregated_state
        f = ec_add(state.aggregated_at_z, state.aggregated_at_z_omega)
        e = state.aggregated_opening_at_z + state.u * state.aggregated_opening_at_z_omega
        assert state.pair_with_generator == ec_sub(f, ec_mul(G1, e))

    def test_first_coefficients_are_v_powers(self, aggregated_state):
        state = aggregated_state
        assert state.first_d_coeff == state.v ** 5
        assert state.first_t_coeff == state.v ** 10


# ─────────────────────────────────────────────────────────────────────
# 페어링 피연산자
# ─────────────────────────────────────────────────────────────────────

class TestPairingOperands:
    def test_operands_with_recursive_fold(self, vk, valid_proof):
        before = _run_until(vk, valid_proof, aggregation)
        f_minus_e = before.pair_with_generator
        state = _run_until(vk, valid_proof, pairing)
        proof = state.proof
        u, z = state.u, state.z
        u2 = u * u

        w, w_omega = proof.opening_proof_at_z, proof.opening_proof_at_z_omega
        expected_x = ec_add(ec_add(w, ec_mul(w_omega, u)), ec_mul(proof.recursive_part_p1, u2))
        expected_generator = ec_add(f_minus_e, ec_mul(w, z))
        expected_generator = ec_add(expected_generator, ec_mul(w_omega, u * z * state.omega))
        expected_generator = ec_add(expected_generator, ec_mul(proof.recursive_part_p2, u2))

        assert state.pair_with_x == expected_x
        assert state.pair_with_generator == expected_generator

    def test_operands_without_fold(self, vk_non_recursive, valid_proof_non_recursive):
        state = _run_until(vk_non_recursive, valid_proof_non_recursive, pairing)
        proof = state.proof
        expected_x = ec_add(proof.opening_proof_at_z,
                            ec_mul(proof.opening_proof_at_z_omega, state.u))
        assert state.pair_with_x == expected_x

    def test_kzg_relation(self, tau, vk, valid_proof):
        """τ·L = R 이면 e(L, [τ]₂) = e(R, [1]₂) 가 성립한다."""
        state = _run_until(vk, valid_proof, pairing)
        assert ec_mul(state.pair_with_x, tau) == state.pair_with_generator


# ─────────────────────────────────────────────────────────────────────
# 닫힌 식 재계산: 증명 배열의 평가값과 챌린지만으로 r₀, [D1], 병합 계수
# ─────────────────────────────────────────────────────────────────────

# 증명 배열의 스칼라 인덱스
A_Z, B_Z, C_Z, D_Z = 22, 23, 24, 25
D_Z_OMEGA = 26
SELECTOR_Z = 27
SIGMA_Z = (28, 29, 30)
Z_PERM_Z_OMEGA = 31
T_LOOKUP_Z = 32
LOOKUP_SELECTOR_Z = 33
TABLE_TYPE_Z = 34
S_Z_OMEGA = 36
Z_LOOKUP_Z_OMEGA = 37
T_LOOKUP_Z_OMEGA = 38


class TestClosedForm:
    @pytest.fixture(scope="class")
    def terms(self, vk, valid_proof, aggregated_state):
        public_inputs, words, _ = valid_proof
        state = aggregated_state

        def opening(index):
            return FR(words[index])

        n = vk.domain_size
        z = state.z
        zn = z ** n
        last_omega = vk.omega ** (n - 1)
        alpha = state.alpha
        beta, gamma = state.beta, state.gamma
        beta_lookup, gamma_lookup = state.beta_lookup, state.gamma_lookup
        a, b, c, d = (opening(i) for i in (A_Z, B_Z, C_Z, D_Z))

        return {
            "state": state,
            "n": n,
            "z": z,
            "v": state.v,
            "eta": state.eta,
            "alpha": [alpha ** k for k in range(9)],
            "beta": beta,
            "gamma": gamma,
            "beta_lookup": beta_lookup,
            "gamma_lookup": gamma_lookup,
            "gamma_beta_lookup": gamma_lookup * (FR(1) + beta_lookup),
            "z_minus_last_omega": z - last_omega,
            "l_0": (zn - FR(1)) / (FR(n) * (z - FR(1))),
            "l_last": last_omega * (zn - FR(1)) / (FR(n) * (z - last_omega)),
            "public_input": FR(public_inputs[0]),
            "abcd": (a, b, c, d),
            "opening": opening,
        }

    def test_lagrange_last(self, terms):
        assert terms["state"].l_n_minus_one_at_z == terms["l_last"]

    def test_main_gate_term(self, terms):
        expected = terms["l_0"] * terms["public_input"] * terms["opening"](SELECTOR_Z)
        assert quotient.main_gate_quotient_contribution(terms["state"]) == expected

    def test_permutation_term(self, terms):
        """-α⁴·z_perm(zω)·Π(aᵢ + β·σᵢ + γ)·(d + γ) - L₀·α⁵"""
        opening = terms["opening"]
        beta, gamma, alpha = terms["beta"], terms["gamma"], terms["alpha"]
        a, b, c, d = terms["abcd"]

        product = ((a + beta * opening(SIGMA_Z[0]) + gamma)
                   * (b + beta * opening(SIGMA_Z[1]) + gamma)
                   * (c + beta * opening(SIGMA_Z[2]) + gamma)
                   * (d + gamma))
        expected = (FR(0) - alpha[4] * opening(Z_PERM_Z_OMEGA) * product
                    - terms["l_0"] * alpha[5])
        assert quotient.permutation_quotient_contribution(terms["state"]) == expected

    def test_lookup_term(self, terms):
        opening = terms["opening"]
        alpha = terms["alpha"]
        gbl = terms["gamma_beta_lookup"]

        expected = (alpha[6] * terms["z_minus_last_omega"] * opening(Z_LOOKUP_Z_OMEGA)
                    * (terms["beta_lookup"] * opening(S_Z_OMEGA) + gbl))
        expected = expected - terms["l_0"] * alpha[7]
        expected = expected - terms["l_last"] * alpha[8] * gbl ** (terms["n"] - 1)
        assert quotient.lookup_quotient_contribution(terms["state"]) == expected

    def test_constant_term_is_sum(self, terms):
        state = terms["state"]
        expected = (quotient.main_gate_quotient_contribution(state)
                    + quotient.permutation_quotient_contribution(state)
                    + quotient.lookup_quotient_contribution(state))
        assert quotient.linearisation_constant_term(state) == expected

    def test_copy_permutation_coefficient(self, vk, terms):
        """v·(α⁴·Π(aᵢ + β·kᵢ·z + γ) + α⁵·L₀), k = 1, 5, 7, 10"""
        assert [int(k) for k in vk.non_residues] == [5, 7, 10]
        beta, gamma, alpha, z = terms["beta"], terms["gamma"], terms["alpha"], terms["z"]

        product = FR(1)
        for opening, k in zip(terms["abcd"], (1, 5, 7, 10)):
            product = product * (opening + beta * FR(k) * z + gamma)
        expected = terms["v"] * (alpha[4] * product + alpha[5] * terms["l_0"])
        assert terms["state"].copy_permutation_first_aggregated_commitment_coeff == expected

    def test_lookup_s_coefficient(self, terms):
        expected = (terms["v"] * terms["alpha"][6] * terms["z_minus_last_omega"]
                    * terms["opening"](Z_LOOKUP_Z_OMEGA))
        assert terms["state"].lookup_s_first_aggregated_commitment_coeff == expected

    def test_lookup_grand_product_coefficient(self, terms):
        """v·(-α⁶·(z - ω^(n-1))·(1 + β')·f(z)·(t(z) + β'·t(zω) + γ'(1 + β')) + α⁷·L₀ + α⁸·L_{n-1})"""
        opening = terms["opening"]
        alpha, eta = terms["alpha"], terms["eta"]
        a, b, c, _ = terms["abcd"]

        f = (a + eta * b + eta ** 2 * c + eta ** 3 * opening(TABLE_TYPE_Z))
        f = f * opening(LOOKUP_SELECTOR_Z) + terms["gamma_lookup"]
        t_term = (opening(T_LOOKUP_Z) + terms["beta_lookup"] * opening(T_LOOKUP_Z_OMEGA)
                  + terms["gamma_beta_lookup"])

        expected = (FR(0) - alpha[6] * terms["z_minus_last_omega"]
                    * (FR(1) + terms["beta_lookup"]) * f * t_term)
        expected = expected + alpha[7] * terms["l_0"] + alpha[8] * terms["l_last"]
        expected = terms["v"] * expected
        assert terms["state"].lookup_grand_product_first_aggregated_commitment_coeff == expected

    def test_linearisation_commitment(self, vk, terms):
        """[D1] = 메인 게이트 + Rescue 게이트 - σ₃ 항"""
        opening = terms["opening"]
        v, alpha, beta, gamma = terms["v"], terms["alpha"], terms["beta"], terms["gamma"]
        a, b, c, d = terms["abcd"]

        main_scalars = [a, b, c, d, a * b, a * c, FR(1), opening(D_Z_OMEGA)]
        selector = v * opening(SELECTOR_Z)
        expected = None
        for commitment, scalar in zip(vk.gate_setup, main_scalars):
            expected = ec_add(expected, ec_mul(commitment, selector * scalar))

        rescue = (a * a - b) * alpha[1] + (b * b - c) * alpha[2] + (c * a - d) * alpha[3]
        expected = ec_add(expected, ec_mul(vk.gate_selectors[1], v * rescue))

        sigma_3 = (v * alpha[4] * beta * opening(Z_PERM_Z_OMEGA)
                   * (a + beta * opening(SIGMA_Z[0]) + gamma)
                   * (b + beta * opening(SIGMA_Z[1]) + gamma)
                   * (c + beta * opening(SIGMA_Z[2]) + gamma))
        expected = ec_sub(expected, ec_mul(vk.permutation[3], sigma_3))

        assert terms["state"].queries_at_z_1 == expected
