"""
PLONK Verifier: 최종 페어링 검사
==================================

  ┌─────────────────────────────────────────────────┐
  │  입력:  [F] - [E], [W], [W'], P1, P2, z, ω, u    │
  │  검사:  e(L, [x]₂) = e(R, [1]₂)                 │
  └─────────────────────────────────────────────────┘

**피연산자**:
  L = [W] + u·[W'] + u²·P1
  R = z·[W] + u·z·ω·[W'] + [F] - [E] + u²·P2

  KZG 열기 검사 두 개 (z, zω)를 u로 묶은 것이다:
    e(W, [x - z]₂) = e(F_z - E_z·G1, [1]₂)
    e(W', [x - zω]₂) = e(F_zω - E_zω·G1, [1]₂)

**재귀 증명 접기**:
  이전 검증에서 나온 (P1, P2)는 e(P1, [x]₂) = e(P2, [1]₂)를 만족해야 한다.
  u² 배로 접으면 두 검사가 하나의 페어링 방정식으로 합쳐진다.
  검증 키의 recursive_flag가 꺼져 있으면 접지 않는다.
"""

import logging

from rollup_zkp.plonk.errors import PrimitiveFailureError
from rollup_zkp.plonk.field import ec_add, ec_mul, ec_pairing


logger = logging.getLogger(__name__)


def prepare(state):
    """페어링 피연산자 L (state.pair_with_x), R (state.pair_with_generator)을 만든다."""
    proof = state.proof
    u, z = state.u, state.z
    w = proof.opening_proof_at_z
    w_omega = proof.opening_proof_at_z_omega

    pair_with_generator = ec_add(state.pair_with_generator, ec_mul(w, z))
    z_omega = z * state.omega
    pair_with_generator = ec_add(pair_with_generator, ec_mul(w_omega, z_omega * u))

    pair_with_x = ec_add(w, ec_mul(w_omega, u))

    if state.vk.recursive_flag:
        u_squared = u * u
        pair_with_x = ec_add(pair_with_x, ec_mul(proof.recursive_part_p1, u_squared))
        pair_with_generator = ec_add(
            pair_with_generator, ec_mul(proof.recursive_part_p2, u_squared)
        )

    state.pair_with_generator = pair_with_generator
    state.pair_with_x = pair_with_x


def execute(state):
    """e(L, [x]₂) == e(R, [1]₂) 를 검사한다.

    Returns:
        bool: 페어링 방정식 성립 여부

    Raises:
        PrimitiveFailureError: 페어링 라이브러리가 입력을 처리하지 못할 때
    """
    g2_generator, g2_x = state.vk.g2_elements
    try:
        lhs = ec_pairing(g2_x, state.pair_with_x)
        rhs = ec_pairing(g2_generator, state.pair_with_generator)
    except (AssertionError, ValueError, TypeError) as e:
        raise PrimitiveFailureError("finalPairing: precompile failure") from e

    if lhs != rhs:
        logger.debug("pairing mismatch")
        return False
    return True
