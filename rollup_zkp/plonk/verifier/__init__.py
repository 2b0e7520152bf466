"""
PLONK Verifier — 5-단계 검증 파이프라인 오케스트레이터
=========================================================

롤업 상태 전이 회로의 PLONK 증명을 검증한다.

**검증 단계**:
  모든 단계는 순차적으로 실행되며, 처음 실패한 검사에서 즉시 중단된다.

  ┌─────────────────────────────────────────────────────┐
  │  Codec: 워드 배열 → Proof                           │
  │  길이 검사, mod R / mod Q 축소, 곡선 방정식 검사     │
  ├─────────────────────────────────────────────────────┤
  │  Challenges: Fiat-Shamir 트랜스크립트 재생           │
  │  η, β, γ, β', γ', α, z, v, u (9개)                 │
  ├─────────────────────────────────────────────────────┤
  │  Quotient: 몫 다항식 항등식                          │
  │  t(z)·(z^n - 1) = r(z) + r₀                        │
  ├─────────────────────────────────────────────────────┤
  │  Queries + Aggregation: 일괄 열기 커밋먼트           │
  │  [D0], [D1], [F] = F_z + F_zω, [E] = E·G1           │
  ├─────────────────────────────────────────────────────┤
  │  Pairing: 최종 페어링 검사                           │
  │  e(W + u·W' + u²·P1, [x]₂) = e(R, [1]₂)            │
  └─────────────────────────────────────────────────────┘

**반환 규칙**:
  - 와이어 포맷 위반, 도메인 충돌, 몫 항등식 불일치, 프리미티브 실패는
    VerificationError 하위 예외로 중단한다.
  - 페어링 방정식 불일치만 False 반환이다.

사용 예시:
    >>> from rollup_zkp.plonk.verifier import verify
    >>> verify([public_input], proof_words, recursive_words, vk)
    True
"""

import logging

from rollup_zkp.plonk.proof import load_proof, decode_calldata
from rollup_zkp.plonk.transcript import Transcript
from rollup_zkp.plonk.verification_key import verification_key_hash
from rollup_zkp.plonk.verifier import challenges, quotient, queries, aggregation, pairing


logger = logging.getLogger(__name__)

__all__ = [
    "VerifierState",
    "verify",
    "verify_calldata",
    "accumulate",
    "derive_challenges",
    "verification_key_hash",
]


class VerifierState:
    """한 번의 검증 호출 동안만 살아 있는 Verifier 상태.

    각 단계 모듈은 이 객체를 읽고 결과를 기록한다. 호출 간에 공유되지 않는다.

    속성 (입력):
        proof: Proof
        vk: VerificationKey
        transcript: Fiat-Shamir 트랜스크립트

    속성 (챌린지):
        eta, beta, gamma, beta_lookup, gamma_lookup, alpha, z, v, u

    속성 (몫 검사):
        z_in_domain_size: z^n
        alpha_powers: [1, α, α², ..., α⁸]
        l_0_at_z, l_n_minus_one_at_z: Lagrange 기저 평가값
        beta_plus_one: β' + 1
        beta_gamma_plus_gamma: γ'·(β' + 1)
        z_minus_last_omega: z - ω^(n-1)

    속성 (쿼리):
        queries_at_z_0: [D0] = Σ z^(jn)·[t_j]
        queries_at_z_1: [D1] (선형화 커밋먼트)
        queries_t_poly_aggregated: [t] = Σ η^k·[col_k]
        copy_permutation_first_aggregated_commitment_coeff: [z_perm] 계수
        lookup_s_first_aggregated_commitment_coeff: [s] 계수
        lookup_grand_product_first_aggregated_commitment_coeff: [z_lookup] 계수

    속성 (집계 / 페어링):
        first_d_coeff, first_t_coeff
        aggregated_at_z, aggregated_opening_at_z
        aggregated_at_z_omega, aggregated_opening_at_z_omega
        pair_with_generator: F - E (페어링 준비 후 R 전체)
        pair_with_x: L
    """

    def __init__(self, proof, vk):
        self.proof = proof
        self.vk = vk
        self.transcript = Transcript()

        # 도메인 정보 (편의 접근)
        self.n = vk.domain_size
        self.omega = vk.omega

        # 챌린지
        self.eta = None
        self.beta = None
        self.gamma = None
        self.beta_lookup = None
        self.gamma_lookup = None
        self.alpha = None
        self.z = None
        self.v = None
        self.u = None

        # 몫 검사
        self.z_in_domain_size = None
        self.alpha_powers = None
        self.l_0_at_z = None
        self.l_n_minus_one_at_z = None
        self.beta_plus_one = None
        self.beta_gamma_plus_gamma = None
        self.z_minus_last_omega = None

        # 쿼리
        self.queries_at_z_0 = None
        self.queries_at_z_1 = None
        self.queries_t_poly_aggregated = None
        self.copy_permutation_first_aggregated_commitment_coeff = None
        self.lookup_s_first_aggregated_commitment_coeff = None
        self.lookup_grand_product_first_aggregated_commitment_coeff = None

        # 집계
        self.first_d_coeff = None
        self.first_t_coeff = None
        self.aggregated_at_z = None
        self.aggregated_opening_at_z = None
        self.aggregated_at_z_omega = None
        self.aggregated_opening_at_z_omega = None

        # 페어링
        self.pair_with_generator = None
        self.pair_with_x = None

    def challenges(self):
        """9개의 챌린지를 번호 순서대로 (이름, 값) 쌍으로 반환한다."""
        return [(name, getattr(self, name)) for name in challenges.CHALLENGE_NAMES]


def _prepare(public_inputs, proof, recursive_aggregation_input, vk):
    """페어링 직전까지 모든 단계를 실행한 상태를 반환한다."""
    state = VerifierState(
        load_proof(public_inputs, proof, recursive_aggregation_input, vk), vk
    )

    # ┌─────────────────────────────────────────────────────┐
    # │  Fiat-Shamir 재생: η, β, γ, β', γ', α, z, v, u      │
    # └─────────────────────────────────────────────────────┘
    challenges.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  몫 다항식 항등식: t(z)·Z_H(z) = r(z) + r₀          │
    # └─────────────────────────────────────────────────────┘
    quotient.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  선형화 커밋먼트 [D0], [D1] 및 병합 계수            │
    # └─────────────────────────────────────────────────────┘
    queries.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  z, zω 에서의 일괄 열기 커밋먼트 [F], 값 E          │
    # └─────────────────────────────────────────────────────┘
    aggregation.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  페어링 피연산자 L, R (재귀 증명 u² 접기 포함)       │
    # └─────────────────────────────────────────────────────┘
    pairing.prepare(state)
    return state


def verify(public_inputs, proof, recursive_aggregation_input, vk):
    """PLONK 증명을 검증한다.

    Args:
        public_inputs: 공개 입력 워드 리스트 (길이 1)
        proof: 증명 워드 리스트 (길이 44)
        recursive_aggregation_input: 재귀 증명 워드 리스트 (길이 4 또는 0)
        vk: VerificationKey

    Returns:
        bool: 페어링 방정식 성립 여부

    Raises:
        MalformedProofError: 와이어 포맷 위반
        DomainCollisionError: z가 평가 도메인 위의 점
        QuotientEvaluationError: 몫 항등식 불일치
        PrimitiveFailureError: 페어링 라이브러리 실패
    """
    state = _prepare(public_inputs, proof, recursive_aggregation_input, vk)
    accepted = pairing.execute(state)
    if accepted:
        logger.info("proof accepted (public input %s)", int(state.proof.public_input))
    else:
        logger.info("proof rejected: pairing mismatch")
    return accepted


def verify_calldata(data, vk):
    """ABI 인코딩된 verify(uint256[], uint256[], uint256[]) 인자로 검증한다."""
    public_inputs, proof, recursive_aggregation_input = decode_calldata(data)
    return verify(public_inputs, proof, recursive_aggregation_input, vk)


def accumulate(public_inputs, proof, recursive_aggregation_input, vk):
    """페어링을 실행하지 않고 최종 페어링 피연산자 (L, R)를 반환한다.

    정직한 증명이라면 e(L, [x]₂) = e(R, [1]₂) 이므로, 결과 4워드는 다른
    증명의 recursiveAggregationInput (P1 = L, P2 = R)으로 그대로 쓸 수 있다.

    Returns:
        list: [L.x, L.y, R.x, R.y]
    """
    state = _prepare(public_inputs, proof, recursive_aggregation_input, vk)
    words = []
    for point in (state.pair_with_x, state.pair_with_generator):
        if point is None:
            words.extend([0, 0])
        else:
            words.extend([int(point[0]), int(point[1])])
    logger.debug("accumulated pairing operands for public input %s",
                 int(state.proof.public_input))
    return words


def derive_challenges(public_inputs, proof, recursive_aggregation_input, vk):
    """트랜스크립트만 재생하여 9개의 챌린지를 반환한다 (산술 검사 없음)."""
    state = VerifierState(
        load_proof(public_inputs, proof, recursive_aggregation_input, vk), vk
    )
    challenges.execute(state)
    return state.challenges()
