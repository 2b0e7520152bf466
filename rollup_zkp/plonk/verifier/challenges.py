"""
PLONK Verifier: Fiat-Shamir 챌린지 재생
=========================================

  ┌─────────────────────────────────────────────────┐
  │  입력:  Proof의 커밋먼트와 평가값                │
  │  출력:  9개의 챌린지, z^n                       │
  └─────────────────────────────────────────────────┘

**흡수 순서** (Prover와 비트 단위로 같아야 한다):

  Round 1: 공개 입력, [a], [b], [c], [d]          → η  (0)
  Round 2: [s]                                    → β  (1), γ  (2)
  Round 3: [z_perm]                               → β' (3), γ' (4)
  Round 4: [z_lookup]                             → α  (5)
  Round 5: [t_0], [t_1], [t_2], [t_3]             → z  (6), z^n
  Round 6: 18개 평가값 (OPENING_ORDER 순서)        → v  (7)
  Round 7: [W], [W']                              → u  (8)

재귀 증명 (P1, P2)은 흡수하지 않는다.

사용:
    이 모듈은 직접 호출하지 않고, verifier.verify()를 통해 실행된다.
"""

import logging


logger = logging.getLogger(__name__)


CHALLENGE_NAMES = (
    "eta",
    "beta",
    "gamma",
    "beta_lookup",
    "gamma_lookup",
    "alpha",
    "z",
    "v",
    "u",
)

# Round 6 흡수 순서 (와이어 순서와 다르다: 몫 다항식 평가값이 맨 앞)
OPENING_ORDER = (
    "quotient_poly_opening_at_z",
    "state_poly_0_opening_at_z",
    "state_poly_1_opening_at_z",
    "state_poly_2_opening_at_z",
    "state_poly_3_opening_at_z",
    "state_poly_3_opening_at_z_omega",
    "gate_selector_0_opening_at_z",
    "copy_permutation_poly_0_opening_at_z",
    "copy_permutation_poly_1_opening_at_z",
    "copy_permutation_poly_2_opening_at_z",
    "copy_permutation_grand_product_opening_at_z_omega",
    "lookup_t_poly_opening_at_z",
    "lookup_selector_poly_opening_at_z",
    "lookup_table_type_poly_opening_at_z",
    "lookup_s_poly_opening_at_z_omega",
    "lookup_grand_product_opening_at_z_omega",
    "lookup_t_poly_opening_at_z_omega",
    "linearisation_poly_opening_at_z",
)


def commitment_rounds(state):
    """Round 1~5: 커밋먼트를 흡수하고 η, β, γ, β', γ', α, z 를 얻는다."""
    transcript = state.transcript
    proof = state.proof

    # ── Round 1: 공개 입력 + 상태 다항식 ──
    transcript.append_scalar(proof.public_input)
    for commitment in proof.state_polys:
        transcript.append_point(commitment)
    state.eta = transcript.challenge_scalar(0)

    # ── Round 2: 룩업 S 다항식 ──
    transcript.append_point(proof.lookup_s_poly)
    state.beta = transcript.challenge_scalar(1)
    state.gamma = transcript.challenge_scalar(2)

    # ── Round 3: 복사 순열 grand product ──
    transcript.append_point(proof.copy_permutation_grand_product)
    state.beta_lookup = transcript.challenge_scalar(3)
    state.gamma_lookup = transcript.challenge_scalar(4)

    # ── Round 4: 룩업 grand product ──
    transcript.append_point(proof.lookup_grand_product)
    state.alpha = transcript.challenge_scalar(5)

    # ── Round 5: 몫 다항식 조각 ──
    for commitment in proof.quotient_poly_parts:
        transcript.append_point(commitment)
    state.z = transcript.challenge_scalar(6)
    state.z_in_domain_size = state.z ** state.n


def opening_round(state):
    """Round 6: 평가값 18개를 흡수하고 v 를 얻는다."""
    for name in OPENING_ORDER:
        state.transcript.append_scalar(getattr(state.proof, name))
    state.v = state.transcript.challenge_scalar(7)


def opening_proof_round(state):
    """Round 7: 열기 증명 [W], [W']를 흡수하고 u 를 얻는다."""
    state.transcript.append_point(state.proof.opening_proof_at_z)
    state.transcript.append_point(state.proof.opening_proof_at_z_omega)
    state.u = state.transcript.challenge_scalar(8)


def execute(state):
    """Round 1~7 전체를 실행한다.

    Args:
        state: VerifierState — Proof를 읽고 9개의 챌린지와 z^n을 기록한다.
    """
    commitment_rounds(state)
    opening_round(state)
    opening_proof_round(state)
    logger.debug("derived challenges: %s",
                 ", ".join(f"{name}={int(value):#x}" for name, value in state.challenges()))
