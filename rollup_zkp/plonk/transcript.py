"""
PLONK Fiat-Shamir Transcript
==============================

비대화식(non-interactive) 변환을 위한 Fiat-Shamir 해싱 구현.

**Fiat-Shamir 변환이란?**
  Prover가 보낸 커밋먼트와 평가값을 해싱하여 챌린지를 결정론적으로
  재구성한다. Verifier는 Prover와 정확히 같은 순서로 값을 흡수(absorb)해야
  같은 챌린지를 얻는다. 순서가 하나라도 다르면 챌린지가 달라지고,
  결과적으로 건전성(soundness)이 조용히 깨진다.

**상태(state)**:
  두 개의 32바이트 워드 (s0, s1), 초기값 0.

  absorb(value):
      s0' = keccak256(0x000000 ‖ 0x00 ‖ s0 ‖ s1 ‖ value)
      s1' = keccak256(0x000000 ‖ 0x01 ‖ s0 ‖ s1 ‖ value)
      (두 해시 모두 갱신 이전의 상태를 사용)

  challenge(i):
      keccak256(0x000000 ‖ 0x02 ‖ s0 ‖ s1 ‖ uint32(i)) & (2^253 - 1)
      상태를 변경하지 않는다.

**9개의 챌린지**:
  0: η, 1: β, 2: γ, 3: β', 4: γ', 5: α, 6: z, 7: v, 8: u

사용 예시:
    >>> t = Transcript()
    >>> t.append_point(commitment)
    >>> eta = t.challenge_scalar(0)
"""

from eth_utils import keccak

from rollup_zkp.plonk.constants import FR_MASK, WORD_BYTES
from rollup_zkp.plonk.field import FR


# 해시 입력 앞의 3바이트 패딩 + 도메인 분리 바이트
_PADDING = b"\x00" * 3
DST_UPDATE_STATE_0 = b"\x00"
DST_UPDATE_STATE_1 = b"\x01"
DST_CHALLENGE = b"\x02"


class Transcript:
    """keccak256 기반 2-워드 Fiat-Shamir 트랜스크립트.

    속성:
        state_0, state_1: 현재 해시 상태 (각 32바이트)
    """

    def __init__(self):
        self.state_0 = b"\x00" * WORD_BYTES
        self.state_1 = b"\x00" * WORD_BYTES

    def absorb(self, value):
        """256비트 워드 하나를 트랜스크립트에 흡수한다.

        Args:
            value: 0 ≤ value < 2^256 인 정수 (FR/FQ 원소도 허용)
        """
        word = int(value).to_bytes(WORD_BYTES, "big")
        body = self.state_0 + self.state_1 + word
        new_state_0 = keccak(_PADDING + DST_UPDATE_STATE_0 + body)
        new_state_1 = keccak(_PADDING + DST_UPDATE_STATE_1 + body)
        self.state_0 = new_state_0
        self.state_1 = new_state_1

    def append_scalar(self, scalar):
        """FR 스칼라 값을 트랜스크립트에 추가한다."""
        self.absorb(scalar)

    def append_point(self, point):
        """G1 점을 x, y 좌표 순서로 트랜스크립트에 추가한다.

        무한원점(None)은 EVM 관례대로 (0, 0)으로 흡수한다.
        """
        if point is None:
            self.absorb(0)
            self.absorb(0)
        else:
            x, y = point
            self.absorb(x)
            self.absorb(y)

    def challenge_scalar(self, number):
        """번호가 붙은 챌린지 스칼라를 생성한다.

        Args:
            number: 챌린지 번호 (0 ~ 8)

        Returns:
            FR: 253비트로 마스킹된 챌린지 (항상 R 미만)
        """
        digest = keccak(
            _PADDING + DST_CHALLENGE + self.state_0 + self.state_1
            + number.to_bytes(4, "big")
        )
        return FR(int.from_bytes(digest, "big") & FR_MASK)
