"""
PLONK Structured Reference String (SRS)
=========================================

검증기가 필요로 하는 신뢰 설정(trusted setup)의 일부를 표현한다.

**검증기가 쓰는 SRS**:
  KZG 열기 검사는 G2 쪽에서 두 원소만 필요하다.

  SRS = {
      G2 powers: [G2, τ·G2]    ← 최종 페어링의 [1]₂, [x]₂
  }

**배포된 설정 (ignition)**:
  실제 롤업 회로는 다자간 계산(MPC)으로 생성된 고정 설정을 사용한다.
  τ는 아무도 모르며, G2 원소만 상수로 배포된다.

**결정론적 설정 (generate)**:
  seed에서 τ를 유도한다. τ를 아는 사람은 임의의 증명을 만들 수 있으므로
  테스트와 시연 용도로만 사용한다.

사용 예시:
    >>> srs = SRS.ignition()
    >>> srs.g2_powers[1]  # [x]₂
    >>> test_srs = SRS.generate(seed=42)
"""

import hashlib

from rollup_zkp.plonk.constants import G2_ELEMENT_0, G2_ELEMENT_1
from rollup_zkp.plonk.field import FR, G2, ec_mul, CURVE_ORDER


def toxic_waste(seed):
    """seed에서 τ ("toxic waste")를 결정론적으로 유도한다.

    Args:
        seed: 임의의 값 (str()로 변환하여 해싱)

    Returns:
        FR: 0이 아닌 τ
    """
    h = hashlib.sha256(str(seed).encode()).digest()
    tau_int = int.from_bytes(h, "big") % CURVE_ORDER
    return FR(tau_int or 1)


class SRS:
    """검증용 Structured Reference String.

    속성:
        g2_powers: [G2, τ·G2]
    """

    def __init__(self, g2_powers):
        self.g2_powers = g2_powers

    @classmethod
    def ignition(cls):
        """배포된 회로의 고정 G2 원소로 SRS를 만든다."""
        return cls([G2_ELEMENT_0, G2_ELEMENT_1])

    @classmethod
    def generate(cls, seed):
        """seed에서 유도한 τ로 SRS를 만든다 (테스트용).

        Args:
            seed: 결정론적 생성을 위한 시드

        Returns:
            SRS: [G2, τ·G2]
        """
        tau = toxic_waste(seed)
        g2_powers = [G2, ec_mul(G2, tau)]
        return cls(g2_powers)
