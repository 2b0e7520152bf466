"""
PLONK 공유 유틸리티
===================

검증 단계 여러 곳에서 공유되는 수학적 유틸리티 함수를 제공한다.

  - vanishing_poly_eval: 소거 다항식 Z_H(z) = z^n - 1 평가
  - lagrange_basis_eval: 도메인 밖의 점에서 i번째 Lagrange 기저 L_i(z) 평가
"""

from rollup_zkp.plonk.errors import DomainCollisionError
from rollup_zkp.plonk.field import FR


def vanishing_poly_eval(n, zeta):
    """소거 다항식 Z_H(z) = z^n - 1 을 평가한다.

    Z_H(x) = x^n - 1 은 도메인 H = {1, ω, ..., ω^(n-1)} 위에서 0이 되는 다항식이다.
    n = 2^26 이라도 지수 연산은 O(log n) 이다.

    Args:
        n: 도메인 크기
        zeta: 평가 점 (FR 원소)

    Returns:
        FR: z^n - 1
    """
    return zeta ** n - FR(1)


def lagrange_basis_eval(i, n, omega, zeta):
    """도메인 밖의 점 z에서 i번째 Lagrange 기저 다항식 L_i(z)를 평가한다.

    공식:
        L_i(z) = ω^i · (z^n - 1) / (n · (z - ω^i))

    z가 도메인 위의 점이면 z^n - 1 = 0 이고, 이 공식은 정의되지 않는다.
    그런 z는 정직한 증명에서 나올 수 없으므로 나눗셈 이전에 거부한다.

    Args:
        i: 기저 인덱스 (0 ≤ i < n)
        n: 도메인 크기
        omega: n차 원시 단위근
        zeta: 평가 점

    Returns:
        FR: L_i(z)

    Raises:
        DomainCollisionError: z^n - 1 = 0 일 때
    """
    zh_zeta = vanishing_poly_eval(n, zeta)
    if zh_zeta == FR(0):
        raise DomainCollisionError("invalid vanishing polynomial")

    omega_i = omega ** i if i else FR(1)
    denominator = (zeta - omega_i) * FR(n)
    return zh_zeta * omega_i / denominator
