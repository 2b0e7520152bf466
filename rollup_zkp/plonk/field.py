"""
PLONK 검증기 기반 모듈: 유한체(Finite Field) 및 타원곡선 연산
===============================================================

검증 알고리즘 전체에서 사용되는 기본 대수적 도구를 정의한다.

**유한체 FR**:
  bn128 타원곡선의 스칼라 필드 (scalar field). 모든 챌린지, 다항식 평가값,
  선형결합 계수는 FR 위에서 계산된다.
  - 위수(order) R ≈ 2^254, 소수체(prime field)

**유한체 FQ**:
  bn128의 기저체 (base field). G1 점의 좌표가 FQ 원소이다.
  - 위수 Q ≈ 2^254, 곡선 방정식 y² = x³ + 3 (mod Q)

**타원곡선 연산**:
  커밋먼트 결합(ecAdd/ecMul)과 최종 페어링 검사를 위한 G1, G2 그룹 연산.
  무한원점은 py_ecc 관례에 따라 None으로 표현한다.

사용 예시:
    >>> from rollup_zkp.plonk.field import FR, G1, ec_mul
    >>> a = FR(3)
    >>> b = FR(7)
    >>> c = a * b        # FR(21)
    >>> P = ec_mul(G1, 5)  # 5·G1
"""

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128

from rollup_zkp.plonk.errors import InvalidPointError


# ─────────────────────────────────────────────────────────────────────
# 유한체(Finite Field) FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ 클래스를 상속하여 +, -, *, /, ** 등의 필드 연산을 제공한다.
    0으로 나누면 py_ecc는 예외 없이 0을 돌려주므로, 분모가 0이 될 수 있는
    곳에서는 호출자가 먼저 검사해야 한다.

    예시:
        >>> x = FR(3)
        >>> x * x          # FR(9)
        >>> FR(1) / FR(3)   # 3의 모듈러 역원
    """
    field_modulus = bn128.curve_order


# 곡선 위수 (스칼라 필드 크기)
CURVE_ORDER = bn128.curve_order

# 기저체 크기
FIELD_MODULUS = bn128.field_modulus


# ─────────────────────────────────────────────────────────────────────
# 타원곡선 상수 및 연산
# ─────────────────────────────────────────────────────────────────────

# G1 그룹 생성자 (generator) = (1, 2)
G1 = bn128.G1

# G2 그룹 생성자 (generator)
G2 = bn128.G2


def point_valid(x, y):
    """(x, y)가 곡선 y² = x³ + 3 (mod Q) 위에 있는지 확인한다.

    좌표는 정수 또는 FQ 원소 모두 허용하며, 먼저 mod Q로 축소한다.
    (0, 0)은 방정식을 만족하지 않으므로 무한원점은 와이어로 표현할 수 없다.

    Args:
        x, y: 점의 좌표

    Returns:
        bool: 곡선 방정식 만족 여부
    """
    x = int(x) % FIELD_MODULUS
    y = int(y) % FIELD_MODULUS
    lhs = y * y % FIELD_MODULUS
    rhs = (x * x % FIELD_MODULUS * x + 3) % FIELD_MODULUS
    return lhs == rhs


def g1_point(x, y):
    """정수 좌표를 mod Q로 축소하고 검증한 뒤 G1 점을 만든다.

    Raises:
        InvalidPointError: 곡선 방정식을 만족하지 않을 때
    """
    x = int(x) % FIELD_MODULUS
    y = int(y) % FIELD_MODULUS
    if not point_valid(x, y):
        raise InvalidPointError(f"point ({x}, {y}) is not on curve")
    return (FQ(x), FQ(y))


def ec_mul(point, scalar):
    """타원곡선 스칼라 곱셈: scalar · point.

    Args:
        point: G1 또는 G2 위의 점
        scalar: 정수 또는 FR 원소 (mod R로 축소)

    Returns:
        scalar · point (같은 그룹의 점)
    """
    if isinstance(scalar, FR):
        scalar = int(scalar)
    return bn128.multiply(point, scalar % CURVE_ORDER)


def ec_add(p1, p2):
    """타원곡선 점 덧셈: p1 + p2."""
    return bn128.add(p1, p2)


def ec_neg(point):
    """G1 점의 역원 (negation): -point.

    y = 0인 점은 x = 0 (무한원점의 와이어 표현)일 때만 허용되며,
    이때는 무한원점(None)을 반환한다. 그 외에 y = 0이면 곡선 위의 점이
    아니므로 거부한다.

    Raises:
        InvalidPointError: y = 0 이고 x ≠ 0 일 때
    """
    if point is None:
        return None
    x, y = point
    if int(y) == 0:
        if int(x) != 0:
            raise InvalidPointError("pointNegate: invalid point")
        return None
    return bn128.neg(point)


def ec_sub(p1, p2):
    """타원곡선 점 뺄셈: p1 - p2."""
    return ec_add(p1, ec_neg(p2))


def ec_pairing(g2_point, g1_point):
    """쌍선형 페어링 e(G1, G2) → GT.

    주의:
        py_ecc.bn128.pairing의 인자 순서는 (G2, G1)이다.
    """
    return bn128.pairing(g2_point, g1_point)


def is_on_curve_g2(point):
    """G2 점이 트위스트 곡선 위에 있는지 확인한다."""
    return bn128.is_on_curve(point, bn128.b2)


# ─────────────────────────────────────────────────────────────────────
# 단위근 (Roots of Unity)
# ─────────────────────────────────────────────────────────────────────

def get_root_of_unity(n):
    """n차 원시 단위근(primitive n-th root of unity) ω를 반환한다.

    생성자 g = FR(5)를 사용하여 ω = g^((R-1)/n)으로 계산한다.
    배포된 회로는 고정 상수 OMEGA를 쓰며, 이 함수는 작은 도메인의
    검증 키를 구성할 때 사용한다.

    Args:
        n: 단위근의 차수 (2의 거듭제곱, ≤ 2^28)

    Raises:
        ValueError: n이 2의 거듭제곱이 아니거나 2^28을 초과할 때

    예시:
        >>> omega = get_root_of_unity(4)
        >>> omega ** 4 == FR(1)  # True
    """
    if n < 1 or (n & (n - 1)) != 0:
        raise ValueError(f"n은 2의 거듭제곱이어야 합니다: {n}")
    if n > (1 << 28):
        raise ValueError(f"n은 2^28 이하여야 합니다: {n}")
    if n == 1:
        return FR(1)

    g = FR(5)
    exponent = (CURVE_ORDER - 1) // n
    return g ** exponent
