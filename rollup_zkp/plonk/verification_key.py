"""
PLONK 검증 키 (Verification Key)
==================================

배포된 회로마다 한 번 설정되고 이후 읽기 전용으로 공유되는 공개 파라미터.

**커밋먼트 (20개의 G1 점)**:
  - gate_setup[0..7]:   메인 게이트 셀렉터
                        q_a, q_b, q_c, q_d, q_ab, q_ac, q_const, q_d_next
  - gate_selectors[0..1]: 게이트 선택자 (0: 메인 게이트, 1: Rescue 커스텀 게이트)
  - permutation[0..3]:  복사 순열 다항식 σ₀..σ₃
  - lookup_selector:    룩업 셀렉터
  - lookup_table[0..3]: 룩업 테이블 열(column) 커밋먼트
  - lookup_table_type:  테이블 타입 다항식

**스칼라 상수**:
  ω, n = 2^26, 비잉여 {5, 7, 10}

**G2 원소**:
  최종 페어링의 [1]₂, [x]₂

**키 해시**:
  20개 점의 좌표 40워드와 재귀 플래그 1워드를 슬롯 순서대로 이어 붙여
  keccak256으로 해싱한다. 키 무결성을 외부에서 대조하는 용도이다.

사용 예시:
    >>> vk = VerificationKey(gate_setup=[...], gate_selectors=[...], ...)
    >>> verification_key_hash(vk).hex()
"""

from eth_utils import keccak

from rollup_zkp.plonk.constants import DOMAIN_SIZE, OMEGA, NON_RESIDUES, WORD_BYTES
from rollup_zkp.plonk.field import FR, point_valid, is_on_curve_g2
from rollup_zkp.plonk.srs import SRS


_POINT_GROUPS = (
    ("gate_setup", 8),
    ("gate_selectors", 2),
    ("permutation", 4),
    ("lookup_table", 4),
)


class VerificationKey:
    """회로별 검증 키.

    생성 시 점의 개수와 곡선 위 여부를 검사하고, 이후에는 변경하지 않는다.

    Args:
        gate_setup: G1 점 8개
        gate_selectors: G1 점 2개
        permutation: G1 점 4개
        lookup_selector: G1 점
        lookup_table: G1 점 4개
        lookup_table_type: G1 점
        recursive_flag: 재귀 증명(P1, P2)을 페어링에 접어 넣을지 여부
        domain_size: 평가 도메인 크기 n (2의 거듭제곱)
        omega: n차 원시 단위근
        non_residues: 순열 코셋 이동 상수 3개
        g2_elements: [1]₂, [x]₂ (기본값: 배포된 설정)

    Raises:
        ValueError: 점 개수가 틀리거나 곡선 위에 있지 않을 때
    """

    def __init__(self, gate_setup, gate_selectors, permutation,
                 lookup_selector, lookup_table, lookup_table_type,
                 recursive_flag=True, domain_size=DOMAIN_SIZE, omega=OMEGA,
                 non_residues=NON_RESIDUES, g2_elements=None):
        self.gate_setup = tuple(gate_setup)
        self.gate_selectors = tuple(gate_selectors)
        self.permutation = tuple(permutation)
        self.lookup_selector = lookup_selector
        self.lookup_table = tuple(lookup_table)
        self.lookup_table_type = lookup_table_type
        self.recursive_flag = bool(recursive_flag)

        if domain_size < 2 or (domain_size & (domain_size - 1)) != 0:
            raise ValueError(f"domain_size는 2의 거듭제곱이어야 합니다: {domain_size}")
        self.domain_size = domain_size
        self.omega = FR(int(omega))

        if len(non_residues) != 3:
            raise ValueError("non_residues는 3개여야 합니다")
        self.non_residues = tuple(FR(int(k)) for k in non_residues)

        if g2_elements is None:
            g2_elements = SRS.ignition().g2_powers
        if len(g2_elements) != 2:
            raise ValueError("g2_elements는 [1]₂, [x]₂ 두 개여야 합니다")
        for point in g2_elements:
            if point is None or not is_on_curve_g2(point):
                raise ValueError("G2 원소가 트위스트 곡선 위에 있지 않습니다")
        self.g2_elements = tuple(g2_elements)

        self._validate_points()

    def _validate_points(self):
        for name, count in _POINT_GROUPS:
            points = getattr(self, name)
            if len(points) != count:
                raise ValueError(f"{name}는 {count}개의 점이어야 합니다: {len(points)}")
        for point in self.commitments():
            if point is None or not point_valid(point[0], point[1]):
                raise ValueError(f"검증 키 커밋먼트가 곡선 위에 있지 않습니다: {point}")

    def commitments(self):
        """20개의 G1 커밋먼트를 슬롯 순서대로 반환한다."""
        return (
            list(self.gate_setup)
            + list(self.gate_selectors)
            + list(self.permutation)
            + [self.lookup_selector]
            + list(self.lookup_table)
            + [self.lookup_table_type]
        )

    def words(self):
        """키 해시의 입력이 되는 41개의 256비트 워드."""
        words = []
        for x, y in self.commitments():
            words.append(int(x))
            words.append(int(y))
        words.append(1 if self.recursive_flag else 0)
        return words


def verification_key_hash(vk):
    """검증 키 바이트 전체의 keccak256 해시.

    Returns:
        bytes: 32바이트 다이제스트
    """
    data = b"".join(w.to_bytes(WORD_BYTES, "big") for w in vk.words())
    return keccak(data)
