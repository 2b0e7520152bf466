"""
PLONK 증명 코덱 (Proof Codec)
===============================

제출된 배치에서 추출한 세 개의 워드 배열을 타입이 있는 Proof 객체로 변환한다.

**와이어 레이아웃** (각 슬롯은 256비트 빅엔디안 워드, 점은 (x, y)):

  ┌──────────────────────────────┬──────┬──────────────────────────────┐
  │ 배열                         │ 길이 │ 내용                          │
  ├──────────────────────────────┼──────┼──────────────────────────────┤
  │ publicInputs                 │  1   │ 공개 입력 스칼라               │
  │ proof                        │  44  │ 아래 PROOF_LAYOUT 순서         │
  │ recursiveAggregationInput    │  4   │ P1 (2), P2 (2)                │
  └──────────────────────────────┴──────┴──────────────────────────────┘

  proof 배열:
    0-7    [a], [b], [c], [d]              상태 다항식 커밋먼트
    8-9    [z_perm]                        복사 순열 grand product
    10-11  [s]                             룩업 S 다항식
    12-13  [z_lookup]                      룩업 grand product
    14-21  [t_0] .. [t_3]                  몫 다항식 조각
    22-25  a(z), b(z), c(z), d(z)
    26     d(zω)
    27     q_main(z)                       메인 게이트 선택자
    28-30  σ₀(z), σ₁(z), σ₂(z)
    31     z_perm(zω)
    32     t_lookup(z)
    33     q_lookup(z)
    34     table_type(z)
    35     t(z)                            몫 다항식
    36     s(zω)
    37     z_lookup(zω)
    38     t_lookup(zω)
    39     r(z)                            선형화 다항식
    40-41  [W]                             z에서의 열기 증명
    42-43  [W']                            zω에서의 열기 증명

**검증 규칙**:
  - 길이 검사가 모든 산술보다 먼저 수행된다.
  - 스칼라는 mod R로 축소된다 (축소 자체는 오류가 아니다).
  - 점 좌표는 mod Q로 축소된 뒤 y² = x³ + 3 을 만족해야 한다.
  - 위반 시 MalformedProofError로 중단하며, 부분적인 증명은 받지 않는다.

사용 예시:
    >>> proof = load_proof(public_inputs, proof_words, recursive_words, vk)
    >>> proof.quotient_poly_opening_at_z
"""

from rollup_zkp.plonk.constants import (
    PUBLIC_INPUTS_LENGTH,
    PROOF_LENGTH,
    RECURSIVE_AGGREGATION_INPUT_LENGTH,
    WORD_BITS,
    WORD_BYTES,
)
from rollup_zkp.plonk.errors import MalformedProofError
from rollup_zkp.plonk.field import FR, g1_point


POINT = "point"
SCALAR = "scalar"

PROOF_LAYOUT = (
    ("state_poly_0", POINT),
    ("state_poly_1", POINT),
    ("state_poly_2", POINT),
    ("state_poly_3", POINT),
    ("copy_permutation_grand_product", POINT),
    ("lookup_s_poly", POINT),
    ("lookup_grand_product", POINT),
    ("quotient_poly_part_0", POINT),
    ("quotient_poly_part_1", POINT),
    ("quotient_poly_part_2", POINT),
    ("quotient_poly_part_3", POINT),
    ("state_poly_0_opening_at_z", SCALAR),
    ("state_poly_1_opening_at_z", SCALAR),
    ("state_poly_2_opening_at_z", SCALAR),
    ("state_poly_3_opening_at_z", SCALAR),
    ("state_poly_3_opening_at_z_omega", SCALAR),
    ("gate_selector_0_opening_at_z", SCALAR),
    ("copy_permutation_poly_0_opening_at_z", SCALAR),
    ("copy_permutation_poly_1_opening_at_z", SCALAR),
    ("copy_permutation_poly_2_opening_at_z", SCALAR),
    ("copy_permutation_grand_product_opening_at_z_omega", SCALAR),
    ("lookup_t_poly_opening_at_z", SCALAR),
    ("lookup_selector_poly_opening_at_z", SCALAR),
    ("lookup_table_type_poly_opening_at_z", SCALAR),
    ("quotient_poly_opening_at_z", SCALAR),
    ("lookup_s_poly_opening_at_z_omega", SCALAR),
    ("lookup_grand_product_opening_at_z_omega", SCALAR),
    ("lookup_t_poly_opening_at_z_omega", SCALAR),
    ("linearisation_poly_opening_at_z", SCALAR),
    ("opening_proof_at_z", POINT),
    ("opening_proof_at_z_omega", POINT),
)

RECURSIVE_LAYOUT = (
    ("recursive_part_p1", POINT),
    ("recursive_part_p2", POINT),
)


class Proof:
    """PLONK 증명 데이터 컨테이너.

    한 번 소비되고 저장되지 않는다. 속성 이름은 PROOF_LAYOUT을 따른다.

    커밋먼트 (G1 점):
        state_poly_0..3, copy_permutation_grand_product, lookup_s_poly,
        lookup_grand_product, quotient_poly_part_0..3

    평가값 (FR, 18개):
        *_opening_at_z, *_opening_at_z_omega

    열기 증명 (G1 점):
        opening_proof_at_z, opening_proof_at_z_omega

    재귀 증명 (G1 점, 검증 키의 recursive_flag가 꺼져 있으면 None):
        recursive_part_p1, recursive_part_p2
    """

    def __init__(self):
        self.public_input = None
        for name, _ in PROOF_LAYOUT + RECURSIVE_LAYOUT:
            setattr(self, name, None)

    @property
    def state_polys(self):
        return [self.state_poly_0, self.state_poly_1,
                self.state_poly_2, self.state_poly_3]

    @property
    def state_polys_openings_at_z(self):
        return [self.state_poly_0_opening_at_z, self.state_poly_1_opening_at_z,
                self.state_poly_2_opening_at_z, self.state_poly_3_opening_at_z]

    @property
    def quotient_poly_parts(self):
        return [self.quotient_poly_part_0, self.quotient_poly_part_1,
                self.quotient_poly_part_2, self.quotient_poly_part_3]

    @property
    def copy_permutation_polys_openings_at_z(self):
        return [self.copy_permutation_poly_0_opening_at_z,
                self.copy_permutation_poly_1_opening_at_z,
                self.copy_permutation_poly_2_opening_at_z]


# ─────────────────────────────────────────────────────────────────────
# 워드 배열 ↔ Proof
# ─────────────────────────────────────────────────────────────────────

def _check_words(name, words, expected_length):
    if len(words) != expected_length:
        raise MalformedProofError(
            f"loadProof: {name} must contain {expected_length} elements, got {len(words)}"
        )
    for word in words:
        if isinstance(word, bool) or not isinstance(word, int):
            raise MalformedProofError(f"loadProof: {name} element is not an integer: {word!r}")
        if word < 0 or word >> WORD_BITS:
            raise MalformedProofError(f"loadProof: {name} element is not a 256-bit word")


def _read_layout(target, layout, words):
    i = 0
    for name, kind in layout:
        if kind == POINT:
            setattr(target, name, g1_point(words[i], words[i + 1]))
            i += 2
        else:
            setattr(target, name, FR(words[i]))
            i += 1


def _write_layout(source, layout):
    words = []
    for name, kind in layout:
        value = getattr(source, name)
        if kind == POINT:
            words.append(int(value[0]))
            words.append(int(value[1]))
        else:
            words.append(int(value))
    return words


def load_proof(public_inputs, proof, recursive_aggregation_input, vk):
    """세 개의 워드 배열에서 Proof를 만든다.

    Args:
        public_inputs: 길이 1의 정수 리스트
        proof: 길이 44의 정수 리스트
        recursive_aggregation_input: vk.recursive_flag이면 길이 4, 아니면 빈 리스트
        vk: VerificationKey

    Returns:
        Proof

    Raises:
        MalformedProofError: 길이, 워드 범위, 곡선 방정식 위반
    """
    public_inputs = list(public_inputs)
    proof = list(proof)
    recursive_aggregation_input = list(recursive_aggregation_input)

    recursive_length = RECURSIVE_AGGREGATION_INPUT_LENGTH if vk.recursive_flag else 0
    _check_words("public inputs", public_inputs, PUBLIC_INPUTS_LENGTH)
    _check_words("proof", proof, PROOF_LENGTH)
    _check_words("recursive aggregation input", recursive_aggregation_input, recursive_length)

    result = Proof()
    result.public_input = FR(public_inputs[0])
    _read_layout(result, PROOF_LAYOUT, proof)
    if vk.recursive_flag:
        _read_layout(result, RECURSIVE_LAYOUT, recursive_aggregation_input)
    return result


def encode_proof(proof):
    """Proof를 (publicInputs, proof, recursiveAggregationInput) 워드 배열로 되돌린다."""
    public_inputs = [int(proof.public_input)]
    proof_words = _write_layout(proof, PROOF_LAYOUT)
    if proof.recursive_part_p1 is None:
        recursive_words = []
    else:
        recursive_words = _write_layout(proof, RECURSIVE_LAYOUT)
    return public_inputs, proof_words, recursive_words


# ─────────────────────────────────────────────────────────────────────
# ABI calldata: verify(uint256[], uint256[], uint256[])
# ─────────────────────────────────────────────────────────────────────

def _read_word(data, offset):
    if offset < 0 or offset + WORD_BYTES > len(data):
        raise MalformedProofError("calldata: read out of bounds")
    return int.from_bytes(data[offset:offset + WORD_BYTES], "big")


def decode_calldata(data):
    """ABI 인코딩된 세 개의 동적 uint256[] 인자를 디코딩한다.

    레이아웃: 머리(head)에 각 배열의 오프셋 3워드, 각 배열은 길이 워드 뒤에
    원소 워드가 이어진다. 함수 선택자(selector)는 포함하지 않는다.

    Returns:
        tuple: (public_inputs, proof, recursive_aggregation_input)

    Raises:
        MalformedProofError: 버퍼가 잘렸거나 오프셋/길이가 범위를 벗어날 때
    """
    data = bytes(data)
    arrays = []
    for head in range(3):
        offset = _read_word(data, head * WORD_BYTES)
        length = _read_word(data, offset)
        if offset + WORD_BYTES * (length + 1) > len(data):
            raise MalformedProofError("calldata: array length exceeds buffer")
        start = offset + WORD_BYTES
        arrays.append([_read_word(data, start + k * WORD_BYTES) for k in range(length)])
    return tuple(arrays)


def encode_calldata(public_inputs, proof, recursive_aggregation_input):
    """decode_calldata의 역변환 (표준 ABI 인코딩)."""
    arrays = [list(public_inputs), list(proof), list(recursive_aggregation_input)]
    head = b""
    tail = b""
    offset = 3 * WORD_BYTES
    for words in arrays:
        head += offset.to_bytes(WORD_BYTES, "big")
        body = len(words).to_bytes(WORD_BYTES, "big")
        body += b"".join(int(w).to_bytes(WORD_BYTES, "big") for w in words)
        tail += body
        offset += len(body)
    return head + tail
