"""
PLONK 검증기 데이터 직렬화/역직렬화 헬퍼
==========================================

TinyDB와 JSON 요청/응답에서 쓸 수 있는 형태로 검증기 객체를 변환한다.
FR, G1, G2, VerificationKey, 증명 워드 배열, 챌린지 목록.

정수는 10진 문자열로 직렬화하며, 역직렬화는 10진 문자열, "0x" 16진
문자열, 정수를 모두 받는다.
"""

from py_ecc import bn128

from rollup_zkp.plonk.field import g1_point
from rollup_zkp.plonk.verification_key import VerificationKey


def parse_word(value):
    """10진 문자열, 0x 16진 문자열, 정수 → int

    Raises:
        ValueError: 정수로 해석할 수 없는 값
    """
    if isinstance(value, bool):
        raise ValueError(f"정수가 아닙니다: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.lower().startswith("0x"):
            return int(text, 16)
        return int(text, 10)
    raise ValueError(f"정수가 아닙니다: {value!r}")


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


# ─── G1 point ───

def serialize_g1(point):
    """G1 point → [str, str] or None"""
    if point is None:
        return None
    return [str(int(point[0])), str(int(point[1]))]


def deserialize_g1(data):
    """[str, str] → G1 point (곡선 위 검사 포함)"""
    if data is None or len(data) != 2:
        raise ValueError(f"G1 점은 [x, y] 형식이어야 합니다: {data!r}")
    return g1_point(parse_word(data[0]), parse_word(data[1]))


# ─── G2 point ───

def serialize_g2(point):
    """G2 point → [[str,str],[str,str]] or None"""
    if point is None:
        return None
    return [
        [str(int(point[0].coeffs[0])), str(int(point[0].coeffs[1]))],
        [str(int(point[1].coeffs[0])), str(int(point[1].coeffs[1]))]
    ]


def deserialize_g2(data):
    """[[x_c0, x_c1], [y_c0, y_c1]] → G2 point

    Raises:
        ValueError: 2×2 형식이 아닐 때
    """
    if data is None:
        return None
    if (not isinstance(data, list) or len(data) != 2
            or any(not isinstance(c, list) or len(c) != 2 for c in data)):
        raise ValueError(f"G2 점은 [[x_c0, x_c1], [y_c0, y_c1]] 형식이어야 합니다: {data!r}")
    return (
        bn128.FQ2([parse_word(data[0][0]), parse_word(data[0][1])]),
        bn128.FQ2([parse_word(data[1][0]), parse_word(data[1][1])])
    )


# ─── Word arrays ───

def serialize_words(words):
    """list[int] → list[str]"""
    return [str(int(w)) for w in words]


def deserialize_words(data):
    """list[str | int] → list[int]"""
    if not isinstance(data, list):
        raise ValueError(f"워드 배열은 리스트여야 합니다: {data!r}")
    return [parse_word(w) for w in data]


# ─── VerificationKey ───

def serialize_verification_key(vk):
    """VerificationKey → dict"""
    return {
        "gateSetup": [serialize_g1(p) for p in vk.gate_setup],
        "gateSelectors": [serialize_g1(p) for p in vk.gate_selectors],
        "permutation": [serialize_g1(p) for p in vk.permutation],
        "lookupSelector": serialize_g1(vk.lookup_selector),
        "lookupTable": [serialize_g1(p) for p in vk.lookup_table],
        "lookupTableType": serialize_g1(vk.lookup_table_type),
        "recursiveFlag": vk.recursive_flag,
        "domainSize": vk.domain_size,
        "omega": serialize_fr(vk.omega),
        "nonResidues": [serialize_fr(k) for k in vk.non_residues],
        "g2Elements": [serialize_g2(p) for p in vk.g2_elements],
    }


def deserialize_verification_key(data):
    """dict → VerificationKey

    domainSize, omega, nonResidues, g2Elements, recursiveFlag는 생략하면
    배포된 회로의 기본값을 쓴다.

    Raises:
        ValueError: 필드가 없거나 점이 곡선 위에 있지 않을 때
    """
    try:
        kwargs = {
            "gate_setup": [deserialize_g1(p) for p in data["gateSetup"]],
            "gate_selectors": [deserialize_g1(p) for p in data["gateSelectors"]],
            "permutation": [deserialize_g1(p) for p in data["permutation"]],
            "lookup_selector": deserialize_g1(data["lookupSelector"]),
            "lookup_table": [deserialize_g1(p) for p in data["lookupTable"]],
            "lookup_table_type": deserialize_g1(data["lookupTableType"]),
        }
        if "recursiveFlag" in data:
            kwargs["recursive_flag"] = bool(data["recursiveFlag"])
        if "domainSize" in data:
            kwargs["domain_size"] = parse_word(data["domainSize"])
        if "omega" in data:
            kwargs["omega"] = parse_word(data["omega"])
        if "nonResidues" in data:
            kwargs["non_residues"] = [parse_word(k) for k in data["nonResidues"]]
        if "g2Elements" in data:
            kwargs["g2_elements"] = [deserialize_g2(p) for p in data["g2Elements"]]
    except (KeyError, TypeError) as e:
        raise ValueError(f"검증 키 형식이 올바르지 않습니다: {e}") from e
    return VerificationKey(**kwargs)


# ─── Challenges ───

def serialize_challenges(challenges):
    """[(name, FR)] → {name: hex str}"""
    return {name: hex(int(value)) for name, value in challenges}
