"""
검증기 고정 상수
================

배포된 롤업 회로의 검증에 쓰이는 비트 단위로 고정된 상수들.
이 값들이 하나라도 바뀌면 이전에 발급된 모든 증명이 무효가 된다.

**체(field) 모듈러스**:
  - Q_MOD: bn128 기저체(base field) 위수. 곡선 좌표는 모두 mod Q.
  - R_MOD: bn128 스칼라체(scalar field) 위수. 챌린지/평가값은 모두 mod R.

**평가 도메인**:
  - DOMAIN_SIZE n = 2^26
  - OMEGA: n차 원시 단위근
  - NON_RESIDUES {5, 7, 10}: 순열 코셋을 분리하는 비잉여(non-residue) 상수

**와이어 포맷 길이**:
  공개 입력 1워드, 증명 44워드, 재귀 증명 4워드.
"""

from py_ecc import bn128


Q_MOD = bn128.field_modulus
R_MOD = bn128.curve_order

# 챌린지는 keccak 다이제스트의 하위 253비트만 사용한다 (항상 R_MOD 미만)
FR_MASK = (1 << 253) - 1

DOMAIN_SIZE = 1 << 26
OMEGA = 0x1951441010b2b95a6e47a6075066a50a036f5ba978c050f2821df86636c0facb

NON_RESIDUES = (5, 7, 10)

# 신뢰 설정(trusted setup)의 G2 원소.
# EVM 인코딩 순서는 (x.c1, x.c0, y.c1, y.c0)이지만 py_ecc FQ2는 (c0, c1) 순서이다.
G2_ELEMENT_0 = bn128.G2
G2_ELEMENT_1 = (
    bn128.FQ2([
        0x0118c4d5b837bcc2bc89b5b398b5974e9f5944073b32078b7e231fec938883b0,
        0x260e01b251f6f1c7e7ff4e580791dee8ea51d87a358e038b4efe30fac09383c1,
    ]),
    bn128.FQ2([
        0x22febda3c0c0632a56475b4214e5615e11e6dd3f96e6cea2854a87d4dacc5e55,
        0x04fc6369f7110fe3d25156c1bb9a72859cf2a04641f99ba4ee413c80da6a5fe4,
    ]),
)

PUBLIC_INPUTS_LENGTH = 1
PROOF_LENGTH = 44
RECURSIVE_AGGREGATION_INPUT_LENGTH = 4

WORD_BITS = 256
WORD_BYTES = 32
