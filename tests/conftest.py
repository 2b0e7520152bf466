"""
공용 테스트 fixture
====================

트랩도어 증명 생성기는 trapdoor.py 참고.
"""

import sys
import os

import pytest

# 프로젝트 루트와 tests 디렉토리를 sys.path에 추가
tests_dir = os.path.abspath(os.path.dirname(__file__))
project_root = os.path.abspath(os.path.join(tests_dir, '..'))
for path in (project_root, tests_dir):
    if path not in sys.path:
        sys.path.insert(0, path)

from rollup_zkp.plonk.srs import SRS, toxic_waste

from trapdoor import SETUP_SEED, make_verification_key, make_proof


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def tau():
    return toxic_waste(SETUP_SEED)


@pytest.fixture(scope="session")
def srs():
    return SRS.generate(SETUP_SEED)


@pytest.fixture(scope="session")
def vk(srs):
    """재귀 플래그가 켜진 2^26 도메인 검증 키."""
    return make_verification_key(srs)


@pytest.fixture(scope="session")
def vk_non_recursive(srs):
    return make_verification_key(srs, recursive_flag=False)


@pytest.fixture(scope="session")
def valid_proof(vk, tau):
    """(public_inputs, proof, recursive_aggregation_input) 워드 배열."""
    return make_proof(vk, tau, seed=1)


@pytest.fixture(scope="session")
def valid_proof_non_recursive(vk_non_recursive, tau):
    return make_proof(vk_non_recursive, tau, seed=2)
