"""
PLONK 검증기 Flask Blueprint
==============================

검증 키 설치/조회와 증명 검증 JSON 엔드포인트.

  POST /verifier/keys/<name>          검증 키 설치 → {name, vkHash}
  GET  /verifier/keys/<name>          검증 키 조회 → {name, vkHash, verificationKey}
  GET  /verifier/keys/<name>/hash     검증 키 해시 → {name, vkHash}
  POST /verifier/verify/<name>        증명 검증 → {accepted, reason, vkHash}
  POST /verifier/challenges/<name>    트랜스크립트 재생 → {challenges, vkHash}

증명 요청 본문:
  {"publicInputs": [...], "proof": [...], "recursiveAggregationInput": [...]}

상태 코드:
  200  검증 완료 (accepted가 false여도 200)
  400  요청 본문 또는 검증 키 형식 오류
  404  설치되지 않은 검증 키
  422  와이어 포맷 위반 (malformed proof)
"""

import logging

from flask import Blueprint, jsonify, request
from tinydb import Query

from rollup_zkp.plonk.errors import MalformedProofError, VerificationError
from rollup_zkp.plonk.verifier import verify, derive_challenges, verification_key_hash

from verifier_serializers import (
    serialize_verification_key, deserialize_verification_key,
    deserialize_words, serialize_challenges,
)

logger = logging.getLogger(__name__)

verifier_bp = Blueprint('verifier', __name__, url_prefix='/verifier')

DATA = Query()

# DB는 app.py에서 주입
DB = None


def init_verifier_bp(db):
    """app.py에서 DB 테이블을 주입받는다."""
    global DB
    DB = db


# ─── DB 헬퍼 ───

def db_get(key):
    """DB에서 키로 데이터를 조회한다."""
    result = DB.search(DATA.type == key)
    if not result:
        return None
    return result[0].get("data")


def db_set(key, data):
    """DB에 키로 데이터를 저장한다."""
    DB.upsert({"type": key, "data": data}, DATA.type == key)


def install_verification_key(name, vk):
    """검증 키를 저장하고 해시(hex)를 반환한다."""
    vk_hash = "0x" + verification_key_hash(vk).hex()
    db_set(f"verifier.keys.{name}", {
        "verificationKey": serialize_verification_key(vk),
        "vkHash": vk_hash,
    })
    logger.info("installed verification key %s (%s)", name, vk_hash)
    return vk_hash


def _load_key(name):
    """저장된 (VerificationKey, hash) 또는 (None, None)"""
    stored = db_get(f"verifier.keys.{name}")
    if stored is None:
        return None, None
    return deserialize_verification_key(stored["verificationKey"]), stored["vkHash"]


def _proof_arrays(body):
    if not isinstance(body, dict):
        raise ValueError("요청 본문은 JSON 객체여야 합니다")
    return (
        deserialize_words(body.get("publicInputs")),
        deserialize_words(body.get("proof")),
        deserialize_words(body.get("recursiveAggregationInput", [])),
    )


def _unknown_key(name):
    return jsonify({"error": f"unknown verification key: {name}"}), 404


# ──────────────────────────────────────────────────────────────
# 검증 키
# ──────────────────────────────────────────────────────────────

@verifier_bp.route("/keys/<name>", methods=["POST"])
def keys_install(name):
    """검증 키 JSON을 설치한다."""
    try:
        vk = deserialize_verification_key(request.get_json(force=True))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    vk_hash = install_verification_key(name, vk)
    return jsonify({"name": name, "vkHash": vk_hash})


@verifier_bp.route("/keys/<name>", methods=["GET"])
def keys_get(name):
    """설치된 검증 키와 해시를 반환한다."""
    stored = db_get(f"verifier.keys.{name}")
    if stored is None:
        return _unknown_key(name)
    return jsonify({"name": name, **stored})


@verifier_bp.route("/keys/<name>/hash", methods=["GET"])
def keys_hash(name):
    """설치된 검증 키의 keccak256 해시를 반환한다."""
    stored = db_get(f"verifier.keys.{name}")
    if stored is None:
        return _unknown_key(name)
    return jsonify({"name": name, "vkHash": stored["vkHash"]})


# ──────────────────────────────────────────────────────────────
# 검증
# ──────────────────────────────────────────────────────────────

@verifier_bp.route("/verify/<name>", methods=["POST"])
def verify_proof(name):
    """증명을 검증한다. 오류는 accepted=false와 사유로 변환된다."""
    vk, vk_hash = _load_key(name)
    if vk is None:
        return _unknown_key(name)

    try:
        public_inputs, proof, recursive = _proof_arrays(request.get_json(force=True))
    except ValueError as e:
        return jsonify({"accepted": False, "reason": str(e), "vkHash": vk_hash}), 400

    try:
        accepted = verify(public_inputs, proof, recursive, vk)
    except MalformedProofError as e:
        logger.warning("malformed proof for %s: %s", name, e)
        return jsonify({"accepted": False, "reason": str(e), "vkHash": vk_hash}), 422
    except VerificationError as e:
        logger.warning("proof rejected for %s: %s", name, e)
        return jsonify({"accepted": False, "reason": str(e), "vkHash": vk_hash})

    reason = None if accepted else "pairing check failed"
    if not accepted:
        logger.warning("proof rejected for %s: %s", name, reason)
    return jsonify({"accepted": accepted, "reason": reason, "vkHash": vk_hash})


@verifier_bp.route("/challenges/<name>", methods=["POST"])
def challenges_replay(name):
    """트랜스크립트를 재생하여 9개의 챌린지를 반환한다."""
    vk, vk_hash = _load_key(name)
    if vk is None:
        return _unknown_key(name)

    try:
        public_inputs, proof, recursive = _proof_arrays(request.get_json(force=True))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    try:
        challenges = derive_challenges(public_inputs, proof, recursive, vk)
    except MalformedProofError as e:
        return jsonify({"error": str(e)}), 422
    return jsonify({"challenges": serialize_challenges(challenges), "vkHash": vk_hash})
