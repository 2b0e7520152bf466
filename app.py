import json
import logging
import os

from flask import Flask, jsonify

from tinydb import TinyDB, Query
from tinydb.storages import MemoryStorage

from verifier_routes import verifier_bp, init_verifier_bp, install_verification_key
from verifier_serializers import deserialize_verification_key

logger = logging.getLogger(__name__)

DB_PATH = os.environ.get("ZKP_DB_PATH", "db.json")
VERIFICATION_KEY_PATH = os.environ.get("ZKP_VERIFICATION_KEY")
DEFAULT_KEY_NAME = "default"


def create_app(db=None, verification_key_path=None):
    """Flask 앱을 만든다.

    Args:
        db: TinyDB 인스턴스 (기본: ZKP_DB_PATH 파일, ":memory:"이면 메모리 DB)
        verification_key_path: 시작 시 "default" 이름으로 설치할 검증 키 JSON 경로
    """
    if db is None:
        if DB_PATH == ":memory:":
            db = TinyDB(storage=MemoryStorage)  # Memory DB
        else:
            db = TinyDB(DB_PATH)                # Storage DB

    app = Flask(__name__)

    init_verifier_bp(db.table("verifier"))
    app.register_blueprint(verifier_bp)

    if verification_key_path:
        with open(verification_key_path) as f:
            vk = deserialize_verification_key(json.load(f))
        install_verification_key(DEFAULT_KEY_NAME, vk)

    @app.route("/")
    def main():
        table = db.table("verifier")
        names = sorted(
            row["type"][len("verifier.keys."):]
            for row in table.search(Query().type.test(lambda t: t.startswith("verifier.keys.")))
        )
        return jsonify({"keys": names})

    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("ZKP_LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(verification_key_path=VERIFICATION_KEY_PATH)
    app.run(debug=True)
