"""
Poseidon 인터랙티브 스터디 앱
================================

Flask 앱 + TinyDB. Poseidon 엔드포인트는 poseidon_routes의 Blueprint로 등록된다.

환경 변수:
  POSEIDON_DB_PATH     TinyDB 파일 경로 (없으면 메모리 DB)
  POSEIDON_SECRET_KEY  Flask secret key
"""

import logging
import os

from flask import Flask, jsonify
from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from zkposeidon.field import CURVE_ORDER
from zkposeidon.grain import MIN_WIDTH, MAX_WIDTH, N_ROUNDS_F, SBOX_DEGREE

from poseidon_routes import poseidon_bp, init_poseidon_bp


logger = logging.getLogger(__name__)


def open_db(path=None):
    """path가 있으면 파일 DB, 없으면 메모리 DB를 연다."""
    if path:
        return TinyDB(path)
    return TinyDB(storage=MemoryStorage)


def create_app(db=None):
    """Flask 앱을 만들고 Poseidon Blueprint에 DB를 주입한다."""
    app = Flask(__name__)
    app.secret_key = os.environ.get("POSEIDON_SECRET_KEY", "key")

    if db is None:
        db = open_db(os.environ.get("POSEIDON_DB_PATH"))
    poseidon_db = db.table("poseidon")
    init_poseidon_bp(poseidon_db)
    app.register_blueprint(poseidon_bp)

    @app.route("/")
    def main():
        return jsonify({
            "field_modulus": str(CURVE_ORDER),
            "sbox_degree": SBOX_DEGREE,
            "full_rounds": N_ROUNDS_F,
            "widths": [MIN_WIDTH, MAX_WIDTH],
            "endpoints": sorted(
                str(rule) for rule in app.url_map.iter_rules() if rule.endpoint != "static"
            ),
        })

    logger.info("poseidon app ready (db=%s)", type(db.storage).__name__)
    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_app().run(debug=True)
