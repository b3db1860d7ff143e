"""
Poseidon Flask Blueprint
==========================

JSON 엔드포인트 5개 (GET 2 + POST 3)

  | 메서드 | 경로                         | 내용                              |
  |--------|------------------------------|-----------------------------------|
  | GET    | /poseidon/params/<t>         | 라운드 수, 상수, 혼합 행렬        |
  | POST   | /poseidon/hash               | {"inputs", "strategy"} → 해시     |
  | POST   | /poseidon/circuit            | {"inputs", "strategy"} → 게이트 수|
  | GET    | /poseidon/history            | 계산 기록                         |
  | POST   | /poseidon/history/clear      | 기록 삭제                         |

검증 오류(PoseidonError, 잘못된 입력 값)는 400 {"error": msg}로 응답한다.
"""

import logging

from flask import Blueprint, jsonify, request
from tinydb import Query

from zkposeidon.circuit import CircuitBuilder
from zkposeidon.errors import PoseidonError
from zkposeidon.hash import poseidon_hash, poseidon_hash_ex
from zkposeidon.params import STANDARD, build_config
from zkposeidon.sparse import SPARSE, build_sparse_config

from poseidon_serializers import (
    serialize_fr,
    serialize_config,
    serialize_circuit_summary,
    serialize_gate_rows,
    deserialize_fr_list,
    fr_short,
)

logger = logging.getLogger(__name__)

poseidon_bp = Blueprint('poseidon', __name__, url_prefix='/poseidon')

DATA = Query()

# DB는 app.py에서 주입
DB = None

HISTORY_KEY = "poseidon.history"

# 보관할 최대 기록 수 (오래된 것부터 삭제)
HISTORY_LIMIT = 100

# 응답에 포함할 게이트 행 수
GATE_PREVIEW = 16


def init_poseidon_bp(db):
    """app.py에서 DB를 주입받는다."""
    global DB
    DB = db


# ─── DB 헬퍼 ───

def db_remove_prefix(prefix):
    """prefix로 시작하는 모든 키를 삭제한다."""
    DB.remove(DATA.type.test(lambda t: t.startswith(prefix)))


def append_history(entry):
    """기록 한 건을 문서 하나로 저장하고 HISTORY_LIMIT을 넘는 오래된 기록을 지운다."""
    DB.insert({"type": HISTORY_KEY, "data": entry})
    rows = DB.search(DATA.type == HISTORY_KEY)
    if len(rows) > HISTORY_LIMIT:
        oldest = sorted(row.doc_id for row in rows)[:len(rows) - HISTORY_LIMIT]
        DB.remove(doc_ids=oldest)


def load_history():
    rows = DB.search(DATA.type == HISTORY_KEY)
    return [row["data"] for row in sorted(rows, key=lambda row: row.doc_id)]


# ─── 요청 파싱 ───

class RequestError(ValueError):
    """요청 본문 형식 오류."""


def read_inputs():
    """JSON 본문의 "inputs"를 FR 리스트로 변환한다."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise RequestError("JSON 객체 본문이 필요합니다")
    inputs = body.get("inputs")
    if not isinstance(inputs, list):
        raise RequestError('"inputs"는 리스트여야 합니다')
    try:
        return body, deserialize_fr_list(inputs)
    except (TypeError, ValueError) as e:
        raise RequestError(f"입력 값을 필드 원소로 변환할 수 없습니다: {e}")


def read_strategy(body):
    """JSON 본문의 "strategy" (기본값 "standard")."""
    strategy = body.get("strategy", STANDARD)
    if not isinstance(strategy, str):
        raise RequestError('"strategy"는 문자열이어야 합니다')
    return strategy


@poseidon_bp.errorhandler(PoseidonError)
@poseidon_bp.errorhandler(RequestError)
def handle_bad_request(e):
    logger.warning("rejected %s %s: %s", request.method, request.path, e)
    return jsonify({"error": str(e)}), 400


# ──────────────────────────────────────────────────────────────
# 파라미터
# ──────────────────────────────────────────────────────────────

@poseidon_bp.route("/params/<int:t>")
def params_page(t):
    """너비 t의 파라미터를 반환한다. ?strategy=sparse로 희소 배치를 조회한다."""
    strategy = request.args.get("strategy", STANDARD)
    if strategy == SPARSE:
        config = build_sparse_config(t)
    elif strategy == STANDARD:
        config = build_config(t)
    else:
        raise RequestError(f"알 수 없는 라운드 전략입니다: {strategy!r}")
    return jsonify(serialize_config(config))


# ──────────────────────────────────────────────────────────────
# 해시
# ──────────────────────────────────────────────────────────────

@poseidon_bp.route("/hash", methods=["POST"])
def hash_inputs():
    """입력을 해시한다. "n_outputs"가 있으면 PoseidonEx 형태로 여러 출력을 반환한다."""
    body, inputs = read_inputs()
    strategy = read_strategy(body)
    n_outputs = body.get("n_outputs")

    if n_outputs is None:
        outputs = [poseidon_hash(inputs, strategy=strategy)]
    else:
        if not isinstance(n_outputs, int) or isinstance(n_outputs, bool):
            raise RequestError('"n_outputs"는 정수여야 합니다')
        outputs = poseidon_hash_ex(inputs, n_outputs, strategy=strategy)

    result = {
        "inputs": [serialize_fr(x) for x in inputs],
        "strategy": strategy,
        "t": len(inputs) + 1,
        "hash": serialize_fr(outputs[0]),
        "outputs": [serialize_fr(out) for out in outputs],
    }
    append_history({
        "kind": "hash",
        "t": result["t"],
        "strategy": strategy,
        "inputs": result["inputs"],
        "hash": result["hash"],
        "hash_short": fr_short(outputs[0]),
    })
    return jsonify(result)


# ──────────────────────────────────────────────────────────────
# 회로
# ──────────────────────────────────────────────────────────────

@poseidon_bp.route("/circuit", methods=["POST"])
def circuit_inputs():
    """입력을 회로 변수로 두고 Poseidon 회로를 만든다. "strategy"로 라운드 전략을 고른다."""
    body, inputs = read_inputs()
    strategy = read_strategy(body)
    builder = CircuitBuilder()
    variables = [builder.input(x, name=f"x{i + 1}") for i, x in enumerate(inputs)]
    output = poseidon_hash(variables, api=builder, strategy=strategy)

    result = serialize_circuit_summary(builder, [output])
    result["t"] = len(inputs) + 1
    result["strategy"] = strategy
    result["hash"] = result["outputs"][0]
    result["gates_preview"] = serialize_gate_rows(builder, limit=GATE_PREVIEW)

    append_history({
        "kind": "circuit",
        "t": result["t"],
        "strategy": strategy,
        "inputs": [serialize_fr(x) for x in inputs],
        "hash": result["hash"],
        "hash_short": fr_short(output.value),
        "gates": result["n"],
    })
    return jsonify(result)


# ──────────────────────────────────────────────────────────────
# 기록
# ──────────────────────────────────────────────────────────────

@poseidon_bp.route("/history")
def history_page():
    return jsonify({"history": load_history()})


@poseidon_bp.route("/history/clear", methods=["POST"])
def history_clear():
    db_remove_prefix("poseidon.")
    return jsonify({"history": []})
