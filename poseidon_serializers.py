"""
Poseidon 데이터 직렬화/역직렬화 헬퍼
======================================

TinyDB / JSON 응답에 담을 수 있는 형태로 Poseidon 객체를 변환한다.
FR, FR 리스트, 행렬, PermutationConfig, SparseConfig, CircuitBuilder 요약 등.
"""

from zkposeidon.circuit import WIRE_A, WIRE_B, WIRE_C
from zkposeidon.field import FR, to_fr


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def deserialize_fr(s):
    """str(int) 또는 "0x.." → FR"""
    return to_fr(s)


def serialize_fr_list(vals):
    """list[FR] → list[str]"""
    return [serialize_fr(v) for v in vals]


def deserialize_fr_list(data):
    """list[str | int] → list[FR]"""
    return [deserialize_fr(s) for s in data]


def serialize_matrix(m):
    """FR 행렬 → list[list[str]]"""
    return [serialize_fr_list(row) for row in m]


# ─── Config ───

def serialize_config(config):
    """PermutationConfig / SparseConfig → dict"""
    data = {
        "strategy": config.strategy,
        "t": config.t,
        "full_rounds": config.full_rounds,
        "partial_rounds": config.partial_rounds,
        "num_constants": len(config.round_constants),
        "round_constants": serialize_fr_list(config.round_constants),
        "mixing_matrix": serialize_matrix(config.mixing_matrix),
    }
    if hasattr(config, "sparse_matrices"):
        data["pre_sparse_matrix"] = serialize_matrix(config.pre_sparse_matrix)
        data["sparse_matrices"] = serialize_fr_list(config.sparse_matrices)
    return data


# ─── Circuit ───

def serialize_circuit_summary(builder, outputs):
    """CircuitBuilder → 게이트 수/검사 결과 요약 dict"""
    return {
        "n": builder.n,
        "gates": {
            "add": builder.count("add"),
            "mul": builder.count("mul"),
            "const": builder.count("const"),
        },
        "copy_constraints": len(builder.copy_constraints),
        "witness_ok": builder.check_witness(),
        "outputs": [serialize_fr(out.value) for out in outputs],
    }


def serialize_gate_rows(builder, limit=None):
    """게이트별 셀렉터/위트니스 행 (UI 표시용)"""
    rows = []
    for i, (gate, kind) in enumerate(zip(builder.gates, builder.gate_kinds)):
        if limit is not None and i >= limit:
            break
        row = builder.witness[i]
        rows.append({
            "index": i,
            "type": kind,
            "q_L": serialize_fr(gate.q_l),
            "q_R": serialize_fr(gate.q_r),
            "q_O": serialize_fr(gate.q_o),
            "q_M": serialize_fr(gate.q_m),
            "q_C": serialize_fr(gate.q_c),
            "a": serialize_fr(row[WIRE_A]),
            "b": serialize_fr(row[WIRE_B]),
            "c": serialize_fr(row[WIRE_C]),
        })
    return rows


def fr_short(val):
    """FR → 축약 문자열 (UI 표시용)"""
    if val is None:
        return "None"
    s = str(int(FR(int(val))))
    if len(s) <= 10:
        return s
    return s[:4] + "..." + s[-4:]
