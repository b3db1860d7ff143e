"""
Poseidon 최적화 변형 (sparse 전략)
====================================

부분 라운드의 t × t 행렬 곱을 희소(sparse) 행렬 곱으로 바꾼 변형.
결과는 standard 전략과 같고, 부분 라운드 한 번의 선형층 비용이
t² 에서 3t - 2 정도로 줄어든다.

**희소 행렬 분해**:
  부분 라운드는 s0에만 S-box를 적용하므로, MDS 행렬 A를 다음처럼 쪼갤 수 있다.

    L = [[g, hᵀ], [k, E]] = S · B

      S = [[g, hᵀE⁻¹], [k, I]]      (희소 행렬: 첫 행 + 첫 열)
      B = [[1, 0], [0, E]]           (s0을 건드리지 않는 블록 대각 행렬)

  B는 다음 라운드의 S-box와 교환되므로 앞 라운드의 A와 합칠 수 있다.
  마지막 부분 라운드부터 거꾸로 L ← B·A 를 반복하면 각 부분 라운드에는
  S만 남고, 남은 L(= B₀·A)은 전이 라운드의 "pre-sparse" 행렬 P가 된다.

**희소 벡터 배치** (라운드 r, o = (2t-1)·r):
  S[o .. o+t-1]        : S 행렬의 첫 행
  S[o+t .. o+2t-2]     : S 행렬의 첫 열 (1..t-1행)

    new[0] = Σ_i S[o+i]·s[i]
    new[i] = s[i] + s0·S[o+t+i-1]     (i ≥ 1, s0은 갱신 전 값)

**스케줄**:
  ARK(0)
  [σ 전체 → ARK((r+1)t) → mix(M)] × (R_F/2 - 1)
   σ 전체 → ARK((R_F/2)t) → mix(P)
  [σ(s0) → s0 += C[(R_F/2+1)t + r] → mix_sparse(r)] × R_P
  [σ 전체 → ARK(..+r·t) → mix(M)] × (R_F/2 - 1)
   σ 전체 → mix_last(M)

사용 예시:
    >>> config = build_sparse_config(3)
    >>> state = PermutationState(NATIVE, 0, [1, 2])
    >>> permute_sparse(config, state)[0]
"""

import logging
from functools import lru_cache

from zkposeidon.errors import ConfigurationError, ParameterMismatchError
from zkposeidon.field import FR, to_fr
from zkposeidon.grain import N_ROUNDS_F, MIN_WIDTH, MAX_WIDTH, generate_parameters, partial_rounds
from zkposeidon.matrix import (
    check_squareness,
    column,
    matrix_inverse,
    matrix_multiply,
    matrix_vector_multiply,
    transpose,
)
from zkposeidon.permutation import check_shape, check_strategy
from zkposeidon.rounds import linear_combination, sbox


logger = logging.getLogger(__name__)

SPARSE = "sparse"

_FACTORY = object()


# ─────────────────────────────────────────────────────────────────────
# 라운드 프리미티브 (값 리스트를 받아 새 리스트를 반환)
# ─────────────────────────────────────────────────────────────────────

def sigma(api, x):
    """S-box x^5."""
    return sbox(api, x)


def ark(api, values, constants, offset):
    """values[i] + constants[offset + i]."""
    if offset < 0 or offset + len(values) > len(constants):
        raise ParameterMismatchError(
            f"라운드 상수가 부족합니다: offset={offset}, 너비={len(values)}, 상수 {len(constants)}개"
        )
    return [api.add(v, constants[offset + i]) for i, v in enumerate(values)]


def mix(api, values, matrix):
    """new[i] = Σ_j matrix[j][i]·values[j]."""
    return [linear_combination(api, values, column(matrix, i)) for i in range(len(values))]


def mix_last(api, values, matrix, s):
    """s번째 출력만 계산한다."""
    return linear_combination(api, values, column(matrix, s))


def mix_sparse(api, values, sparse, r):
    """r번째 부분 라운드의 희소 행렬을 곱한다."""
    t = len(values)
    offset = (2 * t - 1) * r
    if offset + 2 * t - 1 > len(sparse):
        raise ParameterMismatchError(
            f"희소 행렬 벡터가 부족합니다: 라운드 {r}, 벡터 {len(sparse)}개"
        )
    first = linear_combination(api, values, sparse, offset)
    out = [first]
    for i in range(1, t):
        out.append(api.add(values[i], api.mul(sparse[offset + t + i - 1], values[0])))
    return out


# ─────────────────────────────────────────────────────────────────────
# SparseConfig
# ─────────────────────────────────────────────────────────────────────

class SparseConfig:
    """sparse 전략의 불변 파라미터.

    속성 (읽기 전용):
        t, full_rounds, partial_rounds
        round_constants: t·R_F + R_P 개 (C)
        mixing_matrix: 풀 라운드 행렬 (M, 전치 접근)
        pre_sparse_matrix: 전이 라운드 행렬 (P, 전치 접근)
        sparse_matrices: (2t-1)·R_P 개 (S)
        strategy: "sparse"
    """

    strategy = SPARSE

    def __init__(self, t, full_rounds, partial_rounds, round_constants, mixing_matrix,
                 pre_sparse_matrix, sparse_matrices, _token=None):
        if _token is not _FACTORY:
            raise ConfigurationError("build_sparse_config(t)를 사용하세요")
        if not check_squareness(mixing_matrix, t) or not check_squareness(pre_sparse_matrix, t):
            raise ConfigurationError(f"혼합 행렬은 {t} × {t} 이어야 합니다")
        needed = t * full_rounds + partial_rounds
        if len(round_constants) != needed:
            raise ParameterMismatchError(
                f"라운드 상수 개수가 맞지 않습니다: {len(round_constants)}개 (필요: {needed}개)"
            )
        if len(sparse_matrices) != (2 * t - 1) * partial_rounds:
            raise ParameterMismatchError(
                f"희소 행렬 벡터 개수가 맞지 않습니다: {len(sparse_matrices)}개 "
                f"(필요: {(2 * t - 1) * partial_rounds}개)"
            )
        self._t = t
        self._full_rounds = full_rounds
        self._partial_rounds = partial_rounds
        self._round_constants = tuple(to_fr(c) for c in round_constants)
        self._mixing_matrix = tuple(tuple(row) for row in mixing_matrix)
        self._pre_sparse_matrix = tuple(tuple(row) for row in pre_sparse_matrix)
        self._sparse_matrices = tuple(to_fr(s) for s in sparse_matrices)

    @property
    def t(self):
        return self._t

    @property
    def full_rounds(self):
        return self._full_rounds

    @property
    def partial_rounds(self):
        return self._partial_rounds

    @property
    def round_constants(self):
        return self._round_constants

    @property
    def mixing_matrix(self):
        return self._mixing_matrix

    @property
    def pre_sparse_matrix(self):
        return self._pre_sparse_matrix

    @property
    def sparse_matrices(self):
        return self._sparse_matrices

    def __repr__(self):
        return (
            f"SparseConfig(t={self.t}, full_rounds={self.full_rounds}, "
            f"partial_rounds={self.partial_rounds})"
        )


def factor_sparse(matrix):
    """L = S · B 로 분해한다.

    Args:
        matrix: t × t 표준 행렬 L

    Returns:
        tuple: (S, B). S는 희소 행렬, B = blockdiag(1, E)
    """
    t = len(matrix)
    g = matrix[0][0]
    h_row = matrix[0][1:]
    k_col = [row[0] for row in matrix[1:]]
    e = [row[1:] for row in matrix[1:]]
    e_inv = matrix_inverse(e)

    # hᵀ E⁻¹
    u = [sum((h_row[m] * e_inv[m][j] for m in range(t - 1)), FR(0)) for j in range(t - 1)]

    s = [[g] + u]
    for r, k in enumerate(k_col):
        s.append([k] + [FR(1) if r == c else FR(0) for c in range(t - 1)])

    b = [[FR(1)] + [FR(0)] * (t - 1)]
    for row in e:
        b.append([FR(0)] + list(row))
    return s, b


def derive_sparse_constants(params):
    """교과서 파라미터를 sparse 스케줄의 배치로 변환한다.

    Args:
        params: grain.PoseidonParameters

    Returns:
        tuple: (C, P_matrix, S_vector)
            C: t·R_F + R_P 개 상수
            P_matrix: 표준 형태의 pre-sparse 행렬 (B₀·A)
            S_vector: (2t-1)·R_P 개
    """
    t = params.t
    half = params.rounds_f // 2
    total = params.total_rounds
    n_partial = params.rounds_p
    a = [list(row) for row in params.mds]
    a_inv = matrix_inverse(a)

    sparse_factors = [None] * n_partial
    block_factors = [None] * n_partial
    current = a
    for i in reversed(range(n_partial)):
        sparse_factors[i], block_factors[i] = factor_sparse(current)
        current = matrix_multiply(block_factors[i], a)
    pre_sparse = current

    constants = list(params.round_vector(0))
    for j in range(1, half):
        constants.extend(matrix_vector_multiply(a_inv, params.round_vector(j)))

    acc = params.round_vector(total - half)
    partial = [None] * n_partial
    for i in reversed(range(n_partial)):
        w = matrix_vector_multiply(matrix_inverse(sparse_factors[i]), acc)
        partial[i] = w[0]
        shifted = matrix_vector_multiply(block_factors[i], params.round_vector(half + i))
        acc = [c + (x if k > 0 else FR(0)) for k, (c, x) in enumerate(zip(shifted, w))]

    constants.extend(matrix_vector_multiply(matrix_inverse(pre_sparse), acc))
    constants.extend(partial)
    for j in range(1, half):
        constants.extend(matrix_vector_multiply(a_inv, params.round_vector(total - half + j)))

    sparse_vector = []
    for s in sparse_factors:
        sparse_vector.extend(s[0])
        sparse_vector.extend(row[0] for row in s[1:])

    return constants, pre_sparse, sparse_vector


@lru_cache(maxsize=None)
def build_sparse_config(t):
    """너비 t의 SparseConfig를 만든다 (프로세스 단위 캐시).

    Raises:
        ConfigurationError: t가 범위 [2, 17] 밖일 때
    """
    if not isinstance(t, int) or t < MIN_WIDTH or t > MAX_WIDTH:
        raise ConfigurationError(f"지원하지 않는 너비입니다: t={t} (범위 {MIN_WIDTH}..{MAX_WIDTH})")
    rounds_p = partial_rounds(t)
    params = generate_parameters(t)
    constants, pre_sparse, sparse_vector = derive_sparse_constants(params)
    logger.debug("built sparse config t=%d (%d sparse entries)", t, len(sparse_vector))
    return SparseConfig(
        t,
        N_ROUNDS_F,
        rounds_p,
        constants,
        transpose([list(row) for row in params.mds]),
        transpose(pre_sparse),
        sparse_vector,
        _token=_FACTORY,
    )


# ─────────────────────────────────────────────────────────────────────
# 순열 엔진
# ─────────────────────────────────────────────────────────────────────

def permute_sparse(config, state, n_outputs=1):
    """sparse 스케줄로 순열을 실행한다.

    Args:
        config: SparseConfig
        state: PermutationState (elements가 최종 값으로 교체된다)
        n_outputs: 추출할 출력 개수 (1 ≤ n_outputs ≤ t)

    Returns:
        list: 백엔드 원소 n_outputs개

    Raises:
        ConfigurationError: 입력/출력 개수가 맞지 않을 때
        ParameterMismatchError: standard 파라미터가 전달되었을 때
    """
    check_strategy(config, SPARSE)
    check_shape(config, state, n_outputs)

    api = state.api
    t = config.t
    half = config.full_rounds // 2
    n_partial = config.partial_rounds
    c = config.round_constants
    m = config.mixing_matrix

    values = ark(api, state.elements, c, 0)
    for r in range(half - 1):
        values = [sigma(api, v) for v in values]
        values = ark(api, values, c, (r + 1) * t)
        values = mix(api, values, m)

    values = [sigma(api, v) for v in values]
    values = ark(api, values, c, half * t)
    values = mix(api, values, config.pre_sparse_matrix)

    for r in range(n_partial):
        values[0] = sigma(api, values[0])
        values[0] = api.add(values[0], c[(half + 1) * t + r])
        values = mix_sparse(api, values, config.sparse_matrices, r)

    for r in range(half - 1):
        values = [sigma(api, v) for v in values]
        values = ark(api, values, c, (half + 1) * t + n_partial + r * t)
        values = mix(api, values, m)

    values = [sigma(api, v) for v in values]
    state.elements = values
    return [mix_last(api, values, m, i) for i in range(n_outputs)]
