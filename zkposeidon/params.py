"""
Poseidon 순열 설정 (PermutationConfig)
========================================

너비 t마다 한 번 만들어지고 이후 변경되지 않는 파라미터 묶음.

  PermutationConfig = { t, R_F, R_P, round_constants, mixing_matrix }

**상수 배치 (standard 전략)**:
  엔진(permutation.permute)은 S-box 바로 뒤, 선형층 바로 앞에서 상수를 더한다.

    ARC(0)
    [S-box 전체 → ARC((r+1)·t) → Mix]            × (R_F/2 - 1)
     S-box 전체 → ARC((R_F/2)·t) → Mix            (전이 라운드)
    [S-box(s0) → s0 += C[(R_F/2+1)·t + r] → Mix] × R_P
    [S-box 전체 → ARC((R_F/2+1)·t + R_P + r·t) → Mix] × (R_F/2 - 1)
     S-box 전체 → 출력 추출

  필요한 상수 개수는 t·R_F + R_P 이다.

**교과서 상수에서의 변환**:
  교과서 라운드는 (c_r 더하기 → S-box → A 곱)이다. A가 선형이므로
  A(x) + c = A(x + A⁻¹c) 이고, 부분 라운드에서 S-box는 s0만 건드리므로
  나머지 성분의 상수는 S-box 앞으로 옮길 수 있다. 마지막 부분 라운드부터
  거꾸로 누적하면 부분 라운드마다 스칼라 하나만 남는다.

    k_0 = c_0,   k_j = A⁻¹ c_j                (1 ≤ j < R_F/2)
    acc = c_{R-R_F/2}
    r = R_P-1 .. 0:  w = A⁻¹ acc,  q_r = w[0],  acc = c_{R_F/2+r} + (w, w[0]=0)
    k_{R_F/2} = A⁻¹ acc                       (전이 라운드)
    k'_j = A⁻¹ c_{R-R_F/2+j}                   (1 ≤ j < R_F/2)

  혼합 행렬은 M[j][i] 방식으로 접근되므로 A의 전치를 저장한다.

사용 예시:
    >>> config = build_config(4)
    >>> config.partial_rounds                 # 56
    >>> len(config.round_constants)           # 4·8 + 56 = 88
"""

import logging
from functools import lru_cache

from zkposeidon.errors import ConfigurationError, ParameterMismatchError
from zkposeidon.grain import (
    N_ROUNDS_F,
    MIN_WIDTH,
    MAX_WIDTH,
    generate_parameters,
    partial_rounds,
)
from zkposeidon.matrix import check_squareness, matrix_inverse, matrix_vector_multiply, transpose
from zkposeidon.field import to_fr


logger = logging.getLogger(__name__)

STANDARD = "standard"

# 직접 생성을 막기 위한 토큰 (build_config / from_tables만 사용)
_FACTORY = object()


def required_constants(t, rounds_f, rounds_p):
    """standard 스케줄이 소비하는 라운드 상수 개수: t·R_F + R_P."""
    return t * rounds_f + rounds_p


def validate_layout(t, rounds_f, rounds_p, round_constants, mixing_matrix):
    """라운드 수, 상수 테이블, 혼합 행렬의 차원을 검사한다.

    Raises:
        ConfigurationError: t, 라운드 수, 행렬 차원이 맞지 않거나 상수가 남을 때
        ParameterMismatchError: 상수 테이블이 스케줄 오프셋보다 짧을 때
    """
    if t < MIN_WIDTH:
        raise ConfigurationError(f"너비는 {MIN_WIDTH} 이상이어야 합니다: t={t}")
    if rounds_f < 2 or rounds_f % 2 != 0:
        raise ConfigurationError(f"풀 라운드 수는 2 이상의 짝수여야 합니다: R_F={rounds_f}")
    if rounds_p < 0:
        raise ConfigurationError(f"부분 라운드 수는 음수일 수 없습니다: R_P={rounds_p}")
    if not check_squareness(mixing_matrix, t):
        raise ConfigurationError(f"혼합 행렬은 {t} × {t} 이어야 합니다")

    needed = required_constants(t, rounds_f, rounds_p)
    if len(round_constants) < needed:
        raise ParameterMismatchError(
            f"라운드 상수가 부족합니다: {len(round_constants)}개 (필요: {needed}개)"
        )
    if len(round_constants) > needed:
        raise ConfigurationError(
            f"라운드 상수 개수가 스케줄과 맞지 않습니다: {len(round_constants)}개 (필요: {needed}개)"
        )


class PermutationConfig:
    """standard 전략의 불변(immutable) 파라미터.

    build_config(t) 또는 PermutationConfig.from_tables(...)로만 만든다.

    속성 (읽기 전용):
        t: 상태 너비
        full_rounds: 풀 라운드 수 R_F
        partial_rounds: 부분 라운드 수 R_P
        round_constants: t·R_F + R_P 개 FR 튜플
        mixing_matrix: t × t FR 튜플 행렬 (M[j][i] 방식으로 접근)
        strategy: "standard"
    """

    strategy = STANDARD

    def __init__(self, t, full_rounds, partial_rounds, round_constants, mixing_matrix, _token=None):
        if _token is not _FACTORY:
            raise ConfigurationError("build_config(t) 또는 PermutationConfig.from_tables()를 사용하세요")
        validate_layout(t, full_rounds, partial_rounds, round_constants, mixing_matrix)
        self._t = t
        self._full_rounds = full_rounds
        self._partial_rounds = partial_rounds
        self._round_constants = tuple(to_fr(c) for c in round_constants)
        self._mixing_matrix = tuple(tuple(to_fr(x) for x in row) for row in mixing_matrix)

    @classmethod
    def from_tables(cls, t, full_rounds, partial_rounds, round_constants, mixing_matrix):
        """외부에서 검증된 상수/행렬 테이블로 설정을 만든다.

        테이블은 이미 standard 스케줄의 상수 배치여야 한다.
        """
        return cls(t, full_rounds, partial_rounds, round_constants, mixing_matrix, _token=_FACTORY)

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

    def __repr__(self):
        return (
            f"PermutationConfig(t={self.t}, full_rounds={self.full_rounds}, "
            f"partial_rounds={self.partial_rounds})"
        )


def derive_standard_constants(params):
    """교과서 파라미터를 standard 스케줄의 상수 배치로 변환한다.

    Args:
        params: grain.PoseidonParameters

    Returns:
        list[FR]: t·R_F + R_P 개의 상수
    """
    half = params.rounds_f // 2
    total = params.total_rounds
    mds_inv = matrix_inverse([list(row) for row in params.mds])

    def pulled_back(vector):
        return matrix_vector_multiply(mds_inv, vector)

    constants = list(params.round_vector(0))
    for r in range(1, half):
        constants.extend(pulled_back(params.round_vector(r)))

    # 부분 라운드: 뒤에서부터 s0 이외 성분을 S-box 앞으로 옮긴다
    acc = params.round_vector(total - half)
    partial = [None] * params.rounds_p
    for r in reversed(range(params.rounds_p)):
        w = pulled_back(acc)
        partial[r] = w[0]
        acc = [c + (x if i > 0 else 0) for i, (c, x) in enumerate(zip(params.round_vector(half + r), w))]

    constants.extend(pulled_back(acc))
    constants.extend(partial)
    for r in range(1, half):
        constants.extend(pulled_back(params.round_vector(total - half + r)))
    return constants


@lru_cache(maxsize=None)
def build_config(t):
    """너비 t의 PermutationConfig를 만든다 (프로세스 단위 캐시).

    R_F = 8, R_P는 부분 라운드 테이블에서 t-2 인덱스로 조회한다.
    상수와 행렬은 Grain LFSR 절차로 생성한 교과서 파라미터에서 유도한다.

    Args:
        t: 상태 너비 (2 ≤ t ≤ 17)

    Returns:
        PermutationConfig

    Raises:
        ConfigurationError: t가 테이블 범위 밖일 때
    """
    if not isinstance(t, int) or t < MIN_WIDTH or t > MAX_WIDTH:
        raise ConfigurationError(f"지원하지 않는 너비입니다: t={t} (범위 {MIN_WIDTH}..{MAX_WIDTH})")
    rounds_p = partial_rounds(t)
    params = generate_parameters(t)
    constants = derive_standard_constants(params)
    mixing = transpose([list(row) for row in params.mds])
    logger.debug("built standard config t=%d (%d constants)", t, len(constants))
    return PermutationConfig(t, N_ROUNDS_F, rounds_p, constants, mixing, _token=_FACTORY)
