"""
Poseidon 라운드 프리미티브 (standard 전략)
============================================

순열 상태(PermutationState)를 제자리에서(in place) 변환하는 네 가지 기본 연산.

  | 연산                 | 정의                                        |
  |----------------------|---------------------------------------------|
  | sbox                 | x ↦ x^5 (곱셈 3번: x², x⁴, x⁵)              |
  | add_round_constants  | state[i] += C[offset + i]  (i = 0..t-1)      |
  | full_mix             | new[i] = Σ_j M[j][i]·state[j]               |
  | mix_last             | out = Σ_j M[j][s]·state[j]  (상태 불변)      |

혼합 행렬은 M[j][i] (전치) 방식으로 접근한다. 외부에서 생성된 행렬과의
호환을 위해 이 인덱싱을 바꾸면 안 된다.
"""

from zkposeidon.errors import ParameterMismatchError
from zkposeidon.field import FR
from zkposeidon.matrix import column


def sbox(api, x):
    """S-box x^5."""
    x2 = api.mul(x, x)
    x4 = api.mul(x2, x2)
    return api.mul(x4, x)


def _constant_at(config, index):
    constants = config.round_constants
    if index < 0 or index >= len(constants):
        raise ParameterMismatchError(
            f"라운드 상수 인덱스가 범위를 벗어났습니다: {index} (상수 {len(constants)}개)"
        )
    return constants[index]


def add_round_constants(config, state, offset):
    """모든 위치에 라운드 상수를 더한다: state[i] += C[offset + i]."""
    if offset < 0 or offset + state.width > len(config.round_constants):
        raise ParameterMismatchError(
            f"라운드 상수가 부족합니다: offset={offset}, 너비={state.width}, "
            f"상수 {len(config.round_constants)}개"
        )
    api = state.api
    for i, value in enumerate(state.elements):
        state.elements[i] = api.add(value, config.round_constants[offset + i])


def add_round_constant(config, state, offset, position=0):
    """한 위치에만 상수를 더한다 (부분 라운드): state[position] += C[offset]."""
    state.elements[position] = state.api.add(state.elements[position], _constant_at(config, offset))


def linear_combination(api, values, coefficients, offset=0):
    """Σ_i coefficients[offset + i]·values[i]. 0에서 시작해 곱-덧셈을 누적한다."""
    lc = FR(0)
    for i, value in enumerate(values):
        lc = api.add(lc, api.mul(coefficients[offset + i], value))
    return lc


def full_mix(config, state):
    """상태 전체에 혼합 행렬을 곱한다."""
    matrix = config.mixing_matrix
    values = list(state.elements)
    state.elements = [
        linear_combination(state.api, values, column(matrix, i))
        for i in range(state.width)
    ]


def mix_last(config, state, index):
    """index번째 출력 하나만 계산한다 (상태는 바꾸지 않는다)."""
    return linear_combination(state.api, state.elements, column(config.mixing_matrix, index))
