"""
Poseidon 순열 엔진 (standard 전략)
====================================

풀 → 부분 → 풀 라운드 스케줄로 상태를 변환하고 출력을 추출한다.

  ┌──────────────────────────────────────────────────────────────┐
  │  ARC(0)                                                      │
  ├──────────────────────────────────────────────────────────────┤
  │  풀 라운드 × (R_F/2 - 1): S-box 전체, ARC((r+1)t), Mix       │
  │  전이 라운드:             S-box 전체, ARC((R_F/2)t), Mix     │
  ├──────────────────────────────────────────────────────────────┤
  │  부분 라운드 × R_P:       S-box(s0), s0 += C[..+r], Mix      │
  ├──────────────────────────────────────────────────────────────┤
  │  풀 라운드 × (R_F/2 - 1): S-box 전체, ARC(..+r·t), Mix       │
  │  마지막 S-box 전체 → mix_last로 n개 출력 추출                │
  └──────────────────────────────────────────────────────────────┘

  S-box 적용 횟수:  t·R_F + R_P
  Mix 횟수:         R_F - 1 + R_P  (+ 출력 추출 1회)

사용 예시:
    >>> from zkposeidon.api import NATIVE
    >>> config = build_config(4)
    >>> state = PermutationState(NATIVE, 0, [1, 2, 3])
    >>> permute(config, state, 1)
"""

from zkposeidon.errors import ConfigurationError, ParameterMismatchError
from zkposeidon.params import STANDARD
from zkposeidon.rounds import add_round_constant, add_round_constants, full_mix, mix_last


def check_strategy(config, strategy):
    """config가 해당 전략의 파라미터인지 확인한다."""
    actual = getattr(config, "strategy", None)
    if actual != strategy:
        raise ParameterMismatchError(
            f"{strategy} 엔진에 {actual} 파라미터를 사용할 수 없습니다"
        )


def check_shape(config, state, n_outputs):
    """입력 개수와 출력 개수를 라운드 실행 전에 검사한다."""
    n_inputs = state.width - 1
    if n_inputs != config.t - 1:
        raise ConfigurationError(
            f"입력 개수가 파라미터와 일치하지 않습니다: {n_inputs}개 (필요: {config.t - 1}개)"
        )
    if n_outputs < 1 or n_outputs > config.t:
        raise ConfigurationError(f"출력 개수는 1..{config.t} 범위여야 합니다: {n_outputs}")


def permute(config, state, n_outputs=1):
    """standard 스케줄로 순열을 실행하고 n_outputs개의 출력을 반환한다.

    Args:
        config: PermutationConfig (strategy = "standard")
        state: PermutationState (제자리에서 변경된다)
        n_outputs: 추출할 출력 개수 (1 ≤ n_outputs ≤ t)

    Returns:
        list: 백엔드 원소 n_outputs개

    Raises:
        ConfigurationError: 입력/출력 개수가 맞지 않을 때
        ParameterMismatchError: 다른 전략의 파라미터일 때
    """
    check_strategy(config, STANDARD)
    check_shape(config, state, n_outputs)

    t = config.t
    half = config.full_rounds // 2
    n_partial = config.partial_rounds

    # 첫 번째 풀 라운드 구간
    add_round_constants(config, state, 0)
    for r in range(half - 1):
        state.apply_full_sbox()
        add_round_constants(config, state, (r + 1) * t)
        full_mix(config, state)

    # 전이 라운드
    state.apply_full_sbox()
    add_round_constants(config, state, half * t)
    full_mix(config, state)

    # 부분 라운드: s0만 S-box와 상수를 받는다
    for r in range(n_partial):
        state.apply_sbox(0)
        add_round_constant(config, state, (half + 1) * t + r)
        full_mix(config, state)

    # 두 번째 풀 라운드 구간
    for r in range(half - 1):
        state.apply_full_sbox()
        add_round_constants(config, state, (half + 1) * t + n_partial + r * t)
        full_mix(config, state)

    # 마지막 S-box 후 출력 추출
    state.apply_full_sbox()
    return [mix_last(config, state, i) for i in range(n_outputs)]


def schedule_counts(config, n_outputs=1):
    """스케줄의 정적 연산 수를 반환한다.

    회로 소비자가 제약 시스템 크기를 미리 알 수 있도록
    (t, R_F, R_P, n_outputs)만으로 계산한다.

    Returns:
        dict: sbox, full_mix, full_arc, partial_arc, multiplications, additions
    """
    t = config.t
    rounds_f = config.full_rounds
    rounds_p = config.partial_rounds
    sboxes = t * rounds_f + rounds_p
    mixes = rounds_f - 1 + rounds_p
    arc_additions = t * rounds_f + rounds_p
    extraction = n_outputs * t
    return {
        "sbox": sboxes,
        "full_mix": mixes,
        "full_arc": rounds_f,
        "partial_arc": rounds_p,
        "multiplications": 3 * sboxes + mixes * t * t + extraction,
        "additions": arc_additions + mixes * t * t + extraction,
    }
