"""
Poseidon 해시 (고정 길이 입력)
================================

t-1개의 입력을 받아 상태 [capacity, x_1, ..., x_{t-1}]로 순열을 실행하고
첫 번째 출력(또는 n개의 출력)을 반환한다. circomlib의 Poseidon / PoseidonEx와
같은 값을 만든다.

  | 함수              | 출력              | circomlib 대응            |
  |-------------------|-------------------|---------------------------|
  | poseidon_hash     | 원소 1개          | Poseidon(nInputs)         |
  | poseidon_hash_ex  | 원소 n_outputs개  | PoseidonEx(nInputs, nOuts)|

백엔드(api)를 CircuitBuilder로 바꾸면 같은 호출이 PLONK 게이트를 기록한다.

사용 예시:
    >>> poseidon_hash([1, 2, 3])
    >>> poseidon_hash([1, 2], strategy="sparse")
    >>> builder = CircuitBuilder()
    >>> out = poseidon_hash([builder.input(1), builder.input(2)], api=builder)
"""

from zkposeidon.api import NATIVE
from zkposeidon.errors import ConfigurationError
from zkposeidon.grain import MAX_WIDTH
from zkposeidon.params import STANDARD, build_config
from zkposeidon.permutation import permute
from zkposeidon.sparse import SPARSE, build_sparse_config, permute_sparse
from zkposeidon.state import PermutationState


# 전략 이름 → (설정 빌더, 순열 엔진)
STRATEGIES = {
    STANDARD: (build_config, permute),
    SPARSE: (build_sparse_config, permute_sparse),
}


def poseidon_hash_ex(inputs, n_outputs=1, initial_state=0, config=None, api=None, strategy=STANDARD):
    """n_outputs개의 출력을 내는 Poseidon 해시.

    Args:
        inputs: 입력 원소 리스트 (1 ≤ 개수 ≤ 16, int / str / FR / Variable)
        n_outputs: 출력 개수 (1 ≤ n_outputs ≤ t)
        initial_state: 용량(capacity) 원소의 초기값
        config: 미리 만든 설정 (없으면 strategy와 t로 만든다)
        api: 산술 백엔드 (기본값: NativeAPI)
        strategy: "standard" 또는 "sparse"

    Returns:
        list: 출력 원소 n_outputs개

    Raises:
        ConfigurationError: 입력 개수, 출력 개수, 전략 이름이 잘못되었을 때
        ParameterMismatchError: config와 strategy가 다를 때
    """
    inputs = list(inputs)
    if not inputs or len(inputs) > MAX_WIDTH - 1:
        raise ConfigurationError(
            f"입력 개수는 1..{MAX_WIDTH - 1} 범위여야 합니다: {len(inputs)}개"
        )
    if strategy not in STRATEGIES:
        raise ConfigurationError(f"알 수 없는 라운드 전략입니다: {strategy!r}")

    builder, engine = STRATEGIES[strategy]
    if config is None:
        config = builder(len(inputs) + 1)
    if api is None:
        api = NATIVE

    state = PermutationState(api, initial_state, inputs)
    return engine(config, state, n_outputs)


def poseidon_hash(inputs, config=None, api=None, strategy=STANDARD):
    """Poseidon 해시: t = len(inputs) + 1, 상태 [0] ++ inputs, 출력 1개.

    예시:
        >>> int(poseidon_hash([1, 2]))
        7853200120776062878684798364095072458815029376092732009249414926327459813530
    """
    return poseidon_hash_ex(inputs, 1, 0, config=config, api=api, strategy=strategy)[0]
