"""
Poseidon 테스트 공용 fixture.

reference_permutation은 교과서 정의(라운드 = 상수 더하기 → S-box → MDS 곱)를
그대로 따르는 독립 구현이다. 엔진(standard / sparse)의 출력은 이 함수와
같아야 한다.
"""

import pytest

from zkposeidon.field import FR, to_fr
from zkposeidon.grain import generate_parameters
from zkposeidon.params import build_config
from zkposeidon.sparse import build_sparse_config


def reference_permutation(params, state):
    """교과서 Poseidon 순열. 상태 전체(t개)를 반환한다."""
    t = params.t
    half = params.rounds_f // 2
    s = [to_fr(x) for x in state]
    for r in range(params.total_rounds):
        s = [x + c for x, c in zip(s, params.round_vector(r))]
        if half <= r < half + params.rounds_p:
            s[0] = s[0] ** 5
        else:
            s = [x ** 5 for x in s]
        s = [sum((params.mds[i][j] * s[j] for j in range(t)), FR(0)) for i in range(t)]
    return s


class CountingAPI:
    """NativeAPI와 같은 값을 내면서 add / mul 호출 수를 센다."""

    def __init__(self):
        self.adds = 0
        self.muls = 0

    def element(self, value):
        return to_fr(value)

    def constant(self, value):
        return to_fr(value)

    def add(self, a, b):
        self.adds += 1
        return to_fr(a) + to_fr(b)

    def mul(self, a, b):
        self.muls += 1
        return to_fr(a) * to_fr(b)


@pytest.fixture
def reference():
    return reference_permutation


@pytest.fixture
def counting_api():
    return CountingAPI()


@pytest.fixture(scope="session")
def params3():
    return generate_parameters(3)


@pytest.fixture(scope="session")
def config3():
    return build_config(3)


@pytest.fixture(scope="session")
def config4():
    return build_config(4)


@pytest.fixture(scope="session")
def sparse3():
    return build_sparse_config(3)


@pytest.fixture(scope="session")
def sparse4():
    return build_sparse_config(4)
