"""Poseidon 순열의 내부 상태."""

from zkposeidon.rounds import sbox


class PermutationState:
    """순열 한 번 동안만 쓰이는 가변 상태 벡터.

    elements[0]은 용량(capacity) 원소, 나머지는 입력이다.
    상태는 한 번의 순열 호출이 독점하며 다른 호출과 공유하지 않는다.

    속성:
        api: 산술 백엔드 (NativeAPI 또는 CircuitBuilder)
        elements: t개의 백엔드 원소 리스트
    """

    def __init__(self, api, initial_state, inputs):
        self.api = api
        self.elements = [api.element(initial_state)] + [api.element(x) for x in inputs]

    @property
    def width(self):
        return len(self.elements)

    def apply_sbox(self, i):
        """i번째 원소에 S-box를 적용한다."""
        self.elements[i] = sbox(self.api, self.elements[i])

    def apply_full_sbox(self):
        """모든 원소에 S-box를 적용한다."""
        for i in range(self.width):
            self.apply_sbox(i)
