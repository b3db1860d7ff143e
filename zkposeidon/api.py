"""
산술 백엔드 (FieldOp)
=======================

Poseidon 라운드 프리미티브는 add / mul 두 연산만으로 표현된다.
같은 코드가 다음 두 백엔드 위에서 그대로 동작한다.

  | 백엔드           | 원소 타입  | 결과                          |
  |------------------|------------|-------------------------------|
  | NativeAPI        | FR         | 구체적인 해시 값              |
  | CircuitBuilder   | Variable   | PLONK 게이트 + 위트니스 기록  |

백엔드 인터페이스:
  - element(value): 입력값을 백엔드 원소로 변환 (이미 원소면 그대로)
  - constant(value): 고정 상수를 원소로 만든다
  - add(a, b), mul(a, b): 한쪽이 FR/int 상수여도 된다

사용 예시:
    >>> api = NativeAPI()
    >>> api.mul(api.add(1, 2), 5)   # FR(15)
"""

from zkposeidon.field import to_fr


class NativeAPI:
    """FR 값을 직접 계산하는 백엔드."""

    def element(self, value):
        return to_fr(value)

    def constant(self, value):
        return to_fr(value)

    def add(self, a, b):
        return to_fr(a) + to_fr(b)

    def mul(self, a, b):
        return to_fr(a) * to_fr(b)


# 상태가 없으므로 프로세스 전체에서 공유한다
NATIVE = NativeAPI()
