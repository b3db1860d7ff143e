"""Poseidon 파라미터/입력 검증 오류.

모든 오류는 라운드가 실행되기 전에 정적인 설정과 입력만으로 결정된다.
같은 입력으로 재시도해도 결과는 바뀌지 않는다.
"""


class PoseidonError(ValueError):
    """zkposeidon의 모든 검증 오류의 기반 클래스."""


class ConfigurationError(PoseidonError):
    """너비 t, 입력 개수, 출력 개수, 행렬/상수 차원이 맞지 않을 때."""


class ParameterMismatchError(PoseidonError):
    """라운드 상수 테이블이 스케줄이 요구하는 오프셋보다 짧거나,
    다른 라운드 전략의 파라미터가 엔진에 전달되었을 때."""
