"""
Poseidon 파라미터 생성 (Grain LFSR)
=====================================

Poseidon 논문(https://eprint.iacr.org/2019/458, Appendix F)의 결정론적 절차로
라운드 상수와 MDS 행렬을 생성한다. circomlib / go-iden3-crypto가 사용하는
`generate_parameters_grain.sage 1 0 254 t 8 R_P` 와 같은 값을 만든다.

**Grain LFSR (self-shrinking mode)**:
  80비트 상태 b0..b79를 다음과 같이 초기화한다.
    - b0, b1     : 필드 종류 (1 = GF(p))
    - b2..b5     : S-box 종류 (0 = x^alpha)
    - b6..b17    : 필드 비트 길이 n
    - b18..b29   : 상태 너비 t
    - b30..b39   : 풀 라운드 수 R_F
    - b40..b49   : 부분 라운드 수 R_P
    - b50..b79   : 모두 1
  갱신식: b_{i+80} = b_{i+62} ⊕ b_{i+51} ⊕ b_{i+38} ⊕ b_{i+23} ⊕ b_{i+13} ⊕ b_i
  처음 160비트는 버린다. 이후 비트를 쌍으로 읽어 첫 비트가 1이면
  두 번째 비트를 출력하고, 0이면 두 번째 비트를 버린다.

**라운드 상수**:
  n비트씩 읽어 (MSB 우선) p 미만이면 채택, 아니면 버리고 다시 읽는다.
  총 (R_F + R_P)·t 개. 라운드 r의 i번째 상수는 c[r·t + i].

**MDS 행렬 (Cauchy)**:
  라운드 상수 다음으로 2t개의 값을 읽어 (mod p 축약) x_0..x_{t-1}, y_0..y_{t-1}로
  나누고 M[i][j] = 1 / (x_i + y_j). 중복값이나 x_i + y_j = 0이 있으면 다시 뽑는다.

사용 예시:
    >>> params = generate_parameters(3)
    >>> len(params.round_constants)   # (8 + 57) * 3 = 195
    >>> params.mds[0][0]
"""

import logging
from functools import lru_cache

from zkposeidon.errors import ConfigurationError
from zkposeidon.field import FR, CURVE_ORDER, FIELD_BITS


logger = logging.getLogger(__name__)

# Grain 초기화 플래그
FIELD_FLAG = 1      # GF(p)
SBOX_FLAG = 0       # x^alpha (alpha = 5)

# 라운드 수 (논문 Table 2, Table 8; x^5, 128비트 보안)
N_ROUNDS_F = 8
N_ROUNDS_P = (56, 57, 56, 60, 60, 63, 64, 63, 60, 66, 60, 65, 70, 60, 64, 68)

MIN_WIDTH = 2
MAX_WIDTH = MIN_WIDTH + len(N_ROUNDS_P) - 1

SBOX_DEGREE = 5


def partial_rounds(t):
    """너비 t의 부분 라운드 수 R_P를 반환한다.

    Raises:
        ConfigurationError: t가 테이블 범위 [2, 17] 밖일 때
    """
    if t < MIN_WIDTH or t > MAX_WIDTH:
        raise ConfigurationError(f"지원하지 않는 너비입니다: t={t} (범위 {MIN_WIDTH}..{MAX_WIDTH})")
    return N_ROUNDS_P[t - MIN_WIDTH]


def _to_bits(value, width):
    return [int(b) for b in bin(value)[2:].zfill(width)]


class GrainLFSR:
    """self-shrinking 모드의 80비트 Grain LFSR.

    속성:
        state: 현재 80비트 상태 (리스트, 가장 오래된 비트가 앞)
    """

    def __init__(self, field_size, t, rounds_f, rounds_p):
        self.state = (
            _to_bits(FIELD_FLAG, 2)
            + _to_bits(SBOX_FLAG, 4)
            + _to_bits(field_size, 12)
            + _to_bits(t, 12)
            + _to_bits(rounds_f, 10)
            + _to_bits(rounds_p, 10)
            + [1] * 30
        )
        for _ in range(160):
            self._step()

    def _step(self):
        s = self.state
        new_bit = s[62] ^ s[51] ^ s[38] ^ s[23] ^ s[13] ^ s[0]
        s.pop(0)
        s.append(new_bit)
        return new_bit

    def next_bit(self):
        """self-shrinking 규칙으로 출력 비트 하나를 생성한다."""
        while True:
            first = self._step()
            second = self._step()
            if first == 1:
                return second

    def random_bits(self, n):
        """n개의 출력 비트를 MSB 우선 정수로 묶어 반환한다."""
        value = 0
        for _ in range(n):
            value = (value << 1) | self.next_bit()
        return value


def generate_round_constants(lfsr, count, field_size=FIELD_BITS):
    """거절 샘플링(rejection sampling)으로 count개의 라운드 상수를 뽑는다."""
    constants = []
    while len(constants) < count:
        candidate = lfsr.random_bits(field_size)
        if candidate < CURVE_ORDER:
            constants.append(FR(candidate))
    return constants


def generate_mds_matrix(lfsr, t, field_size=FIELD_BITS):
    """Cauchy 구성으로 t × t MDS 행렬을 만든다: M[i][j] = 1 / (x_i + y_j)."""
    while True:
        values = [lfsr.random_bits(field_size) % CURVE_ORDER for _ in range(2 * t)]
        while len(set(values)) != len(values):
            values = [lfsr.random_bits(field_size) % CURVE_ORDER for _ in range(2 * t)]
        xs, ys = values[:t], values[t:]
        if any((x + y) % CURVE_ORDER == 0 for x in xs for y in ys):
            continue
        return [[FR(1) / FR(x + y) for y in ys] for x in xs]


class PoseidonParameters:
    """교과서(textbook) Poseidon 파라미터.

    한 라운드 = (상수 더하기 → S-box → MDS 곱) 형태의 표준 순열이
    그대로 소비하는 값이다. 각 라운드 전략(standard / sparse)은
    이 값을 자신의 상수 배치로 변환해 사용한다.

    속성:
        t: 상태 너비
        rounds_f: 풀 라운드 수 (8)
        rounds_p: 부분 라운드 수
        alpha: S-box 지수 (5)
        round_constants: (rounds_f + rounds_p)·t 개 FR 튜플 (라운드 우선)
        mds: t × t FR 튜플 행렬, new[i] = Σ_j mds[i][j]·s[j]
    """

    def __init__(self, t, rounds_f, rounds_p, round_constants, mds):
        self.t = t
        self.rounds_f = rounds_f
        self.rounds_p = rounds_p
        self.alpha = SBOX_DEGREE
        self.round_constants = tuple(round_constants)
        self.mds = tuple(tuple(row) for row in mds)

    @property
    def total_rounds(self):
        return self.rounds_f + self.rounds_p

    def round_vector(self, r):
        """라운드 r에서 더해지는 t개의 상수."""
        return list(self.round_constants[r * self.t:(r + 1) * self.t])


@lru_cache(maxsize=None)
def generate_parameters(t):
    """너비 t의 Poseidon 파라미터를 생성한다 (프로세스 단위 캐시).

    Args:
        t: 상태 너비 (2 ≤ t ≤ 17)

    Returns:
        PoseidonParameters

    Raises:
        ConfigurationError: t가 지원 범위 밖일 때
    """
    rounds_p = partial_rounds(t)
    lfsr = GrainLFSR(FIELD_BITS, t, N_ROUNDS_F, rounds_p)
    constants = generate_round_constants(lfsr, (N_ROUNDS_F + rounds_p) * t)
    mds = generate_mds_matrix(lfsr, t)
    logger.debug("generated poseidon parameters t=%d R_F=%d R_P=%d", t, N_ROUNDS_F, rounds_p)
    return PoseidonParameters(t, N_ROUNDS_F, rounds_p, constants, mds)
