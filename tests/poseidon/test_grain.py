"""
Grain LFSR 파라미터 생성 테스트.

테스트 대상:
  - partial_rounds: 너비별 부분 라운드 표, 범위 밖 오류
  - GrainLFSR: 결정론성, 비트 출력
  - generate_parameters: 상수 개수, circomlib 상수/MDS 값, 캐시
"""

import pytest

from zkposeidon.errors import ConfigurationError
from zkposeidon.field import FR, CURVE_ORDER, FIELD_BITS
from zkposeidon.grain import (
    N_ROUNDS_F,
    MIN_WIDTH,
    MAX_WIDTH,
    SBOX_DEGREE,
    GrainLFSR,
    generate_parameters,
    partial_rounds,
)


def fr_hex(s):
    return FR(int(s, 16))


# ─────────────────────────────────────────────────────────────────────
# 라운드 수 표
# ─────────────────────────────────────────────────────────────────────

class TestPartialRounds:

    @pytest.mark.parametrize("t, expected", [(2, 56), (3, 57), (4, 56), (5, 60), (13, 65), (17, 68)])
    def test_table(self, t, expected):
        assert partial_rounds(t) == expected

    @pytest.mark.parametrize("t", [0, 1, 18, 100])
    def test_out_of_range(self, t):
        with pytest.raises(ConfigurationError):
            partial_rounds(t)

    def test_width_bounds(self):
        assert MIN_WIDTH == 2
        assert MAX_WIDTH == 17

    def test_field_bits(self):
        """BN254 스칼라 필드는 254비트."""
        assert FIELD_BITS == 254


# ─────────────────────────────────────────────────────────────────────
# LFSR
# ─────────────────────────────────────────────────────────────────────

class TestGrainLFSR:

    def test_state_length(self):
        lfsr = GrainLFSR(FIELD_BITS, 3, N_ROUNDS_F, 57)
        assert len(lfsr.state) == 80

    def test_deterministic(self):
        """같은 초기화 값이면 같은 비트열."""
        a = GrainLFSR(FIELD_BITS, 3, N_ROUNDS_F, 57)
        b = GrainLFSR(FIELD_BITS, 3, N_ROUNDS_F, 57)
        assert a.random_bits(254) == b.random_bits(254)

    def test_width_changes_stream(self):
        a = GrainLFSR(FIELD_BITS, 3, N_ROUNDS_F, 57)
        b = GrainLFSR(FIELD_BITS, 4, N_ROUNDS_F, 56)
        assert a.random_bits(64) != b.random_bits(64)

    def test_bits_are_binary(self):
        lfsr = GrainLFSR(FIELD_BITS, 2, N_ROUNDS_F, 56)
        assert all(lfsr.next_bit() in (0, 1) for _ in range(100))

    def test_random_bits_range(self):
        lfsr = GrainLFSR(FIELD_BITS, 2, N_ROUNDS_F, 56)
        assert 0 <= lfsr.random_bits(16) < 2 ** 16


# ─────────────────────────────────────────────────────────────────────
# 교과서 파라미터
# ─────────────────────────────────────────────────────────────────────

class TestGenerateParameters:

    def test_counts_t3(self, params3):
        assert params3.t == 3
        assert params3.rounds_f == 8
        assert params3.rounds_p == 57
        assert params3.alpha == SBOX_DEGREE
        assert len(params3.round_constants) == (8 + 57) * 3
        assert params3.total_rounds == 65

    def test_first_constants_t3(self, params3):
        """circomlib poseidon_constants (t=3) C[0], C[1]."""
        assert params3.round_constants[0] == fr_hex(
            "0x0ee9a592ba9a9518d05986d656f40c2114c4993c11bb29938d21d47304cd8e6e")
        assert params3.round_constants[1] == fr_hex(
            "0x00f1445235f2148c5986587169fc1bcd887b08d4d00868df5696fff40956e864")

    def test_mds_t3(self, params3):
        assert params3.mds[0][0] == fr_hex(
            "0x109b7f411ba0e4c9b2b70caf5c36a7b194be7c11ad24378bfedb68592ba8118b")
        assert params3.mds[0][1] == fr_hex(
            "0x16ed41e13bb9c0c66ae119424fddbcbc9314dc9fdbdeea55d6c64543dc4903e0")
        assert params3.mds[1][0] == fr_hex(
            "0x2969f27eed31a480b9c36c764379dbca2cc8fdd1415c3dded62940bcde0bd771")

    def test_last_constant_t4(self):
        params = generate_parameters(4)
        assert len(params.round_constants) == 256
        assert params.round_constants[-1] == fr_hex(
            "0x163ec73251f85443687222487dda9a65467d90b22f0b38664686077c6a4486d5")

    def test_constants_in_field(self, params3):
        assert all(0 <= int(c) < CURVE_ORDER for c in params3.round_constants)

    def test_round_vector(self, params3):
        assert params3.round_vector(0) == list(params3.round_constants[0:3])
        assert params3.round_vector(64) == list(params3.round_constants[192:195])

    def test_mds_is_cauchy_shape(self, params3):
        assert len(params3.mds) == 3
        assert all(len(row) == 3 for row in params3.mds)
        assert all(x != FR(0) for row in params3.mds for x in row)

    def test_cached(self):
        assert generate_parameters(3) is generate_parameters(3)

    def test_out_of_range(self):
        with pytest.raises(ConfigurationError):
            generate_parameters(1)
