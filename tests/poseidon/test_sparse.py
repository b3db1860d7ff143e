"""
sparse 전략 테스트.

테스트 대상:
  - 함수형 프리미티브: sigma, ark, mix, mix_last, mix_sparse
  - factor_sparse: L = S · B
  - SparseConfig: 차원, 불변성, circomlib 배치 값
  - permute_sparse: standard 전략 / 골든 벡터와 같은 출력
"""

import pytest

from zkposeidon.api import NATIVE
from zkposeidon.errors import ConfigurationError, ParameterMismatchError
from zkposeidon.field import FR
from zkposeidon.hash import poseidon_hash, poseidon_hash_ex
from zkposeidon.matrix import matrix_multiply
from zkposeidon.sparse import (
    SPARSE,
    SparseConfig,
    ark,
    build_sparse_config,
    factor_sparse,
    mix,
    mix_last,
    mix_sparse,
    permute_sparse,
    sigma,
)
from zkposeidon.state import PermutationState


def frs(values):
    return [FR(x) for x in values]


# ─────────────────────────────────────────────────────────────────────
# 프리미티브
# ─────────────────────────────────────────────────────────────────────

class TestPrimitives:

    def test_sigma(self):
        assert sigma(NATIVE, FR(2)) == FR(32)

    def test_ark(self):
        assert ark(NATIVE, frs([1, 1]), frs([5, 6, 7]), 1) == frs([7, 8])

    def test_ark_out_of_range(self):
        with pytest.raises(ParameterMismatchError):
            ark(NATIVE, frs([1, 1]), frs([5, 6, 7]), 2)

    def test_mix(self):
        assert mix(NATIVE, frs([5, 6]), frs_matrix([[1, 2], [3, 4]])) == frs([23, 34])

    def test_mix_last(self):
        assert mix_last(NATIVE, frs([5, 6]), frs_matrix([[1, 2], [3, 4]]), 1) == FR(34)

    def test_mix_sparse_t2(self):
        """new0 = 2·7 + 3·11, new1 = 11 + 7·5."""
        assert mix_sparse(NATIVE, frs([7, 11]), frs([2, 3, 5]), 0) == frs([47, 46])

    def test_mix_sparse_per_position_column(self):
        """열 성분은 위치마다 다르다: new[i] = s[i] + s0·S[o+t+i-1]."""
        assert mix_sparse(NATIVE, frs([2, 3, 4]), frs([1, 2, 3, 4, 5]), 0) == frs([20, 11, 14])

    def test_mix_sparse_round_offset(self):
        sparse = frs([0, 0, 0, 2, 3, 5])
        assert mix_sparse(NATIVE, frs([7, 11]), sparse, 1) == frs([47, 46])

    def test_mix_sparse_out_of_range(self):
        with pytest.raises(ParameterMismatchError):
            mix_sparse(NATIVE, frs([7, 11]), frs([2, 3, 5]), 1)


def frs_matrix(rows):
    return [frs(row) for row in rows]


# ─────────────────────────────────────────────────────────────────────
# 분해
# ─────────────────────────────────────────────────────────────────────

class TestFactorSparse:

    def test_reconstructs_mds(self, params3):
        mds = [list(row) for row in params3.mds]
        s, b = factor_sparse(mds)
        assert matrix_multiply(s, b) == mds

    def test_sparse_shape(self, params3):
        s, _ = factor_sparse([list(row) for row in params3.mds])
        assert s[1][1:] == frs([1, 0])
        assert s[2][1:] == frs([0, 1])

    def test_block_shape(self, params3):
        _, b = factor_sparse([list(row) for row in params3.mds])
        assert b[0] == frs([1, 0, 0])
        assert [row[0] for row in b] == frs([1, 0, 0])


# ─────────────────────────────────────────────────────────────────────
# SparseConfig
# ─────────────────────────────────────────────────────────────────────

class TestSparseConfig:

    def test_dimensions(self, sparse3):
        assert sparse3.strategy == SPARSE
        assert len(sparse3.round_constants) == 3 * 8 + 57
        assert len(sparse3.sparse_matrices) == (2 * 3 - 1) * 57
        assert len(sparse3.pre_sparse_matrix) == 3

    def test_layout_values(self, sparse3, params3):
        """첫 희소 행렬의 g와 P[0][0]은 MDS의 [0][0] 성분."""
        assert sparse3.round_constants[0] == params3.round_constants[0]
        assert sparse3.sparse_matrices[0] == params3.mds[0][0]
        assert sparse3.pre_sparse_matrix[0][0] == params3.mds[0][0]

    def test_full_round_constants_shared(self, sparse3, config3):
        """풀 라운드 상수 배치는 standard 전략과 같다."""
        assert sparse3.round_constants[:3 * 4] == config3.round_constants[:3 * 4]
        assert sparse3.round_constants[-3 * 3:] == config3.round_constants[-3 * 3:]

    def test_read_only(self, sparse3):
        with pytest.raises(AttributeError):
            sparse3.sparse_matrices = ()

    def test_direct_construction_rejected(self):
        with pytest.raises(ConfigurationError):
            SparseConfig(2, 2, 1, [0] * 5, [[1, 0], [0, 1]], [[1, 0], [0, 1]], [0] * 3)

    def test_cached(self):
        assert build_sparse_config(3) is build_sparse_config(3)

    @pytest.mark.parametrize("t", [1, 18])
    def test_out_of_range(self, t):
        with pytest.raises(ConfigurationError):
            build_sparse_config(t)

    def test_repr(self, sparse3):
        assert repr(sparse3) == "SparseConfig(t=3, full_rounds=8, partial_rounds=57)"


# ─────────────────────────────────────────────────────────────────────
# 순열
# ─────────────────────────────────────────────────────────────────────

class TestPermuteSparse:

    def test_golden_t3(self):
        assert int(poseidon_hash([1, 2], strategy=SPARSE)) == \
            7853200120776062878684798364095072458815029376092732009249414926327459813530

    @pytest.mark.parametrize("inputs, expected", [
        ([1, 2, 3], 6542985608222806190361240322586112750744169038454362455181422643027100751666),
        ([0, 0, 0], 5317387130258456662214331362918410991734007599705406860481038345552731150762),
    ])
    def test_golden_t4(self, inputs, expected):
        assert int(poseidon_hash(inputs, strategy=SPARSE)) == expected

    def test_golden_t2(self):
        assert int(poseidon_hash([1], strategy=SPARSE)) == \
            18586133768512220936620570745912940619677854269274689475585506675881198879027

    def test_matches_standard_all_outputs(self):
        inputs = [123456789, 987654321, 42]
        assert poseidon_hash_ex(inputs, 4, strategy=SPARSE) == poseidon_hash_ex(inputs, 4)

    def test_matches_reference_with_capacity(self, reference, params3):
        expected = reference(params3, [9, 10, 11])
        assert poseidon_hash_ex([10, 11], 3, initial_state=9, strategy=SPARSE) == expected

    def test_state_holds_final_values(self, sparse3):
        state = PermutationState(NATIVE, 0, [1, 2])
        outputs = permute_sparse(sparse3, state, 1)
        assert state.width == 3
        assert mix_last(NATIVE, state.elements, sparse3.mixing_matrix, 0) == outputs[0]

    def test_standard_config_rejected(self, config3):
        state = PermutationState(NATIVE, 0, [1, 2])
        with pytest.raises(ParameterMismatchError):
            permute_sparse(config3, state)

    def test_wrong_input_count(self, sparse4):
        state = PermutationState(NATIVE, 0, [1, 2])
        with pytest.raises(ConfigurationError):
            permute_sparse(sparse4, state)

    def test_n_outputs_out_of_range(self, sparse3):
        state = PermutationState(NATIVE, 0, [1, 2])
        with pytest.raises(ConfigurationError):
            permute_sparse(sparse3, state, 4)
