"""
zkposeidon: BN254 위의 Poseidon(x^5) 순열

일반 함수(NativeAPI)와 PLONK 회로 빌더(CircuitBuilder) 양쪽에서
같은 라운드 코드로 동작한다.
"""

from zkposeidon.api import NATIVE, NativeAPI
from zkposeidon.circuit import Circuit, CircuitBuilder, Gate, Variable
from zkposeidon.errors import ConfigurationError, ParameterMismatchError, PoseidonError
from zkposeidon.field import CURVE_ORDER, FR, to_fr
from zkposeidon.grain import generate_parameters
from zkposeidon.hash import STRATEGIES, poseidon_hash, poseidon_hash_ex
from zkposeidon.params import STANDARD, PermutationConfig, build_config
from zkposeidon.permutation import permute, schedule_counts
from zkposeidon.sparse import SPARSE, SparseConfig, build_sparse_config, permute_sparse
from zkposeidon.state import PermutationState
