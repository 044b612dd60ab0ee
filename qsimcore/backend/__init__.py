"""Backend kernels for state-vector and density-matrix operations."""

from .density_matrix import (
    apply_kraus_single_qubit,
    dm_from_statevector,
    embed_single_qubit_operator,
)
from .indexing import (
    basis_index,
    bit_mask,
    clear_index_caches,
    group_indices,
    index_cache_entries,
    pair_indices,
)
from .statevector import (
    MAX_QUBITS,
    apply_gate,
    apply_matrix,
    apply_three_qubit_gate,
    apply_two_qubit_gate,
    collapse,
    density_matrix,
    expectation_value,
    measure_probs,
    normalize_,
    probability_of_one,
    zero_state,
)

__all__ = [
    "MAX_QUBITS",
    "zero_state",
    "apply_matrix",
    "apply_gate",
    "apply_two_qubit_gate",
    "apply_three_qubit_gate",
    "measure_probs",
    "probability_of_one",
    "collapse",
    "normalize_",
    "expectation_value",
    "density_matrix",
    "dm_from_statevector",
    "embed_single_qubit_operator",
    "apply_kraus_single_qubit",
    "basis_index",
    "bit_mask",
    "group_indices",
    "pair_indices",
    "clear_index_caches",
    "index_cache_entries",
]
