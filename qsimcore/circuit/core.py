"""Circuit container: an ordered gate list plus a measurement map."""

from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import torch

from qsimcore.diagnostics import is_unitary
from qsimcore.exceptions import InvalidArgumentError

from .gate import Gate, GateKind, gate_kind
from .layers import circuit_depth

MatrixLike = Union[torch.Tensor, np.ndarray, Sequence[Sequence[complex]]]


def as_complex_matrix(matrix: MatrixLike) -> torch.Tensor:
    """Convert a tensor, array or nested list into a complex128 CPU tensor."""
    if isinstance(matrix, torch.Tensor):
        return matrix.detach().to(dtype=torch.complex128, device="cpu").clone()
    return torch.as_tensor(np.asarray(matrix, dtype=np.complex128))


class QuantumCircuit:
    """
    An ordered list of gate applications on ``n_qubits`` qubits, plus a list
    of (qubit, classical bit) measurement pairs.

    Insertion order is execution order. The qubit and classical-bit counts are
    fixed at construction; the optimizer may rewrite the gate list in place.
    """

    def __init__(self, n_qubits: int, n_clbits: int = 0) -> None:
        if n_qubits < 1:
            raise InvalidArgumentError("QuantumCircuit requires n_qubits >= 1.")
        if n_clbits < 0:
            raise InvalidArgumentError("QuantumCircuit requires n_clbits >= 0.")

        self._n_qubits = int(n_qubits)
        self._n_clbits = int(n_clbits)
        self._gates: List[Gate] = []
        self._measurements: List[Tuple[int, int]] = []

    @property
    def n_qubits(self) -> int:
        return self._n_qubits

    @property
    def n_clbits(self) -> int:
        return self._n_clbits

    @property
    def gates(self) -> Tuple[Gate, ...]:
        """Read-only snapshot of the gate list."""
        return tuple(self._gates)

    @property
    def measurements(self) -> Tuple[Tuple[int, int], ...]:
        """Read-only snapshot of the (qubit, classical bit) pairs."""
        return tuple(self._measurements)

    def _check_qubits(self, qubits: Sequence[int]) -> None:
        for q in qubits:
            if q < 0 or q >= self._n_qubits:
                raise IndexError(
                    f"Qubit index {q} is out of range for this circuit "
                    f"(n_qubits={self._n_qubits})."
                )

    def add_gate(
        self,
        kind: Union[GateKind, str],
        qubits: Sequence[int],
        params: Optional[Sequence[float]] = None,
    ) -> Gate:
        """
        Append a gate application to the circuit.

        Parameters
        ----------
        kind:
            A GateKind or a gate name such as "h", "cx", "rz" (aliases like
            "cnot" and "toffoli" are accepted).
        qubits:
            Target qubit indices, controls first.
        params:
            Real parameters (e.g. rotation angles), if the kind takes any.

        Returns
        -------
        Gate
            The appended gate.

        Raises
        ------
        IndexError
            If a qubit index is outside [0, n_qubits).
        InvalidArgumentError
            If the arity or parameter count is wrong, or qubits repeat.
        UnsupportedOperationError
            If the gate name is unknown.
        """
        resolved = gate_kind(kind)
        q_tuple = tuple(int(q) for q in qubits)
        self._check_qubits(q_tuple)
        gate = Gate(resolved, q_tuple, tuple(params or ()))
        self._gates.append(gate)
        return gate

    def add_custom_gate(
        self,
        name: str,
        matrix: MatrixLike,
        qubits: Sequence[int],
    ) -> Gate:
        """
        Append a gate defined by an explicit unitary matrix.

        The first qubit is the most significant bit of the matrix index.

        Raises
        ------
        IndexError
            If a qubit index is out of range.
        InvalidArgumentError
            If the matrix is not a 2**k x 2**k unitary.
        """
        q_tuple = tuple(int(q) for q in qubits)
        self._check_qubits(q_tuple)
        tensor = as_complex_matrix(matrix)
        gate = Gate(GateKind.CUSTOM, q_tuple, (), tensor, str(name).lower())
        if not is_unitary(tensor):
            raise InvalidArgumentError(f"Matrix of custom gate {name!r} is not unitary.")
        self._gates.append(gate)
        return gate

    def add_measurement(self, qubit: int, clbit: int) -> None:
        """
        Record that ``qubit`` is measured into classical bit ``clbit``.

        Raises
        ------
        IndexError
            If either index is out of range.
        """
        self._check_qubits((qubit,))
        if clbit < 0 or clbit >= self._n_clbits:
            raise IndexError(
                f"Classical bit index {clbit} is out of range for this circuit "
                f"(n_clbits={self._n_clbits})."
            )
        self._measurements.append((int(qubit), int(clbit)))

    def replace_gates(self, gates: Sequence[Gate]) -> None:
        """Replace the whole gate list, checking every qubit index."""
        new_gates = list(gates)
        for gate in new_gates:
            self._check_qubits(gate.qubits)
        self._gates = new_gates

    def relabel_qubits(self, mapping: Mapping[int, int]) -> None:
        """
        Rename qubits in every gate and measurement.

        ``mapping`` must be a permutation of range(n_qubits) given as
        old index -> new index.
        """
        if sorted(mapping) != list(range(self._n_qubits)) or sorted(
            mapping.values()
        ) != list(range(self._n_qubits)):
            raise InvalidArgumentError(
                f"Qubit mapping must be a permutation of range({self._n_qubits})."
            )
        self._gates = [
            gate.with_qubits(mapping[q] for q in gate.qubits) for gate in self._gates
        ]
        self._measurements = [(mapping[q], c) for q, c in self._measurements]

    def validate(self) -> None:
        """Re-check every gate and measurement against the register sizes."""
        for gate in self._gates:
            self._check_qubits(gate.qubits)
        for qubit, clbit in self._measurements:
            self._check_qubits((qubit,))
            if clbit < 0 or clbit >= self._n_clbits:
                raise IndexError(f"Classical bit index {clbit} is out of range.")

    def parameters(self) -> List[float]:
        """All gate parameters, flattened in gate order."""
        return [p for gate in self._gates for p in gate.params]

    def update_parameter(self, index: int, value: float) -> None:
        """Set the ``index``-th entry of ``parameters()`` to ``value``."""
        if index < 0:
            raise IndexError(f"Parameter index {index} is out of range.")
        offset = 0
        for i, gate in enumerate(self._gates):
            if index < offset + len(gate.params):
                params = list(gate.params)
                params[index - offset] = float(value)
                self._gates[i] = gate.with_params(params)
                return
            offset += len(gate.params)
        raise IndexError(
            f"Parameter index {index} is out of range (circuit has {offset} parameters)."
        )

    def update_parameters(self, values: Sequence[float]) -> None:
        """Replace all parameters at once; ``len(values)`` must match."""
        values = [float(v) for v in values]
        expected = len(self.parameters())
        if len(values) != expected:
            raise InvalidArgumentError(
                f"Expected {expected} parameter values, got {len(values)}."
            )
        it = iter(values)
        self._gates = [
            gate.with_params([next(it) for _ in gate.params]) if gate.params else gate
            for gate in self._gates
        ]

    def copy(self) -> "QuantumCircuit":
        """Return an independent copy of this circuit."""
        new = QuantumCircuit(self._n_qubits, self._n_clbits)
        new._gates.extend(self._gates)
        new._measurements.extend(self._measurements)
        return new

    def __len__(self) -> int:
        return len(self._gates)

    def __iter__(self) -> Iterator[Gate]:
        return iter(tuple(self._gates))

    def num_gates(self) -> int:
        """Return the number of gate operations in this circuit."""
        return len(self._gates)

    def gate_counts(self) -> Dict[str, int]:
        """Return a dictionary mapping gate names to their counts."""
        counts: Dict[str, int] = {}
        for gate in self._gates:
            counts[gate.name] = counts.get(gate.name, 0) + 1
        return counts

    def depth(self) -> int:
        """
        Number of layers of mutually independent gates, using the same ASAP
        layering as the optimizer's depth pass. Does not modify the circuit.
        """
        return circuit_depth(self._gates, self._n_qubits)

    def to_qasm(self) -> str:
        """Export the gate list as OpenQASM 2.0 text."""
        from qsimcore.io.qasm2 import export_circuit_to_qasm

        return export_circuit_to_qasm(self)

    def __repr__(self) -> str:
        return (
            f"QuantumCircuit(n_qubits={self._n_qubits}, n_clbits={self._n_clbits}, "
            f"gates={len(self._gates)}, measurements={len(self._measurements)})"
        )
