"""State-vector simulation engine.

The engine owns one amplitude buffer of 2**n complex128 values, applies gates
to it in place, samples measurements from a per-engine ``torch.Generator``,
optionally injects stochastic single-qubit noise after every gate, and keeps
named snapshots of the buffer.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Union

import numpy as np
import torch

from ..backend.indexing import basis_index
from ..backend.statevector import (
    MAX_QUBITS,
    apply_gate as apply_single_qubit_gate,
    apply_branch_,
    apply_matrix,
    branch_weight,
    collapse,
    density_matrix,
    expectation_value,
    measure_probs,
    normalize_,
    probability_of_one,
    zero_state,
)
from ..circuit import Gate, QuantumCircuit
from ..circuit.core import MatrixLike
from ..core.device import Device, resolve_device
from ..exceptions import InvalidArgumentError, NotFoundError
from ..gates import X, gate_matrix
from ..logging import get_logger
from ..noise import NoiseChannel, NoiseKind

logger = get_logger(__name__)

BasisState = Union[int, str, Sequence[int]]


class StateVectorSimulator:
    """
    Single-register state-vector simulator.

    Parameters
    ----------
    n_qubits : int
        Register size, 1 <= n_qubits <= MAX_QUBITS.
    noise_model : NoiseKind or str, optional
        Noise channel applied after every gate during ``simulate``.
    noise_parameter : float
        Channel rate in [0, 1].
    seed : int, optional
        Seed for the engine's random generator. Unseeded engines draw a
        nondeterministic seed.
    device : Device, str or torch.device, optional
        Where the amplitude buffer lives. Defaults to ``"sv_cpu"``.
    noise_kraus : sequence of 2x2 matrices, optional
        Operators of a ``NoiseKind.CUSTOM`` noise model.

    Notes
    -----
    Qubit 0 is the least significant bit of a basis index. Bitstrings
    returned by the engine list qubit 0 first.

    Not thread-safe; use one engine per thread.
    """

    def __init__(
        self,
        n_qubits: int,
        noise_model: Union[NoiseKind, str, None] = NoiseKind.NONE,
        noise_parameter: float = 0.0,
        seed: Optional[int] = None,
        device: Union[Device, torch.device, str, None] = None,
        noise_kraus: Optional[Sequence[MatrixLike]] = None,
    ) -> None:
        if n_qubits < 1:
            raise InvalidArgumentError(
                f"Number of qubits must be at least 1, got {n_qubits}."
            )
        if n_qubits > MAX_QUBITS:
            raise InvalidArgumentError(
                f"Number of qubits {n_qubits} exceeds the maximum of {MAX_QUBITS}."
            )

        self._n_qubits = int(n_qubits)
        self._device = resolve_device(device)
        self._state = zero_state(self._n_qubits, self._device)
        self._noise = NoiseChannel(
            noise_model,
            noise_parameter,
            kraus=None if noise_kraus is None else tuple(noise_kraus),
        )
        self._snapshots: Dict[str, torch.Tensor] = {}

        self._generator = torch.Generator(device="cpu")
        if seed is None:
            self._generator.seed()
        else:
            self._generator.manual_seed(int(seed))

        logger.debug(
            "Created %d-qubit simulator on %s with noise %r",
            self._n_qubits,
            self._device.name,
            self._noise,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def n_qubits(self) -> int:
        return self._n_qubits

    @property
    def device(self) -> Device:
        return self._device

    @property
    def noise_channel(self) -> NoiseChannel:
        return self._noise

    @property
    def state(self) -> torch.Tensor:
        """A copy of the amplitude buffer."""
        return self._state.clone()

    def set_state(self, amplitudes: Union[torch.Tensor, np.ndarray, Sequence[complex]]) -> None:
        """
        Replace the amplitude buffer with ``amplitudes`` (normalised on entry).

        Raises
        ------
        InvalidArgumentError
            If the length is not 2**n_qubits or the vector is zero.
        """
        if isinstance(amplitudes, torch.Tensor):
            tensor = amplitudes.detach().flatten()
        else:
            tensor = torch.as_tensor(np.asarray(amplitudes, dtype=np.complex128).ravel())
        dim = 1 << self._n_qubits
        if tensor.shape[0] != dim:
            raise InvalidArgumentError(
                f"State must have {dim} amplitudes, got {tensor.shape[0]}."
            )
        tensor = tensor.to(
            dtype=self._device.complex_dtype, device=self._device.as_torch_device()
        ).clone()
        if torch.linalg.vector_norm(tensor).item() == 0.0:
            raise InvalidArgumentError("State vector must not be zero.")
        self._state = normalize_(tensor)

    # ------------------------------------------------------------------
    # Randomness
    # ------------------------------------------------------------------

    def _draw(self) -> float:
        """One uniform sample from [0, 1)."""
        return float(torch.rand(1, generator=self._generator, dtype=torch.float64).item())

    # ------------------------------------------------------------------
    # Gates and circuits
    # ------------------------------------------------------------------

    def _check_qubit(self, qubit: int) -> None:
        if qubit < 0 or qubit >= self._n_qubits:
            raise IndexError(
                f"Qubit index {qubit} is out of range [0, {self._n_qubits})."
            )

    def apply_gate(self, gate: Gate) -> None:
        """
        Apply one gate to the buffer in place.

        Raises
        ------
        IndexError
            If any target qubit is out of range.
        UnsupportedOperationError
            If the gate kind has no matrix.
        """
        for q in gate.qubits:
            self._check_qubit(q)
        matrix = gate_matrix(
            gate,
            dtype=self._device.complex_dtype,
            device=self._device.as_torch_device(),
        )
        apply_matrix(self._state, matrix, gate.qubits, self._n_qubits)

    def _check_circuit(self, circuit: QuantumCircuit) -> None:
        if circuit.n_qubits != self._n_qubits:
            raise InvalidArgumentError(
                f"Circuit has {circuit.n_qubits} qubits but the simulator has "
                f"{self._n_qubits}."
            )

    @staticmethod
    def _check_shots(shots: int) -> None:
        if shots < 1:
            raise InvalidArgumentError(f"Number of shots must be positive, got {shots}.")

    def simulate(self, circuit: QuantumCircuit, shots: int = 1) -> None:
        """
        Apply every gate of ``circuit`` to the current state, in order.

        When a noise model is active, ``apply_noise`` runs on every qubit a
        gate touched right after that gate. The state is renormalised once at
        the end. ``shots`` is validated but the circuit runs once; use
        ``sample_counts`` or ``run`` for repeated trials.

        An error part-way leaves the buffer as the last successful gate
        produced.

        Raises
        ------
        InvalidArgumentError
            If ``shots < 1`` or the circuit's qubit count differs.
        """
        self._check_shots(shots)
        self._check_circuit(circuit)

        noisy = self._noise.is_active
        for gate in circuit.gates:
            self.apply_gate(gate)
            if noisy:
                for q in gate.qubits:
                    self.apply_noise(q)

        normalize_(self._state)

    def reset(self) -> None:
        """Return to |0...0⟩. Snapshots are kept."""
        self._state = zero_state(self._n_qubits, self._device)

    # ------------------------------------------------------------------
    # Measurement
    # ------------------------------------------------------------------

    def measure(self, qubit: int) -> int:
        """
        Measure ``qubit`` in the computational basis and collapse the state.

        Outcome 1 is chosen iff a uniform draw falls below P(qubit = 1).

        Raises
        ------
        IndexError
            If ``qubit`` is out of range.
        """
        self._check_qubit(qubit)
        p1 = probability_of_one(self._state, qubit, self._n_qubits)
        total = float(measure_probs(self._state).sum().item())
        outcome = 1 if self._draw() < p1 else 0
        probability = p1 if outcome else total - p1
        if probability <= 0.0:
            # Rounding left the chosen branch empty; take the other one.
            outcome = 1 - outcome
            probability = total - probability
        collapse(self._state, qubit, outcome, probability, self._n_qubits)
        return outcome

    def measure_all(self) -> List[int]:
        """Measure qubits 0..n-1 in ascending order."""
        return [self.measure(q) for q in range(self._n_qubits)]

    def get_measurement_stats(self, shots: int) -> Dict[str, int]:
        """
        Repeat ``measure_all`` ``shots`` times on the current state.

        The state collapses on the first shot, so later shots repeat that
        outcome. Keys are bitstrings with character k = qubit k.
        """
        self._check_shots(shots)
        counts: Dict[str, int] = {}
        for _ in range(shots):
            key = "".join(str(b) for b in self.measure_all())
            counts[key] = counts.get(key, 0) + 1
        return counts

    def sample_counts(self, circuit: QuantumCircuit, shots: int) -> Dict[str, int]:
        """
        Run ``shots`` independent trials of reset, simulate, measure_all.

        Returns counts keyed by bitstring (character k = qubit k).
        """
        self._check_shots(shots)
        self._check_circuit(circuit)
        counts: Dict[str, int] = {}
        for _ in range(shots):
            self.reset()
            self.simulate(circuit)
            key = "".join(str(b) for b in self.measure_all())
            counts[key] = counts.get(key, 0) + 1
        return counts

    def run(self, circuit: QuantumCircuit, shots: int = 1) -> Dict[str, int]:
        """
        Run ``shots`` independent trials and record the circuit's measurements.

        Each trial resets, simulates, then measures every (qubit, clbit) pair
        of ``circuit.measurements`` in order. Keys are classical bitstrings of
        length ``circuit.n_clbits`` (character k = classical bit k); bits that
        are never written read 0.
        """
        self._check_shots(shots)
        self._check_circuit(circuit)
        counts: Dict[str, int] = {}
        for _ in range(shots):
            self.reset()
            self.simulate(circuit)
            clbits = [0] * circuit.n_clbits
            for qubit, clbit in circuit.measurements:
                clbits[clbit] = self.measure(qubit)
            key = "".join(str(b) for b in clbits)
            counts[key] = counts.get(key, 0) + 1
        return counts

    # ------------------------------------------------------------------
    # Read-out
    # ------------------------------------------------------------------

    def _basis_index(self, basis_state: BasisState) -> int:
        dim = 1 << self._n_qubits
        if isinstance(basis_state, (bool, np.bool_)):
            raise InvalidArgumentError(
                f"Basis state must be an index, a bitstring or a bit sequence, got {basis_state!r}."
            )
        if isinstance(basis_state, (int, np.integer)):
            index = int(basis_state)
            if index < 0 or index >= dim:
                raise InvalidArgumentError(
                    f"Basis state index {index} is out of range [0, {dim})."
                )
            return index

        if isinstance(basis_state, str):
            if any(ch not in "01" for ch in basis_state):
                raise InvalidArgumentError(
                    f"Basis state {basis_state!r} must contain only '0' and '1'."
                )
            bits = [int(ch) for ch in basis_state]
        else:
            bits = [int(b) for b in basis_state]
            if any(b not in (0, 1) for b in bits):
                raise InvalidArgumentError(f"Basis state bits must be 0 or 1, got {bits}.")

        if len(bits) != self._n_qubits:
            raise InvalidArgumentError(
                f"Basis state size {len(bits)} does not match number of qubits "
                f"{self._n_qubits}."
            )
        return basis_index(bits)

    def get_probability(self, basis_state: BasisState) -> float:
        """
        Return |a_k|² for a basis state.

        ``basis_state`` is an integer index, a bitstring, or a sequence of
        bits; in the latter two, position k is qubit k.

        Raises
        ------
        InvalidArgumentError
            On a wrong length or an out-of-range index.
        """
        index = self._basis_index(basis_state)
        return float(self._state[index].abs().item() ** 2)

    def get_probabilities(self) -> torch.Tensor:
        """Born-rule probabilities of every basis state."""
        return measure_probs(self._state).to(self._device.dtype)

    def get_expectation_value(self, observable: Union[torch.Tensor, np.ndarray]) -> float:
        """
        Return Re⟨ψ|O|ψ⟩.

        Raises
        ------
        InvalidArgumentError
            Unless ``observable`` is 2**n x 2**n.
        """
        if not isinstance(observable, torch.Tensor):
            observable = torch.as_tensor(np.asarray(observable, dtype=np.complex128))
        dim = 1 << self._n_qubits
        if tuple(observable.shape) != (dim, dim):
            raise InvalidArgumentError(
                f"Observable dimension {tuple(observable.shape)} does not match "
                f"state dimension ({dim}, {dim})."
            )
        return expectation_value(self._state, observable)

    def get_density_matrix(self) -> torch.Tensor:
        """Return ρ = |ψ⟩⟨ψ| as a (2**n, 2**n) tensor."""
        return density_matrix(self._state)

    # ------------------------------------------------------------------
    # Noise
    # ------------------------------------------------------------------

    def set_noise_model(
        self,
        kind: Union[NoiseKind, str, None],
        parameter: float = 0.0,
        kraus: Optional[Sequence[MatrixLike]] = None,
    ) -> None:
        """
        Configure the channel used by later ``simulate`` calls.

        ``kraus`` supplies the 2x2 operators of a ``NoiseKind.CUSTOM``
        channel; ``parameter`` is then the probability that the set is
        applied after a gate.

        Raises
        ------
        InvalidArgumentError
            If ``parameter`` is outside [0, 1], the kind is unknown, or the
            Kraus set is missing, misshapen or not trace preserving.
        """
        self._noise = NoiseChannel(
            kind, parameter, kraus=None if kraus is None else tuple(kraus)
        )
        logger.debug("Noise model set to %r", self._noise)

    def apply_noise(self, qubit: int) -> None:
        """
        Stochastically apply the configured channel to ``qubit``.

        With probability ``rate`` the channel's error operator is applied;
        otherwise the state is untouched. Depolarizing noise picks X, Y or Z
        uniformly with a second draw. Amplitude damping applies the decay
        |0⟩⟨1| and renormalises; a qubit with no |1⟩ weight cannot decay.
        A custom channel picks operator K_k with probability ||K_k ψ||² and
        applies K_k ψ / ||K_k ψ||.

        Raises
        ------
        IndexError
            If ``qubit`` is out of range.
        """
        self._check_qubit(qubit)
        channel = self._noise
        if not channel.is_active:
            return
        if self._draw() >= channel.rate:
            return

        if channel.kind is NoiseKind.CUSTOM:
            self._apply_kraus_branch(channel, qubit)
            return
        if channel.kind is NoiseKind.AMPLITUDE_DAMPING:
            p1 = probability_of_one(self._state, qubit, self._n_qubits)
            if p1 <= 0.0:
                return
            # |0⟩⟨1| = X · projector onto |1⟩, renormalised.
            collapse(self._state, qubit, 1, p1, self._n_qubits)
            operator = X(
                dtype=self._device.complex_dtype, device=self._device.as_torch_device()
            )
        else:
            choice = self._draw() if channel.kind is NoiseKind.DEPOLARIZING else 0.0
            operator = channel.error_operator(choice).to(
                dtype=self._device.complex_dtype, device=self._device.as_torch_device()
            )
        apply_single_qubit_gate(self._state, operator, qubit, self._n_qubits)

    def _apply_kraus_branch(self, channel: NoiseChannel, qubit: int) -> None:
        weights = [
            branch_weight(self._state, K, qubit, self._n_qubits) for K in channel.kraus
        ]
        probs = torch.tensor(weights, dtype=torch.float64)
        if probs.sum().item() <= 0.0:
            return
        chosen = int(torch.multinomial(probs, num_samples=1, generator=self._generator).item())
        apply_branch_(self._state, channel.kraus[chosen], qubit, self._n_qubits)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def save_state(self, name: str) -> None:
        """Store a copy of the current buffer under ``name``, replacing any old one."""
        self._snapshots[name] = self._state.clone()
        logger.debug("Saved snapshot %r", name)

    def load_state(self, name: str) -> None:
        """
        Restore the buffer from snapshot ``name``.

        Raises
        ------
        NotFoundError
            If no snapshot has that name.
        """
        try:
            snapshot = self._snapshots[name]
        except KeyError:
            raise NotFoundError(f"State {name!r} not found in cache.") from None
        self._state = snapshot.clone()
        logger.debug("Loaded snapshot %r", name)

    def clear_cache(self) -> None:
        """Drop every snapshot."""
        self._snapshots.clear()
        logger.debug("Cleared snapshot cache")

    def snapshot_names(self) -> List[str]:
        return sorted(self._snapshots)

    def __repr__(self) -> str:
        return (
            f"StateVectorSimulator(n_qubits={self._n_qubits}, "
            f"device={self._device.name!r}, noise={self._noise!r})"
        )


__all__ = ["StateVectorSimulator", "MAX_QUBITS"]
