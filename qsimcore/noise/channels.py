"""Single-qubit noise channels.

Each channel is a kind plus a rate in [0, 1]. It resolves to the textbook
Kraus set for exact density-matrix evolution, and to one designated error
operator used by the engine's stochastic noise model.

A custom channel carries a caller-supplied trace-preserving Kraus set and is
applied with probability ``rate``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

import torch

from ..backend.density_matrix import apply_kraus_single_qubit
from ..circuit.core import MatrixLike, as_complex_matrix
from ..exceptions import InvalidArgumentError
from ..gates.standard import I, X, Y, Z


class NoiseKind(str, Enum):
    """Supported single-qubit noise channels."""

    NONE = "none"
    DEPOLARIZING = "depolarizing"
    AMPLITUDE_DAMPING = "amplitude_damping"
    PHASE_DAMPING = "phase_damping"
    BIT_FLIP = "bit_flip"
    PHASE_FLIP = "phase_flip"
    BIT_PHASE_FLIP = "bit_phase_flip"
    CUSTOM = "custom"


def noise_kind(kind: Union[NoiseKind, str, None]) -> NoiseKind:
    """Resolve a NoiseKind, its string value, or None (no noise)."""
    if kind is None:
        return NoiseKind.NONE
    if isinstance(kind, NoiseKind):
        return kind
    try:
        return NoiseKind(str(kind).strip().lower().replace("-", "_").replace(" ", "_"))
    except ValueError:
        choices = ", ".join(k.value for k in NoiseKind)
        raise InvalidArgumentError(
            f"Unknown noise model {kind!r}; expected one of: {choices}"
        ) from None


def _scaled(op: torch.Tensor, factor: float) -> torch.Tensor:
    return op * factor


def _matrix(rows) -> torch.Tensor:
    return torch.tensor(rows, dtype=torch.complex128)


def _check_trace_preserving(kraus: Tuple[torch.Tensor, ...]) -> None:
    # sum_i K_i^dagger K_i = I
    total = torch.zeros((2, 2), dtype=torch.complex128)
    for K in kraus:
        total = total + K.conj().transpose(-2, -1) @ K
    max_diff = torch.max(torch.abs(total - torch.eye(2, dtype=torch.complex128))).item()
    if max_diff > 1e-6:
        raise InvalidArgumentError(
            f"Kraus operators do not satisfy trace-preserving condition. "
            f"sum_i K_i^dagger K_i should equal I, but max difference is {max_diff:.2e}"
        )


def _as_kraus_set(ops) -> Tuple[torch.Tensor, ...]:
    kraus = tuple(as_complex_matrix(K) for K in ops)
    if not kraus:
        raise InvalidArgumentError("A custom noise channel needs at least one Kraus operator.")
    for i, K in enumerate(kraus):
        if tuple(K.shape) != (2, 2):
            raise InvalidArgumentError(
                f"Kraus operator {i} must have shape (2, 2), got {tuple(K.shape)}"
            )
    _check_trace_preserving(kraus)
    return kraus


def _is_identity_multiple(op: torch.Tensor) -> bool:
    return bool(
        torch.allclose(op, op[0, 0] * torch.eye(2, dtype=op.dtype), atol=1e-12)
    )


@dataclass(frozen=True)
class NoiseChannel:
    """
    A single-qubit noise channel of a given kind and rate.

    Attributes
    ----------
    kind : NoiseKind
        Which channel. Strings such as ``"bit_flip"`` are accepted.
    rate : float
        Error probability p (or damping parameter gamma / lambda) in [0, 1].
    kraus : tuple of torch.Tensor, optional
        2x2 Kraus operators of a ``NoiseKind.CUSTOM`` channel. Required for
        that kind and rejected for every other one.
    """

    kind: NoiseKind
    rate: float = 0.0
    kraus: Optional[Tuple[torch.Tensor, ...]] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", noise_kind(self.kind))
        rate = float(self.rate)
        if not 0.0 <= rate <= 1.0:
            raise InvalidArgumentError(f"Noise rate must be in [0, 1], got {self.rate}")
        object.__setattr__(self, "rate", rate)

        if self.kind is NoiseKind.CUSTOM:
            if self.kraus is None:
                raise InvalidArgumentError("A custom noise channel needs Kraus operators.")
            object.__setattr__(self, "kraus", _as_kraus_set(self.kraus))
        elif self.kraus is not None:
            raise InvalidArgumentError(
                f"Kraus operators are only accepted for a custom channel, not {self.kind.value!r}."
            )

    @property
    def is_active(self) -> bool:
        """True when the channel can change a state."""
        return self.kind is not NoiseKind.NONE and self.rate > 0.0

    def kraus_operators(self) -> Tuple[torch.Tensor, ...]:
        """
        Return the textbook Kraus operators of this channel (complex128, CPU).

        Depolarizing(p): sqrt(1-p) I, sqrt(p/3) X, sqrt(p/3) Y, sqrt(p/3) Z.
        Amplitude damping(g): [[1, 0], [0, sqrt(1-g)]], [[0, sqrt(g)], [0, 0]].
        Phase damping(l): [[1, 0], [0, sqrt(1-l)]], [[0, 0], [0, sqrt(l)]].
        Bit/phase/bit-phase flip(p): sqrt(1-p) I, sqrt(p) X / Z / Y.
        Custom(p) with operators K_k: sqrt(1-p) I, then sqrt(p) K_k.

        Raises
        ------
        InvalidArgumentError
            If the operators fail the trace-preserving check.
        """
        p = self.rate
        kind = self.kind
        if kind is NoiseKind.NONE:
            kraus: Tuple[torch.Tensor, ...] = (I(),)
        elif kind is NoiseKind.DEPOLARIZING:
            kraus = (
                _scaled(I(), math.sqrt(1.0 - p)),
                _scaled(X(), math.sqrt(p / 3.0)),
                _scaled(Y(), math.sqrt(p / 3.0)),
                _scaled(Z(), math.sqrt(p / 3.0)),
            )
        elif kind is NoiseKind.AMPLITUDE_DAMPING:
            kraus = (
                _matrix([[1.0, 0.0], [0.0, math.sqrt(1.0 - p)]]),
                _matrix([[0.0, math.sqrt(p)], [0.0, 0.0]]),
            )
        elif kind is NoiseKind.PHASE_DAMPING:
            kraus = (
                _matrix([[1.0, 0.0], [0.0, math.sqrt(1.0 - p)]]),
                _matrix([[0.0, 0.0], [0.0, math.sqrt(p)]]),
            )
        elif kind is NoiseKind.CUSTOM:
            kraus = (_scaled(I(), math.sqrt(1.0 - p)),) + tuple(
                _scaled(K, math.sqrt(p)) for K in self.kraus
            )
        else:
            flip = {
                NoiseKind.BIT_FLIP: X,
                NoiseKind.PHASE_FLIP: Z,
                NoiseKind.BIT_PHASE_FLIP: Y,
            }[kind]
            kraus = (_scaled(I(), math.sqrt(1.0 - p)), _scaled(flip(), math.sqrt(p)))

        _check_trace_preserving(kraus)
        return kraus

    def error_operator(self, choice: float = 0.0) -> Optional[torch.Tensor]:
        """
        The operator the stochastic model applies when an error fires.

        ``choice`` is a uniform draw in [0, 1) used only by the depolarizing
        channel to pick X, Y or Z with probability 1/3 each. Amplitude
        damping returns the unnormalised decay jump |0><1|. A custom channel
        returns its first operator that is not a multiple of the identity.
        Returns None for ``NoiseKind.NONE``.
        """
        kind = self.kind
        if kind is NoiseKind.NONE:
            return None
        if kind is NoiseKind.DEPOLARIZING:
            return (X, Y, Z)[min(int(choice * 3.0), 2)]()
        if kind is NoiseKind.AMPLITUDE_DAMPING:
            return _matrix([[0.0, 1.0], [0.0, 0.0]])
        if kind is NoiseKind.CUSTOM:
            return self.error_branches()[0]
        if kind in (NoiseKind.PHASE_DAMPING, NoiseKind.PHASE_FLIP):
            return Z()
        if kind is NoiseKind.BIT_FLIP:
            return X()
        return Y()

    def error_branches(self) -> Tuple[torch.Tensor, ...]:
        """
        Operators of a custom channel that are not multiples of the identity.

        A set made only of identity multiples returns all of its operators.
        """
        if self.kind is not NoiseKind.CUSTOM:
            raise InvalidArgumentError(
                f"Only a custom channel has Kraus branches, not {self.kind.value!r}."
            )
        branches = tuple(K for K in self.kraus if not _is_identity_multiple(K))
        return branches or self.kraus

    def __repr__(self) -> str:
        return f"NoiseChannel({self.kind.value}, rate={self.rate:g})"


def custom_channel(kraus: Sequence[MatrixLike], rate: float = 1.0) -> NoiseChannel:
    """
    Wrap a caller-supplied single-qubit Kraus set.

    With ``rate=1`` the channel is exactly the given set; lower rates mix it
    with the identity.
    """
    return NoiseChannel(NoiseKind.CUSTOM, rate, kraus=tuple(kraus))


def depolarizing_channel(p: float) -> NoiseChannel:
    return NoiseChannel(NoiseKind.DEPOLARIZING, p)


def amplitude_damping_channel(gamma: float) -> NoiseChannel:
    return NoiseChannel(NoiseKind.AMPLITUDE_DAMPING, gamma)


def phase_damping_channel(lam: float) -> NoiseChannel:
    return NoiseChannel(NoiseKind.PHASE_DAMPING, lam)


def bit_flip_channel(p: float) -> NoiseChannel:
    return NoiseChannel(NoiseKind.BIT_FLIP, p)


def phase_flip_channel(p: float) -> NoiseChannel:
    return NoiseChannel(NoiseKind.PHASE_FLIP, p)


def bit_phase_flip_channel(p: float) -> NoiseChannel:
    return NoiseChannel(NoiseKind.BIT_PHASE_FLIP, p)


def apply_channel_to_density_matrix(
    rho: torch.Tensor,
    channel: NoiseChannel,
    qubit: int,
    n_qubits: Optional[int] = None,
) -> torch.Tensor:
    """
    Evolve a density matrix exactly through ``channel`` on ``qubit``.

    Args:
        rho: Density matrix of shape (2**n, 2**n).
        channel: The channel to apply.
        qubit: Target qubit (0 = least significant bit).
        n_qubits: Number of qubits. If None, inferred from rho.

    Returns:
        A new density matrix Σ_k K_k ρ K_k†.
    """
    return apply_kraus_single_qubit(rho, channel.kraus_operators(), qubit, n_qubits)


__all__ = [
    "NoiseKind",
    "noise_kind",
    "NoiseChannel",
    "depolarizing_channel",
    "amplitude_damping_channel",
    "phase_damping_channel",
    "bit_flip_channel",
    "phase_flip_channel",
    "bit_phase_flip_channel",
    "custom_channel",
    "apply_channel_to_density_matrix",
]
