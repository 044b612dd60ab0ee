"""Single-qubit noise channels for the state-vector engine."""

from .channels import (
    NoiseChannel,
    NoiseKind,
    amplitude_damping_channel,
    apply_channel_to_density_matrix,
    bit_flip_channel,
    bit_phase_flip_channel,
    custom_channel,
    depolarizing_channel,
    noise_kind,
    phase_damping_channel,
    phase_flip_channel,
)

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
