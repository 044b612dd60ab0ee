"""Tests for the device abstraction."""

import pytest
import torch

import qsimcore as qs
from qsimcore.core import Device, default_device, device, resolve_device


def test_default_device_is_cpu_complex128():
    dev = default_device()
    assert dev.name == "sv_cpu"
    assert dev.as_torch_device() == torch.device("cpu")
    assert dev.complex_dtype == torch.complex128
    assert dev.dtype == torch.float64


def test_unknown_device_name():
    with pytest.raises(ValueError, match="Unsupported device name"):
        device("tpu")


@pytest.mark.skipif(torch.cuda.is_available(), reason="CUDA present")
def test_cuda_unavailable_raises():
    with pytest.raises(RuntimeError, match="CUDA"):
        device("sv_cuda")


def test_resolve_device_variants():
    assert resolve_device(None).name == "sv_cpu"
    assert resolve_device("sv_cpu").name == "sv_cpu"
    assert resolve_device(torch.device("cpu")).name == "sv_cpu"
    custom = Device("mine", torch.device("cpu"))
    assert resolve_device(custom) is custom
    with pytest.raises(TypeError):
        resolve_device(3)


def test_simulator_accepts_device_name():
    sim = qs.StateVectorSimulator(2, device="sv_cpu")
    assert sim.state.device.type == "cpu"
    assert sim.device.name == "sv_cpu"


def test_package_exports():
    assert qs.__version__
    assert qs.StateVectorSimulator is not None
    assert qs.optimize is not None
    assert qs.NoiseKind.BIT_FLIP.value == "bit_flip"
