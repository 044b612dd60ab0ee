"""Benchmark gate application and circuit simulation."""

import time
from typing import Dict

import torch

import qsimcore as qs
from qsimcore.backend.statevector import apply_matrix, zero_state
from qsimcore.gates import standard as stdgates


def benchmark_gate_application(
    n_qubits: int,
    n_gates: int = 1000,
    device: str = "cpu",
) -> Dict[str, float]:
    """Benchmark in-place one- and two-qubit gate application.

    Args:
        n_qubits: Number of qubits.
        n_gates: Number of gates to apply.
        device: Device ('cpu' or 'cuda').

    Returns:
        Dictionary with timing results.
    """
    device_map = {"cpu": "sv_cpu", "cuda": "sv_cuda"}
    qs_device = qs.device(device_map.get(device, "sv_cpu"))
    torch_device = qs_device.as_torch_device()

    state = zero_state(n_qubits=n_qubits, device=qs_device)

    one_qubit = [
        stdgates.H(device=torch_device),
        stdgates.X(device=torch_device),
        stdgates.RZ(0.3, device=torch_device),
    ]
    cx = stdgates.CX(device=torch_device)

    # Warmup
    for _ in range(10):
        apply_matrix(state, one_qubit[0], (0,), n_qubits)

    start = time.perf_counter()
    for i in range(n_gates):
        qubit = i % n_qubits
        if i % 4 == 3:
            apply_matrix(state, cx, (qubit, (qubit + 1) % n_qubits), n_qubits)
        else:
            apply_matrix(state, one_qubit[i % len(one_qubit)], (qubit,), n_qubits)
    if torch_device.type == "cuda":
        torch.cuda.synchronize()
    end = time.perf_counter()

    total_time = end - start
    return {
        "n_qubits": n_qubits,
        "n_gates": n_gates,
        "total_time_sec": total_time,
        "time_per_gate_sec": total_time / n_gates,
        "gates_per_sec": n_gates / total_time,
    }


def benchmark_optimized_simulation(n_qubits: int, n_layers: int = 50) -> Dict[str, float]:
    """Compare simulating a redundant circuit before and after ``optimize``."""
    circuit = qs.QuantumCircuit(n_qubits)
    for layer in range(n_layers):
        for q in range(n_qubits):
            circuit.add_gate("rz", [q], [0.01 * (layer + 1)])
            circuit.add_gate("h", [q])
            circuit.add_gate("h", [q])
        for q in range(0, n_qubits - 1, 2):
            circuit.add_gate("cx", [q, q + 1])

    optimized = circuit.copy()
    summary = qs.optimize(optimized)

    timings = {}
    for label, circ in (("original", circuit), ("optimized", optimized)):
        sim = qs.StateVectorSimulator(n_qubits, seed=0)
        start = time.perf_counter()
        sim.simulate(circ)
        timings[label] = time.perf_counter() - start

    return {
        "gates_before": summary.gates_before,
        "gates_after": summary.gates_after,
        "original_sec": timings["original"],
        "optimized_sec": timings["optimized"],
    }


if __name__ == "__main__":
    print("Benchmarking gate application...")

    results = benchmark_gate_application(n_qubits=12, n_gates=1000)
    print("Single statevector (12 qubits, 1000 gates):")
    print(f"  Time per gate: {results['time_per_gate_sec']*1e6:.2f} μs")
    print(f"  Gates per second: {results['gates_per_sec']:.0f}")

    results_opt = benchmark_optimized_simulation(n_qubits=10)
    print("\nRedundant circuit (10 qubits):")
    print(f"  Gates: {results_opt['gates_before']} -> {results_opt['gates_after']}")
    print(f"  Simulate original:  {results_opt['original_sec']*1e3:.2f} ms")
    print(f"  Simulate optimized: {results_opt['optimized_sec']*1e3:.2f} ms")
