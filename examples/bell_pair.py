"""Bell-pair example: build, optimize, export and sample a small circuit.

This example prepares a Bell pair with a few redundant gates, lets the
optimizer remove them, prints the OpenQASM 2.0 text, and samples measurement
statistics with and without depolarizing noise.
"""

from __future__ import annotations

import qsimcore as qs


def main() -> None:
    """Build a Bell circuit, optimize it and sample it."""
    circuit = qs.QuantumCircuit(2, 2)
    circuit.add_gate("h", [0])
    circuit.add_gate("x", [1])
    circuit.add_gate("x", [1])
    circuit.add_gate("cx", [0, 1])
    circuit.add_measurement(0, 0)
    circuit.add_measurement(1, 1)

    summary = qs.optimize(circuit)
    print(f"Gates: {summary.gates_before} -> {summary.gates_after}")
    print(f"Depth: {summary.depth_before} -> {summary.depth_after}")

    print("\nOpenQASM 2.0:")
    print(circuit.to_qasm())

    shots = 1000
    sim = qs.StateVectorSimulator(2, seed=0)
    counts = sim.run(circuit, shots=shots)
    print(f"Ideal counts ({shots} shots): {dict(sorted(counts.items()))}")

    sim.set_noise_model(qs.NoiseKind.DEPOLARIZING, 0.1)
    noisy_counts = sim.run(circuit, shots=shots)
    print(f"Noisy counts ({shots} shots): {dict(sorted(noisy_counts.items()))}")


if __name__ == "__main__":
    main()
