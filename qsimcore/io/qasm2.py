"""OpenQASM 2.0 exporter.

Produces the text consumed by the visualization/export layer. The format is
fixed byte for byte:

    OPENQASM 2.0;
    include "qelib1.inc";
    qreg q[N];
    creg c[M];
    <blank line>

followed by one line per gate, in gate-list order:

    h q[0];
    rz(1.5708) q[0];
    cx q[0] q[1];

Operands are separated by single spaces; multi-parameter gates join their
angles with commas. Measurements are not emitted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from qsimcore.circuit import Gate, QuantumCircuit


def format_angle(value: float) -> str:
    """Format an angle with six significant digits (``%g``)."""
    return f"{value:g}"


def qasm_header(n_qubits: int, n_clbits: int) -> str:
    return (
        "OPENQASM 2.0;\n"
        'include "qelib1.inc";\n'
        f"qreg q[{n_qubits}];\n"
        f"creg c[{n_clbits}];\n"
        "\n"
    )


def gate_to_qasm(gate: "Gate") -> str:
    """Render one gate as a QASM statement terminated by a newline."""
    text = gate.name
    if gate.params:
        text += "(" + ",".join(format_angle(p) for p in gate.params) + ")"
    operands = " ".join(f"q[{q}]" for q in gate.qubits)
    return f"{text} {operands};\n"


def gates_to_qasm(gates: Sequence["Gate"]) -> str:
    return "".join(gate_to_qasm(g) for g in gates)


def export_circuit_to_qasm(circuit: "QuantumCircuit") -> str:
    """
    Export a QuantumCircuit to OpenQASM 2.0 text.

    Parameters
    ----------
    circuit : QuantumCircuit
        Circuit to export.

    Returns
    -------
    str
        Header followed by one line per gate.
    """
    return qasm_header(circuit.n_qubits, circuit.n_clbits) + gates_to_qasm(circuit.gates)


__all__ = [
    "format_angle",
    "qasm_header",
    "gate_to_qasm",
    "gates_to_qasm",
    "export_circuit_to_qasm",
]
