"""Tests for OpenQASM 2.0 export."""

import math

from qsimcore.circuit import QuantumCircuit
from qsimcore.gates import H
from qsimcore.io import export_circuit_to_qasm
from qsimcore.io.qasm2 import format_angle

HEADER = 'OPENQASM 2.0;\ninclude "qelib1.inc";\n'


def test_empty_circuit():
    qc = QuantumCircuit(3, 2)
    assert qc.to_qasm() == HEADER + "qreg q[3];\ncreg c[2];\n\n"


def test_bell_circuit_exact_text():
    qc = QuantumCircuit(2, 2)
    qc.add_gate("h", [0])
    qc.add_gate("cx", [0, 1])
    qc.add_measurement(0, 0)
    qc.add_measurement(1, 1)
    expected = HEADER + "qreg q[2];\ncreg c[2];\n\nh q[0];\ncx q[0] q[1];\n"
    assert qc.to_qasm() == expected


def test_parameterized_gates():
    qc = QuantumCircuit(3)
    qc.add_gate("rz", [0], [math.pi / 2])
    qc.add_gate("u3", [1], [0.5, 0.25, -1.0])
    qc.add_gate("ccx", [0, 1, 2])
    body = qc.to_qasm().split("\n\n", 1)[1]
    assert body == "rz(1.5708) q[0];\nu3(0.5,0.25,-1) q[1];\nccx q[0] q[1] q[2];\n"


def test_canonical_names():
    qc = QuantumCircuit(2)
    qc.add_gate("cnot", [0, 1])
    qc.add_gate("s_dag", [0])
    qc.add_gate("t_dag", [1])
    body = export_circuit_to_qasm(qc).split("\n\n", 1)[1]
    assert body == "cx q[0] q[1];\nsdg q[0];\ntdg q[1];\n"


def test_custom_gate_uses_its_own_name():
    qc = QuantumCircuit(1)
    qc.add_custom_gate("MyHadamard", H(), [0])
    assert qc.to_qasm().endswith("myhadamard q[0];\n")


def test_format_angle_uses_six_significant_digits():
    assert format_angle(math.pi) == "3.14159"
    assert format_angle(1e-7) == "1e-07"
    assert format_angle(2.0) == "2"
