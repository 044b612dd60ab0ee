"""Tests for ASAP layering."""

from qsimcore.circuit import Gate, GateKind, assign_layers, circuit_depth, group_into_layers


def g(kind, *qubits, params=()):
    return Gate(kind, qubits, params)


def test_empty_sequence():
    assert assign_layers([], 2) == []
    assert circuit_depth([], 2) == 0
    assert group_into_layers([], 2) == []


def test_independent_gates_share_a_layer():
    gates = [g(GateKind.H, 0), g(GateKind.H, 1), g(GateKind.H, 2)]
    assert assign_layers(gates, 3) == [0, 0, 0]


def test_dependencies_hold_across_layers():
    """A gate lands after every earlier gate that shares a qubit."""
    gates = [
        g(GateKind.H, 0),
        g(GateKind.X, 0),
        g(GateKind.X, 0),
        g(GateKind.H, 1),
        g(GateKind.CX, 0, 1),
    ]
    assert assign_layers(gates, 2) == [0, 1, 2, 0, 3]
    assert circuit_depth(gates, 2) == 4


def test_group_into_layers_keeps_program_order_within_layer():
    a = g(GateKind.X, 1)
    b = g(GateKind.X, 0)
    c = g(GateKind.CX, 0, 1)
    d = g(GateKind.Z, 2)
    layers = group_into_layers([a, b, c, d], 3)
    assert layers == [[a, b, d], [c]]


def test_no_two_gates_in_a_layer_share_a_qubit():
    gates = [
        g(GateKind.CX, 0, 1),
        g(GateKind.CX, 1, 2),
        g(GateKind.H, 0),
        g(GateKind.CCX, 0, 2, 3),
        g(GateKind.SWAP, 1, 3),
    ]
    for layer in group_into_layers(gates, 4):
        used = [q for gate in layer for q in gate.qubits]
        assert len(used) == len(set(used))
