import pytest
import numpy as np
from scipy import sparse

from src.quantum_register.gates import Gates, standard_gates
import tests.helpers.gates as helper_gates


@pytest.mark.parametrize("name", ['I', 'X', 'Y', 'Z', 'H'])
def test_gates_get_matches_reference(name):
    gate = standard_gates.get(name)
    assert sparse.issparse(gate)
    assert np.allclose(gate.toarray(), helper_gates.single_qubit_gates[name])


@pytest.mark.parametrize("name", ['I', 'X', 'Y', 'Z', 'H', 'S', 's', 'T', 't'])
def test_gates_get_is_unitary(name):
    U = standard_gates.get(name).toarray()
    assert np.allclose(U @ U.conj().T, np.eye(2))


@pytest.mark.parametrize("name,adjoint", [('S', 's'), ('T', 't')])
def test_gates_adjoint_pairs(name, adjoint):
    product = standard_gates.get(name) @ standard_gates.get(adjoint)
    assert np.allclose(product.toarray(), np.eye(2))


@pytest.mark.parametrize("name", ['A', 'x', 'XY', ''])
def test_gates_get_unknown_raises_ValueError(name):
    with pytest.raises(ValueError):
        standard_gates.get(name)


def test_gates_standard_named_gates():
    assert np.allclose(standard_gates.cget("CNOT").toarray(), helper_gates.CNOT)
    assert np.allclose(standard_gates.cget("SWAP").toarray(), helper_gates.SWAP)
    assert standard_gates.gate_size("CZ") == 2


def test_gates_cget_unknown_raises_ValueError():
    with pytest.raises(ValueError):
        Gates().cget("CNOT")


def test_gates_make_gate():
    gateset = Gates()
    gateset.make_gate("TOFFOLI", helper_gates.TOFFOLI)
    assert gateset.has_gate("TOFFOLI")
    assert gateset.gate_size("TOFFOLI") == 3
    assert np.allclose(gateset.cget("TOFFOLI").toarray(), helper_gates.TOFFOLI)


@pytest.mark.parametrize("matrix", [np.eye(3), np.ones((2, 4)), np.eye(1)])
def test_gates_make_gate_invalid_shape_raises_ValueError(matrix):
    with pytest.raises(ValueError):
        Gates().make_gate("bad", matrix)


def test_gates_save_and_load_gate(tmp_path):
    path = str(tmp_path / "toffoli.npz")
    gateset = Gates()
    gateset.make_gate("TOFFOLI", helper_gates.TOFFOLI)
    gateset.save_gate("TOFFOLI", path)

    other = Gates()
    other.load_gate("CCX", path)
    assert np.allclose(other.cget("CCX").toarray(), helper_gates.TOFFOLI)
