import pytest
import numpy as np
from scipy import sparse

from src.quantum_register.systems import QSystem
import tests.helpers.functions as helper_functions


@pytest.mark.parametrize("state", ["pure", "mixed"])
def test_save_and_load(tmp_path, state):
    path = str(tmp_path / "state.npz")
    system = QSystem(3, state=state)
    system.evol('H', 0)
    system.cnot(2, [0])
    system.evol('T', 1)
    system.save(path)

    loaded = QSystem.from_file(path, seed=42)
    assert loaded.get_size() == 3
    assert loaded.get_state() == system.get_state()
    assert loaded.get_bits() == [-1, -1, -1]
    (values, row_ind, col_ptr), shape = loaded.get_qbits()
    (values_0, row_ind_0, col_ptr_0), shape_0 = system.get_qbits()
    assert shape == shape_0
    assert row_ind == row_ind_0
    assert col_ptr == col_ptr_0
    assert np.allclose(values, values_0)


def test_save_syncs_pending_operations(tmp_path):
    path = str(tmp_path / "state.npz")
    system = QSystem(2)
    system.evol('X', 1)
    system.save(path)
    assert system.is_synced
    loaded = QSystem.from_file(path)
    psi = helper_functions.dense_state(loaded)
    assert helper_functions.vector_almost_equal(psi, helper_functions.basis_vector(1, 2))


def test_loaded_system_can_evolve(tmp_path):
    path = str(tmp_path / "state.npz")
    QSystem(2).save(path)
    loaded = QSystem.from_file(path)
    loaded.evol('X', 0)
    assert loaded.measure_all() == [1, 0]


@pytest.mark.parametrize("shape", [(3, 1), (4, 2)])
def test_load_invalid_shape_raises_ValueError(tmp_path, shape):
    path = str(tmp_path / "invalid.npz")
    sparse.save_npz(path, sparse.csc_matrix(np.ones(shape, dtype=complex)))
    with pytest.raises(ValueError):
        QSystem.from_file(path)
