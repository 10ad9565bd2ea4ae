import pytest
import numpy as np

from src.quantum_register.systems import QSystem, Bit
from src.quantum_register.utilities import SequenceSampler
import tests.helpers.functions as helper_functions


seeds = [0, 1, 7, 42, 1234]


@pytest.mark.parametrize("state", ["pure", "mixed"])
def test_measure_basis_state_is_deterministic(state):
    system = QSystem(3, state=state, sampler=SequenceSampler([0.0, 0.5, 0.999]))
    system.evol('X', 1)
    assert system.measure_all() == [0, 1, 0]
    assert system.get_bits() == [Bit.ZERO, Bit.ONE, Bit.ZERO]


@pytest.mark.parametrize("u,outcome", [(0.1, 1), (0.49, 1), (0.5, 0), (0.9, 0)])
def test_measure_outcome_follows_sample(u, outcome):
    system = QSystem(1, sampler=SequenceSampler([u]))
    system.evol('H', 0)
    assert system.measure(0) == outcome
    psi = helper_functions.dense_state(system)
    assert helper_functions.vector_almost_equal(psi, helper_functions.basis_vector(outcome, 1))


@pytest.mark.parametrize("seed", seeds)
def test_measure_twice_gives_same_outcome(seed):
    system = QSystem(2, seed=seed)
    system.evol('H', 0, 2)
    first = system.measure(1)
    second = system.measure(1)
    assert first == second
    assert system.get_bits()[1] == first


@pytest.mark.parametrize("seed", seeds)
def test_measure_bell_state_is_correlated(seed):
    system = QSystem(2, seed=seed)
    system.evol('H', 0)
    system.cnot(1, [0])
    outcomes = system.measure_all()
    assert outcomes[0] == outcomes[1]
    psi = helper_functions.dense_state(system)
    assert abs(abs(psi[3 * outcomes[0]]) - 1) < 1e-12


@pytest.mark.parametrize("seed", seeds)
def test_measure_first_collapse_conditions_later_measurements(seed):
    system = QSystem(3, seed=seed)
    system.evol('H', 0)
    system.cnot(1, [0])
    system.cnot(2, [0])
    first = system.measure(0)
    assert system.measure(1, 3) == [first, first]


@pytest.mark.parametrize("seed", seeds)
def test_measure_keeps_pure_state_normalized(seed):
    system = QSystem(3, seed=seed)
    system.evol('H', 0, 3)
    system.evol('T', 1)
    system.cnot(2, [0])
    system.measure(1)
    psi = helper_functions.dense_state(system)
    assert abs(np.sum(np.abs(psi)**2) - 1) < 1e-12
    assert np.count_nonzero(np.abs(psi) > 1e-12) == 4


@pytest.mark.parametrize("seed", seeds)
def test_measure_keeps_mixed_state_valid(seed):
    system = QSystem(3, seed=seed, state="mixed")
    system.evol('H', 0, 3)
    system.cnot(2, [0])
    system.measure(0)
    rho = helper_functions.dense_state(system)
    assert helper_functions.is_density_matrix(rho)
    assert abs(np.trace(rho) - 1) < 1e-12


def test_measure_mixed_collapse():
    system = QSystem(1, state="mixed", sampler=SequenceSampler([0.2]))
    system.evol('H', 0)
    assert system.measure(0) == 1
    rho = helper_functions.dense_state(system)
    assert np.allclose(rho, np.diag([0, 1]))


def test_measure_statistics():
    system_outcomes = []
    for seed in range(200):
        system = QSystem(1, seed=seed)
        system.evol('H', 0)
        system_outcomes.append(system.measure(0))
    assert 60 < sum(system_outcomes) < 140


def test_measure_range_returns_list():
    system = QSystem(4)
    system.evol('X', 2)
    assert system.measure(1, 4) == [0, 1, 0]
    assert system.get_bits() == [Bit.NONE, Bit.ZERO, Bit.ONE, Bit.ZERO]


def test_measure_syncs_pending_operations():
    system = QSystem(2)
    system.evol('X', 0)
    assert system.measure(0) == 1
    assert system.is_synced


def test_gate_resets_classical_bit():
    system = QSystem(2)
    system.measure_all()
    system.evol('H', 0)
    assert system.get_bits() == [Bit.NONE, Bit.ZERO]


def test_measure_out_of_range_raises_IndexError():
    system = QSystem(2)
    with pytest.raises(IndexError):
        system.measure(2)
    with pytest.raises(IndexError):
        system.measure(1, 3)
