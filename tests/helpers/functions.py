"""
Helper functions for the unit tests.
"""

import functools as ft
import numpy as np


def dense_state(system) -> np.ndarray:
    """ Returns the synced state of the system as dense array, flattened for pure states. """
    (values, row_ind, col_ptr), (n_rows, n_cols) = system.get_qbits()
    m = np.zeros((n_rows, n_cols), dtype=complex)
    for col in range(n_cols):
        for k in range(col_ptr[col], col_ptr[col + 1]):
            m[row_ind[k], col] = values[k]
    return m[:, 0] if n_cols == 1 else m


def basis_vector(index: int, nqubit: int) -> np.ndarray:
    psi = np.zeros(2**nqubit, dtype=complex)
    psi[index] = 1
    return psi


def kron_all(*matrices) -> np.ndarray:
    return ft.reduce(np.kron, matrices)


def vector_almost_equal(m1, m2, abstol: float=1e-9) -> bool:
    """ Check if m1 and m2 are close.
    """
    return np.allclose(m1, m2, rtol=0, atol=abstol)


def is_density_matrix(rho, abstol: float=1e-9) -> bool:
    """ Hermitian, trace one and positive semidefinite. """
    hermitian = np.allclose(rho, rho.conj().T, atol=abstol)
    trace = abs(np.trace(rho) - 1) < abstol
    psd = np.all(np.linalg.eigvalsh((rho + rho.conj().T) / 2) > -abstol)
    return hermitian and trace and psd
