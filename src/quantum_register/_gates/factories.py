"""
Factories for the composite gates.

Each factory builds the operator of a multi-qubit primitive only on the window of contiguous qubits it touches. The
window is later embedded into the full register by the backend, so the size of the operator is 2^size x 2^size with
size the span of the gate, and not the size of the register. Within a window, qubit 0 is the most significant bit of
the basis index.
"""

import numpy as np
from scipy import sparse


def cut(target: int, control) -> tuple:
    """Translates the indices of a controlled gate such that the lowest touched qubit becomes qubit 0.

    Args:
        target (int): Index of the target qubit.
        control (Iterable[int]): Indices of the control qubits, possibly empty.

    Returns:
        Tuple (size, offset, target, control) with the span of the window, the index of its first qubit and the
        indices relative to the window.
    """
    control = tuple(control)
    touched = (target,) + control
    minq, maxq = min(touched), max(touched)
    return maxq - minq + 1, minq, target - minq, tuple(c - minq for c in control)


def _mask(qubits, size: int) -> int:
    mask = 0
    for q in qubits:
        mask |= 1 << (size - q - 1)
    return mask


class CNOTFactory(object):

    def construct(self, target: int, control, size: int) -> sparse.csc_matrix:
        """Generates the multi-controlled X gate.

        The target bit of a basis index is flipped exactly when all the control bits are 1. Without controls, this is
        the X gate on the target.

        Args:
            target (int): Target qubit relative to the window.
            control (Iterable[int]): Control qubits relative to the window.
            size (int): Number of qubits of the window.

        Returns:
            Sparse permutation matrix of shape 2^size x 2^size.
        """
        dim = 1 << size
        cmask = _mask(control, size)
        tmask = _mask((target,), size)
        cols = np.arange(dim)
        rows = np.where((cols & cmask) == cmask, cols ^ tmask, cols)
        return sparse.csc_matrix((np.ones(dim, dtype=complex), (rows, cols)), shape=(dim, dim))


class CPhaseFactory(object):

    def construct(self, phase: float, target: int, control, size: int) -> sparse.csc_matrix:
        """Generates the multi-controlled phase gate.

        The amplitude of a basis state is multiplied by exp(i phase) when the target and all the control bits are 1.

        Args:
            phase (float): Phase angle in radians.
            target (int): Target qubit relative to the window.
            control (Iterable[int]): Control qubits relative to the window.
            size (int): Number of qubits of the window.

        Returns:
            Sparse diagonal matrix of shape 2^size x 2^size.
        """
        mask = _mask(tuple(control) + (target,), size)
        idx = np.arange(1 << size)
        diagonal = np.where((idx & mask) == mask, np.exp(1J * phase), 1.0 + 0J)
        return sparse.diags(diagonal, format="csc")


class SwapFactory(object):

    def construct(self, size: int) -> sparse.csc_matrix:
        """ Generates the permutation exchanging the first and the last qubit of the window. """
        dim = 1 << size
        hi, lo = 1 << (size - 1), 1
        cols = np.arange(dim)
        differ = ((cols & hi) > 0) != ((cols & lo) > 0)
        rows = np.where(differ, cols ^ (hi | lo), cols)
        return sparse.csc_matrix((np.ones(dim, dtype=complex), (rows, cols)), shape=(dim, dim))


class QFTFactory(object):

    def construct(self, size: int, inverse: bool=False) -> sparse.csc_matrix:
        """Generates the quantum Fourier transform on the window.

        The entries are w^(row col) / sqrt(N) with N = 2^size and w = exp(2 pi i / N) the primitive N-th root of
        unity. The matrix is built directly instead of decomposing it in Hadamard and controlled phase gates.

        Args:
            size (int): Number of qubits of the window.
            inverse (bool): Build the inverse transform instead.

        Returns:
            Sparse matrix of shape 2^size x 2^size.
        """
        dim = 1 << size
        idx = np.arange(dim)
        # Reduce the exponent before scaling to keep the phases exact.
        exponent = np.outer(idx, idx) % dim
        sign = -1 if inverse else 1
        result = np.exp(sign * 2J * np.pi * exponent / dim) / np.sqrt(dim)
        return sparse.csc_matrix(result)
