"""
This module contains the gate catalog used by the simulator.

Single qubit gates are addressed by one character, multi-qubit gates by name. All the matrices are stored as sparse
CSC matrices, such that they can be embedded into the register without conversion.

Attributes:
    standard_gates (Gates): Catalog with the Pauli, Hadamard, phase and T gates, plus the named gates CNOT, CZ and
        SWAP.
"""

import numpy as np
from scipy import sparse


class Gates(object):
    """Collection of the gates available to a quantum system.

    The single qubit gates are fixed, the named gates can be registered at runtime, either from a matrix or from a
    file written with ``scipy.sparse.save_npz``.

    Example:
        .. code-block:: python

            from quantum_register.gates import Gates

            gateset = Gates()
            gateset.make_gate("iSWAP", [[1, 0, 0, 0], [0, 0, 1j, 0], [0, 1j, 0, 0], [0, 0, 0, 1]])

            hadamard = gateset.get('H')
            iswap = gateset.cget("iSWAP")
    """

    def __init__(self):
        sq2 = 1 / np.sqrt(2)
        self.single_qubit_gates = {
            'I': np.array([[1, 0], [0, 1]]),
            'X': np.array([[0, 1], [1, 0]]),
            'Y': np.array([[0, -1J], [1J, 0]]),
            'Z': np.array([[1, 0], [0, -1]]),
            'H': np.array([[sq2, sq2], [sq2, -sq2]]),
            'S': np.array([[1, 0], [0, 1J]]),
            's': np.array([[1, 0], [0, -1J]]),
            'T': np.array([[1, 0], [0, np.exp(1J * np.pi / 4)]]),
            't': np.array([[1, 0], [0, np.exp(-1J * np.pi / 4)]]),
        }
        self._single = {key: sparse.csc_matrix(value, dtype=complex)
                        for key, value in self.single_qubit_gates.items()}
        self._named = {}

    def get(self, gate: str) -> sparse.csc_matrix:
        """ Returns the single qubit gate identified by the character gate. """
        if gate not in self._single:
            raise ValueError(
                f"Argument 'gate' must be one of {list(self._single.keys())}, not {gate!r}."
            )
        return self._single[gate]

    def cget(self, name: str) -> sparse.csc_matrix:
        """ Returns the named gate registered as name. """
        if name not in self._named:
            raise ValueError(f"Unknown gate {name!r}, registered gates are {list(self._named.keys())}.")
        return self._named[name]

    def has_gate(self, name: str) -> bool:
        return name in self._named

    def gate_size(self, name: str) -> int:
        """ Number of qubits on which the named gate acts. """
        return int(np.log2(self.cget(name).shape[0]))

    def make_gate(self, name: str, matrix):
        """Registers a named gate.

        Args:
            name (str): Name under which the gate can be retrieved with cget.
            matrix (array_like or sparse matrix): Square matrix with a power of two dimension of at least 2.

        Returns:
            None
        """
        m = sparse.csc_matrix(matrix, dtype=complex)
        rows, cols = m.shape
        if rows != cols or rows < 2 or rows & (rows - 1):
            raise ValueError(
                f"Gate {name!r} must be a square matrix of power of two dimension, but found shape {m.shape}."
            )
        self._named[name] = m

    def load_gate(self, name: str, path: str):
        """ Registers the named gate stored at path. """
        self.make_gate(name, sparse.load_npz(path))

    def save_gate(self, name: str, path: str):
        """ Stores the named gate at path. """
        sparse.save_npz(path, self.cget(name))


def _standard_gates() -> Gates:
    gateset = Gates()
    gateset.make_gate("CNOT", [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0]])
    gateset.make_gate("CZ", np.diag([1, 1, 1, -1]))
    gateset.make_gate("SWAP", [[1, 0, 0, 0], [0, 0, 1, 0], [0, 1, 0, 0], [0, 0, 0, 1]])
    return gateset


standard_gates = _standard_gates()
