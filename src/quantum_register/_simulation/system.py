"""
This module implements the quantum system, a register of qubits simulated with sparse matrices.

The state is kept as a sparse column vector (pure state) or as a sparse density matrix (mixed state). Gates are queued
per qubit and only applied when the state is read, see QSystem.sync.
"""

import logging
import numpy as np
from scipy import sparse

from .operations import Bit, Op, OpTag, OperationQueue
from .backend import KronBackend
from .._gates.gates import Gates, standard_gates
from .._gates.factories import cut
from .._utility.sampler import RandomSampler
from .._utility.parameters import SimulatorParameters, default_parameters


logger = logging.getLogger(__name__)

_states = {"pure": "pure", "mixed": "mixed", "mix": "mixed"}


def _check_state(state: str) -> str:
    if state not in _states:
        raise ValueError(f"Argument 'state' must be \"pure\" or \"mixed\", not {state!r}.")
    return _states[state]


def _basis_state(nqbits: int, state: str) -> sparse.csc_matrix:
    """ The state |0...0> as column vector or as density matrix. """
    dim = 1 << nqbits
    shape = (dim, dim) if state == "mixed" else (dim, 1)
    return sparse.csc_matrix(([1.0 + 0J], ([0], [0])), shape=shape)


class QSystem(object):
    """Register of qubits with lazy evolution, measurements, error channels and ancillas.

    Args:
        nqbits (int): Number of qubits, at least 1.
        seed (int): Seed of the random sampler, used when no sampler is given.
        gate (Gates): Gate catalog. It is referenced, not copied.
        state (str): Representation of the state, "pure" or "mixed".
        sampler: Source of uniform samples in [0, 1), an object with a sample() method.
        parameters (SimulatorParameters): Numerical tolerances and formatting options.

    Example:
        .. code:: python

            from quantum_register.systems import QSystem

            system = QSystem(2, seed=42)
            system.evol('H', 0)
            system.cnot(1, [0])
            system.measure_all()  # Gives [0, 0] or [1, 1]

    Attributes:
        gate (Gates): Gate catalog.
        size (int): Number of primary qubits.
        an_size (int): Number of ancillas.
        state (str): Current representation, "pure" or "mixed".
        qbits (scipy.sparse.csc_matrix): The state, only up to date when the system is synced.
        ops (OperationQueue): Pending operations of the primary qubits followed by the ancillas.
        syncc (bool): Whether the queue is empty.
        bits (list[Bit]): Classical bits of the primary qubits.
        an_bits (list[Bit]): Classical bits of the ancillas.
    """

    def __init__(self,
                 nqbits: int,
                 seed: int=42,
                 gate: Gates=standard_gates,
                 state: str="pure",
                 sampler=None,
                 parameters: SimulatorParameters=None):
        state = _check_state(state)
        if nqbits < 1:
            raise ValueError(f"Argument 'nqbits' must be greater than 0, not {nqbits}.")
        self._setup(nqbits, seed, gate, state, sampler, parameters)
        self.qbits = _basis_state(nqbits, state)

    @classmethod
    def from_file(cls,
                  path: str,
                  seed: int=42,
                  gate: Gates=standard_gates,
                  sampler=None,
                  parameters: SimulatorParameters=None):
        """Loads a state stored with QSystem.save.

        The number of qubits is inferred from the number of rows, the representation from the number of columns.
        """
        qbits = sparse.load_npz(path).tocsc().astype(complex)
        rows, cols = qbits.shape
        if rows < 2 or rows & (rows - 1):
            raise ValueError(f"The state stored at {path} has {rows} rows, expected a power of two.")
        if cols not in (1, rows):
            raise ValueError(f"The state stored at {path} has shape {qbits.shape}, expected a vector or a square matrix.")
        system = cls.__new__(cls)
        system._setup(rows.bit_length() - 1, seed, gate, "mixed" if cols > 1 else "pure", sampler, parameters)
        system.qbits = qbits
        return system

    def _setup(self, nqbits, seed, gate, state, sampler, parameters):
        self.gate = gate
        self.size = nqbits
        self.state = state
        self.ops = OperationQueue(nqbits)
        self.syncc = True
        self.bits = [Bit.NONE] * nqbits
        self.an_size = 0
        self.an_bits = []
        self.sampler = sampler if sampler is not None else RandomSampler(seed)
        self.parameters = parameters if parameters is not None else default_parameters
        self.backend = KronBackend(gate)

    # Evolution

    def evol(self, gate: str, qbit: int, qend: int=None):
        """Applies the single qubit gate on qubit qbit, or on every qubit in [qbit, qend).

        Consecutive single qubit gates on the same qubit are fused and applied with one multiplication.
        """
        self.gate.get(gate)
        if qend is None:
            self._check_qbit(qbit)
            self._evol(gate, qbit)
        else:
            self._check_range(qbit, qend, self.size)
            for i in range(qbit, qend):
                self._evol(gate, i)

    def evol_string(self, gates: str):
        """ Applies gates[i] on qubit i for all primary qubits, 'I' leaves the qubit untouched. """
        if len(gates) != self.size:
            raise ValueError(f"Argument 'gates' must have one gate per qubit ({self.size}), but found {len(gates)}.")
        for g in gates:
            self.gate.get(g)
        for qbit, g in enumerate(gates):
            if g != 'I':
                self._evol(g, qbit)

    def evol_named(self, name: str, qbit: int):
        """ Applies the named gate of the catalog on the window starting at qbit. """
        size_n = self.gate.gate_size(name)
        self._check_qbit(qbit)
        if qbit + size_n > self.size + self.an_size:
            raise IndexError(f"Gate {name!r} acts on {size_n} qubits and does not fit when starting at qubit {qbit}.")
        self._fill(Op(OpTag.GATE_N, name, size_n), qbit)

    def cnot(self, target: int, control):
        """Applies X on the target when all the control qubits are 1.

        Indices are global: ancillas follow the primary qubits. Any number of controls is allowed.
        """
        control = self._check_controlled(target, control)
        size_n, minq, target, control = cut(target, control)
        self._fill(Op(OpTag.CNOT, (target, control), size_n), minq)

    def cphase(self, phase: float, target: int, control):
        """ Multiplies by exp(i phase) the basis states in which the target and all the control qubits are 1. """
        control = self._check_controlled(target, control)
        size_n, minq, target, control = cut(target, control)
        self._fill(Op(OpTag.CPHASE, (float(phase), target, control), size_n), minq)

    def swap(self, qbit_a: int, qbit_b: int):
        """ Exchanges two qubits, indices are global. """
        self._check_global(qbit_a, "qbit_a")
        self._check_global(qbit_b, "qbit_b")
        if qbit_a == qbit_b:
            raise ValueError(f"Arguments 'qbit_a' and 'qbit_b' must differ, but both are {qbit_a}.")
        lo, hi = min(qbit_a, qbit_b), max(qbit_a, qbit_b)
        self._fill(Op(OpTag.SWAP, None, hi - lo + 1), lo)

    def qft(self, qbegin: int, qend: int, inverse: bool=False):
        """ Applies the quantum Fourier transform on the qubits [qbegin, qend), indices are global. """
        self._check_range(qbegin, qend, self.size + self.an_size)
        self._fill(Op(OpTag.QFT, bool(inverse), qend - qbegin), qbegin)

    def _evol(self, gate: str, qbit: int):
        if not self.ops.fuse(qbit, gate):
            self.sync()
            self.ops.fuse(qbit, gate)
        self._set_bit(qbit, Bit.NONE)
        self.syncc = False

    def _fill(self, op: Op, qbit: int):
        if self.ops.is_busy(qbit, qbit + op.size):
            self.sync()
        self.ops.put(qbit, op)
        for i in range(qbit, qbit + op.size):
            self._set_bit(i, Bit.NONE)
        self.syncc = False

    # Synchronization

    @property
    def is_synced(self) -> bool:
        return self.syncc

    def sync(self):
        """Applies all the pending operations with a single multiplication.

        The queue is compiled into one propagator, the Kronecker product of the window operators and of identities on
        the idle qubits. Calling sync on an empty queue does nothing.
        """
        if self.syncc:
            return
        blocks = self.backend.blocks(self.ops.heads())
        if blocks:
            U = self.backend.propagator(blocks)
            self.qbits = self.backend.evolve(U, self.qbits, self.state)
            self._prune()
            logger.debug("Synced %d blocks, state has %d nonzeros.", len(blocks), self.qbits.nnz)
        self.ops.clear()
        self.syncc = True

    def _prune(self):
        tol = self.parameters.prune_tolerance
        if tol > 0:
            self.qbits.data[np.abs(self.qbits.data) < tol] = 0
            self.qbits.eliminate_zeros()

    # Measurement

    def measure(self, qbit: int, qend: int=None):
        """Measures qubit qbit, or the qubits in [qbit, qend) one after the other.

        Returns:
            The outcome (int) of qbit, or the list of outcomes of the range.
        """
        if qend is None:
            self._check_qbit(qbit)
            return self._measure(qbit)
        self._check_range(qbit, qend, self.size)
        return [self._measure(i) for i in range(qbit, qend)]

    def measure_all(self) -> list:
        return [self._measure(i) for i in range(self.size)]

    def _measure(self, qbit: int) -> int:
        self.sync()
        p1 = self._probability_one(qbit)
        outcome = 1 if self.sampler.sample() < p1 else 0
        self._collapse(qbit, outcome)
        self._set_bit(qbit, Bit(outcome))
        return outcome

    def _shift(self, qbit: int) -> int:
        return self.size + self.an_size - qbit - 1

    def _probability_one(self, qbit: int) -> float:
        shift = self._shift(qbit)
        coo = self.qbits.tocoo()
        ones = ((coo.row >> shift) & 1) == 1
        if self.state == "pure":
            p1 = float(np.sum(np.abs(coo.data[ones])**2))
        else:
            p1 = float(np.sum(coo.data[ones & (coo.row == coo.col)].real))
        tol = self.parameters.probability_tolerance
        if p1 < tol:
            return 0.0
        if p1 > 1 - tol:
            return 1.0
        return p1

    def _collapse(self, qbit: int, outcome: int):
        shift = self._shift(qbit)
        coo = self.qbits.tocoo()
        keep = ((coo.row >> shift) & 1) == outcome
        if self.state == "mixed":
            keep &= ((coo.col >> shift) & 1) == outcome
        qbits = sparse.csc_matrix((coo.data[keep], (coo.row[keep], coo.col[keep])), shape=self.qbits.shape)
        self.qbits = self._normalize(qbits)

    def _normalize(self, qbits) -> sparse.csc_matrix:
        if self.state == "pure":
            norm = np.sqrt(np.sum(np.abs(qbits.data)**2))
        else:
            norm = qbits.diagonal().real.sum()
        if norm <= 0:
            raise RuntimeError("The state vanished, it can not be normalized.")
        return (qbits / norm).tocsc()

    # Error channels

    def flip(self, gate: str, qbit: int, p: float):
        """ Applies the single qubit gate on qbit with probability p. """
        self.gate.get(gate)
        self._check_qbit(qbit)
        self._check_probability(p)
        if self.sampler.sample() < p:
            self._evol(gate, qbit)

    def amp_damping(self, qbit: int, p: float):
        """Relaxes qbit towards |0> with probability p.

        The jump operator is chosen with probability p times the population of |1>, otherwise the no-jump operator is
        applied. Both are not unitary, so the state is renormalized and the channel is applied immediately.
        """
        self._check_qbit(qbit)
        self._check_probability(p)
        self.sync()
        p1 = self._probability_one(qbit)
        if self.sampler.sample() < p * p1:
            kraus = np.array([[0, 1], [0, 0]])
        else:
            kraus = np.array([[1, 0], [0, np.sqrt(1 - p)]])
        K = self.backend.embed(kraus, qbit, self.size + self.an_size)
        self.qbits = self._normalize(self.backend.evolve(K, self.qbits, self.state))
        self._set_bit(qbit, Bit.NONE)

    def dpl_channel(self, qbit: int, p: float):
        """ With probability p, applies X, Y or Z on qbit, each with the same probability. """
        self._check_qbit(qbit)
        self._check_probability(p)
        if self.sampler.sample() < p:
            gate = "XYZ"[min(int(self.sampler.sample() * 3), 2)]
            self._evol(gate, qbit)

    # Ancillas

    def add_ancillas(self, an_num: int):
        """ Appends an_num ancillas in the state |0...0> after the existing qubits. """
        if an_num < 1:
            raise ValueError(f"Argument 'an_num' must be greater than 0, not {an_num}.")
        self.sync()
        self.qbits = sparse.kron(self.qbits, _basis_state(an_num, self.state), format="csc")
        self.an_size += an_num
        self.an_bits.extend([Bit.NONE] * an_num)
        self.ops.add_ancillas(an_num)
        logger.debug("Added %d ancillas, the system has %d qubits.", an_num, self.size + self.an_size)

    def rm_ancillas(self):
        """Removes all the ancillas with a partial trace, starting from the last one.

        In a pure state, an ancilla that was not measured is measured first, as tracing out a superposition would
        leave a mixed state.
        """
        if self.an_size == 0:
            raise RuntimeError("There are no ancillas on the system.")
        self.sync()
        while self.an_size:
            if self.state == "pure":
                if self.an_bits[-1] is Bit.NONE:
                    logger.debug("Measuring ancilla %d before removing it.", self.an_size - 1)
                    self._measure(self.size + self.an_size - 1)
                self.qbits = self._trace_pure()
            else:
                self.qbits = self._trace_mixed()
            self.an_size -= 1
            self.an_bits.pop()
        self.ops.rm_ancillas()
        logger.debug("Removed the ancillas, the system has %d qubits.", self.size)

    def _trace_pure(self) -> sparse.csc_matrix:
        coo = self.qbits.tocoo()
        dim = self.qbits.shape[0] >> 1
        return sparse.csc_matrix((coo.data, (coo.row >> 1, coo.col)), shape=(dim, 1))

    def _trace_mixed(self) -> sparse.csc_matrix:
        coo = self.qbits.tocoo()
        dim = self.qbits.shape[0] >> 1
        keep = (coo.row & 1) == (coo.col & 1)
        return sparse.csc_matrix(
            (coo.data[keep], (coo.row[keep] >> 1, coo.col[keep] >> 1)), shape=(dim, dim)
        )

    def an_evol(self, gate: str, qbit: int, qend: int=None):
        """ Same as evol, with qbit indexing the ancillas. """
        self.gate.get(gate)
        if qend is None:
            self._check_an_qbit(qbit)
            self._evol(gate, self.size + qbit)
        else:
            self._check_range(qbit, qend, self.an_size)
            for i in range(qbit, qend):
                self._evol(gate, self.size + i)

    def an_measure(self, qbit: int, qend: int=None):
        """ Same as measure, with qbit indexing the ancillas. """
        if qend is None:
            self._check_an_qbit(qbit)
            return self._measure(self.size + qbit)
        self._check_range(qbit, qend, self.an_size)
        return [self._measure(self.size + i) for i in range(qbit, qend)]

    # Utility

    def get_size(self) -> int:
        return self.size

    def get_an_size(self) -> int:
        return self.an_size

    def get_bits(self) -> list:
        self.sync()
        return list(self.bits)

    def get_an_bits(self) -> list:
        self.sync()
        return list(self.an_bits)

    def get_state(self) -> str:
        self.sync()
        return self.state

    def change_to(self, state: str):
        """Changes the representation of the state.

        A pure state becomes the projector on it. A mixed state becomes the vector of the square roots of its
        diagonal, the relative phases are lost.
        """
        state = _check_state(state)
        if state == self.state:
            return
        self.sync()
        if state == "mixed":
            self.qbits = (self.qbits @ self.qbits.conj().T).tocsc()
        else:
            amplitudes = np.sqrt(np.clip(self.qbits.diagonal().real, 0, None))
            self.qbits = sparse.csc_matrix(amplitudes.reshape(-1, 1), dtype=complex)
        self.state = state
        logger.debug("Changed the representation to %s.", state)

    def get_qbits(self) -> tuple:
        """Exports the state in compressed sparse column format.

        Returns:
            Tuple ((values, row_indices, col_ptrs), (n_rows, n_cols)) of python lists and ints.
        """
        self.sync()
        qbits = self.qbits.tocsc()
        qbits.sort_indices()
        csc = (
            [complex(v) for v in qbits.data],
            [int(i) for i in qbits.indices],
            [int(i) for i in qbits.indptr],
        )
        return csc, (int(qbits.shape[0]), int(qbits.shape[1]))

    def set_qbits(self, row_ind, col_ptr, values, nqbits: int, state: str):
        """Replaces the state by a state given in compressed sparse column format.

        Pending operations are discarded and the classical bits are reset.
        """
        state = _check_state(state)
        if self.an_size:
            raise RuntimeError("The state can not be replaced while there are ancillas on the system.")
        if nqbits < 1:
            raise ValueError(f"Argument 'nqbits' must be greater than 0, not {nqbits}.")
        dim = 1 << nqbits
        shape = (dim, dim) if state == "mixed" else (dim, 1)
        qbits = sparse.csc_matrix(
            (np.asarray(values, dtype=complex), np.asarray(row_ind), np.asarray(col_ptr)), shape=shape
        )
        self.qbits = qbits
        self.state = state
        self.size = nqbits
        self.ops = OperationQueue(nqbits)
        self.syncc = True
        self.bits = [Bit.NONE] * nqbits

    def save(self, path: str):
        """ Stores the synced state at path with scipy.sparse.save_npz, which appends '.npz' if missing. """
        self.sync()
        sparse.save_npz(path, self.qbits)

    def print_state(self):
        print(self)

    def __str__(self):
        self.sync()
        coo = self.qbits.tocoo()
        lines = []
        if self.state == "pure":
            for i in np.argsort(coo.row, kind="stable"):
                if abs(coo.data[i]) < self.parameters.print_tolerance:
                    continue
                lines.append(self._cx_to_str(coo.data[i]) + self._to_bits(int(coo.row[i])))
        else:
            for i in np.lexsort((coo.col, coo.row)):
                lines.append(f"({coo.row[i]}, {coo.col[i]})    {self._cx_to_str(coo.data[i])}")
        return "\n".join(lines) + "\n"

    def _to_bits(self, index: int) -> str:
        label = format(index, f"0{self.size + self.an_size}b")
        if self.an_size == 0:
            return f"|{label}>"
        return f"|{label[:self.size]}>|{label[self.size:]}>"

    def _cx_to_str(self, value: complex) -> str:
        p = self.parameters.precision
        tol = self.parameters.print_tolerance
        width = 2 * (p + 3) + 1
        if abs(value.imag) < tol:
            text = f"{value.real:+.{p}f}"
        elif abs(value.real) < tol:
            text = f"{value.imag:+.{p}f}i"
        else:
            text = f"{value.real:+.{p}f}{value.imag:+.{p}f}i"
        return text.ljust(width)

    # Validation

    def _check_qbit(self, qbit: int, name: str="qbit"):
        if not 0 <= qbit < self.size:
            raise IndexError(f"Argument '{name}' must be in range [0, {self.size - 1}], not {qbit}.")

    def _check_an_qbit(self, qbit: int, name: str="qbit"):
        if self.an_size == 0:
            raise IndexError("There are no ancillas on the system.")
        if not 0 <= qbit < self.an_size:
            raise IndexError(f"Argument '{name}' must be in range [0, {self.an_size - 1}], not {qbit}.")

    def _check_global(self, qbit: int, name: str):
        total = self.size + self.an_size
        if not 0 <= qbit < total:
            raise IndexError(f"Argument '{name}' must be in range [0, {total - 1}], not {qbit}.")

    def _check_range(self, qbegin: int, qend: int, limit: int):
        if not 0 <= qbegin < qend <= limit:
            raise IndexError(f"Range [{qbegin}, {qend}) must be a non empty range within [0, {limit}).")

    def _check_controlled(self, target: int, control) -> tuple:
        control = tuple(control)
        self._check_global(target, "target")
        for c in control:
            self._check_global(c, "control")
        if target in control:
            raise ValueError(f"Argument 'target' ({target}) can not be one of the controls {list(control)}.")
        if len(set(control)) != len(control):
            raise ValueError(f"Argument 'control' contains duplicate indices {list(control)}.")
        return control

    @staticmethod
    def _check_probability(p: float):
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"Argument 'p' must be a probability in [0, 1], not {p}.")

    def _set_bit(self, qbit: int, value: Bit):
        if qbit < self.size:
            self.bits[qbit] = value
        else:
            self.an_bits[qbit - self.size] = value
