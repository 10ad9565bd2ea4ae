"""Perform the classical computation of the pending operations.

The backend turns one pass over the operation queue into a single sparse propagator. Idle qubits are grouped into
identity blocks, such that the Kronecker product only has as many factors as there are windows, and the state is
multiplied once per synchronization instead of once per gate.
"""

import functools as ft
from scipy import sparse

from .operations import Op, OpTag
from .._gates.gates import Gates
from .._gates.factories import CNOTFactory, CPhaseFactory, SwapFactory, QFTFactory


def identity(nqubit: int) -> sparse.csc_matrix:
    return sparse.identity(1 << nqubit, dtype=complex, format="csc")


def _kron(a, b):
    return sparse.kron(a, b, format="csc")


class KronBackend(object):
    """Builds the operators of pending operations and embeds them in the register.

    Args:
        gates (Gates): Catalog used to resolve single and named gates.

    Example:
        .. code:: python

            from quantum_register.gates import standard_gates
            from quantum_register.systems import KronBackend

            backend = KronBackend(standard_gates)
            U = backend.embed(standard_gates.get('X'), 1, 2)  # X on qubit 1 of 2
    """

    def __init__(self, gates: Gates):
        self.gates = gates
        self.cnot_c = CNOTFactory()
        self.cphase_c = CPhaseFactory()
        self.swap_c = SwapFactory()
        self.qft_c = QFTFactory()

    def get_gate(self, op: Op) -> sparse.csc_matrix:
        """ Returns the operator of op on its window. """
        if op.tag is OpTag.NONE:
            return self.gates.get('I')
        if op.tag is OpTag.GATE_1:
            # Later gates act after the earlier ones.
            return ft.reduce(lambda u, g: self.gates.get(g) @ u, op.data[1:], self.gates.get(op.data[0]))
        if op.tag is OpTag.GATE_N:
            return self.gates.cget(op.data)
        if op.tag is OpTag.CNOT:
            target, control = op.data
            return self.cnot_c.construct(target, control, op.size)
        if op.tag is OpTag.CPHASE:
            phase, target, control = op.data
            return self.cphase_c.construct(phase, target, control, op.size)
        if op.tag is OpTag.SWAP:
            return self.swap_c.construct(op.size)
        if op.tag is OpTag.QFT:
            return self.qft_c.construct(op.size, inverse=op.data)
        raise ValueError(f"Unknown operation tag {op.tag}.")

    def blocks(self, heads) -> list:
        """Groups the queue into Kronecker factors.

        Args:
            heads (Iterable[tuple]): Pairs (qbit, op) as produced by OperationQueue.heads(), op is None for idle slots.

        Returns:
            List of sparse matrices, consecutive idle slots merged into one identity. Empty if all slots are idle.
        """
        result = []
        idle = 0
        busy = False
        for _, op in heads:
            if op is None:
                idle += 1
                continue
            if idle:
                result.append(identity(idle))
                idle = 0
            result.append(self.get_gate(op))
            busy = True
        if not busy:
            return []
        if idle:
            result.append(identity(idle))
        return result

    def propagator(self, blocks: list) -> sparse.csc_matrix:
        """ Kronecker product of the blocks, the first block acting on the most significant qubits. """
        return ft.reduce(_kron, blocks)

    def embed(self, gate, qbit: int, nqubit: int) -> sparse.csc_matrix:
        """ Embeds a window operator starting at qbit into a register of nqubit qubits. """
        span = int(gate.shape[0]).bit_length() - 1
        blocks = []
        if qbit:
            blocks.append(identity(qbit))
        blocks.append(sparse.csc_matrix(gate, dtype=complex))
        if nqubit - qbit - span:
            blocks.append(identity(nqubit - qbit - span))
        return self.propagator(blocks)

    def evolve(self, U, qbits, state: str) -> sparse.csc_matrix:
        """Applies the propagator to the state.

        Args:
            U (sparse matrix): Propagator on the full register.
            qbits (sparse matrix): State vector (pure) or density matrix (mixed).
            state (str): Representation, "pure" or "mixed".

        Returns:
            The propagated state.
        """
        if state == "pure":
            return (U @ qbits).tocsc()
        return (U @ qbits @ U.conj().T).tocsc()
