"""
Pending operations of a quantum system.

Gates are not applied to the state when they are requested. Instead, each qubit owns a slot in the OperationQueue,
and the operation waits there until the next synchronization compiles the queue into a single operator. A multi-qubit
operation is stored in the slot of its first qubit and marks the other qubits of its window as covered.
"""

from enum import Enum, IntEnum


class Bit(IntEnum):
    """ Classical bit obtained by measuring a qubit. NONE means that the qubit was not measured. """
    NONE = -1
    ZERO = 0
    ONE = 1


class OpTag(Enum):
    NONE = "none"
    GATE_1 = "gate_1"
    GATE_N = "gate_n"
    CNOT = "cnot"
    CPHASE = "cphase"
    SWAP = "swap"
    QFT = "qft"


class Op(object):
    """Pending operation of one slot.

    Args:
        tag (OpTag): Kind of the operation.
        data: Payload, depends on the tag.
        size (int): Number of qubits of the window starting at this slot. Covered slots have size 0.

    Note:
        The payload for each tag:

        - GATE_1: string of gate characters in the order of application.
        - GATE_N: name of the gate in the catalog.
        - CNOT: tuple (target, control) relative to the window.
        - CPHASE: tuple (phase, target, control) relative to the window.
        - SWAP: None, the first and last qubit of the window are swapped.
        - QFT: bool, whether the inverse transform is applied.
    """

    __slots__ = ("tag", "data", "size")

    def __init__(self, tag: OpTag=OpTag.NONE, data=None, size: int=1):
        self.tag = tag
        self.data = data
        self.size = size

    @property
    def is_none(self) -> bool:
        return self.tag is OpTag.NONE

    @property
    def is_covered(self) -> bool:
        return self.size == 0

    def __repr__(self):
        return f"Op({self.tag.name}, {self.data!r}, size={self.size})"


class OperationQueue(object):
    """Contiguous slots for the primary qubits followed by the ancillas.

    Keeping both regions in one list lets a window that starts on a primary qubit continue on the ancillas.

    Args:
        size (int): Number of primary qubits.
    """

    def __init__(self, size: int):
        self.size = size
        self.ops = [Op() for _ in range(size)]

    def __len__(self):
        return len(self.ops)

    def __getitem__(self, qbit: int) -> Op:
        return self.ops[qbit]

    @property
    def an_ops(self) -> list:
        return self.ops[self.size:]

    def is_empty(self) -> bool:
        return all(op.is_none for op in self.ops)

    def is_busy(self, qbegin: int, qend: int) -> bool:
        """ Whether any slot in [qbegin, qend) holds an operation. """
        return any(not op.is_none for op in self.ops[qbegin:qend])

    def put(self, qbit: int, op: Op):
        """ Stores op at slot qbit and covers the rest of its window. """
        self.ops[qbit] = op
        for i in range(qbit + 1, qbit + op.size):
            self.ops[i] = Op(op.tag, None, 0)

    def fuse(self, qbit: int, gate: str) -> bool:
        """Appends a single qubit gate to the pending single qubit gates of slot qbit.

        Returns:
            True if the slot was free or already held single qubit gates, False otherwise.
        """
        op = self.ops[qbit]
        if op.is_none:
            self.ops[qbit] = Op(OpTag.GATE_1, gate)
            return True
        if op.tag is OpTag.GATE_1 and not op.is_covered:
            op.data += gate
            return True
        return False

    def heads(self):
        """ Yields (qbit, op) for every non trivial operation and (qbit, None) for every idle slot. """
        i = 0
        while i < len(self.ops):
            op = self.ops[i]
            if op.is_none:
                yield i, None
                i += 1
            else:
                yield i, op
                i += op.size

    def clear(self):
        self.ops = [Op() for _ in self.ops]

    def add_ancillas(self, an_num: int):
        self.ops.extend(Op() for _ in range(an_num))

    def rm_ancillas(self):
        del self.ops[self.size:]
