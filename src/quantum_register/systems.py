""" The quantum system and its building blocks.

Attributes:
    QSystem: Register of qubits in a pure or mixed state, with lazy evolution, measurement, error channels and
        ancillas.
    OperationQueue: Pending operations of a system, one slot per qubit.
    KronBackend: Compiles the pending operations into a single sparse propagator.
"""

from ._simulation.system import QSystem
from ._simulation.operations import Bit, Op, OpTag, OperationQueue
from ._simulation.backend import KronBackend
