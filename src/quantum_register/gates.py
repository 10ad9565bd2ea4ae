""" The gate catalog of the simulator.

Single qubit gates are addressed by one character: I, X, Y, Z, H, S, T and the adjoints s and t. Named gates of any
number of qubits can be registered with Gates.make_gate or loaded from a file with Gates.load_gate.

Attributes:
    standard_gates (Gates): Catalog with the single qubit gates and the named gates CNOT, CZ and SWAP.
"""

from ._gates.gates import Gates, standard_gates
