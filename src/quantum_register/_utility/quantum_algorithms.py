import numpy as np

from qiskit import QuantumCircuit


def ghz_circ(n_qubits: int, measure: bool=True):
    """ Generates the GHZ circuit for n qubits.

    The circuit first applies a Hadamard on the first qubit, and then applies CNOT gates with qubit 0 as control and
    qubit j as target, j = 1, ..., n_qubits - 1.

    Args:
        n_qubits (int): Number of qubits.
        measure (bool): Whether all the qubits are measured at the end.

    Returns:
        The Qiskit circuit.
    """

    ghz = QuantumCircuit(n_qubits, n_qubits)

    ghz.h(0)
    for j in range(1, n_qubits):
        ghz.cx(0, j)
    if measure:
        ghz.barrier(range(n_qubits))
        ghz.measure(range(n_qubits), range(n_qubits))

    return ghz


def qft_circ(n_qubits: int, measure: bool=True):
    """ Generates the Quantum Fourier Transform circuit decomposed in Hadamard, controlled phase and swap gates.

    Qubit 0 is taken as the most significant qubit, such that running the circuit with run_circuit gives the same
    result as QSystem.qft(0, n_qubits).

    Args:
        n_qubits (int): Number of qubits.
        measure (bool): Whether all the qubits are measured at the end.

    Returns:
        The Qiskit circuit.
    """

    qft = QuantumCircuit(n_qubits, n_qubits)

    for j in range(n_qubits):
        qft.h(j)
        for k in range(j + 1, n_qubits):
            qft.cp(np.pi/2**(k - j), k, j)
    for j in range(n_qubits//2):
        qft.swap(j, n_qubits - j - 1)

    if measure:
        qft.barrier(range(n_qubits))
        qft.measure(range(n_qubits), range(n_qubits))

    return qft


def ghz(system, qbegin: int, qend: int):
    """ Prepares the GHZ state on the qubits [qbegin, qend) of the system, which are expected in |0...0>. """
    system.evol('H', qbegin)
    for j in range(qbegin + 1, qend):
        system.cnot(j, [qbegin])


def qft_decomposed(system, qbegin: int, qend: int):
    """ Applies the quantum Fourier transform on [qbegin, qend) gate by gate instead of as a single operator. """
    for j in range(qbegin, qend):
        system.evol('H', j)
        for k in range(j + 1, qend):
            system.cphase(np.pi/2**(k - j), j, [k])
    for j in range((qend - qbegin)//2):
        system.swap(qbegin + j, qend - j - 1)


_single_qubit_gates = {
    "id": 'I',
    "x": 'X',
    "y": 'Y',
    "z": 'Z',
    "h": 'H',
    "s": 'S',
    "sdg": 's',
    "t": 'T',
    "tdg": 't',
}

_supported_instructions = set(_single_qubit_gates) | {"cx", "ccx", "mcx", "cz", "cp", "swap", "measure", "barrier"}


def run_circuit(circ: QuantumCircuit, system) -> list:
    """Executes a Qiskit circuit on a quantum system.

    Qubit i of the circuit is qubit i of the system. The supported instructions are id, x, y, z, h, s, sdg, t, tdg,
    cx, ccx, mcx, cz, cp, swap, measure and barrier.

    Args:
        circ (QuantumCircuit): Circuit to execute.
        system (QSystem): System on which the circuit is applied.

    Returns:
        List with the classical bits of the circuit after the execution, unmeasured bits are 0.
    """
    if circ.num_qubits > system.get_size():
        raise ValueError(
            f"The circuit has {circ.num_qubits} qubits, but the system only has {system.get_size()}."
        )
    for instruction in circ.data:
        if instruction.operation.name not in _supported_instructions:
            raise ValueError(f"Instruction {instruction.operation.name!r} is not supported by run_circuit.")

    clbits = [0] * circ.num_clbits
    for instruction in circ.data:
        name = instruction.operation.name
        qubits = [circ.find_bit(q).index for q in instruction.qubits]

        if name in _single_qubit_gates:
            system.evol(_single_qubit_gates[name], qubits[0])
        elif name in ("cx", "ccx", "mcx"):
            system.cnot(qubits[-1], qubits[:-1])
        elif name == "cz":
            system.cphase(np.pi, qubits[-1], qubits[:-1])
        elif name == "cp":
            system.cphase(float(instruction.operation.params[0]), qubits[-1], qubits[:-1])
        elif name == "swap":
            system.swap(qubits[0], qubits[1])
        elif name == "measure":
            clbits[circ.find_bit(instruction.clbits[0]).index] = system.measure(qubits[0])
        # barrier is a no-op

    return clbits
