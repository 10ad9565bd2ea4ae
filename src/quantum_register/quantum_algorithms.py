from ._utility.quantum_algorithms import ghz_circ, qft_circ, ghz, qft_decomposed, run_circuit
