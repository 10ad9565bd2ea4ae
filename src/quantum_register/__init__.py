from .gates import Gates, standard_gates
from .operators import cut, CNOTFactory, CPhaseFactory, SwapFactory, QFTFactory
from .systems import QSystem, Bit, Op, OpTag, OperationQueue, KronBackend
from .quantum_algorithms import ghz_circ, qft_circ, ghz, qft_decomposed, run_circuit
from .utilities import SimulatorParameters, default_parameters, RandomSampler, SequenceSampler


__all__ = ["Gates", "standard_gates"]
__all__ += ["cut", "CNOTFactory", "CPhaseFactory", "SwapFactory", "QFTFactory"]
__all__ += ["QSystem", "Bit", "Op", "OpTag", "OperationQueue", "KronBackend"]
__all__ += ["ghz_circ", "qft_circ", "ghz", "qft_decomposed", "run_circuit"]
__all__ += ["SimulatorParameters", "default_parameters", "RandomSampler", "SequenceSampler"]
