from ._utility.parameters import SimulatorParameters, default_parameters
from ._utility.sampler import RandomSampler, SequenceSampler
