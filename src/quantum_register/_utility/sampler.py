"""
Sources of uniform samples in [0, 1) for the measurements and the error channels.

A quantum system draws all of its random numbers from one sampler, such that fixing the seed at construction makes
a run reproducible. The SequenceSampler replays given values and is meant for tests.
"""

import numpy as np


class RandomSampler(object):
    """ Uniform samples from numpy's default generator. """

    def __init__(self, seed: int=None):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def sample(self) -> float:
        return float(self.rng.random())


class SequenceSampler(object):
    """Replays a fixed sequence of samples, starting over when it is exhausted.

    Args:
        values (Iterable[float]): Samples in [0, 1).
    """

    def __init__(self, values):
        self.values = [float(v) for v in values]
        if not self.values:
            raise ValueError("SequenceSampler expected at least one value.")
        if any(v < 0.0 or v >= 1.0 for v in self.values):
            raise ValueError(f"SequenceSampler expected values in [0, 1) but found {self.values}.")
        self.i = 0

    def sample(self) -> float:
        value = self.values[self.i % len(self.values)]
        self.i += 1
        return value
