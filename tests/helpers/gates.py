"""
Helper functions and variable definitions for the unit tests.
"""

import numpy as np


""" Gates """

identity = np.eye(2)
X = np.array(
    [[0,1],
     [1,0]]
)

Y = np.array(
    [[0,-1j],
     [1j,0]]
)

Z = np.array(
    [[1,0],
     [0,-1]]
)

H = np.array(
    [[1,1],
     [1,-1]]
) / np.sqrt(2)

single_qubit_gates = {'I': identity, 'X': X, 'Y': Y, 'Z': Z, 'H': H}

CNOT = np.array(
    [[1, 0, 0, 0],
     [0, 1, 0, 0],
     [0, 0, 0, 1],
     [0, 0, 1, 0]]
)

SWAP = np.array(
    [[1, 0, 0, 0],
     [0, 0, 1, 0],
     [0, 1, 0, 0],
     [0, 0, 0, 1]]
)

TOFFOLI = np.eye(8)
TOFFOLI[[6, 7]] = TOFFOLI[[7, 6]]
