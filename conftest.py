""" Puts the repository root on the path, such that the tests can import src.quantum_register and tests.helpers. """
