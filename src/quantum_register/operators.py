""" Factories for the composite gates, built on the minimal window of qubits they touch.
"""

from ._gates.factories import cut, CNOTFactory, CPhaseFactory, SwapFactory, QFTFactory
