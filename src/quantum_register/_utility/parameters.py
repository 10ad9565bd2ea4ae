"""
Class for loading, storing, validating and passing the numerical parameters of the simulator.
"""

import os
import json


class SimulatorParameters(object):
    """Numerical tolerances and formatting options of a quantum system. Can load and save the values.

    Args:
        print_tolerance (float): Amplitudes with smaller magnitude are hidden when printing a pure state.
        prune_tolerance (float): Entries with smaller magnitude are dropped from the state after a synchronization.
        probability_tolerance (float): Outcome probabilities this close to 0 or 1 are treated as exact.
        precision (int): Number of decimals when printing amplitudes.

    Attributes:
        print_tolerance (float): Amplitudes with smaller magnitude are hidden when printing a pure state.
        prune_tolerance (float): Entries with smaller magnitude are dropped from the state after a synchronization.
        probability_tolerance (float): Outcome probabilities this close to 0 or 1 are treated as exact.
        precision (int): Number of decimals when printing amplitudes.
    """

    # Filename when storing the data in a json file
    f_json = "simulator_parameters.json"

    def __init__(self,
                 print_tolerance: float=1e-14,
                 prune_tolerance: float=1e-14,
                 probability_tolerance: float=1e-12,
                 precision: int=3):
        self.print_tolerance = print_tolerance
        self.prune_tolerance = prune_tolerance
        self.probability_tolerance = probability_tolerance
        self.precision = precision
        self._names = ["print_tolerance", "prune_tolerance", "probability_tolerance", "precision"]

    def load_from_json(self, location: str):
        """ Load the parameters from the json file in the directory location.
        """
        # Verify that it exists
        self._json_exists_at_location(location)

        # Load
        with open(os.path.join(location, self.f_json), "r") as f:
            data_dict = json.load(f)

        # Check json keys
        if any((name not in data_dict for name in self._names)):
            raise Exception("Loading of simulator parameters from json not successful: At least one quantity is missing.")

        self.print_tolerance = float(data_dict["print_tolerance"])
        self.prune_tolerance = float(data_dict["prune_tolerance"])
        self.probability_tolerance = float(data_dict["probability_tolerance"])
        self.precision = int(data_dict["precision"])

        # Verify
        if not self.is_complete():
            raise Exception("Loading of simulator parameters from json was not successful: Did not pass verification.")

    def save_to_json(self, location: str):
        """ Save the parameters to a json file in the directory location, creating the directory if needed.
        """
        if not self.is_complete():
            raise Exception("Saving of simulator parameters was not successful: Did not pass verification.")
        os.makedirs(location, exist_ok=True)
        with open(os.path.join(location, self.f_json), "w") as f:
            json.dump(dict(zip(self._names, self.get_as_tuple())), f, indent=4)

    def get_as_tuple(self) -> tuple:
        return self.print_tolerance, self.prune_tolerance, self.probability_tolerance, self.precision

    def is_complete(self) -> bool:
        """ Returns whether all the values are present and in their valid range. """
        tolerances = [self.print_tolerance, self.prune_tolerance, self.probability_tolerance]
        if any((t is None for t in tolerances)) or self.precision is None:
            return False
        if any((t < 0 or t >= 1 for t in tolerances)):
            return False
        return isinstance(self.precision, int) and self.precision >= 0

    def _json_exists_at_location(self, location: str):
        if not os.path.exists(os.path.join(location, self.f_json)):
            raise FileNotFoundError(f"Simulator parameters file {self.f_json} not found at location {location}.")

    def __eq__(self, other) -> bool:
        if not isinstance(other, SimulatorParameters):
            return False
        return self.get_as_tuple() == other.get_as_tuple()

    def __str__(self):
        return "\n".join(f"{name}: {value}" for name, value in zip(self._names, self.get_as_tuple()))


default_parameters = SimulatorParameters()
