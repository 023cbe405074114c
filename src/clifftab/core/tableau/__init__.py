from .qubit_map import QubitIndexMap
from .clifford_tableau import CliffordTableau

__all__ = ["QubitIndexMap", "CliffordTableau"]
