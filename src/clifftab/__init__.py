from .core.circuits import Circuit, Gate, GateType
from .core.tableau import CliffordTableau, QubitIndexMap
from .core.converters import circuit_to_tableau, tableau_to_circuit
from .exceptions import (TableauError, DependentStabilizersError, UnsupportedOperationError,
                         UnknownQubitError)

__all__ = ["Circuit", "Gate", "GateType", "CliffordTableau", "QubitIndexMap", "circuit_to_tableau",
           "tableau_to_circuit", "TableauError", "DependentStabilizersError", "UnsupportedOperationError",
           "UnknownQubitError"]
