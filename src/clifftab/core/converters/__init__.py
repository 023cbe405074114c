from .circuit_to_tableau import circuit_to_tableau
from .tableau_to_circuit import tableau_to_circuit

__all__ = ["circuit_to_tableau", "tableau_to_circuit"]
