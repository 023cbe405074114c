from .circuits import Circuit
from .gates import Gate, GateType, INVERSE_GATES

__all__ = ["Circuit", "Gate", "GateType", "INVERSE_GATES"]
