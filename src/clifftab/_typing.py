from typing import Hashable

# Qubit labels only need to be hashable and totally ordered (ints, strings, tuples, ...)
QubitLabel = Hashable
