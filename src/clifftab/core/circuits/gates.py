from enum import Enum
from typing import Sequence
import scipy.sparse as sp
from clifftab._typing import QubitLabel
from .utils import LOCAL_UNITARIES


class GateType(str, Enum):
    """
    Gate kinds known to :class:`Circuit`. Values are the names used when printing a circuit.

    T and Tdg are not Clifford gates. A circuit can hold them, but a tableau cannot apply them.
    """
    X = "X"
    Y = "Y"
    Z = "Z"
    H = "H"
    S = "S"
    SDG = "Sdg"
    V = "V"
    VDG = "Vdg"
    T = "T"
    TDG = "Tdg"
    CX = "CX"
    CY = "CY"
    CZ = "CZ"
    SWAP = "SWAP"
    NOOP = "noop"

    @property
    def n_qubits(self) -> int:
        return 2 if self in TWO_QUBIT_GATES else 1

    @property
    def is_clifford(self) -> bool:
        return self not in (GateType.T, GateType.TDG)

    @property
    def inverse(self) -> "GateType":
        return INVERSE_GATES[self]

    def __str__(self):
        return self.value


TWO_QUBIT_GATES = frozenset({GateType.CX, GateType.CY, GateType.CZ, GateType.SWAP})

INVERSE_GATES = {
    GateType.X: GateType.X,
    GateType.Y: GateType.Y,
    GateType.Z: GateType.Z,
    GateType.H: GateType.H,
    GateType.S: GateType.SDG,
    GateType.SDG: GateType.S,
    GateType.V: GateType.VDG,
    GateType.VDG: GateType.V,
    GateType.T: GateType.TDG,
    GateType.TDG: GateType.T,
    GateType.CX: GateType.CX,
    GateType.CY: GateType.CY,
    GateType.CZ: GateType.CZ,
    GateType.SWAP: GateType.SWAP,
    GateType.NOOP: GateType.NOOP,
}


class Gate:
    def __init__(self, gate_type: GateType | str, qubits: Sequence[QubitLabel]):
        """
        An elementary gate acting on an ordered list of qubit labels.

        For two-qubit gates the control comes first, e.g. ``Gate(GateType.CX, [1, 3])`` has
        control 1 and target 3.

        Parameters:
            gate_type (GateType | str): The gate kind, or its name (e.g. ``"CX"``, ``"Sdg"``).
            qubits (Sequence): The qubit labels the gate acts on.
        """
        gate_type = GateType(gate_type)
        qubits = tuple(qubits)
        if len(qubits) != gate_type.n_qubits:
            raise ValueError(f"{gate_type} acts on {gate_type.n_qubits} qubit(s), got {len(qubits)}.")
        if len(set(qubits)) != len(qubits):
            raise ValueError(f"{gate_type} must act on distinct qubits, got {list(qubits)}.")

        self.gate_type = gate_type
        self.name = gate_type.value
        self.qubits = qubits

    def __repr__(self):
        return f"Gate(name={self.name}, qubits={list(self.qubits)})"

    def __str__(self):
        return f"{self.name} {list(self.qubits)}"

    def __eq__(self, other):
        if not isinstance(other, Gate):
            return False
        return self.gate_type == other.gate_type and self.qubits == other.qubits

    def __hash__(self):
        return hash((self.gate_type, self.qubits))

    def copy(self) -> 'Gate':
        return Gate(self.gate_type, self.qubits)

    def inv(self) -> 'Gate':
        return Gate(self.gate_type.inverse, self.qubits)

    def unitary(self) -> sp.csr_matrix:
        """
        Local unitary of the gate, on its own qubits in operand order (first operand most significant).
        """
        return LOCAL_UNITARIES[self.gate_type.value]()
