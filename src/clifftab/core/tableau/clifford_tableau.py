from typing import Iterable, Sequence
import numpy as np
import galois
from clifftab._typing import QubitLabel
from clifftab.core.circuits.gates import GateType
from clifftab.core.finite_field_solvers import GF2, as_gf2
from clifftab.exceptions import UnsupportedOperationError
from .qubit_map import QubitIndexMap
from .utils import row_product, pauli_row_to_str, is_symplectic

# Gates without a primitive update rule, as time-ordered sequences of (gate, operand positions).
# End application walks a sequence forwards, front application walks it backwards.
_COMPOSITE_GATES: dict[GateType, list[tuple[GateType, tuple[int, ...]]]] = {
    GateType.NOOP: [],
    GateType.H: [(GateType.S, (0,)), (GateType.V, (0,)), (GateType.S, (0,))],
    GateType.SDG: [(GateType.S, (0,))] * 3,
    GateType.VDG: [(GateType.V, (0,))] * 3,
    GateType.Y: [(GateType.X, (0,)), (GateType.Z, (0,))],
    GateType.CZ: [(GateType.H, (1,)), (GateType.CX, (0, 1)), (GateType.H, (1,))],
    GateType.CY: [(GateType.SDG, (1,)), (GateType.CX, (0, 1)), (GateType.S, (1,))],
    GateType.SWAP: [(GateType.CX, (0, 1)), (GateType.CX, (1, 0)), (GateType.CX, (0, 1))],
}


class CliffordTableau:
    """
    Binary tableau of an n-qubit Clifford unitary U.

    Row i of the destabilizer arrays holds the signed Pauli string U† X_i U and row i of the stabilizer arrays holds
    U† Z_i U. Entry [i, j] of an X (Z) block is the X (Z) bit of that string on qubit j, with x = z = 1 meaning Y,
    and the sign is (-1)^phase.

    Two ways of adding a gate G:

    - at the end of the circuit (U -> G U): each generator row becomes a product of rows, i.e. a row operation.
    - at the front of the circuit (U -> U G): each row is conjugated by G, i.e. a column operation.

    Only S, V, CX, X and Z have their own update rules. Every other Clifford kind is expanded into these.

    Attributes:
        destabilizer_x, destabilizer_z, stabilizer_x, stabilizer_z: (n, n) GF(2) arrays.
        destabilizer_phase, stabilizer_phase: (n,) GF(2) arrays.
        qubits: The QubitIndexMap between qubit labels and row/column indices.
    """

    def __init__(self, qubits: int | Iterable[QubitLabel]):
        """
        The identity tableau over ``qubits`` (a number of qubits, or labels that get indices in the given order).
        """
        self.qubits = QubitIndexMap(qubits)
        n = len(self.qubits)
        self.destabilizer_x = GF2.Identity(n)
        self.destabilizer_z = GF2.Zeros((n, n))
        self.destabilizer_phase = GF2.Zeros(n)
        self.stabilizer_x = GF2.Zeros((n, n))
        self.stabilizer_z = GF2.Identity(n)
        self.stabilizer_phase = GF2.Zeros(n)

    @classmethod
    def from_matrices(cls, destabilizer_x, destabilizer_z, stabilizer_x, stabilizer_z,
                      destabilizer_phase=None, stabilizer_phase=None,
                      qubits: Iterable[QubitLabel] | None = None) -> 'CliffordTableau':
        """
        Builds a tableau from its arrays. Only shapes are checked: the rows are expected to form a symplectic basis
        (see :meth:`is_valid`), and operations on a tableau that does not are undefined.
        """
        n = np.shape(destabilizer_x)[0]
        tableau = cls(n if qubits is None else qubits)
        if len(tableau.qubits) != n:
            raise ValueError(f"Got {len(tableau.qubits)} qubit labels for a {n}-qubit tableau.")

        blocks = {"destabilizer_x": destabilizer_x, "destabilizer_z": destabilizer_z,
                  "stabilizer_x": stabilizer_x, "stabilizer_z": stabilizer_z}
        for name, block in blocks.items():
            block = as_gf2(block)
            if block.shape != (n, n):
                raise ValueError(f"{name} must have shape {(n, n)}, got {block.shape}.")
            setattr(tableau, name, block)

        phases = {"destabilizer_phase": destabilizer_phase, "stabilizer_phase": stabilizer_phase}
        for name, phase in phases.items():
            phase = GF2.Zeros(n) if phase is None else as_gf2(phase)
            if phase.shape != (n,):
                raise ValueError(f"{name} must have shape {(n,)}, got {phase.shape}.")
            setattr(tableau, name, phase)
        return tableau

    def n_qubits(self) -> int:
        return len(self.qubits)

    def copy(self) -> 'CliffordTableau':
        tableau = CliffordTableau.__new__(CliffordTableau)
        tableau.qubits = self.qubits
        tableau.destabilizer_x = self.destabilizer_x.copy()
        tableau.destabilizer_z = self.destabilizer_z.copy()
        tableau.destabilizer_phase = self.destabilizer_phase.copy()
        tableau.stabilizer_x = self.stabilizer_x.copy()
        tableau.stabilizer_z = self.stabilizer_z.copy()
        tableau.stabilizer_phase = self.stabilizer_phase.copy()
        return tableau

    def __eq__(self, other) -> bool:
        if not isinstance(other, CliffordTableau):
            return False
        return (self.qubits == other.qubits
                and np.array_equal(self.destabilizer_x, other.destabilizer_x)
                and np.array_equal(self.destabilizer_z, other.destabilizer_z)
                and np.array_equal(self.destabilizer_phase, other.destabilizer_phase)
                and np.array_equal(self.stabilizer_x, other.stabilizer_x)
                and np.array_equal(self.stabilizer_z, other.stabilizer_z)
                and np.array_equal(self.stabilizer_phase, other.stabilizer_phase))

    def __str__(self) -> str:
        str_out = 'Destabilizers:\n'
        for i in range(self.n_qubits()):
            str_out += pauli_row_to_str(*self._destabilizer_row(i)) + '\n'
        str_out += 'Stabilizers:\n'
        for i in range(self.n_qubits()):
            str_out += pauli_row_to_str(*self._stabilizer_row(i)) + '\n'
        return str_out

    def __repr__(self) -> str:
        return f"CliffordTableau(qubits={list(self.qubits)})"

    def get_destabilizer(self, qubit: QubitLabel) -> str:
        """Signed Pauli string U† X_q U, one letter per qubit in index order."""
        return pauli_row_to_str(*self._destabilizer_row(self.qubits.index(qubit)))

    def get_stabilizer(self, qubit: QubitLabel) -> str:
        """Signed Pauli string U† Z_q U, one letter per qubit in index order."""
        return pauli_row_to_str(*self._stabilizer_row(self.qubits.index(qubit)))

    def symplectic_matrix(self) -> galois.FieldArray:
        """The (2n, 2n) matrix [[Dx, Dz], [Sx, Sz]] of destabilizer rows stacked over stabilizer rows."""
        top = np.hstack([self.destabilizer_x.view(np.ndarray), self.destabilizer_z.view(np.ndarray)])
        bottom = np.hstack([self.stabilizer_x.view(np.ndarray), self.stabilizer_z.view(np.ndarray)])
        return GF2(np.vstack([top, bottom]))

    def is_valid(self) -> bool:
        """Whether the rows form a symplectic basis, i.e. the tableau describes a Clifford unitary."""
        return is_symplectic(self.symplectic_matrix())

    def is_identity(self) -> bool:
        return self == CliffordTableau(self.qubits)

    # ---------- rows ----------

    def _destabilizer_row(self, i: int) -> tuple:
        return self.destabilizer_x[i], self.destabilizer_z[i], self.destabilizer_phase[i]

    def _stabilizer_row(self, i: int) -> tuple:
        return self.stabilizer_x[i], self.stabilizer_z[i], self.stabilizer_phase[i]

    def _set_destabilizer_row(self, i: int, x, z, phase: int):
        self.destabilizer_x[i] = x
        self.destabilizer_z[i] = z
        self.destabilizer_phase[i] = phase

    def _set_stabilizer_row(self, i: int, x, z, phase: int):
        self.stabilizer_x[i] = x
        self.stabilizer_z[i] = z
        self.stabilizer_phase[i] = phase

    def _halves(self) -> tuple:
        return ((self.destabilizer_x, self.destabilizer_z, self.destabilizer_phase),
                (self.stabilizer_x, self.stabilizer_z, self.stabilizer_phase))

    # ---------- gates at the end: U -> G U, rows P -> U† G† P G U ----------

    def apply_S_at_end(self, qubit: int):
        # S† X S = -Y = -i X Z
        self._set_destabilizer_row(qubit, *row_product(self._destabilizer_row(qubit),
                                                       self._stabilizer_row(qubit), i_power=3))

    def apply_V_at_end(self, qubit: int):
        # V† Z V = Y = i X Z
        self._set_stabilizer_row(qubit, *row_product(self._destabilizer_row(qubit),
                                                     self._stabilizer_row(qubit), i_power=1))

    def apply_CX_at_end(self, control: int, target: int):
        # X_c -> X_c X_t, Z_t -> Z_c Z_t
        self._set_destabilizer_row(control, *row_product(self._destabilizer_row(control),
                                                         self._destabilizer_row(target)))
        self._set_stabilizer_row(target, *row_product(self._stabilizer_row(control),
                                                      self._stabilizer_row(target)))

    def apply_X_at_end(self, qubit: int):
        # X Z X = -Z
        self.stabilizer_phase[qubit] = int(self.stabilizer_phase[qubit]) ^ 1

    def apply_Z_at_end(self, qubit: int):
        # Z X Z = -X
        self.destabilizer_phase[qubit] = int(self.destabilizer_phase[qubit]) ^ 1

    # ---------- gates at the front: U -> U G, every row Q -> G† Q G ----------

    def apply_S_at_front(self, qubit: int):
        # X -> -Y, Y -> X, Z -> Z
        for x, z, phase in self._halves():
            phase += x[:, qubit] + x[:, qubit] * z[:, qubit]
            z[:, qubit] += x[:, qubit]

    def apply_V_at_front(self, qubit: int):
        # X -> X, Z -> Y, Y -> -Z
        for x, z, phase in self._halves():
            phase += x[:, qubit] * z[:, qubit]
            x[:, qubit] += z[:, qubit]

    def apply_CX_at_front(self, control: int, target: int):
        for x, z, phase in self._halves():
            x_c, z_t = x[:, control], z[:, target]
            phase += x_c * z_t * (x[:, target] + z[:, control]) + x_c * z_t
            x[:, target] += x[:, control]
            z[:, control] += z[:, target]

    def apply_X_at_front(self, qubit: int):
        for _, z, phase in self._halves():
            phase += z[:, qubit]

    def apply_Z_at_front(self, qubit: int):
        for x, _, phase in self._halves():
            phase += x[:, qubit]

    # ---------- dispatch ----------

    def apply_gate_at_end(self, gate_type: GateType | str, qubit_indices: Sequence[int]):
        """
        Updates the tableau as if ``gate_type`` were appended to the end of the circuit, acting on the given qubit
        indices (control first for two-qubit gates).
        """
        gate_type, qubit_indices = self._check_gate(gate_type, qubit_indices)
        primitive = self._primitive(gate_type, "end")
        if primitive is not None:
            primitive(*qubit_indices)
            return
        for sub_gate, positions in _COMPOSITE_GATES[gate_type]:
            self.apply_gate_at_end(sub_gate, [qubit_indices[p] for p in positions])

    def apply_gate_at_front(self, gate_type: GateType | str, qubit_indices: Sequence[int]):
        """
        Updates the tableau as if ``gate_type`` were inserted at the start of the circuit.
        """
        gate_type, qubit_indices = self._check_gate(gate_type, qubit_indices)
        primitive = self._primitive(gate_type, "front")
        if primitive is not None:
            primitive(*qubit_indices)
            return
        for sub_gate, positions in reversed(_COMPOSITE_GATES[gate_type]):
            self.apply_gate_at_front(sub_gate, [qubit_indices[p] for p in positions])

    def _primitive(self, gate_type: GateType, where: str):
        if gate_type in (GateType.S, GateType.V, GateType.CX, GateType.X, GateType.Z):
            return getattr(self, f"apply_{gate_type.value}_at_{where}")
        return None

    def _check_gate(self, gate_type, qubit_indices) -> tuple[GateType, list[int]]:
        try:
            gate_type = GateType(gate_type)
        except ValueError:
            raise UnsupportedOperationError(f"Cannot apply unknown gate {gate_type!r} to a Clifford tableau.") from None
        if gate_type not in _COMPOSITE_GATES and self._primitive(gate_type, "end") is None:
            raise UnsupportedOperationError(f"Cannot apply {gate_type} gate to a Clifford tableau.")

        qubit_indices = [int(q) for q in qubit_indices]
        if len(qubit_indices) != gate_type.n_qubits:
            raise ValueError(f"{gate_type} acts on {gate_type.n_qubits} qubit(s), got {len(qubit_indices)}.")
        if len(set(qubit_indices)) != len(qubit_indices):
            raise ValueError(f"{gate_type} must act on distinct qubits, got {qubit_indices}.")
        n = self.n_qubits()
        for q in qubit_indices:
            if not 0 <= q < n:
                raise IndexError(f"Qubit index {q} out of range for a {n}-qubit tableau.")
        return gate_type, qubit_indices
