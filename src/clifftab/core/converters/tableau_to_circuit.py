import numpy as np
from clifftab.core.circuits import Circuit, GateType
from clifftab.core.finite_field_solvers import (ColumnEchelon, gaussian_elimination_col_ops,
                                                binary_llt_decomposition)
from clifftab.core.tableau import CliffordTableau
from clifftab.exceptions import DependentStabilizersError

# V = H S H exactly, so V never shows up in synthesised circuits
_EMITTED_AS = {GateType.V: (GateType.H, GateType.S, GateType.H)}


class _SynthesisContext:
    """
    A working copy of the tableau together with the circuit synthesised so far.

    The circuit is peeled off the front of the tableau: for every emitted gate G the working tableau goes from
    U to U G^-1. Once it reaches the identity, the emitted gates (in emission order) implement the original U.
    """

    def __init__(self, tableau: CliffordTableau):
        self.tableau = tableau.copy()
        self.size = tableau.n_qubits()
        self.circuit = Circuit(self.size)

    def apply(self, gate_type: GateType, *qubits: int):
        for emitted in _EMITTED_AS.get(gate_type, (gate_type,)):
            self.circuit.add_gate(emitted, *qubits)
        self.tableau.apply_gate_at_front(gate_type.inverse, qubits)

    def apply_col_ops(self, ops, reverse: bool = False):
        for op in (reversed(ops) if reverse else ops):
            self.apply(GateType.CX, op.source, op.target)

    def apply_S_where(self, flags):
        for i in range(self.size):
            if flags[i] != 0:
                self.apply(GateType.S, i)

    def apply_to_all(self, gate_type: GateType):
        for i in range(self.size):
            self.apply(gate_type, i)


def _has_identity_blocks(tableau: CliffordTableau) -> bool:
    identity = CliffordTableau(tableau.n_qubits())
    return (np.array_equal(tableau.destabilizer_x, identity.destabilizer_x)
            and np.array_equal(tableau.destabilizer_z, identity.destabilizer_z)
            and np.array_equal(tableau.stabilizer_x, identity.stabilizer_x)
            and np.array_equal(tableau.stabilizer_z, identity.stabilizer_z))


def _make_stabilizer_x_full_rank(context: _SynthesisContext):
    """
    Step 1: give the stabilizer X block full rank, using V gates on the columns that are dependent.

    V at the front adds the Z column of a qubit to its X column. If the X column is already in the span of the
    previous pivot columns, the new column is independent exactly when the Z column is. So the Z column is what
    gets retried.
    """
    tableau = context.tableau
    echelon = ColumnEchelon(tableau.stabilizer_x)
    for col in range(context.size):
        if echelon.reduce_column(col):
            continue
        context.apply(GateType.V, col)
        echelon.replace_column(col, tableau.stabilizer_z[:, col])
        if not echelon.reduce_column(col):
            raise DependentStabilizersError("Stabilizers are not mutually independent")


def _canonical_form_steps(context: _SynthesisContext):
    """
    Steps 2-11 of the canonical form H-C-P-C-P-C-H-P-C-P-C. The comments give the tableau as
    [[destabilizer X, destabilizer Z], [stabilizer X, stabilizer Z]].
    """
    tableau = context.tableau

    # Step 2: CXs eliminate the stabilizer X block, giving [[A, B], [I, D]]
    context.apply_col_ops(gaussian_elimination_col_ops(tableau.stabilizer_x))

    # Step 3: the stabilizers commute, so D is symmetric. Phases add a diagonal so that D = M M^T
    lower, diag = binary_llt_decomposition(tableau.stabilizer_z)
    context.apply_S_where(diag)

    # Step 4: CXs taking I to M also take M M^T to M, giving [[A, B], [M, M]]
    context.apply_col_ops(gaussian_elimination_col_ops(lower), reverse=True)

    # Step 5: phases on all qubits give [[A, B], [M, 0]]. Stabilizer signs are fixed in the delayed step
    context.apply_to_all(GateType.S)

    # Step 6: CXs eliminate M, giving [[A, B], [I, 0]]. Commutation then forces B = I
    context.apply_col_ops(gaussian_elimination_col_ops(tableau.stabilizer_x))

    # Step 7: Hadamards on all qubits give [[I, A], [0, I]]
    context.apply_to_all(GateType.H)

    # Step 8: the destabilizers commute, so A is symmetric. Phases add a diagonal so that A = N N^T
    lower, diag = binary_llt_decomposition(tableau.destabilizer_z)
    context.apply_S_where(diag)

    # Step 9: CXs give [[N, N], [0, C]]
    context.apply_col_ops(gaussian_elimination_col_ops(lower), reverse=True)

    # Step 10: phases on all qubits give [[N, 0], [0, C]]. Destabilizer signs are fixed in the delayed step
    context.apply_to_all(GateType.S)

    # Step 11: CXs eliminate N, and commutation gives C = I
    context.apply_col_ops(gaussian_elimination_col_ops(tableau.destabilizer_x))


def _clear_phases(context: _SynthesisContext):
    """
    Delayed step: the tableau is now the identity up to signs. Z flips a destabilizer sign and X flips a stabilizer
    sign.
    """
    tableau = context.tableau
    for i in range(context.size):
        if tableau.destabilizer_phase[i] != 0:
            context.apply(GateType.Z, i)
        if tableau.stabilizer_phase[i] != 0:
            context.apply(GateType.X, i)


def tableau_to_circuit(tableau: CliffordTableau) -> Circuit:
    """
    Synthesises a circuit of H, S, CX, X and Z gates that implements the tableau (up to global phase).

    Follows the canonical form of Aaronson and Gottesman, "Improved simulation of stabilizer circuits",
    PRA 70, 052328 (2004), Theorem 8. The input tableau is not modified. The output is deterministic, and its qubits
    are the tableau's qubit labels in index order.

    Raises:
        DependentStabilizersError: The stabilizer rows of the tableau are not independent.
    """
    context = _SynthesisContext(tableau)

    if not _has_identity_blocks(context.tableau):
        _make_stabilizer_x_full_rank(context)
        _canonical_form_steps(context)
    _clear_phases(context)

    circuit = context.circuit
    circuit.rename_qubits({i: label for i, label in tableau.qubits.items()})
    return circuit
