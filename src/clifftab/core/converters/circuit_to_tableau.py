from typing import Iterable
from clifftab._typing import QubitLabel
from clifftab.core.circuits import Circuit
from clifftab.core.tableau import CliffordTableau


def circuit_to_tableau(circuit: Circuit, qubits: Iterable[QubitLabel] | None = None) -> CliffordTableau:
    """
    Simulates a Clifford circuit into a tableau.

    The tableau starts at the identity over ``circuit.all_qubits()`` (or ``qubits``, if given), with indices
    assigned in that order, and every gate is applied at the end in circuit order.

    Raises:
        UnknownQubitError: A gate uses a qubit that is not in the qubit set.
        UnsupportedOperationError: A gate is not a Clifford gate the tableau knows.
    """
    tableau = CliffordTableau(circuit.all_qubits() if qubits is None else qubits)
    for gate in circuit:
        tableau.apply_gate_at_end(gate.gate_type, [tableau.qubits.index(q) for q in gate.qubits])
    return tableau
