import numpy as np
import pytest
from clifftab.core.circuits import Circuit, GateType
from clifftab.core.circuits.utils import tensor, I_mat, X_mat, Y_mat, Z_mat
from clifftab.core.converters import circuit_to_tableau
from clifftab.core.finite_field_solvers import GF2
from clifftab.core.tableau import CliffordTableau
from clifftab.exceptions import UnsupportedOperationError, UnknownQubitError

SINGLE_QUBIT_CLIFFORDS = (GateType.H, GateType.S, GateType.SDG, GateType.V, GateType.VDG,
                          GateType.X, GateType.Y, GateType.Z, GateType.NOOP)
TWO_QUBIT_CLIFFORDS = (GateType.CX, GateType.CY, GateType.CZ, GateType.SWAP)

PAULI_MATRICES = {"I": I_mat, "X": X_mat, "Y": Y_mat, "Z": Z_mat}


def pauli_matrix(pauli: str) -> np.ndarray:
    sign = -1 if pauli[0] == "-" else 1
    return sign * tensor([PAULI_MATRICES[p]() for p in pauli[1:]]).toarray()


def random_clifford_circuit(n_qubits: int, n_gates: int, seed: int) -> Circuit:
    return Circuit.from_random(n_gates, n_qubits, two_qubit_gate_ratio=0.4,
                               single_qubit_gates=SINGLE_QUBIT_CLIFFORDS,
                               two_qubit_gates=TWO_QUBIT_CLIFFORDS, seed=seed)


class TestCliffordTableau:

    def test_identity(self):
        tableau = CliffordTableau(2)
        assert str(tableau) == "Destabilizers:\n+XI\n+IX\nStabilizers:\n+ZI\n+IZ\n"
        assert tableau.is_identity()
        assert tableau.is_valid()
        assert tableau.n_qubits() == 2

    def test_labels(self):
        tableau = CliffordTableau(["b", "a"])
        assert tableau.qubits.index("a") == 1
        assert tableau.get_stabilizer("a") == "+IZ"
        assert tableau.get_destabilizer("b") == "+XI"
        with pytest.raises(UnknownQubitError):
            tableau.get_stabilizer("c")

    @pytest.mark.parametrize("gate_type, destabilizer, stabilizer", [
        (GateType.X, "+X", "-Z"),
        (GateType.Z, "-X", "+Z"),
        (GateType.Y, "-X", "-Z"),
        (GateType.H, "+Z", "+X"),
        (GateType.S, "-Y", "+Z"),
        (GateType.SDG, "+Y", "+Z"),
        (GateType.V, "+X", "+Y"),
        (GateType.VDG, "+X", "-Y"),
        (GateType.NOOP, "+X", "+Z"),
    ])
    def test_single_qubit_gates(self, gate_type, destabilizer, stabilizer):
        # rows are U† X U and U† Z U
        for where in ("end", "front"):
            tableau = CliffordTableau(1)
            getattr(tableau, f"apply_gate_at_{where}")(gate_type, [0])
            assert tableau.get_destabilizer(0) == destabilizer, where
            assert tableau.get_stabilizer(0) == stabilizer, where

    def test_CX(self):
        tableau = CliffordTableau(2)
        tableau.apply_CX_at_end(0, 1)
        assert [tableau.get_destabilizer(q) for q in range(2)] == ["+XX", "+IX"]
        assert [tableau.get_stabilizer(q) for q in range(2)] == ["+ZI", "+ZZ"]

        front = CliffordTableau(2)
        front.apply_CX_at_front(0, 1)
        assert front == tableau

    def test_SWAP(self):
        tableau = CliffordTableau(2)
        tableau.apply_gate_at_end(GateType.SWAP, [0, 1])
        assert [tableau.get_destabilizer(q) for q in range(2)] == ["+IX", "+XI"]
        assert [tableau.get_stabilizer(q) for q in range(2)] == ["+IZ", "+ZI"]

    def test_rows_match_conjugation(self):
        # stabilizer row q is U† Z_q U and destabilizer row q is U† X_q U, signs included
        for seed in range(40):
            n = 1 + seed % 3
            circuit = random_clifford_circuit(n, 12, seed)
            tableau = circuit_to_tableau(circuit)
            U = circuit.unitary().toarray()
            for q in range(n):
                Z_q = tensor([Z_mat() if j == q else I_mat() for j in range(n)]).toarray()
                X_q = tensor([X_mat() if j == q else I_mat() for j in range(n)]).toarray()
                assert np.allclose(pauli_matrix(tableau.get_stabilizer(q)), U.conj().T @ Z_q @ U), str(circuit)
                assert np.allclose(pauli_matrix(tableau.get_destabilizer(q)), U.conj().T @ X_q @ U), str(circuit)

    def test_front_is_start_of_circuit(self):
        rng = np.random.default_rng(11)
        for seed in range(60):
            n = 2 + seed % 3
            circuit = random_clifford_circuit(n, 15, seed)
            tableau = circuit_to_tableau(circuit)

            if rng.random() < 0.5:
                gate_type = SINGLE_QUBIT_CLIFFORDS[rng.integers(len(SINGLE_QUBIT_CLIFFORDS))]
                qubits = [int(rng.integers(n))]
            else:
                gate_type = TWO_QUBIT_CLIFFORDS[rng.integers(len(TWO_QUBIT_CLIFFORDS))]
                qubits = [int(q) for q in rng.choice(n, size=2, replace=False)]
            tableau.apply_gate_at_front(gate_type, qubits)

            prepended = Circuit(n).add_gate(gate_type, *qubits) + circuit
            assert tableau == circuit_to_tableau(prepended), f"{gate_type} {qubits}\n{circuit}"

    def test_stays_valid(self):
        for seed in range(30):
            n = 1 + seed % 5
            tableau = circuit_to_tableau(random_clifford_circuit(n, 30, seed))
            assert tableau.is_valid()
            assert tableau.n_qubits() == n

    def test_gate_orders(self):
        tableau = circuit_to_tableau(random_clifford_circuit(3, 20, seed=5))
        expected = tableau.copy()
        for _ in range(4):
            tableau.apply_S_at_front(1)
        assert tableau == expected
        for _ in range(4):
            tableau.apply_V_at_end(2)
        assert tableau == expected

    def test_copy_is_independent(self):
        tableau = CliffordTableau(2)
        copied = tableau.copy()
        copied.apply_gate_at_end(GateType.H, [0])
        assert tableau.is_identity()
        assert not copied.is_identity()
        assert copied.qubits == tableau.qubits

    def test_unsupported_gates(self):
        tableau = CliffordTableau(2)
        with pytest.raises(UnsupportedOperationError):
            tableau.apply_gate_at_end(GateType.T, [0])
        with pytest.raises(UnsupportedOperationError):
            tableau.apply_gate_at_front("Tdg", [0])
        with pytest.raises(UnsupportedOperationError):
            tableau.apply_gate_at_end("Rz", [0])
        with pytest.raises(NotImplementedError):
            tableau.apply_gate_at_end(GateType.T, [0])
        assert tableau.is_identity()

    def test_bad_operands(self):
        tableau = CliffordTableau(2)
        with pytest.raises(ValueError):
            tableau.apply_gate_at_end(GateType.CX, [0])
        with pytest.raises(ValueError):
            tableau.apply_gate_at_end(GateType.CX, [1, 1])
        with pytest.raises(IndexError):
            tableau.apply_gate_at_front(GateType.H, [2])

    def test_from_matrices(self):
        reference = circuit_to_tableau(Circuit(["a", "b"]).add_gate(GateType.H, "a").add_gate(GateType.CX, "a", "b"))
        tableau = CliffordTableau.from_matrices(
            reference.destabilizer_x.view(np.ndarray), reference.destabilizer_z.view(np.ndarray),
            reference.stabilizer_x.view(np.ndarray), reference.stabilizer_z.view(np.ndarray),
            reference.destabilizer_phase.view(np.ndarray), reference.stabilizer_phase.view(np.ndarray),
            qubits=["a", "b"])
        assert tableau == reference
        assert isinstance(tableau.stabilizer_x, GF2)

    def test_from_matrices_shapes(self):
        with pytest.raises(ValueError):
            CliffordTableau.from_matrices(np.eye(2), np.zeros((2, 3)), np.zeros((2, 2)), np.eye(2))
        with pytest.raises(ValueError):
            CliffordTableau.from_matrices(np.eye(2), np.zeros((2, 2)), np.zeros((2, 2)), np.eye(2),
                                          stabilizer_phase=[0, 0, 1])
        with pytest.raises(ValueError):
            CliffordTableau.from_matrices(np.eye(2), np.zeros((2, 2)), np.zeros((2, 2)), np.eye(2), qubits=["a"])

    def test_is_valid_detects_broken_tableau(self):
        tableau = CliffordTableau.from_matrices(np.eye(2), np.zeros((2, 2)), np.zeros((2, 2)), [[1, 0], [1, 0]])
        assert not tableau.is_valid()
