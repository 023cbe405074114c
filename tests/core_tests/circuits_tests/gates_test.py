import numpy as np
import pytest
from clifftab.core.circuits import Gate, GateType
from clifftab.core.circuits.utils import (embed_unitary, equal_up_to_global_phase, tensor, H_mat, S_mat, V_mat,
                                          X_mat, I_mat, SWAP_mat, controlled)


class TestGates():

    def test_gate_type_from_name(self):
        assert GateType("Sdg") is GateType.SDG
        assert GateType("noop") is GateType.NOOP
        assert str(GateType.VDG) == "Vdg"
        with pytest.raises(ValueError):
            GateType("Rz")

    def test_arity(self):
        assert GateType.CX.n_qubits == 2
        assert GateType.SWAP.n_qubits == 2
        assert GateType.H.n_qubits == 1
        assert GateType.NOOP.n_qubits == 1

    def test_clifford_kinds(self):
        non_clifford = {g for g in GateType if not g.is_clifford}
        assert non_clifford == {GateType.T, GateType.TDG}

    def test_inverse_kinds(self):
        for g in GateType:
            assert g.inverse.inverse is g
        assert GateType.S.inverse is GateType.SDG
        assert GateType.V.inverse is GateType.VDG
        assert GateType.CX.inverse is GateType.CX

    def test_gate(self):
        gate = Gate("CX", [1, 3])
        assert gate.gate_type is GateType.CX
        assert gate.name == "CX"
        assert gate.qubits == (1, 3)
        assert str(gate) == "CX [1, 3]"
        assert gate == Gate(GateType.CX, (1, 3))
        assert gate != Gate(GateType.CX, (3, 1))
        assert len({gate, gate.copy()}) == 1

    def test_bad_gates(self):
        with pytest.raises(ValueError):
            Gate(GateType.CX, [0])
        with pytest.raises(ValueError):
            Gate(GateType.H, [0, 1])
        with pytest.raises(ValueError):
            Gate(GateType.CZ, ["a", "a"])
        with pytest.raises(ValueError):
            Gate("Toffoli", [0, 1, 2])

    def test_inverse_unitaries(self):
        for g in GateType:
            qubits = list(range(g.n_qubits))
            gate = Gate(g, qubits)
            product = (gate.inv().unitary() @ gate.unitary()).toarray()
            assert np.allclose(product, np.eye(2 ** g.n_qubits)), g

    def test_named_unitaries(self):
        # V is the square root of X and equals H S H
        V = V_mat().toarray()
        assert np.allclose(V @ V, X_mat().toarray())
        assert np.allclose(V, (H_mat() @ S_mat() @ H_mat()).toarray())
        assert np.allclose(controlled(X_mat()).toarray(),
                           [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0]])

    def test_embed_unitary(self):
        # control on the less significant qubit
        CX_10 = embed_unitary(controlled(X_mat()), [1, 0], 2).toarray()
        assert np.allclose(CX_10, [[1, 0, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0], [0, 1, 0, 0]])

        H_1 = embed_unitary(H_mat(), [1], 3).toarray()
        assert np.allclose(H_1, tensor([I_mat(), H_mat(), I_mat()]).toarray())

        assert np.allclose(embed_unitary(SWAP_mat(), [0, 1], 2).toarray(),
                           embed_unitary(SWAP_mat(), [1, 0], 2).toarray())

        with pytest.raises(ValueError):
            embed_unitary(H_mat(), [0, 1], 2)

    def test_global_phase(self):
        H = H_mat().toarray()
        assert equal_up_to_global_phase(1j * H, H)
        assert equal_up_to_global_phase(np.exp(0.3j) * H, H)
        assert not equal_up_to_global_phase(-H, S_mat().toarray())
        assert not equal_up_to_global_phase(H, np.eye(4))
