from typing import Iterable, Iterator, Mapping, Sequence
import warnings
import numpy as np
import scipy.sparse as sp
from clifftab._typing import QubitLabel
from clifftab.exceptions import UnknownQubitError
from .gates import Gate, GateType
from .utils import embed_unitary, tensor, I_mat

# Above this many qubits a dense unitary gets expensive
_UNITARY_WARNING_QUBITS = 10

_QISKIT_METHODS = {
    GateType.X: "x", GateType.Y: "y", GateType.Z: "z", GateType.H: "h",
    GateType.S: "s", GateType.SDG: "sdg", GateType.V: "sx", GateType.VDG: "sxdg",
    GateType.T: "t", GateType.TDG: "tdg", GateType.CX: "cx", GateType.CY: "cy",
    GateType.CZ: "cz", GateType.SWAP: "swap", GateType.NOOP: "id",
}


class Circuit:
    def __init__(self, qubits: int | Iterable[QubitLabel] | None = None,
                 gates: list[Gate] | None = None):
        """
        An ordered list of gates over a fixed set of qubit labels.

        Parameters:
            qubits (int | Iterable): The number of qubits (labelled 0..n-1) or the qubit labels. Labels must be
                hashable and mutually comparable.
            gates (list): Gate objects, applied in list order. Every qubit they use must be in ``qubits``.
        """
        if qubits is None:
            qubits = 0
        if isinstance(qubits, (int, np.integer)):
            qubits = range(int(qubits))
        self.qubits: list[QubitLabel] = list(qubits)
        if len(set(self.qubits)) != len(self.qubits):
            raise ValueError(f"Qubit labels must be distinct, got {self.qubits}.")
        self.gates: list[Gate] = []
        for gate in gates or []:
            self.add_gate(gate)

    @classmethod
    def from_random(cls, n_gates: int,
                    qubits: int | Iterable[QubitLabel],
                    two_qubit_gate_ratio: float = 0.3,
                    single_qubit_gates: Sequence[GateType] = (GateType.H, GateType.S, GateType.V,
                                                              GateType.X, GateType.Z),
                    two_qubit_gates: Sequence[GateType] = (GateType.CX,),
                    seed: int | None = None) -> 'Circuit':
        """
        Creates a random circuit.

        Parameters:
            n_gates (int): The number of gates.
            qubits (int | Iterable): The number of qubits or the qubit labels.
            two_qubit_gate_ratio (float): Probability that a gate is drawn from ``two_qubit_gates`` (when the circuit
                has at least two qubits).
            single_qubit_gates, two_qubit_gates: The gate kinds to draw from.
            seed (int | None): Seed for the random number generator.

        Returns:
            Circuit: A new Circuit object.
        """
        rng = np.random.default_rng(seed)
        circuit = cls(qubits)
        labels = circuit.qubits
        if len(labels) == 0:
            return circuit

        for _ in range(n_gates):
            if len(labels) > 1 and rng.random() < two_qubit_gate_ratio:
                gate_type = two_qubit_gates[rng.integers(len(two_qubit_gates))]
                a, b = rng.choice(len(labels), size=2, replace=False)
                circuit.add_gate(gate_type, labels[a], labels[b])
            else:
                gate_type = single_qubit_gates[rng.integers(len(single_qubit_gates))]
                circuit.add_gate(gate_type, labels[rng.integers(len(labels))])
        return circuit

    def add_gate(self, gate: Gate | GateType | str, *qubits: QubitLabel) -> 'Circuit':
        """
        Appends a gate. Either a Gate object, or a gate kind followed by its qubit labels, e.g.
        ``circuit.add_gate(GateType.CX, 0, 1)``.
        """
        if not isinstance(gate, Gate):
            gate = Gate(gate, qubits)
        elif qubits:
            raise TypeError("Qubits cannot be given together with a Gate object.")

        known = set(self.qubits)
        for q in gate.qubits:
            if q not in known:
                raise UnknownQubitError(f"Gate {gate} uses qubit {q!r}, which is not in the circuit {self.qubits}.")
        self.gates.append(gate)
        return self

    def remove_gate(self, index: int):
        self.gates.pop(index)

    def n_qubits(self) -> int:
        return len(self.qubits)

    def all_qubits(self) -> list[QubitLabel]:
        """
        The qubit labels in sorted order. This order seeds the index assignment of tableaux built from the circuit.
        """
        return sorted(self.qubits)

    def count_gates(self) -> dict[GateType, int]:
        counts: dict[GateType, int] = {}
        for gate in self.gates:
            counts[gate.gate_type] = counts.get(gate.gate_type, 0) + 1
        return counts

    def rename_qubits(self, mapping: Mapping[QubitLabel, QubitLabel]):
        """
        Renames qubits in place. All labels are renamed at once, so the mapping may permute labels. Labels that are
        not in ``mapping`` are kept.
        """
        new_qubits = [mapping.get(q, q) for q in self.qubits]
        if len(set(new_qubits)) != len(new_qubits):
            raise ValueError(f"Renaming {self.qubits} with {dict(mapping)} merges distinct qubits.")
        self.qubits = new_qubits
        self.gates = [Gate(g.gate_type, [mapping.get(q, q) for q in g.qubits]) for g in self.gates]

    def __add__(self, other: "Circuit | Gate") -> "Circuit":
        """
        Concatenates two circuits (or appends a gate). The qubits of ``other`` must be in this circuit.
        """
        if not isinstance(other, Circuit) and not isinstance(other, Gate):
            raise TypeError("Can only add another Circuit or Gate object.")
        new_circuit = self.copy()
        for gate in ([other] if isinstance(other, Gate) else other.gates):
            new_circuit.add_gate(gate)
        return new_circuit

    def __eq__(self, other) -> bool:
        if not isinstance(other, Circuit):
            return False
        return self.qubits == other.qubits and self.gates == other.gates

    def __iter__(self) -> Iterator[Gate]:
        return iter(self.gates)

    def __getitem__(self, index: int) -> Gate:
        return self.gates[index]

    def __len__(self) -> int:
        return len(self.gates)

    def __str__(self) -> str:
        str_out = ''
        for gate in self.gates:
            str_out += str(gate) + '\n'
        return str_out

    def __repr__(self) -> str:
        return f"Circuit(qubits={self.qubits}, n_gates={len(self.gates)})"

    def copy(self) -> 'Circuit':
        return Circuit(self.qubits, [g.copy() for g in self.gates])

    def inv(self) -> 'Circuit':
        return Circuit(self.qubits, [g.inv() for g in reversed(self.gates)])

    def unitary(self) -> sp.csr_matrix:
        """
        Dense-in-sparse-format unitary of the circuit. Qubit ``self.qubits[0]`` is the most significant tensor
        factor.
        """
        n = self.n_qubits()
        if n > _UNITARY_WARNING_QUBITS:
            warnings.warn(f"Building the unitary of a {n}-qubit circuit, this may be slow.", UserWarning)
        positions = {q: i for i, q in enumerate(self.qubits)}
        m = tensor([I_mat() for _ in range(n)])
        for g in self.gates:
            m = embed_unitary(g.unitary(), [positions[q] for q in g.qubits], n) @ m
        return sp.csr_matrix(m)

    def to_qiskit(self):
        """
        Converts to a qiskit ``QuantumCircuit``, with qubit ``self.qubits[i]`` on qiskit qubit ``i``.
        """
        from qiskit import QuantumCircuit

        positions = {q: i for i, q in enumerate(self.qubits)}
        circuit = QuantumCircuit(self.n_qubits())
        for gate in self.gates:
            getattr(circuit, _QISKIT_METHODS[gate.gate_type])(*[positions[q] for q in gate.qubits])
        return circuit

    def show(self):
        print(self.to_qiskit())
