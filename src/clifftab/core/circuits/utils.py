import numpy as np
import scipy.sparse as sp


def tensor(mm: list[sp.csr_matrix]) -> sp.csr_matrix:
    # Inputs:
    #     mm - (list{scipy.sparse.csr_matrix}) - matrices to tensor
    # Outputs:
    #     (scipy.sparse.csr_matrix) - tensor product of matrices
    if len(mm) == 0:
        return sp.csr_matrix(np.ones((1, 1), dtype=complex))

    if len(mm) == 1:
        return sp.csr_matrix(mm[0])

    return sp.csr_matrix(sp.kron(mm[0], tensor(mm[1:]), format="csr"))


def I_mat() -> sp.csr_matrix:
    return sp.csr_matrix(np.eye(2, dtype=complex))


def X_mat() -> sp.csr_matrix:
    return sp.csr_matrix(np.array([[0, 1], [1, 0]], dtype=complex))


def Y_mat() -> sp.csr_matrix:
    return sp.csr_matrix(np.array([[0, -1j], [1j, 0]], dtype=complex))


def Z_mat() -> sp.csr_matrix:
    return sp.csr_matrix(np.diag([1, -1]).astype(complex))


def H_mat() -> sp.csr_matrix:
    return sp.csr_matrix(1 / np.sqrt(2) * np.array([[1, 1], [1, -1]], dtype=complex))


def S_mat() -> sp.csr_matrix:
    return sp.csr_matrix(np.diag([1, 1j]))


def V_mat() -> sp.csr_matrix:
    # principal square root of X, equal to H S H
    return sp.csr_matrix(0.5 * np.array([[1 + 1j, 1 - 1j], [1 - 1j, 1 + 1j]]))


def T_mat() -> sp.csr_matrix:
    return sp.csr_matrix(np.diag([1, np.exp(1j * np.pi / 4)]))


def controlled(U: sp.csr_matrix) -> sp.csr_matrix:
    """Controlled-U on (control, target), control most significant."""
    return sp.csr_matrix(sp.block_diag([I_mat(), U], format="csr"))


def SWAP_mat() -> sp.csr_matrix:
    rows = np.array([0, 2, 1, 3])
    return sp.csr_matrix((np.ones(4, dtype=complex), (rows, np.arange(4))), shape=(4, 4))


LOCAL_UNITARIES = {
    "noop": I_mat,
    "X": X_mat,
    "Y": Y_mat,
    "Z": Z_mat,
    "H": H_mat,
    "S": S_mat,
    "Sdg": lambda: sp.csr_matrix(S_mat().conj().T),
    "V": V_mat,
    "Vdg": lambda: sp.csr_matrix(V_mat().conj().T),
    "T": T_mat,
    "Tdg": lambda: sp.csr_matrix(T_mat().conj().T),
    "CX": lambda: controlled(X_mat()),
    "CY": lambda: controlled(Y_mat()),
    "CZ": lambda: controlled(Z_mat()),
    "SWAP": SWAP_mat,
}


def _bits_to_linear(bits) -> int:
    """Linear index of a computational basis state, qubit 0 most significant."""
    idx = 0
    for b in bits:
        idx = 2 * idx + int(b)
    return idx


def embed_unitary(U_local: sp.csr_matrix, qubit_indices: list[int], n_qubits: int) -> sp.csr_matrix:
    """
    Embed a local unitary acting on a subset of qubits into the full Hilbert space.

    - Basis ordering: |q0> ⊗ |q1> ⊗ ... ⊗ |qN-1>
    - The local unitary acts on the qubits in the order given by ``qubit_indices``.

    Args:
        U_local: Local unitary of shape (2^k, 2^k) with k = len(qubit_indices).
        qubit_indices: Indices of the qubits the local unitary acts on.
        n_qubits: Number of qubits of the full system.

    Returns:
        Full unitary of shape (2^n, 2^n).
    """
    sel = list(map(int, qubit_indices))
    rest = [k for k in range(n_qubits) if k not in sel]
    if U_local.shape != (2 ** len(sel), 2 ** len(sel)):
        raise ValueError(f"U_local shape {U_local.shape} does not match {len(sel)} qubit(s).")

    D = 2 ** n_qubits
    # Permutation P reordering tensor factors to [sel..., rest...]
    order = sel + rest
    rows = np.empty(D, dtype=int)
    for old_idx, bits in enumerate(np.ndindex(*([2] * n_qubits))):
        rows[old_idx] = _bits_to_linear([bits[k] for k in order])
    P = sp.csr_matrix((np.ones(D, dtype=complex), (rows, np.arange(D))), shape=(D, D))

    U_kron = sp.kron(U_local, sp.identity(2 ** len(rest), dtype=complex, format="csr"), format="csr")
    return sp.csr_matrix(P.T @ U_kron @ P)


def equal_up_to_global_phase(U: sp.spmatrix | np.ndarray, W: sp.spmatrix | np.ndarray, atol: float = 1e-9) -> bool:
    """
    Check whether U = e^{i theta} W for some theta.
    """
    U = U.toarray() if sp.issparse(U) else np.asarray(U)
    W = W.toarray() if sp.issparse(W) else np.asarray(W)
    if U.shape != W.shape:
        return False
    flat_index = np.argmax(np.abs(W))
    w = W.flat[flat_index]
    if abs(w) < atol:
        return np.allclose(U, W, atol=atol)
    phase = U.flat[flat_index] / w
    if not np.isclose(abs(phase), 1, atol=atol):
        return False
    return np.allclose(U, phase * W, atol=atol)
