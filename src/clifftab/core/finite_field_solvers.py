from typing import NamedTuple
import numpy as np
import galois

GF2 = galois.GF(2)


class ColumnOp(NamedTuple):
    """XOR column ``source`` into column ``target``."""
    target: int
    source: int


def as_gf2(matrix) -> galois.FieldArray:
    """
    Return a copy of ``matrix`` as a GF(2) array. Integer entries are reduced mod 2.
    """
    if isinstance(matrix, GF2):
        return matrix.copy()
    return GF2(np.asarray(matrix, dtype=int) % 2)


def gf2_rank(matrix) -> int:
    return int(np.linalg.matrix_rank(as_gf2(matrix)))


def apply_col_ops(matrix, ops: list[ColumnOp]) -> galois.FieldArray:
    """
    Replay column operations, in the given order, on a copy of ``matrix``.
    """
    result = as_gf2(matrix)
    for op in ops:
        result[:, op.target] += result[:, op.source]
    return result


class ColumnEchelon:
    """
    Column-echelon reduction over GF(2), one column at a time, recording every column XOR.

    Pivot rule: for a column, scan rows top to bottom. The first nonzero row that does not yet
    own a pivot becomes the pivot of that column. A nonzero row that already owns a pivot column
    is cleared by XORing that pivot column in, and the scan continues.

    A pivot column is always zero above its pivot row, so clearing a row never refills the rows
    above it.

    Attributes:
        matrix: The (owned) matrix being reduced.
        pivots: Map from pivot row to the column that owns it.
        ops: Column operations applied so far, in order.
    """

    def __init__(self, matrix):
        self.matrix = as_gf2(matrix)
        if self.matrix.ndim != 2:
            raise ValueError("ColumnEchelon requires a 2-dimensional matrix.")
        self.pivots: dict[int, int] = {}
        self.ops: list[ColumnOp] = []

    def xor_column(self, target: int, source: int):
        self.matrix[:, target] += self.matrix[:, source]
        self.ops.append(ColumnOp(target, source))

    def swap_columns(self, a: int, b: int):
        self.xor_column(b, a)
        self.xor_column(a, b)
        self.xor_column(b, a)

    def replace_column(self, col: int, values):
        """Overwrite column ``col`` (e.g. to retry it with different data). Not recorded."""
        self.matrix[:, col] = as_gf2(values)

    def reduce_column(self, col: int) -> bool:
        """
        Reduce column ``col`` against the pivots found so far.

        Returns:
            True if the column found a pivot (it is independent of the previous pivot columns),
            False if it was eliminated to zero.
        """
        for row in range(self.matrix.shape[0]):
            if self.matrix[row, col] == 0:
                continue
            if row not in self.pivots:
                self.pivots[row] = col
                return True
            self.xor_column(col, self.pivots[row])
        return False

    def rank(self) -> int:
        return len(self.pivots)


def gaussian_elimination_col_ops(matrix) -> list[ColumnOp]:
    """
    Column operations that reduce ``matrix`` over GF(2).

    Columns are first brought to echelon form left to right with the pivot rule of
    :class:`ColumnEchelon`. Pivot rows are then cleared outside their pivot column in ascending
    row order. If the matrix is square and full rank, the resulting permutation matrix is finally
    sorted into the identity with column swaps (three XORs each).

    Replaying the returned operations in order, e.g. with :func:`apply_col_ops`, maps a full-rank
    square matrix to the identity and any other matrix to reduced column-echelon form. The result
    depends only on the input.

    Args:
        matrix: A binary matrix (integer array or GF(2) array).

    Returns:
        The ordered list of column operations.
    """
    echelon = ColumnEchelon(matrix)
    n_rows, n_cols = echelon.matrix.shape
    for col in range(n_cols):
        echelon.reduce_column(col)

    reduced = echelon.matrix
    for row in sorted(echelon.pivots):
        pivot_col = echelon.pivots[row]
        for col in range(n_cols):
            if col != pivot_col and reduced[row, col] != 0:
                echelon.xor_column(col, pivot_col)

    if echelon.rank() == n_rows == n_cols:
        for target in range(n_cols):
            if reduced[target, target] != 0:
                continue
            col = next(c for c in range(target + 1, n_cols) if reduced[target, c] != 0)
            echelon.swap_columns(target, col)

    return echelon.ops


def binary_llt_decomposition(matrix) -> tuple[galois.FieldArray, galois.FieldArray]:
    """
    Factor a symmetric binary matrix as D + diag(d) = L L^T over GF(2).

    L is lower unitriangular, so it is always invertible. The vector d marks the diagonal
    entries that have to be flipped before the factorisation holds (Lemma 7 of Aaronson and
    Gottesman, "Improved simulation of stabilizer circuits", PRA 70, 052328 (2004)).

    Below the diagonal, (L L^T)_ij = L_ij + sum_{k<j} L_ik L_jk. Each L_ij is therefore fixed by
    D_ij and the columns already computed.

    Args:
        matrix: A symmetric n x n binary matrix.

    Returns:
        (L, d) as GF(2) arrays of shape (n, n) and (n,).
    """
    a = as_gf2(matrix).view(np.ndarray).astype(int)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise ValueError(f"Binary LLT decomposition requires a square matrix, got shape {a.shape}.")
    if not np.array_equal(a, a.T):
        raise ValueError("Binary LLT decomposition requires a symmetric matrix.")

    n = a.shape[0]
    lower = np.eye(n, dtype=int)
    for j in range(n):
        for i in range(j + 1, n):
            lower[i, j] = (a[i, j] + lower[i, :j] @ lower[j, :j]) % 2

    product = (lower @ lower.T) % 2
    diag = (np.diagonal(product) + np.diagonal(a)) % 2
    return GF2(lower), GF2(diag)
