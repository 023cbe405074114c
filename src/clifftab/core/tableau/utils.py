import numpy as np
import galois

PAULI_LABELS = {(0, 0): "I", (1, 0): "X", (0, 1): "Z", (1, 1): "Y"}


def _as_int(v) -> np.ndarray:
    if isinstance(v, galois.FieldArray):
        v = v.view(np.ndarray)
    return np.asarray(v).astype(np.int64)


def pauli_phase_exponent(x1, z1, x2, z2) -> int:
    """
    Exponent k (mod 4) such that P1 P2 = i^k P(x1 + x2, z1 + z2).

    P1 and P2 are unsigned Hermitian Pauli strings given by their X and Z bits, with x = z = 1
    standing for Y. Per qubit, the exponent g(x1, z1, x2, z2) is

        I * P -> 0
        X * P -> z2 (2 x2 - 1)
        Z * P -> x2 (1 - 2 z2)
        Y * P -> z2 - x2

    which gives e.g. X Z = -i Y (g = -1) and Z X = i Y (g = 1).
    """
    x1, z1, x2, z2 = (_as_int(v) for v in (x1, z1, x2, z2))
    g = np.zeros_like(x1)

    mask_x = (x1 == 1) & (z1 == 0)
    g[mask_x] = z2[mask_x] * (2 * x2[mask_x] - 1)

    mask_z = (x1 == 0) & (z1 == 1)
    g[mask_z] = x2[mask_z] * (1 - 2 * z2[mask_z])

    mask_y = (x1 == 1) & (z1 == 1)
    g[mask_y] = z2[mask_y] - x2[mask_y]

    return int(np.sum(g)) % 4


def row_product(left: tuple, right: tuple, i_power: int = 0) -> tuple:
    """
    Product i^i_power * left * right of two signed Pauli rows.

    Rows are ``(x, z, phase)`` triples with x, z GF(2) vectors and the sign (-1)^phase. The
    result must be Hermitian again (i_power = 0 for commuting rows, odd for anticommuting rows).
    Otherwise the phase bit is meaningless.

    Returns:
        The ``(x, z, phase)`` triple of the product, with phase a plain int.
    """
    x1, z1, r1 = left
    x2, z2, r2 = right
    exponent = (2 * int(r1) + 2 * int(r2) + pauli_phase_exponent(x1, z1, x2, z2) + i_power) % 4
    return x1 + x2, z1 + z2, exponent // 2


def pauli_row_to_str(x, z, phase) -> str:
    """Signed Pauli string for a tableau row, e.g. ``'-XIZ'``."""
    x, z = _as_int(x), _as_int(z)
    sign = "-" if int(phase) else "+"
    return sign + "".join(PAULI_LABELS[(int(xi), int(zi))] for xi, zi in zip(x, z))


def symplectic_form(n: int) -> np.ndarray:
    """
    Symplectic form Omega over GF(2) for rows laid out as [x | z].
    """
    Id = np.eye(n, dtype=int)
    Z = np.zeros((n, n), dtype=int)
    return np.block([[Z, Id], [Id, Z]])


def is_symplectic(F) -> bool:
    """
    Check that the rows of the (2n x 2n) binary matrix F satisfy F Omega F^T = Omega over GF(2).

    For a tableau stacked as [destabilizers; stabilizers] this is the commutation pattern of a
    symplectic basis: rows of each half commute, and destabilizer i anticommutes with stabilizer i
    only.
    """
    F = _as_int(F) % 2
    if F.ndim != 2 or F.shape[0] != F.shape[1] or F.shape[0] % 2:
        return False
    Omega = symplectic_form(F.shape[0] // 2)
    return np.array_equal((F @ Omega @ F.T) % 2, Omega)
