from __future__ import annotations

from typing import Optional, Tuple

import numpy as np


def build_effect_matrix(y: int, x: int) -> np.ndarray:
    """Return the NxN effect matrix A over GF(2) for a y-by-x SecureBox.

    Column q encodes the cells toggled when toggling cell q: A[p, q] = 1 iff
    cells p and q share a row or a column (this includes p == q).
    """
    N = y * x
    if N == 0:
        return np.zeros((0, 0), dtype=np.uint8)
    rows, cols = np.divmod(np.arange(N), x)
    same_row = rows[:, None] == rows[None, :]
    same_col = cols[:, None] == cols[None, :]
    return (same_row | same_col).astype(np.uint8)


def build_system(state: np.ndarray) -> np.ndarray:
    """Return the augmented matrix [A | b] for a box snapshot.

    Equation p = i * x + j says "cell (i, j) must end at 0"; b[p] is the
    current value of that cell.
    """
    state = np.asarray(state, dtype=bool)
    y, x = state.shape
    A = build_effect_matrix(y, x)
    b = state.reshape(-1, 1).astype(np.uint8)
    return np.concatenate([A, b], axis=1)  # shape (N, N+1)


def gf2_rref_augmented(M: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Return RREF of augmented matrix [A|b] over GF(2) and the pivot index.

    index[col] is the row holding the pivot of column col, or -1 when col is a
    free variable. Rows are packed to bytes so a row XOR touches whole words.
    """
    M = (np.asarray(M) % 2).astype(np.uint8)
    m, width = M.shape
    n = width - 1
    P = np.packbits(M, axis=1)  # big-endian: col c -> byte c >> 3

    row = 0
    index = np.full(n, -1, dtype=np.intp)
    for col in range(n):
        if row == m:
            break
        mask = np.uint8(0x80 >> (col & 7))
        hits = (P[:, col >> 3] & mask) != 0
        # find a pivot in/under current row
        below = np.flatnonzero(hits[row:])
        if below.size == 0:
            continue
        pivot = row + int(below[0])
        # swap pivot row up
        if pivot != row:
            P[[row, pivot]] = P[[pivot, row]]
            hits[[row, pivot]] = hits[[pivot, row]]
        # eliminate ALL other rows (Gauss-Jordan), XOR is subtraction mod 2
        hits[row] = False
        P[hits] ^= P[row]
        index[col] = row
        row += 1

    R = np.unpackbits(P, axis=1, count=width)
    return R, index


def gf2_solve(M: np.ndarray) -> Tuple[Optional[np.ndarray], bool]:
    """Solve the augmented system [A|b] over GF(2).

    Returns:
        x: one solution (length n, uint8) with free variables set to 0, or
           None if inconsistent
        solvable: bool
    """
    n = M.shape[1] - 1
    R, index = gf2_rref_augmented(M)
    pivoted = index >= 0
    rank = int(pivoted.sum())

    # Inconsistency check: rows without a pivot must read 0...0 | 0
    if np.any(R[rank:, n]):
        return None, False

    pivot_rows = index[pivoted]
    assert np.array_equal(pivot_rows, np.arange(rank)), "pivot rows out of order"
    assert np.all(R[pivot_rows, np.flatnonzero(pivoted)] == 1), "empty pivot"

    x = np.zeros((n,), dtype=np.uint8)
    x[pivoted] = R[pivot_rows, n]
    return x, True
