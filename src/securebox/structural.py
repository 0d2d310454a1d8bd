"""Closed-form solver exploiting the row/column structure of a toggle.

Toggling (a, b) hits cell (i, j) iff a == i or b == j, so the combined effect
of a toggle set x on cell (i, j) is R_i + C_j + x_ij (mod 2), where R_i and C_j
are the toggle parities of row i and column j. A solution therefore has the
form

    x_ij = b_ij + R_i + C_j

and is valid iff, with S the total toggle parity and B_i / B'_j the row and
column parities of the state b,

    (width + 1) * R_i = B_i + S,   (height + 1) * C_j = B'_j + S,
    sum(R) = S = sum(C).

Runs in O(height * width) instead of the cubic cost of elimination.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np


def _line_parities(
    parity: np.ndarray, s: int, length: int
) -> Optional[np.ndarray]:
    """Toggle parity of each line, or None if total parity s is infeasible.

    parity holds the state parity of each line, length the number of cells on
    a line.
    """
    if length % 2 == 0:
        lines = parity ^ s
        if int(lines.sum()) % 2 != s:
            return None
        return lines
    # odd lines: the toggle parities cancel out, the state must match s
    if np.any(parity != s):
        return None
    lines = np.zeros_like(parity)
    lines[0] = s
    return lines


def structural_solve(state: np.ndarray) -> Tuple[Optional[np.ndarray], bool]:
    """Solve a box snapshot in closed form.

    Returns (x, True) with x the flat toggle vector (uint8, row-major) or
    (None, False) if no toggle set unlocks the box.
    """
    b = np.asarray(state, dtype=bool).astype(np.uint8)
    y, x = b.shape
    if b.size == 0:
        return np.zeros((0,), dtype=np.uint8), True

    row_parity = (b.sum(axis=1) % 2).astype(np.uint8)
    col_parity = (b.sum(axis=0) % 2).astype(np.uint8)
    for s in (0, 1):
        R = _line_parities(row_parity, s, x)
        C = _line_parities(col_parity, s, y)
        if R is None or C is None:
            continue
        return (b ^ R[:, None] ^ C[None, :]).reshape(-1), True
    return None, False
