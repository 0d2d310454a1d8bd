from __future__ import annotations

import logging
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from .algebra import build_system, gf2_solve
from .base import Box
from .structural import structural_solve

logger = logging.getLogger(__name__)

METHODS = ("elimination", "structural", "auto")
# 40x40: beyond this the cubic elimination cost dominates
AUTO_ELIMINATION_LIMIT = 1600


class UnlockReport(NamedTuple):
    solution: Optional[np.ndarray]
    consistent: bool
    toggles: List[Tuple[int, int]]
    locked: bool


def solve_state(
    state: np.ndarray, method: str = "auto"
) -> Tuple[Optional[np.ndarray], bool]:
    """Return the flat toggle vector that clears ``state``, and whether one exists."""
    if method not in METHODS:
        raise ValueError(f"Unknown method: {method}")
    if method == "auto":
        method = (
            "structural" if state.size > AUTO_ELIMINATION_LIMIT else "elimination"
        )
    if method == "structural":
        return structural_solve(state)
    return gf2_solve(build_system(state))


def apply_solution(
    box: Box, solution: np.ndarray, width: int
) -> List[Tuple[int, int]]:
    """Toggle every cell whose bit is set, in increasing flat index order."""
    toggles = []
    for q in np.flatnonzero(solution):
        row, col = divmod(int(q), width)
        box.toggle(row, col)
        toggles.append((row, col))
    return toggles


def open_box(box: Box, method: str = "auto") -> UnlockReport:
    """Solve the box through its public operations and report what happened."""
    state = np.asarray(box.get_state(), dtype=bool)
    if state.ndim != 2:
        raise ValueError(f"Box state must be 2-D, got shape {state.shape}")
    y, x = state.shape

    solution, consistent = solve_state(state, method)
    if not consistent or solution is None:
        logger.warning(
            "No solution for %dx%d box (%d cells locked)",
            y,
            x,
            int(state.sum()),
        )
        return UnlockReport(None, False, [], box.is_locked())

    logger.debug("%dx%d box: %d toggles", y, x, int(solution.sum()))
    toggles = apply_solution(box, solution, x)
    locked = box.is_locked()
    if locked:
        logger.error("%dx%d box still locked after %d toggles", y, x, len(toggles))
    return UnlockReport(solution, True, toggles, locked)


def unlock(box: Box, method: str = "auto") -> bool:
    """Return True if the box remains locked, False if it was opened."""
    return open_box(box, method).locked
