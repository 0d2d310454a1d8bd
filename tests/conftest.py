import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from securebox.algebra import build_effect_matrix
from securebox.box import SecureBox


class RecordingBox:
    """Box double that records every call made through the public operations."""

    def __init__(self, box: SecureBox):
        self._box = box
        self.toggles = []
        self.state_reads = 0

    def toggle(self, row, col):
        self.toggles.append((row, col))
        self._box.toggle(row, col)

    def is_locked(self):
        return self._box.is_locked()

    def get_state(self):
        self.state_reads += 1
        return self._box.get_state()


def zero_box(y, x):
    return SecureBox(y, x, state=np.zeros((y, x), dtype=bool))


def scramble(y, x, rng, n_toggles=25):
    """Return a box reached from all-zero by random toggles, and the toggles."""
    box = zero_box(y, x)
    presses = []
    for _ in range(n_toggles):
        r, c = int(rng.integers(y)), int(rng.integers(x))
        box.toggle(r, c)
        presses.append((r, c))
    return box, presses


def residual(state, x):
    """A x + b over GF(2); all zero iff x unlocks state."""
    state = np.asarray(state, dtype=bool)
    A = build_effect_matrix(*state.shape).astype(np.int64)
    return (A @ np.asarray(x, dtype=np.int64) + state.reshape(-1)) % 2


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
