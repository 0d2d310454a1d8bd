from __future__ import annotations

import numpy as np

MAX_SHUFFLE_TOGGLES = 1000


class SecureBox:
    """Locked container: a ``y x x`` grid of booleans (True = locked).

    A toggle at ``(row, col)`` flips the cell, all of row ``row`` and all of
    column ``col``. The cell itself is hit three times, so it ends up flipped
    once.
    """

    def __init__(
        self,
        y: int,
        x: int,
        rng: np.random.Generator | None = None,
        state: np.ndarray | None = None,
    ):
        if y < 0 or x < 0:
            raise ValueError(f"SecureBox: negative size {y}x{x}")
        self.y = int(y)
        self.x = int(x)
        self.rng = rng or np.random.default_rng()
        if state is None:
            self.state = np.zeros((self.y, self.x), dtype=bool)
            self.shuffle()
        else:
            state = np.asarray(state)
            if state.shape != (self.y, self.x):
                raise ValueError(
                    f"SecureBox: state shape {state.shape} != {(self.y, self.x)}"
                )
            self.state = state.astype(bool, copy=True)

    @property
    def shape(self) -> tuple[int, int]:
        return self.y, self.x

    def toggle(self, row: int, col: int) -> None:
        if not (0 <= row < self.y and 0 <= col < self.x):
            raise IndexError(
                f"SecureBox: toggle({row}, {col}) outside {self.y}x{self.x}"
            )
        self.state[row, col] ^= True
        self.state[row, :] ^= True
        self.state[:, col] ^= True

    def is_locked(self) -> bool:
        return bool(self.state.any())

    def get_state(self) -> np.ndarray:
        return self.state.copy()

    def shuffle(self) -> None:
        """Scramble the box with a random number of random toggles."""
        if self.y == 0 or self.x == 0:
            return
        for _ in range(int(self.rng.integers(0, MAX_SHUFFLE_TOGGLES))):
            self.toggle(
                int(self.rng.integers(self.y)), int(self.rng.integers(self.x))
            )

    def count_locked(self) -> int:
        return int(self.state.sum())

    def __repr__(self):
        return f"SecureBox(y={self.y}, x={self.x}, locked={self.count_locked()})"

    def __str__(self) -> str:
        return "\n".join(
            " ".join("1" if cell else "0" for cell in row) for row in self.state
        )
