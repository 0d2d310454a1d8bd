from __future__ import annotations

from typing import Protocol

import numpy as np


class Box(Protocol):
    """The only operations the unlocker is allowed to use on a box."""

    def toggle(self, row: int, col: int) -> None: ...
    def is_locked(self) -> bool: ...
    def get_state(self) -> np.ndarray: ...
