import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Rectangle


def _outline_toggles(ax, toggles, color, linewidth=2):
    for r, c in toggles:
        ax.add_patch(
            Rectangle(
                (c - 0.5, r - 0.5),
                1,
                1,
                edgecolor=color,
                facecolor="none",
                linewidth=linewidth,
            )
        )


def _draw_state(ax, state, title, toggles=(), toggled_color="red", cmap="Greys"):
    state = np.asarray(state, dtype=float)
    y, x = state.shape
    ax.imshow(state, cmap=cmap, vmin=0.0, vmax=1.0)
    _outline_toggles(ax, toggles, toggled_color)
    ax.set_xticks(range(x))
    ax.set_yticks(range(y))
    ax.set_xlabel("col")
    ax.set_ylabel("row")
    ax.set_title(title)
    return ax


def show_box(state, toggles=(), ax=None, title="SecureBox", toggled_color="red"):
    """
    Show a box state as a heatmap (black = locked) with toggled cells outlined.

    Parameters
    ----------
    state : np.ndarray
        Boolean grid of shape (y, x).
    toggles : iterable[(int, int)]
        Cells to outline, e.g. the toggles of a solution.
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(3.5, 3.5))
    return _draw_state(ax, state, title, toggles, toggled_color)


def show_solution(
    before, toggles, after, titles=("Locked", "Unlocked"), toggled_color="red"
):
    """
    Side-by-side view of the box before and after applying the toggles.
    The toggled cells are outlined on the "before" panel.
    """
    _, axes = plt.subplots(1, 2, figsize=(7.2, 3.5), constrained_layout=True)
    _draw_state(axes[0], before, titles[0], toggles, toggled_color)
    _draw_state(axes[1], after, titles[1])
    return list(axes)
