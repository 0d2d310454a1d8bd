import numpy as np
import pytest

from conftest import scramble, zero_box
from securebox.box import SecureBox


def test_toggle_flips_row_column_and_cell_once():
    box = zero_box(2, 2)
    box.toggle(0, 0)
    assert box.get_state().astype(int).tolist() == [[1, 1], [1, 0]]


def test_toggle_on_larger_box():
    box = zero_box(3, 4)
    box.toggle(1, 2)
    expected = np.zeros((3, 4), dtype=bool)
    expected[1, :] = True
    expected[:, 2] = True
    assert np.array_equal(box.get_state(), expected)


@pytest.mark.parametrize("shape", [(1, 1), (2, 3), (4, 4)])
def test_double_toggle_is_noop(shape, rng):
    y, x = shape
    box, _ = scramble(y, x, rng)
    for i in range(y):
        for j in range(x):
            before = box.get_state()
            box.toggle(i, j)
            box.toggle(i, j)
            assert np.array_equal(box.get_state(), before)


def test_toggles_commute(rng):
    presses = [(int(rng.integers(4)), int(rng.integers(5))) for _ in range(30)]
    a, b = zero_box(4, 5), zero_box(4, 5)
    for r, c in presses:
        a.toggle(r, c)
    for idx in rng.permutation(len(presses)):
        b.toggle(*presses[idx])
    assert np.array_equal(a.get_state(), b.get_state())


def test_get_state_is_a_copy():
    box = zero_box(2, 2)
    snapshot = box.get_state()
    snapshot[0, 0] = True
    assert not box.is_locked()


def test_is_locked():
    box = zero_box(3, 3)
    assert not box.is_locked()
    box.toggle(2, 2)
    assert box.is_locked()
    assert box.count_locked() == 5


def test_shuffle_is_reproducible_with_seed():
    a = SecureBox(6, 7, rng=np.random.default_rng(42))
    b = SecureBox(6, 7, rng=np.random.default_rng(42))
    assert np.array_equal(a.get_state(), b.get_state())


def test_explicit_state_is_copied():
    state = np.array([[1, 0], [0, 0]], dtype=bool)
    box = SecureBox(2, 2, state=state)
    state[1, 1] = True
    assert box.count_locked() == 1


def test_wrong_state_shape_raises():
    with pytest.raises(ValueError):
        SecureBox(2, 3, state=np.zeros((3, 2), dtype=bool))


def test_negative_size_raises():
    with pytest.raises(ValueError):
        SecureBox(-1, 2)


@pytest.mark.parametrize("row, col", [(2, 0), (0, 3), (-1, 0), (0, -1)])
def test_toggle_out_of_range_raises(row, col):
    box = zero_box(2, 3)
    with pytest.raises(IndexError):
        box.toggle(row, col)


def test_empty_box_is_unlocked():
    box = SecureBox(0, 0)
    assert not box.is_locked()
    assert box.get_state().shape == (0, 0)


def test_str_and_repr():
    box = SecureBox(2, 2, state=np.array([[1, 0], [0, 1]], dtype=bool))
    assert str(box) == "1 0\n0 1"
    assert repr(box) == "SecureBox(y=2, x=2, locked=2)"
