import math

import pytest

from reformant.windows import WindowType, cwindow, hnwindow, hwindow, rwindow, w_window

DATA = [float(i % 7) - 3.0 for i in range(64)]


def test_rectangular_copies_slice():
    assert rwindow(DATA, 5, 10) == DATA[5:15]


def test_rectangular_pre_emphasis():
    out = rwindow(DATA, 2, 8, 0.5)
    assert out == [DATA[3 + i] - 0.5 * DATA[2 + i] for i in range(8)]


@pytest.mark.parametrize("func", [hwindow, cwindow, hnwindow])
def test_windows_are_symmetric(func):
    ones = [1.0] * 32
    w = func(ones, 0, 32)
    assert len(w) == 32
    for a, b in zip(w, reversed(w)):
        assert math.isclose(a, b, abs_tol=1e-12)


@pytest.mark.parametrize("func", [hwindow, cwindow, hnwindow])
def test_windows_bounded_by_one(func):
    w = func([1.0] * 16, 0, 16)
    assert all(0.0 <= v <= 1.0 for v in w)


def test_hamming_minimum_above_hann():
    ones = [1.0] * 16
    assert min(hwindow(ones, 0, 16)) > min(hnwindow(ones, 0, 16))


def test_dispatch_matches_functions():
    assert w_window(DATA, 1, 20, 0.9, WindowType.HANN) == hnwindow(DATA, 1, 20, 0.9)
    assert w_window(DATA, 1, 20, 0.0, WindowType.COS4) == cwindow(DATA, 1, 20)


def test_unknown_window_type():
    with pytest.raises(ValueError):
        w_window(DATA, 0, 4, 0.0, 42)


def test_signal_too_short():
    with pytest.raises(ValueError):
        rwindow([1.0, 2.0], 0, 2, 0.5)