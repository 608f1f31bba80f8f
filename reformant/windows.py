"""Analysis windows applied to a slice of a signal, with optional pre-emphasis."""

from __future__ import annotations

import math
from enum import IntEnum
from functools import lru_cache
from typing import Sequence


class WindowType(IntEnum):
    RECTANGULAR = 0
    HAMMING = 1
    COS4 = 2
    HANN = 3


@lru_cache(maxsize=32)
def _hamming(n: int) -> tuple[float, ...]:
    arg = math.pi * 2.0 / n
    return tuple(0.54 - 0.46 * math.cos((i + 0.5) * arg) for i in range(n))


@lru_cache(maxsize=32)
def _cos4(n: int) -> tuple[float, ...]:
    arg = math.pi * 2.0 / n
    return tuple((0.5 * (1.0 - math.cos((i + 0.5) * arg))) ** 4 for i in range(n))


@lru_cache(maxsize=32)
def _hann(n: int) -> tuple[float, ...]:
    arg = math.pi * 2.0 / n
    return tuple(0.5 - 0.5 * math.cos((i + 0.5) * arg) for i in range(n))


def _frame(data: Sequence[float], offset: int, n: int, pre_emphasis: float) -> list[float]:
    """Return ``n`` samples from ``offset``, pre-emphasised when requested."""
    if n < 0 or offset < 0:
        raise ValueError("window length and offset must not be negative")
    needed = offset + n + (1 if pre_emphasis != 0.0 else 0)
    if needed > len(data):
        raise ValueError("signal too short for the requested window")
    current = data[offset : offset + n]
    if pre_emphasis == 0.0:
        return [float(x) for x in current]
    following = data[offset + 1 : offset + n + 1]
    return [nxt - pre_emphasis * cur for cur, nxt in zip(current, following)]


def _weighted(weights: Sequence[float], frame: Sequence[float]) -> list[float]:
    return [w * x for w, x in zip(weights, frame)]


def rwindow(data: Sequence[float], offset: int, n: int, pre_emphasis: float = 0.0) -> list[float]:
    """Rectangular window."""
    return _frame(data, offset, n, pre_emphasis)


def hwindow(data: Sequence[float], offset: int, n: int, pre_emphasis: float = 0.0) -> list[float]:
    """Hamming window."""
    return _weighted(_hamming(n), _frame(data, offset, n, pre_emphasis))


def cwindow(data: Sequence[float], offset: int, n: int, pre_emphasis: float = 0.0) -> list[float]:
    """Cos^4 window."""
    return _weighted(_cos4(n), _frame(data, offset, n, pre_emphasis))


def hnwindow(data: Sequence[float], offset: int, n: int, pre_emphasis: float = 0.0) -> list[float]:
    """Hann window."""
    return _weighted(_hann(n), _frame(data, offset, n, pre_emphasis))


_WINDOWS = {
    WindowType.RECTANGULAR: rwindow,
    WindowType.HAMMING: hwindow,
    WindowType.COS4: cwindow,
    WindowType.HANN: hnwindow,
}


def w_window(
    data: Sequence[float],
    offset: int,
    n: int,
    pre_emphasis: float = 0.0,
    window_type: WindowType = WindowType.RECTANGULAR,
) -> list[float]:
    """Apply the window of ``window_type``."""
    try:
        func = _WINDOWS[WindowType(window_type)]
    except ValueError:
        raise ValueError(f"Unknown window type ({window_type!r}) requested") from None
    return func(data, offset, n, pre_emphasis)