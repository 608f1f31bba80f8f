"""Small vector helpers and a selectivity-based peak finder."""

from __future__ import annotations

import math
from typing import Sequence

_EPS_REPLACEMENT = -2.2204e-16


def diff(values: Sequence[float]) -> list[float]:
    """Differences between consecutive elements."""
    return [b - a for a, b in zip(values, values[1:])]


def product(a: Sequence[float], b: Sequence[float]) -> list[float]:
    """Element-wise product."""
    return [x * y for x, y in zip(a, b)]


def find_indices_less_than(values: Sequence[float], threshold: float) -> list[int]:
    """Positions (shifted up by one) of elements below ``threshold``."""
    return [i + 1 for i, v in enumerate(values) if v < threshold]


def select_elements(values: Sequence, indices: Sequence[int]) -> list:
    return [values[i] for i in indices]


def sign_vector(values: Sequence[float], sign: float) -> list[int]:
    """Sign of ``sign * v`` for each element, as -1, 0 or 1."""
    out = []
    for v in values:
        s = sign * v
        out.append(1 if s > 0 else -1 if s < 0 else 0)
    return out


def parabolic_interpolation(array: Sequence[float], x: int) -> tuple[float, float]:
    """Refine the extremum at index ``x`` with a parabola through its neighbours."""
    if x < 1:
        adjusted = x if array[x] <= array[x + 1] else x + 1
    elif x >= len(array) - 1:
        adjusted = x if array[x] <= array[x - 1] else x - 1
    else:
        den = array[x + 1] + array[x - 1] - 2 * array[x]
        delta = array[x - 1] - array[x + 1]
        if den == 0:
            return float(x), array[x]
        return x + delta / (2 * den), array[x] - delta * delta / (8 * den)
    return float(adjusted), array[adjusted]


def find_peaks(x0: Sequence[float], sign: int = 1) -> list[int]:
    """Indices of peaks that stand out by a quarter of the signal's range."""
    if not x0:
        raise ValueError("cannot find peaks of an empty sequence")
    sel = (max(x0) - min(x0)) / 4
    len0 = len(x0)

    dx = [_EPS_REPLACEMENT if d == 0.0 else d for d in diff(x0)]
    ind = find_indices_less_than(product(dx[:-1], dx[1:]), 0)

    x = [x0[0]] + select_elements(x0, ind) + [x0[-1]]
    ind = [0] + ind + [len0 - 1]

    min_mag = min(x)
    left_min = min_mag
    length = len(x)
    if length <= 2:
        return []

    temp_mag = min_mag
    found_peak = False
    sign_dx = sign_vector(diff(x[:3]), sign)
    if sign_dx[0] == sign_dx[1]:
        drop = 1 if sign_dx[0] <= 0 else 0
        del x[drop]
        del ind[drop]
        length -= 1

    ii = 0 if x[0] >= x[1] else 1
    peak_locs: list[int] = []
    temp_loc = 0
    while ii < length:
        ii += 1
        if found_peak:
            temp_mag = min_mag
            found_peak = False
        if x[ii - 1] > temp_mag and x[ii - 1] > left_min + sel:
            temp_loc = ii - 1
            temp_mag = x[ii - 1]
        if ii == length:
            break
        ii += 1
        if not found_peak and temp_mag > sel + x[ii - 1]:
            found_peak = True
            left_min = x[ii - 1]
            peak_locs.append(temp_loc)
        elif x[ii - 1] < left_min:
            left_min = x[ii - 1]

    if x[-1] > temp_mag and x[-1] > left_min + sel:
        peak_locs.append(length - 1)
    elif not found_peak and temp_mag > min_mag:
        peak_locs.append(temp_loc)

    return select_elements(ind, peak_locs)