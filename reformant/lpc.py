"""Linear-prediction analysis: autocorrelation, covariance and stabilised covariance."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from functools import lru_cache
from typing import MutableSequence, Optional, Sequence

from reformant.windows import WindowType, w_window

_log = logging.getLogger(__name__)

MAX_ORDER = 60


class LpcError(ValueError):
    """An LPC analysis could not produce a result."""


def _sqrt(x: float) -> float:
    return math.sqrt(x) if x >= 0.0 else math.nan


def _div(a: float, b: float) -> float:
    if b != 0.0:
        return a / b
    if a == 0.0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def autoc(window_size: int, s: Sequence[float], p: int) -> tuple[list[float], float]:
    """Normalised autocorrelation up to lag ``p`` and the rms of the window."""
    frame = s[:window_size]
    sum0 = sum(x * x for x in frame)
    if sum0 == 0.0:
        # No energy: pretend it is low-energy white noise.
        return [1.0] + [0.0] * p, 1.0
    r = [1.0]
    for lag in range(1, p + 1):
        r.append(sum(a * b for a, b in zip(frame, frame[lag:])) / sum0)
    if sum0 < 0.0:
        _log.warning("autoc(): sum0 = %s", sum0)
    return r, math.sqrt(sum0 / window_size)


def durbin(r: Sequence[float], p: int) -> tuple[list[float], list[float], float]:
    """Levinson-Durbin recursion: reflection and predictor coefficients and error."""
    k = [0.0] * p
    a = [0.0] * p
    e = r[0]
    k[0] = -r[1] / e
    a[0] = k[0]
    e *= 1.0 - k[0] * k[0]
    for i in range(1, p):
        s = -sum(a[j] * r[i - j] for j in range(i))
        k[i] = (s - r[i + 1]) / e
        a[i] = k[i]
        b = a[: i + 1]
        for j in range(i):
            a[j] += k[i] * b[i - j - 1]
        e *= 1.0 - k[i] * k[i]
    return k, a, e


def lpc(
    order: int,
    stabl: float,
    window_size: int,
    data: Sequence[float],
    offset: int = 0,
    pre_emphasis: float = 0.0,
    window_type: WindowType = WindowType.RECTANGULAR,
) -> tuple[list[float], float]:
    """Autocorrelation LPC; returns the predictor polynomial (leading 1) and gain."""
    if window_size <= 0 or order > MAX_ORDER or order < 1:
        raise LpcError("invalid window size or LPC order")
    dwind = w_window(data, offset, window_size, pre_emphasis, window_type)
    n, m = window_size, order

    r = [0.0] * (m + 2)
    a = [0.0] * (m + 2)
    rc = [0.0] * (m + 1)
    for j in range(m, -1, -1):
        r[j + 1] = sum(dwind[i] * dwind[i - j] for i in range(j, n))
    if r[1] == 0.0:
        raise LpcError("signal has no energy")

    a[1] = 1.0
    rc[1] = -r[2] / r[1]
    a[2] = rc[1]
    gain = r[1] + r[2] * rc[1]
    for i in range(2, m + 1):
        s = sum(r[i - j + 2] * a[j] for j in range(1, i + 1))
        rc[i] = -s / gain
        for j in range(2, i // 2 + 2):
            at = a[j] + rc[i] * a[i - j + 2]
            a[i - j + 2] += rc[i] * a[j]
            a[j] = at
        a[i + 1] = rc[i]
        gain += rc[i] * s
        if gain <= 0.0:
            raise LpcError("prediction error became non-positive")

    last = max(m, 1)
    return [1.0] + [a[j + 1] for j in range(1, last + 1)], gain


def dlwrtrn(a: Sequence[float], n: int, y: Sequence[float]) -> list[float]:
    """Solve the lower-triangular system ``a x = y`` (``a`` row-major n×n)."""
    x = [0.0] * n
    x[0] = _div(y[0], a[0])
    for i in range(1, n):
        sm = y[i] - sum(a[i * n + j] * x[j] for j in range(i))
        x[i] = _div(sm, a[i * (n + 1)])
    return x


def dreflpc(c: Sequence[float], n: int) -> list[float]:
    """Convert reflection coefficients to predictor coefficients (leading 1)."""
    a = [0.0] * max(n + 1, 2)
    a[0] = 1.0
    a[1] = c[0]
    for i in range(2, n + 1):
        a[i] = c[i - 1]
        for j in range(1, i // 2 + 1):
            k = i - j
            ta1 = a[j] + c[i - 1] * a[k]
            a[k] += a[j] * c[i - 1]
            a[j] = ta1
    return a


def dchlsky(a: MutableSequence[float], n: int) -> tuple[int, list[float], float]:
    """Cholesky decomposition in place; returns rank reached, inverse diagonal, determinant."""
    det = 1.0
    t = [0.0] * n
    m = 0
    for i in range(0, n * n, n):
        k = i
        s = 0
        for j in range(0, i + 1, n):
            sm = a[k] - sum(a[l] * a[j + l - i] for l in range(i, k))
            if i == j:
                if sm <= 0.0:
                    return m, t, det
                root = math.sqrt(sm)
                det *= root
                a[k] = root
                t[s] = 1.0 / root
                m += 1
            else:
                a[k] = sm * t[s]
            k += 1
            s += 1
    return m, t, det


def dcovlpc(
    p: MutableSequence[float],
    s: Sequence[float],
    a: MutableSequence[float],
    n: int,
    c: MutableSequence[float],
) -> int:
    """Covariance LPC from matrix ``p`` and vector ``s``; ``a`` receives the predictor.

    ``a[n]`` holds the signal power on entry. Returns the order reached.
    """
    thres = 1.0e-31
    m, _, _ = dchlsky(p, n)
    c[:n] = dlwrtrn(p, n, s)

    nm = n * m
    m = 0
    for i in range(0, nm, n + 1):
        if p[i] < thres:
            break
        m += 1

    ps = a[n]
    ps1 = 1.0e-8 * ps
    ee = a[n]
    reached = m
    for l in range(m):
        ee -= c[l] * c[l]
        if ee < thres:
            reached = l
            break
        if ee < ps1:
            _log.warning("covlpc is losing accuracy")
        a[l] = math.sqrt(ee)
    m = reached

    c[0] = _div(-c[0], _sqrt(ps))
    for i in range(1, m):
        c[i] = _div(-c[i], a[i - 1])
    coeffs = dreflpc(c, m)
    a[: len(coeffs)] = coeffs
    for i in range(m + 1, n + 1):
        a[i] = 0.0
    return m


def dcwmtrx(
    s: Sequence[float], ni: int, nl: int, order: int, w: Sequence[float]
) -> tuple[list[float], list[float], float]:
    """Weighted covariance matrix ``phi``, cross vector ``shi`` and power ``ps``."""
    span = nl - ni
    ps = sum(s[i] * s[i] * w[i - ni] for i in range(ni, nl))
    shi = [
        sum(s[ni + j] * s[ni - i + j - 1] * w[j] for j in range(span)) for i in range(order)
    ]
    phi = [0.0] * (order * order)
    for i in range(order):
        for j in range(i + 1):
            sm = sum(s[ni - i - 1 + k] * s[ni - j - 1 + k] * w[k] for k in range(span))
            phi[order * i + j] = sm
            phi[order * j + i] = sm
    return phi, shi, ps


def dlpcwtd(
    s: Sequence[float],
    ls: int,
    p: MutableSequence[float],
    order: int,
    c: MutableSequence[float],
    phi: MutableSequence[float],
    shi: MutableSequence[float],
    xl: float,
    w: Sequence[float],
) -> int:
    """Stabilised weighted covariance LPC; ``p`` receives the predictor. Returns the order."""
    np_ = order
    new_phi, new_shi, pss = dcwmtrx(s, np_, ls, np_, w)
    phi[: len(new_phi)] = new_phi
    shi[: len(new_shi)] = new_shi
    np1 = np_ + 1

    if xl >= 1.0e-4:
        for i in range(np_):
            p[i] = phi[i * np1]
        p[np_] = pss
        pss7 = 0.0000001 * pss

        mm, _, _ = dchlsky(phi, np_)
        if mm < np_:
            _log.warning("LPCHFA error covariance matrix rank %d", mm)
        c[:np_] = dlwrtrn(phi, np_, shi)

        ee = pss
        thres = 0.0
        m = mm
        for idx in range(mm):
            if phi[0] < thres:
                m = idx
                break
            ee -= c[idx] * c[idx]
            if ee < thres:
                m = idx
                break
            if ee < pss7:
                _log.warning("LPCHFA is losing accuracy")
        if m != mm:
            _log.warning("LPCHFA error - inconsistent value of m %d", m)

        pre = ee * xl
        size = np_ * np_
        for i in range(1, size, np1):
            j = i
            for k in range(i + np_ - 1, size, np_):
                phi[k] = phi[j]
                j += 1

        pre3 = 0.375 * pre
        pre2 = 0.25 * pre
        pre0 = 0.0625 * pre
        for ip, i in enumerate(range(0, size, np1)):
            phi[i] = p[ip] + pre3
            i2 = i - np_
            if i2 > 0:
                phi[i2] = phi[i - 1] = phi[i2] - pre2
            i3 = i2 - np_
            if i3 > 0:
                phi[i3] = phi[i - 2] = phi[i3] + pre0
        shi[0] -= pre2
        shi[1] += pre0
        p[np_] = pss + pre3

    return dcovlpc(phi, shi, p, np_, c)


@lru_cache(maxsize=32)
def _bsa_window(size: int) -> tuple[float, ...]:
    fham = 6.28318506 / size
    return tuple(0.54 - 0.46 * math.cos(i * fham) for i in range(size))


def lpcbsa(
    order: int,
    stabl: float,
    window_size: int,
    data: Sequence[float],
    offset: int = 0,
    pre_emphasis: float = 0.0,
    rng: Optional[random.Random] = None,
) -> tuple[list[float], float]:
    """Stabilised covariance LPC with dither; returns predictor (length order+1) and energy."""
    rng = rng if rng is not None else random.Random()
    w = _bsa_window(window_size)
    wind = window_size + order + 1
    wind1 = wind - 1
    if offset < 0 or offset + wind > len(data):
        raise ValueError("signal too short for the requested window")

    sig = [data[offset + i] + 0.016 * rng.random() - 0.008 for i in range(wind)]
    for i in range(1, wind):
        sig[i - 1] = sig[i] - pre_emphasis * sig[i - 1]

    amax = sum(sig[i] * sig[i] for i in range(order, wind1))
    energy = math.sqrt(amax / len(w))
    scale = _div(1.0, energy)
    for i in range(wind1):
        sig[i] *= scale

    coeffs = [0.0] * (order + 1)
    rc = [0.0] * order
    phi = [0.0] * (order * order)
    shi = [0.0] * order
    mm = dlpcwtd(sig, wind1, coeffs, order, rc, phi, shi, 0.09, list(w))
    if mm != order:
        raise LpcError(f"lpcwtd error mm < np ({mm} < {order})")
    return coeffs, energy


@dataclass(frozen=True)
class CovarResult:
    """Outcome of covariance LPC."""

    coefficients: list[float]
    order: int
    alpha: float
    r0: float


def w_covar(
    data: Sequence[float],
    offset: int,
    order: int,
    n: int,
    start: int = 0,
    pre_emphasis: float = 0.0,
    window_type: WindowType = WindowType.RECTANGULAR,
) -> CovarResult:
    """Covariance-method LPC; the order may drop where the recursion becomes unstable."""
    m = order
    x = w_window(data, offset, n, pre_emphasis, window_type) + [0.0]
    b = [0.0] * ((m + 1) * (m + 1) // 2 + 2)
    beta = [0.0] * (m + 3)
    grc = [0.0] * (m + 3)
    cc = [0.0] * (m + 3)
    y = [0.0] * (m + 2)

    ibeg = start - 1
    ibeg1 = ibeg + 1
    mp = m + 1
    ibegm1 = ibeg - 1
    ibeg2 = ibeg + 2
    ibegmp = ibeg + mp

    alpha = 0.0
    for np_ in range(mp, n + 1):
        np1 = np_ + ibegm1
        np0 = np_ + ibeg
        alpha += x[np0] * x[np0]
        cc[1] += x[np0] * x[np1]
        cc[2] += x[np1] * x[np1]
    r0 = alpha

    b[1] = 1.0
    beta[1] = cc[2]
    grc[1] = _div(-cc[1], cc[2])
    y[0] = 1.0
    y[1] = grc[1]
    alpha += grc[1] * cc[1]

    if m <= 1:
        raise LpcError("covariance LPC needs an order above 1")

    def result(final_order: int) -> CovarResult:
        return CovarResult(y[: m + 1], final_order, alpha, r0)

    for minc in range(2, m + 1):
        for j in range(1, minc + 1):
            jp = minc + 2 - j
            n1 = ibeg1 + mp - jp
            n2 = ibeg1 + n - minc
            n3 = ibeg2 + n - jp
            cc[jp] = cc[jp - 1] + x[ibegmp - minc] * x[n1] - x[n2] * x[n3]
        cc[1] = sum(x[np_ + ibeg - minc] * x[np_ + ibeg] for np_ in range(mp, n + 1))
        msub = (minc * minc - minc) // 2
        b[msub + minc] = 1.0
        for ip in range(1, minc):
            isub = (ip * ip - ip) // 2
            if beta[ip] <= 0.0:
                return result(minc - 1)
            gam = sum(cc[j + 1] * b[isub + j] for j in range(1, ip + 1)) / beta[ip]
            for jp in range(1, ip + 1):
                b[msub + jp] -= gam * b[isub + jp]
        beta[minc] = sum(cc[j + 1] * b[msub + j] for j in range(1, minc + 1))
        if beta[minc] <= 0.0:
            return result(minc - 1)
        s = sum(cc[ip] * y[ip - 1] for ip in range(1, minc + 1))
        grc[minc] = -s / beta[minc]
        for ip in range(1, minc):
            y[ip] += grc[minc] * b[msub + ip]
        y[minc] = grc[minc]
        alpha -= grc[minc] * grc[minc] * beta[minc]
        if alpha <= 0.0:
            return result(min(minc, m))
    return result(m)