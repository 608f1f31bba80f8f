import math
import random

import pytest

from reformant.lpc import (
    MAX_ORDER,
    LpcError,
    autoc,
    dchlsky,
    dcwmtrx,
    dlwrtrn,
    dreflpc,
    durbin,
    lpc,
    lpcbsa,
    w_covar,
)
from reformant.windows import WindowType


def _signal(n=600, seed=3):
    rng = random.Random(seed)
    return [
        1000.0 * math.sin(2 * math.pi * 500 * i / 8000)
        + 600.0 * math.sin(2 * math.pi * 1500 * i / 8000)
        + rng.uniform(-20, 20)
        for i in range(n)
    ]


def test_autoc_silence_is_white_noise():
    r, e = autoc(8, [0.0] * 8, 3)
    assert r == [1.0, 0.0, 0.0, 0.0]
    assert e == 1.0


def test_autoc_normalised():
    r, e = autoc(100, _signal(), 5)
    assert r[0] == 1.0
    assert all(abs(v) <= 1.0 for v in r)
    assert e > 0


def test_durbin_first_order():
    k, a, ex = durbin([1.0, 0.5], 1)
    assert k == [-0.5]
    assert a == [-0.5]
    assert math.isclose(ex, 0.75)


def test_lpc_shape_and_leading_one():
    coeffs, gain = lpc(10, 70.0, 256, _signal(), 0, 0.9, WindowType.HAMMING)
    assert len(coeffs) == 11
    assert coeffs[0] == 1.0
    assert gain > 0


def test_lpc_silence_raises():
    with pytest.raises(LpcError):
        lpc(4, 70.0, 64, [0.0] * 100, 0, 0.0, WindowType.RECTANGULAR)


def test_lpc_order_too_high():
    with pytest.raises(LpcError):
        lpc(MAX_ORDER + 1, 70.0, 64, _signal(), 0, 0.0, WindowType.RECTANGULAR)


def test_dchlsky_identity():
    a = [1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0]
    m, t, det = dchlsky(a, 3)
    assert m == 3
    assert t == [1.0, 1.0, 1.0]
    assert det == 1.0


def test_dchlsky_reconstructs():
    a = [4.0, 2.0, 2.0, 3.0]
    original = list(a)
    m, _, det = dchlsky(a, 2)
    l00, l10, l11 = a[0], a[2], a[3]
    assert m == 2
    assert math.isclose(l00 * l00, original[0])
    assert math.isclose(l10 * l00, original[2])
    assert math.isclose(l10 * l10 + l11 * l11, original[3])
    assert math.isclose(det * det, original[0] * original[3] - original[1] * original[2])


def test_dlwrtrn_solves_system():
    a = [2.0, 0.0, 1.0, 4.0]
    y = [4.0, 10.0]
    x = dlwrtrn(a, 2, y)
    assert math.isclose(a[0] * x[0], y[0])
    assert math.isclose(a[2] * x[0] + a[3] * x[1], y[1])


def test_dreflpc_leading_one():
    c = [0.3, -0.2, 0.1]
    a = dreflpc(c, 3)
    assert len(a) == 4
    assert a[0] == 1.0
    assert a[3] == c[2]


def test_dcwmtrx_symmetric():
    s = _signal(60)
    phi, shi, ps = dcwmtrx(s, 4, 50, 4, [1.0] * 46)
    for i in range(4):
        for j in range(4):
            assert phi[4 * i + j] == phi[4 * j + i]
    assert len(shi) == 4
    assert math.isclose(ps, sum(x * x for x in s[4:50]))


def test_lpcbsa_reproducible_with_seed():
    data = _signal()
    first = lpcbsa(10, 70.0, 200, data, 0, 0.7, random.Random(1))
    second = lpcbsa(10, 70.0, 200, data, 0, 0.7, random.Random(1))
    assert first == second
    coeffs, energy = first
    assert len(coeffs) == 11
    assert coeffs[0] == 1.0
    assert energy > 0


def test_w_covar_result():
    result = w_covar(_signal(), 0, 8, 200, 0, 0.0, WindowType.RECTANGULAR)
    assert result.coefficients[0] == 1.0
    assert 1 <= result.order <= 8
    assert result.r0 > 0


def test_w_covar_order_one_raises():
    with pytest.raises(LpcError):
        w_covar(_signal(), 0, 1, 100)