import math

import pytest

from reformant.peaks import (
    diff,
    find_indices_less_than,
    find_peaks,
    parabolic_interpolation,
    product,
    select_elements,
    sign_vector,
)


def test_diff():
    assert diff([1, 4, 9]) == [3, 5]
    assert diff([]) == []


def test_product():
    assert product([1, 2, 3], [4, 5, 6]) == [4, 10, 18]


def test_find_indices_less_than_shifted():
    assert find_indices_less_than([1, -1, 2, -3], 0) == [2, 4]


def test_select_elements():
    assert select_elements([10, 20, 30], [2, 0]) == [30, 10]


def test_sign_vector():
    assert sign_vector([2, 0, -1], 1) == [1, 0, -1]
    assert sign_vector([2, 0, -1], -1) == [-1, 0, 1]


def test_parabolic_symmetric():
    assert parabolic_interpolation([1.0, 3.0, 1.0], 1) == (1.0, 3.0)


def test_parabolic_edge():
    assert parabolic_interpolation([1.0, 2.0], 0) == (0.0, 1.0)


def test_find_peaks_alternating():
    assert find_peaks([0, 1, 0, 2, 0, 3, 0]) == [1, 3, 5]


def test_find_peaks_empty():
    with pytest.raises(ValueError):
        find_peaks([])