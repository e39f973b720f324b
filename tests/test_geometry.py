import numpy as np
import pytest

from skelprune.geometry import (
    MAX_COORDINATE,
    as_points,
    centroid,
    euclidean_distance,
    polyline_length,
    round_coordinates,
)


def test_centroid_mean():
    pts = np.array([[0, 0, 0], [2, 4, 6]], dtype=float)
    np.testing.assert_allclose(centroid(pts), [1.0, 2.0, 3.0])


def test_centroid_of_no_points_is_nan():
    c = centroid(np.zeros((0, 3)))
    assert c.shape == (3,)
    assert np.all(np.isnan(c))


def test_euclidean_distance():
    assert np.isclose(euclidean_distance([0, 0, 0], [3, 4, 12]), 13.0)


@pytest.mark.parametrize(
    "value, expected",
    [(0.5, 1), (1.49, 1), (-0.5, 0), (-1.5, -1), (-1.51, -2), (2.0, 2)],
)
def test_round_coordinates_half_up(value: float, expected: int):
    out = round_coordinates(np.array([value, 0.0, 0.0]))
    assert out[0] == expected


def test_round_coordinates_nan_sentinel():
    out = round_coordinates(np.array([np.nan, 1.2, np.nan]))
    np.testing.assert_array_equal(out, [MAX_COORDINATE, 1, MAX_COORDINATE])


def test_as_points_shapes():
    assert as_points(None).shape == (0, 3)
    assert as_points([1, 2, 3]).shape == (1, 3)
    assert as_points([[1, 2, 3], [4, 5, 6]]).shape == (2, 3)
    with pytest.raises(ValueError):
        as_points([[1, 2], [3, 4]])


def test_polyline_length():
    pts = np.array([[0, 0, 0], [3, 4, 0], [3, 4, 2]], dtype=float)
    assert np.isclose(polyline_length(pts), 7.0)
    assert polyline_length(pts[:1]) == 0.0
