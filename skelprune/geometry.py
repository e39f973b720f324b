"""
Geometry helpers shared by the graph containers and the pruning passes.

Vertices own a (possibly empty) set of 3D points. Edge lengths are measured
between the centroids of those point sets, and collapsed clusters are placed at
the integer-rounded centroid of all points they owned.
"""

from typing import Iterable, Union

import numpy as np

# Coordinate written when a centroid is undefined (cluster without points).
MAX_COORDINATE = 2**31 - 1


def as_points(points: Union[None, np.ndarray, Iterable]) -> np.ndarray:
    """Return `points` as a float (N, 3) array; None gives an empty (0, 3) array."""
    if points is None:
        return np.zeros((0, 3), dtype=float)
    arr = np.asarray(points, dtype=float)
    if arr.size == 0:
        return np.zeros((0, 3), dtype=float)
    if arr.ndim == 1 and arr.shape[0] == 3:
        arr = arr.reshape(1, 3)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"Points must be an (N,3) array, got shape {arr.shape}")
    return arr.copy()


def centroid(points: np.ndarray) -> np.ndarray:
    """
    Arithmetic mean of a point set.

    An empty point set has no mean; every coordinate is then NaN.
    """
    pts = as_points(points)
    if pts.shape[0] == 0:
        return np.full(3, np.nan, dtype=float)
    return pts.mean(axis=0)


def euclidean_distance(a: np.ndarray, b: np.ndarray) -> float:
    d = np.asarray(a, dtype=float) - np.asarray(b, dtype=float)
    return float(np.sqrt(np.sum(d * d)))


def round_coordinates(c: np.ndarray) -> np.ndarray:
    """
    Round a real coordinate to the nearest integer point (halves round up).

    NaN coordinates map to `MAX_COORDINATE`.
    """
    c = np.asarray(c, dtype=float)
    out = np.empty(c.shape, dtype=np.int64)
    nan = np.isnan(c)
    out[nan] = MAX_COORDINATE
    out[~nan] = np.floor(c[~nan] + 0.5).astype(np.int64)
    return out


def polyline_length(points: np.ndarray) -> float:
    pts = as_points(points)
    if pts.shape[0] < 2:
        return 0.0
    return float(np.linalg.norm(np.diff(pts, axis=0), axis=1).sum())
