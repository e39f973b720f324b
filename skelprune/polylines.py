"""
Polylines-based skeleton handler.

Provides a `PolylinesSkeleton` class to:
- Load/save skeleton polylines from/to text format lines: `N x1 y1 z1 x2 y2 z2 ...`
- Convert polylines to a `SkeletonGraph` (end points become vertices, interior
  points become edge slabs) so they can be pruned, and convert a graph back.

Note: Many skeletonizers emit polylines whose end points at a junction do not
coincide exactly; `to_graph(merge_distance=...)` joins such end points into a
single multi-point vertex.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .geometry import polyline_length
from .graph import SkeletonGraph

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class PolylinesSkeleton:
    """
    Container for a set of 3D polylines.

    Attributes:
        polylines: List of (N_i, 3) arrays of float64
    """

    def __init__(self, polylines: Optional[Sequence[np.ndarray]] = None):
        self.polylines: List[np.ndarray] = []
        if polylines is not None:
            for pl in polylines:
                arr = np.asarray(pl, dtype=float)
                if arr.ndim != 2 or arr.shape[1] != 3:
                    raise ValueError("Each polyline must be an (N,3) array")
                self.polylines.append(arr.copy())

    # ---------------------------------------------------------------------
    # IO
    # ---------------------------------------------------------------------
    @staticmethod
    def from_txt(path: str) -> "PolylinesSkeleton":
        """
        Load polylines from a `.polylines.txt` file where each line encodes one
        polyline as: `N x1 y1 z1 x2 y2 z2 ... xN yN zN`. Blank lines are skipped.
        """
        with open(path, "r", encoding="utf-8") as f:
            polylines = [
                _parse_polyline(line_no, line.split())
                for line_no, line in enumerate(f, start=1)
                if line.strip()
            ]
        logger.debug("Loaded %d polyline(s) from %s", len(polylines), path)
        return PolylinesSkeleton(polylines)

    def to_txt(self, path: str) -> None:
        """Write one `N x1 y1 z1 ...` line per polyline, at full float precision."""
        rows = []
        for pl in self.polylines:
            values = [str(len(pl))] + [repr(float(v)) for v in pl.ravel()]
            rows.append(" ".join(values) + "\n")
        with open(path, "w", encoding="utf-8") as f:
            f.writelines(rows)
        logger.debug("Wrote %d polyline(s) to %s", len(rows), path)

    # ---------------------------------------------------------------------
    # Basic properties
    # ---------------------------------------------------------------------
    def total_points(self) -> int:
        return sum(len(pl) for pl in self.polylines)

    def bounds(self) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        """Axis-aligned bounding box `(lo, hi)` of all points, or None when empty."""
        if self.total_points() == 0:
            return None
        pts = np.concatenate(self.polylines, axis=0)
        return pts.min(axis=0), pts.max(axis=0)

    # ---------------------------------------------------------------------
    # Graph conversion
    # ---------------------------------------------------------------------
    def to_graph(self, merge_distance: float = 0.0) -> SkeletonGraph:
        """
        Build a SkeletonGraph from the polylines.

        Each polyline becomes one edge between the vertices at its two end
        points, with the interior points as slabs and the arc length as length.
        An end point within `merge_distance` of a point already owned by a
        vertex joins that vertex. Single-point polylines become isolated vertices.
        """
        merge_distance = float(merge_distance)
        if merge_distance < 0:
            raise ValueError("merge_distance must be >= 0")

        skel = SkeletonGraph()

        def vertex_for(p: np.ndarray) -> int:
            for v in skel.vertices.values():
                d = np.linalg.norm(v.points - p[None, :], axis=1)
                if d.size and float(d.min()) <= merge_distance:
                    if float(d.min()) > 0.0:
                        v.points = np.vstack([v.points, p])
                    return v.id
            return skel.add_vertex([p]).id

        for pl in self.polylines:
            if pl.shape[0] == 0:
                continue
            a = vertex_for(pl[0])
            if pl.shape[0] == 1:
                continue
            b = vertex_for(pl[-1])
            skel.add_edge(a, b, slabs=pl[1:-1], length=polyline_length(pl))

        logger.debug(
            "Polylines -> graph: %d polyline(s), %d vertices, %d edges",
            len(self.polylines),
            len(skel.vertices),
            len(skel.edges),
        )
        return skel

    @staticmethod
    def from_graph(graph: SkeletonGraph) -> "PolylinesSkeleton":
        """
        One polyline per edge, running from the centroid of v1 through the slabs
        to the centroid of v2. Isolated vertices give one-point polylines.
        """
        polylines: List[np.ndarray] = []
        for e in graph.edges.values():
            c1 = graph.vertices[e.v1].centroid()
            c2 = graph.vertices[e.v2].centroid()
            polylines.append(np.vstack([c1[None, :], e.slabs, c2[None, :]]))
        for v in graph.vertices.values():
            if not v.branches:
                polylines.append(v.centroid()[None, :])
        return PolylinesSkeleton(polylines)


def _parse_polyline(line_no: int, parts: List[str]) -> np.ndarray:
    try:
        n = int(float(parts[0]))
    except ValueError as e:
        raise ValueError(f"Invalid header count on line {line_no}") from e
    coords = parts[1:]
    if n < 1 or len(coords) != 3 * n:
        raise ValueError(
            f"Line {line_no}: expected {3*n} coordinate values, got {len(coords)}"
        )
    try:
        return np.array(coords, dtype=float).reshape(n, 3)
    except ValueError as e:
        raise ValueError(f"Invalid coordinate on line {line_no}") from e
