"""
Demo skeleton graphs for skelprune.

Provides small synthetic skeletons that reproduce the artefacts skeletonization
leaves behind (split junctions, short spurs, loops, duplicated branches).
These functions create standard inputs for tutorials and demonstrations.
"""

from typing import Iterable, Sequence, Tuple

import numpy as np

from .graph import SkeletonGraph


def _planar_directions(n: int) -> np.ndarray:
    """Unit vectors evenly spread in the xy-plane."""
    theta = 2.0 * np.pi * np.arange(n) / n
    return np.stack([np.cos(theta), np.sin(theta), np.zeros(n)], axis=1)


def create_path_graph(coords: Iterable[Sequence[float]]) -> SkeletonGraph:
    """
    Create a path through the given coordinates.

    Args:
        coords: Sequence of (x, y, z) points; each becomes a single-point vertex

    Returns:
        SkeletonGraph with an edge between every pair of consecutive vertices
    """
    skel = SkeletonGraph()
    prev = None
    for c in coords:
        v = skel.add_vertex([c])
        if prev is not None:
            skel.add_edge(prev.id, v.id)
        prev = v
    return skel


def create_star_graph(
    n_arms: int = 3,
    arm_length: float = 20.0,
    center: Tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> SkeletonGraph:
    """
    Create a single junction with `n_arms` straight arms in the xy-plane.

    Args:
        n_arms: Number of arms
        arm_length: Distance from the junction to each arm end
        center: Junction position

    Returns:
        SkeletonGraph with n_arms + 1 vertices (the junction has id 0)
    """
    if n_arms < 1:
        raise ValueError("n_arms must be >= 1")
    c = np.asarray(center, dtype=float)
    skel = SkeletonGraph()
    hub = skel.add_vertex([c])
    for d in _planar_directions(n_arms):
        end = skel.add_vertex([c + arm_length * d])
        skel.add_edge(hub.id, end.id)
    return skel


def create_noisy_junction_graph(
    n_arms: int = 3,
    arm_length: float = 20.0,
    junction_spread: float = 1.0,
    spur_length: float = 0.5,
    center: Tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> SkeletonGraph:
    """
    Create a junction that skeletonization has split into a ring of `n_arms`
    nearby vertices, each carrying one arm and one short spur along +z.

    Pruning with a tolerance between the spur/ring edge lengths and
    `arm_length - junction_spread` reduces this graph to a star with `n_arms` arms.

    Args:
        n_arms: Number of arms (and of split junction vertices)
        arm_length: Distance from `center` to each arm end
        junction_spread: Distance from `center` to each split junction vertex
        spur_length: Length of the spur attached to each junction vertex
        center: Position of the true junction

    Returns:
        SkeletonGraph
    """
    if n_arms < 2:
        raise ValueError("n_arms must be >= 2")
    c = np.asarray(center, dtype=float)
    dirs = _planar_directions(n_arms)
    skel = SkeletonGraph()

    ring = [skel.add_vertex([c + junction_spread * d]) for d in dirs]
    # two split vertices share a single edge, not a 2-cycle
    for i in range(n_arms if n_arms > 2 else 1):
        skel.add_edge(ring[i].id, ring[(i + 1) % n_arms].id)

    for v, d in zip(ring, dirs):
        end = skel.add_vertex([c + arm_length * d])
        skel.add_edge(v.id, end.id)
        tip = skel.add_vertex([v.points[0] + np.array([0.0, 0.0, spur_length])])
        skel.add_edge(v.id, tip.id)
    return skel


def create_ring_graph(
    n_vertices: int = 8,
    radius: float = 10.0,
    self_loops: int = 0,
    parallel_edges: int = 0,
) -> SkeletonGraph:
    """
    Create a cycle of `n_vertices` vertices on a circle in the xy-plane.

    Args:
        n_vertices: Number of vertices on the ring (>= 3)
        radius: Ring radius
        self_loops: Number of self-loop edges added to vertex 0
        parallel_edges: Number of extra copies of the edge between vertices 0 and 1

    Returns:
        SkeletonGraph
    """
    if n_vertices < 3:
        raise ValueError("n_vertices must be >= 3")
    skel = SkeletonGraph()
    verts = [skel.add_vertex([radius * d]) for d in _planar_directions(n_vertices)]
    for i in range(n_vertices):
        skel.add_edge(verts[i].id, verts[(i + 1) % n_vertices].id)
    for _ in range(self_loops):
        skel.add_edge(verts[0].id, verts[0].id)
    for _ in range(parallel_edges):
        skel.add_edge(verts[0].id, verts[1].id)
    return skel
