"""
Pruning of short edges from a skeleton graph.

Skeletonization of a 3D shape tends to leave geometrically insignificant
structure behind: loops, duplicate connections between the same two nodes,
short spurs, and junctions that were split into a tight clump of vertices
joined by tiny edges. This module collapses that structure while keeping the
topology of the skeleton.

Important terminology:
- "Tolerance": Edges strictly shorter than the tolerance are "short".
- "Dead end": An edge with exactly one endpoint of degree 1. An isolated
    two-vertex component (both endpoints of degree 1) is not a dead end.
- "Cluster": A maximal set of vertices connected to each other through short edges.
- "Centre": The vertex that replaces a cluster, placed at the integer-rounded
    centroid of all the points its members owned.

The algorithm (`prune_short_edges`) follows these steps:

1. Copy the input graph; the caller's graph is never modified.
2. Remove loops and measure every edge as the distance between the centroids
    of its endpoints.
3. Repeat:
    a) prune short dead ends (and their terminal vertices),
    b) find clusters and collapse each one to its centre, rewiring the edges
       that leave the cluster to the centre,
    c) remove parallel edges.
   until the vertex count stops changing, or only once if `iterate` is False.

Edges are never rewired in place. A boundary edge of a cluster is replaced by a
new edge; an edge joining two clusters is replaced twice, the second
replacement being built from the first so that both ends land on centres.
Vertex branch lists are treated as a cache that is stripped of stale entries
after each batch of edge removals.

EXAMPLE:
    A path A-B-C-D with |AB| = 0.5, |BC| = 2.0, |CD| = 0.3 and tolerance 1.0.
    AB and CD are short dead ends, so A and D are removed together with their
    edges. The result has vertices B and C and the single edge BC of length 2.0.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Set

import numpy as np

from .geometry import centroid, euclidean_distance, round_coordinates
from .graph import Edge, SkeletonGraph, Vertex

# Module-level logger
logger = logging.getLogger(__name__)
# Ensure no "No handler" warnings in library usage; applications can configure handlers.
logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
@dataclass
class PruneOptions:
    tolerance: float = 0.0  # edges shorter than this are collapsed (graph units)
    iterate: bool = True  # repeat until the vertex count is stable


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def prune_short_edges(
    graph: SkeletonGraph,
    tolerance: Optional[float] = None,
    iterate: bool = True,
    *,
    options: Optional[PruneOptions] = None,
    verbose: bool = False,
    verbosity: Optional[int] = None,
) -> SkeletonGraph:
    """
    Return a simplified copy of `graph` with short edges pruned and clusters collapsed.

    Args:
        graph: The skeleton graph to simplify. It is not modified.
        tolerance: Length threshold; edges shorter than this are insignificant.
        iterate: If True, repeat the cleaning until the vertex count stops
            changing. If False, exactly one cleaning pass runs.
        options: PruneOptions; takes precedence over `tolerance` and `iterate`.
        verbose: Log progress (same as verbosity=2).
        verbosity: 0 silent, 1 per-pass summaries (INFO), 2 per-stage counts (DEBUG).

    Returns:
        A new SkeletonGraph.
    """
    if options is None:
        if tolerance is None:
            raise ValueError("A tolerance (or options) must be given")
        options = PruneOptions(tolerance=float(tolerance), iterate=bool(iterate))

    if not isinstance(graph, SkeletonGraph):
        raise TypeError("graph must be a SkeletonGraph")
    tol = float(options.tolerance)
    if math.isnan(tol) or tol < 0.0:
        raise ValueError(f"tolerance must be a non-negative number, got {tol}")

    # Backward-compatibility mapping for verbosity levels
    if verbosity is None:
        eff_verbosity = 2 if verbose else 0
    else:
        try:
            eff_verbosity = int(verbosity)
        except Exception:
            eff_verbosity = 0

    def v_info(msg: str, *args: Any) -> None:
        if eff_verbosity >= 1:
            logger.info(msg, *args)

    def v_debug(msg: str, *args: Any) -> None:
        if eff_verbosity >= 2:
            logger.debug(msg, *args)

    v_info(
        "Pruning short edges: tolerance=%.6g, iterate=%s, vertices=%d, edges=%d",
        tol,
        options.iterate,
        len(graph.vertices),
        len(graph.edges),
    )

    pruned = graph.copy()
    n_edges = len(pruned.edges)
    remove_loops(pruned)
    v_debug("Removed %d loop(s)", n_edges - len(pruned.edges))
    assign_euclidean_lengths(pruned)

    n_pass = 0
    prune = True
    while prune:
        n_pass += 1
        start_size = len(pruned.vertices)

        prune_dead_ends(pruned, tol)
        v_debug("Pass %d: %d vertices after dead-end pruning", n_pass, len(pruned.vertices))

        pruned = cleaning_step(pruned, tol)
        v_debug("Pass %d: %d vertices after cluster collapse", n_pass, len(pruned.vertices))

        n_edges = len(pruned.edges)
        remove_parallel_edges(pruned)
        v_debug("Pass %d: removed %d parallel edge(s)", n_pass, n_edges - len(pruned.edges))

        cleaned_size = len(pruned.vertices)
        v_info("Pass %d: vertices %d -> %d", n_pass, start_size, cleaned_size)
        prune = options.iterate and start_size != cleaned_size

    v_info(
        "Pruning done after %d pass(es): vertices=%d, edges=%d",
        n_pass,
        len(pruned.vertices),
        len(pruned.edges),
    )
    return pruned


def remove_parallel_edges(graph: SkeletonGraph) -> None:
    """
    Remove parallel edges in place, leaving at most one edge per vertex pair.

    The graph is treated as undirected. Which of several parallel edges is kept
    is not specified; callers should rely only on there being exactly one.
    """
    ids = _map_vertex_ids(graph)
    seen: Set[int] = set()
    parallel: List[Edge] = []
    for e in graph.edges.values():
        key = _connection_key(e, ids)
        if key in seen:
            parallel.append(e)
        else:
            seen.add(key)
    for e in parallel:
        _remove_branch_from_endpoints(graph, e)
        del graph.edges[e.id]


def remove_loops(graph: SkeletonGraph) -> None:
    """Remove, in place, every edge whose two endpoints are the same vertex."""
    loops = [e for e in graph.edges.values() if e.is_loop()]
    for e in loops:
        _remove_branch_from_endpoints(graph, e)
        del graph.edges[e.id]


def assign_euclidean_lengths(
    graph: SkeletonGraph, edges: Optional[Iterable[Edge]] = None
) -> None:
    """
    Set the length of each edge (all edges by default) to the distance between
    the centroids of its endpoints' points.
    """
    if edges is None:
        edges = graph.edges.values()
    for e in edges:
        c1 = centroid(graph.vertices[e.v1].points)
        c2 = centroid(graph.vertices[e.v2].points)
        e.length = euclidean_distance(c1, c2)


def prune_dead_ends(graph: SkeletonGraph, tolerance: float) -> None:
    """Remove, in place, dead-end edges shorter than `tolerance` and their terminal vertices."""
    dead_ends = [
        e for e in graph.edges.values() if is_dead_end(graph, e) and is_short(e, tolerance)
    ]
    terminals = [
        vid for e in dead_ends for vid in e.endpoints if graph.degree(vid) == 1
    ]
    for e in dead_ends:
        _remove_branch_from_endpoints(graph, e)
        del graph.edges[e.id]
    for vid in terminals:
        graph.vertices.pop(vid, None)


def cleaning_step(graph: SkeletonGraph, tolerance: float) -> SkeletonGraph:
    """
    Collapse every cluster of `graph` to its centre and return the cleaned graph.

    The returned graph reuses the vertex and edge objects of `graph`, which
    should not be used afterwards.
    """
    clusters = find_clusters(graph, tolerance)
    centres = [cluster_centre(graph, c) for c in clusters]
    replacements: Dict[int, Edge] = {}
    for cluster, centre in zip(clusters, centres):
        _map_replacement_edges(graph, replacements, cluster, centre)
    logger.debug(
        "Collapsing %d cluster(s), %d replacement edge(s)", len(clusters), len(replacements)
    )
    return _create_clean_graph(graph, clusters, centres, replacements)


def find_clusters(graph: SkeletonGraph, tolerance: float) -> List[Set[int]]:
    """
    Group the vertices touched by short edges into maximal sets connected
    through short edges. Returns disjoint, non-empty sets of vertex ids.
    """
    clusters: List[Set[int]] = []
    # dict as an insertion-ordered set
    unassigned = dict.fromkeys(_find_cluster_vertices(graph, tolerance))
    while unassigned:
        start = next(iter(unassigned))
        cluster = _fill_cluster(graph, start, tolerance)
        clusters.append(cluster)
        for vid in cluster:
            unassigned.pop(vid, None)
    return clusters


def find_edges_with_one_end_in_cluster(graph: SkeletonGraph, cluster: Set[int]) -> Set[int]:
    """Ids of the edges that originate in the cluster but terminate outside it."""
    counts = Counter(eid for vid in cluster for eid in graph.vertices[vid].branches)
    return {eid for eid, n in counts.items() if n == 1}


def cluster_centre(graph: SkeletonGraph, cluster: Iterable[int]) -> Vertex:
    """
    Create (without inserting) a vertex at the rounded centroid of all the
    points owned by the cluster members.
    """
    pts = [graph.vertices[vid].points for vid in cluster]
    all_pts = np.vstack(pts) if pts else np.zeros((0, 3), dtype=float)
    coordinates = round_coordinates(centroid(all_pts))
    return graph.new_vertex([coordinates])


def is_short(edge: Edge, tolerance: float) -> bool:
    return edge.length < tolerance


def is_dead_end(graph: SkeletonGraph, edge: Edge) -> bool:
    return sum(1 for vid in edge.endpoints if graph.degree(vid) == 1) == 1


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _map_vertex_ids(graph: SkeletonGraph) -> Dict[int, int]:
    """Dense sequential ids 0..n-1 for the vertices of the graph."""
    return {vid: i for i, vid in enumerate(graph.vertices)}


def _connection_key(e: Edge, ids: Dict[int, int]) -> int:
    """Key identifying the unordered endpoint pair of an edge."""
    n = len(ids)
    a = ids[e.v1]
    b = ids[e.v2]
    return a * n + b if a < b else b * n + a


def _remove_branch_from_endpoints(graph: SkeletonGraph, edge: Edge) -> None:
    for vid in set(edge.endpoints):
        v = graph.vertices.get(vid)
        if v is not None:
            v.branches = [eid for eid in v.branches if eid != edge.id]


def _remove_dangling_branches(graph: SkeletonGraph) -> None:
    """Remove vertex branches that are no longer listed in the graph's edges."""
    for v in graph.vertices.values():
        v.branches = [eid for eid in v.branches if eid in graph.edges]


def _find_cluster_vertices(graph: SkeletonGraph, tolerance: float) -> List[int]:
    """Distinct endpoints of the short edges, in edge order."""
    found = dict.fromkeys(
        vid for e in graph.edges.values() if is_short(e, tolerance) for vid in e.endpoints
    )
    return list(found)


def _fill_cluster(graph: SkeletonGraph, start: int, tolerance: float) -> Set[int]:
    """
    Find all the vertices in the cluster that has the given vertex.

    A vertex is in the cluster if it is connected to `start` directly or
    indirectly via edges shorter than the tolerance.
    """
    cluster: Set[int] = set()
    stack = [start]
    while stack:
        vid = stack.pop()
        if vid in cluster:
            continue
        cluster.add(vid)
        for e in graph.branches(vid):
            if not is_short(e, tolerance):
                continue
            other = e.opposite(vid)
            if other not in cluster:
                stack.append(other)
    return cluster


def _replace_edge(graph: SkeletonGraph, edge: Edge, cluster: Set[int], centre: Vertex) -> Edge:
    """New edge with the in-cluster endpoint swapped for the centre."""
    if edge.v1 in cluster:
        return graph.new_edge(centre.id, edge.v2, slabs=edge.slabs)
    return graph.new_edge(edge.v1, centre.id, slabs=edge.slabs)


def _map_replacement_edges(
    graph: SkeletonGraph,
    replacements: Dict[int, Edge],
    cluster: Set[int],
    centre: Vertex,
) -> None:
    """
    Map the edges leaving `cluster` to new edges ending at `centre`.

    `replacements` is keyed by the id of the original edge. An edge joining two
    clusters is already mapped when the second cluster is processed; its
    replacement is then built from the first replacement.
    """
    for eid in sorted(find_edges_with_one_end_in_cluster(graph, cluster)):
        old = replacements.get(eid, graph.edges[eid])
        replacements[eid] = _replace_edge(graph, old, cluster, centre)


def _create_clean_graph(
    graph: SkeletonGraph,
    clusters: List[Set[int]],
    centres: List[Vertex],
    replacements: Dict[int, Edge],
) -> SkeletonGraph:
    membership: Dict[int, int] = {}
    for i, cluster in enumerate(clusters):
        for vid in cluster:
            membership[vid] = i

    def inside_a_cluster(e: Edge) -> bool:
        c = membership.get(e.v1)
        return c is not None and c == membership.get(e.v2)

    non_cluster_edges = [
        e
        for e in graph.edges.values()
        if e.id not in replacements and not inside_a_cluster(e)
    ]
    connecting_edges = list(replacements.values())
    lonely = [v for v in graph.vertices.values() if not v.branches]

    clean = graph.empty_like()
    for centre in centres:
        clean.insert_vertex(centre)
    for e in non_cluster_edges + connecting_edges:
        for vid in e.endpoints:
            if vid not in clean.vertices:
                clean.insert_vertex(graph.vertices[vid])
    for v in lonely:
        clean.insert_vertex(v)

    # Kept edges are already listed by their endpoints; replacements are new.
    for e in non_cluster_edges:
        clean.edges[e.id] = e
    for e in connecting_edges:
        clean.insert_edge(e)
    assign_euclidean_lengths(clean, connecting_edges)
    _remove_dangling_branches(clean)
    return clean
