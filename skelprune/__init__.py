"""
skelprune: pruning and simplification of 3D skeleton graphs.

A Python package for cleaning skeletons extracted from 3D shapes. Removes loops,
duplicated branches and short dead ends, and collapses clusters of vertices
joined by sub-tolerance edges into a single centroid vertex, keeping the
topology needed for junction counting and branch length measurements.
"""

__version__ = "0.1.0"

# Demo graph functions from demo module
from .demo import (
    create_noisy_junction_graph,
    create_path_graph,
    create_ring_graph,
    create_star_graph,
)

# Graph containers
from .graph import Edge, SkeletonGraph, Vertex, graph_from_points

# Polylines skeleton handler
from .polylines import PolylinesSkeleton

# Pruning functions
from .pruning import (
    PruneOptions,
    find_clusters,
    prune_short_edges,
    remove_loops,
    remove_parallel_edges,
)

__all__ = [
    # Graph containers
    "Vertex",
    "Edge",
    "SkeletonGraph",
    "graph_from_points",
    # Pruning
    "PruneOptions",
    "prune_short_edges",
    "remove_loops",
    "remove_parallel_edges",
    "find_clusters",
    # Polylines skeleton handler
    "PolylinesSkeleton",
    # Demo graph functions
    "create_path_graph",
    "create_star_graph",
    "create_noisy_junction_graph",
    "create_ring_graph",
]
