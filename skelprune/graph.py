"""
Graph containers for skeletons of 3D shapes.

Important terminology:
- "Vertex": A node of the skeleton. It owns a set of 3D points (its geometric
    support, e.g. the voxels of a junction) and a list of incident edges, its
    "branches". The branch list is a derived index of the edge set.
- "Edge": A connection between two vertices (v1, v2). v1 == v2 denotes a loop.
    An edge carries a scalar length and optional intermediate "slab" points.
    Endpoints are fixed at construction; rewiring means building a new edge.
- "SkeletonGraph": Vertex and edge arenas addressed by integer id. Ids are never
    reused within a graph and its copies, so ids double as identities.

Invariants (restored by every public operation before it returns):
- every edge endpoint is in the vertex arena;
- every branch listed by a vertex is an edge of the arena having that vertex as
  an endpoint.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterable, List, Optional, Tuple

import matplotlib.pyplot as plt
import networkx as nx
import numpy as np

from .geometry import as_points, centroid

# Module-level logger
logger = logging.getLogger(__name__)
# Ensure no "No handler" warnings in library usage; applications can configure handlers.
logger.addHandler(logging.NullHandler())

# ============================================================================
# Data models
# ============================================================================


@dataclass(eq=False)
class Vertex:
    """
    A skeleton node.

    Attributes:
        id: Unique identifier within the graph (and its copies).
        points: (N, 3) float array of the points owned by this vertex. May be empty.
        branches: Ids of incident edges. A loop edge is listed twice.
    """

    id: int
    points: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=float))
    branches: List[int] = field(default_factory=list)

    def centroid(self) -> np.ndarray:
        return centroid(self.points)


@dataclass(eq=False)
class Edge:
    """
    A connection between two vertices.

    Attributes:
        id: Unique identifier within the graph (and its copies).
        v1: Id of the first endpoint.
        v2: Id of the second endpoint.
        slabs: (M, 3) float array of intermediate points along the branch.
        length: Branch length; recomputed by the pruning passes.
    """

    id: int
    v1: int
    v2: int
    slabs: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=float))
    length: float = 0.0

    @property
    def endpoints(self) -> Tuple[int, int]:
        return self.v1, self.v2

    def is_loop(self) -> bool:
        return self.v1 == self.v2

    def opposite(self, vertex_id: int) -> int:
        if vertex_id == self.v1:
            return self.v2
        if vertex_id == self.v2:
            return self.v1
        raise ValueError(f"Vertex {vertex_id} is not an endpoint of edge {self.id}")


class SkeletonGraph:
    """
    Undirected multigraph of `Vertex`es and `Edge`s. Loops and parallel edges
    are allowed; the pruning passes are what remove them.
    """

    def __init__(self):
        self.vertices: Dict[int, Vertex] = {}
        self.edges: Dict[int, Edge] = {}
        self._next_vertex_id = 0
        self._next_edge_id = 0

    def __len__(self) -> int:
        return len(self.vertices)

    def __repr__(self) -> str:
        return f"SkeletonGraph(vertices={len(self.vertices)}, edges={len(self.edges)})"

    # ----------------------------- Node/edge API -----------------------------
    def new_vertex(self, points: Optional[Iterable] = None) -> Vertex:
        """Allocate a vertex id and build the vertex without inserting it."""
        v = Vertex(id=self._next_vertex_id, points=as_points(points))
        self._next_vertex_id += 1
        return v

    def add_vertex(self, points: Optional[Iterable] = None) -> Vertex:
        v = self.new_vertex(points)
        self.vertices[v.id] = v
        return v

    def new_edge(
        self,
        v1: int,
        v2: int,
        slabs: Optional[Iterable] = None,
        length: float = 0.0,
    ) -> Edge:
        """Allocate an edge id and build the edge without inserting it."""
        e = Edge(
            id=self._next_edge_id,
            v1=int(v1),
            v2=int(v2),
            slabs=as_points(slabs),
            length=float(length),
        )
        self._next_edge_id += 1
        return e

    def add_edge(
        self,
        v1: int,
        v2: int,
        slabs: Optional[Iterable] = None,
        length: float = 0.0,
    ) -> Edge:
        for vid in (v1, v2):
            if vid not in self.vertices:
                raise ValueError(f"Edge endpoint {vid} is not a vertex of the graph")
        e = self.new_edge(v1, v2, slabs=slabs, length=length)
        self.insert_edge(e)
        return e

    def insert_vertex(self, v: Vertex) -> None:
        """Adopt an existing vertex (keeps its id and branch list)."""
        self.vertices[v.id] = v
        self._next_vertex_id = max(self._next_vertex_id, v.id + 1)

    def insert_edge(self, e: Edge) -> None:
        """Adopt an existing edge and register it with its endpoints."""
        self.edges[e.id] = e
        self._next_edge_id = max(self._next_edge_id, e.id + 1)
        for vid in e.endpoints:
            v = self.vertices.get(vid)
            if v is not None:
                v.branches.append(e.id)

    def degree(self, vertex_id: int) -> int:
        return len(self.vertices[vertex_id].branches)

    def opposite(self, edge: Edge, vertex_id: int) -> Vertex:
        return self.vertices[edge.opposite(vertex_id)]

    def neighbours(self, vertex_id: int) -> List[int]:
        return [self.edges[eid].opposite(vertex_id) for eid in self.vertices[vertex_id].branches]

    def branches(self, vertex_id: int) -> List[Edge]:
        return [self.edges[eid] for eid in self.vertices[vertex_id].branches]

    # ------------------------------ Bookkeeping ------------------------------
    def copy(self) -> "SkeletonGraph":
        """Deep copy; the copy shares no mutable state with this graph."""
        g = SkeletonGraph()
        g.vertices = {
            vid: Vertex(id=v.id, points=v.points.copy(), branches=list(v.branches))
            for vid, v in self.vertices.items()
        }
        g.edges = {
            eid: Edge(id=e.id, v1=e.v1, v2=e.v2, slabs=e.slabs.copy(), length=float(e.length))
            for eid, e in self.edges.items()
        }
        g._next_vertex_id = self._next_vertex_id
        g._next_edge_id = self._next_edge_id
        return g

    def empty_like(self) -> "SkeletonGraph":
        """A graph without vertices or edges that continues this graph's id sequence."""
        g = SkeletonGraph()
        g._next_vertex_id = self._next_vertex_id
        g._next_edge_id = self._next_edge_id
        return g

    def validate(self) -> None:
        """Raise ValueError if the vertex/edge invariants do not hold."""
        for e in self.edges.values():
            for vid in e.endpoints:
                if vid not in self.vertices:
                    raise ValueError(f"Edge {e.id} references missing vertex {vid}")
        for v in self.vertices.values():
            for eid in v.branches:
                e = self.edges.get(eid)
                if e is None:
                    raise ValueError(f"Vertex {v.id} lists missing edge {eid}")
                if v.id not in e.endpoints:
                    raise ValueError(f"Vertex {v.id} lists edge {eid} it is not part of")
        expected: Dict[int, int] = {vid: 0 for vid in self.vertices}
        for e in self.edges.values():
            expected[e.v1] += 1
            expected[e.v2] += 1
        for vid, n in expected.items():
            if len(self.vertices[vid].branches) != n:
                raise ValueError(
                    f"Vertex {vid} lists {len(self.vertices[vid].branches)} branches, expected {n}"
                )

    def summary(self) -> Dict[str, int]:
        n_loops = sum(1 for e in self.edges.values() if e.is_loop())
        n_terminals = sum(1 for v in self.vertices.values() if len(v.branches) == 1)
        n_junctions = sum(1 for v in self.vertices.values() if len(v.branches) > 2)
        return {
            "vertices": len(self.vertices),
            "edges": len(self.edges),
            "loops": n_loops,
            "terminals": n_terminals,
            "junctions": n_junctions,
        }

    # ------------------------------ networkx ---------------------------------
    def to_networkx(self) -> nx.MultiGraph:
        G = nx.MultiGraph()
        for v in self.vertices.values():
            G.add_node(v.id, points=v.points.copy(), centroid=v.centroid())
        for e in self.edges.values():
            G.add_edge(e.v1, e.v2, key=e.id, length=float(e.length), slabs=e.slabs.copy())
        return G

    @staticmethod
    def from_networkx(G: nx.Graph) -> "SkeletonGraph":
        """
        Build a SkeletonGraph from any networkx graph.

        Node attributes: `points` ((N,3) array) or `center` (single 3D point).
        Edge attributes: `length` (default 0.0) and `slabs`.
        """
        skel = SkeletonGraph()
        ids: Dict[Hashable, int] = {}
        for n, attrs in G.nodes(data=True):
            pts = attrs.get("points")
            if pts is None and attrs.get("center") is not None:
                pts = [attrs["center"]]
            ids[n] = skel.add_vertex(pts).id
        for u, v, attrs in G.edges(data=True):
            skel.add_edge(
                ids[u],
                ids[v],
                slabs=attrs.get("slabs"),
                length=float(attrs.get("length", 0.0)),
            )
        return skel

    # visualization
    def draw(
        self,
        axis: str = "x",
        ax: Any = None,
        figsize: Optional[Tuple[float, float]] = None,
        with_labels: bool = False,
        node_size: int = 50,
        node_color: str = "C0",
        edge_color: str = "0.6",
        pad_frac: float = 0.05,
        **kwargs: Any,
    ) -> Any:
        """Draw the graph in 2D using the (x,z) or (y,z) coordinates of vertex centroids.

        Vertices without points cannot be placed and are left out.

        Args:
            axis: Horizontal axis to use ("x" or "y"). Vertical axis is always z.
            ax: Optional matplotlib Axes to draw into. If None, a new figure/axes is created.
            figsize: Optional (width, height) in inches when creating a new figure.
            with_labels: Whether to render vertex ids.
            node_size: Node marker size passed to networkx.draw.
            node_color: Node color.
            edge_color: Edge color.
            pad_frac: Fractional padding added to both axes limits for readability.
            **kwargs: Additional kwargs forwarded to networkx.draw.

        Returns:
            The matplotlib Axes used for drawing.
        """
        axis = axis.lower()
        if axis not in ("x", "y"):
            raise ValueError("axis must be 'x' or 'y'")

        idx = 0 if axis == "x" else 1
        pos: Dict[int, Tuple[float, float]] = {}
        for v in self.vertices.values():
            c = v.centroid()
            if not np.all(np.isfinite(c)):
                continue
            pos[v.id] = (float(c[idx]), float(c[2]))

        if ax is None:
            fig, ax = plt.subplots(figsize=figsize)
        ax.set_xlabel(f"{axis} (horizontal)")
        ax.set_ylabel("z (vertical)")
        if len(pos) == 0:
            return ax

        G = self.to_networkx().subgraph(pos.keys())
        nx.draw(
            G,
            pos=pos,
            ax=ax,
            with_labels=with_labels,
            node_size=node_size,
            node_color=node_color,
            edge_color=edge_color,
            **kwargs,
        )

        xs = np.array([p[0] for p in pos.values()], dtype=float)
        zs = np.array([p[1] for p in pos.values()], dtype=float)
        xr = max(float(xs.max() - xs.min()), 1e-12)
        zr = max(float(zs.max() - zs.min()), 1e-12)
        ax.set_xlim(float(xs.min()) - pad_frac * xr, float(xs.max()) + pad_frac * xr)
        ax.set_ylim(float(zs.min()) - pad_frac * zr, float(zs.max()) + pad_frac * zr)
        return ax


def graph_from_points(
    points: Iterable[Iterable[float]],
    edges: Iterable[Tuple[int, int]],
) -> SkeletonGraph:
    """
    Convenience builder: one single-point vertex per coordinate and an edge per
    (i, j) index pair. Lengths are left at 0 until a pruning pass measures them.
    """
    skel = SkeletonGraph()
    for p in points:
        skel.add_vertex([p])
    for i, j in edges:
        skel.add_edge(int(i), int(j))
    return skel
