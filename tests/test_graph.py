"""
Unit tests for the graph containers in `skelprune/graph.py`.
"""

import matplotlib

matplotlib.use("Agg")

import networkx as nx
import numpy as np
import pytest

from skelprune import SkeletonGraph, create_ring_graph, graph_from_points

# ---- Fixtures ---------------------------------------------------------------


@pytest.fixture
def small_graph():
    return graph_from_points(
        [(0, 0, 0), (1, 0, 0), (1, 1, 0)],
        [(0, 1), (1, 2)],
    )


# ---- Tests: Construction ----------------------------------------------------


def test_add_edge_registers_branches(small_graph):
    assert small_graph.degree(0) == 1
    assert small_graph.degree(1) == 2
    assert sorted(small_graph.neighbours(1)) == [0, 2]
    small_graph.validate()


def test_add_edge_rejects_unknown_endpoint(small_graph):
    with pytest.raises(ValueError):
        small_graph.add_edge(0, 42)


def test_loop_is_listed_twice():
    g = SkeletonGraph()
    v = g.add_vertex([(0, 0, 0)])
    e = g.add_edge(v.id, v.id)
    assert e.is_loop()
    assert g.degree(v.id) == 2
    g.validate()


def test_opposite(small_graph):
    e = small_graph.branches(0)[0]
    assert small_graph.opposite(e, 0).id == 1
    with pytest.raises(ValueError):
        e.opposite(2)


def test_ids_are_not_reused(small_graph):
    e = small_graph.branches(0)[0]
    del small_graph.edges[e.id]
    new = small_graph.new_edge(0, 2)
    assert new.id not in (0, 1)
    v = small_graph.new_vertex()
    assert v.id == 3


# ---- Tests: Copy and validation ---------------------------------------------


def test_copy_is_independent(small_graph):
    cp = small_graph.copy()
    cp.vertices[0].points[0, 0] = 99.0
    cp.vertices[1].branches.clear()
    next(iter(cp.edges.values())).length = 5.0
    cp.add_vertex([(3, 3, 3)])

    assert small_graph.vertices[0].points[0, 0] == 0.0
    assert small_graph.degree(1) == 2
    assert all(e.length == 0.0 for e in small_graph.edges.values())
    assert len(small_graph.vertices) == 3


def test_validate_detects_stale_branch(small_graph):
    e = small_graph.branches(0)[0]
    del small_graph.edges[e.id]
    with pytest.raises(ValueError):
        small_graph.validate()


def test_validate_detects_missing_endpoint(small_graph):
    del small_graph.vertices[2]
    with pytest.raises(ValueError):
        small_graph.validate()


def test_summary():
    g = create_ring_graph(n_vertices=4, self_loops=1)
    s = g.summary()
    assert s["vertices"] == 4
    assert s["edges"] == 5
    assert s["loops"] == 1
    assert s["junctions"] == 1


# ---- Tests: networkx interop ------------------------------------------------


def test_to_networkx_keeps_multi_edges():
    g = create_ring_graph(n_vertices=5, self_loops=1, parallel_edges=1)
    G = g.to_networkx()
    assert isinstance(G, nx.MultiGraph)
    assert G.number_of_nodes() == 5
    assert G.number_of_edges() == 7
    assert nx.number_connected_components(G) == 1
    np.testing.assert_allclose(G.nodes[0]["centroid"], [10.0, 0.0, 0.0])


def test_from_networkx_with_centers():
    G = nx.Graph()
    G.add_node("a", center=np.array([0.0, 0.0, 0.0]))
    G.add_node("b", center=np.array([0.0, 0.0, 5.0]))
    G.add_node("c")
    G.add_edge("a", "b", length=5.0)

    g = SkeletonGraph.from_networkx(G)

    assert len(g.vertices) == 3
    assert len(g.edges) == 1
    (e,) = g.edges.values()
    assert e.length == 5.0
    empty = [v for v in g.vertices.values() if v.points.shape[0] == 0]
    assert len(empty) == 1
    g.validate()


# ---- Tests: Drawing ---------------------------------------------------------


def test_draw_returns_axes(small_graph):
    ax = small_graph.draw(axis="y")
    assert ax.get_ylabel() == "z (vertical)"


def test_draw_rejects_bad_axis(small_graph):
    with pytest.raises(ValueError):
        small_graph.draw(axis="z")
