import numpy as np
import pytest

from skelprune import PolylinesSkeleton, create_noisy_junction_graph, prune_short_edges


def _write(tmp_path, text: str):
    p = tmp_path / "skel.polylines.txt"
    p.write_text(text, encoding="utf-8")
    return str(p)


def test_load_polylines_from_txt(tmp_path):
    path = _write(tmp_path, "2 0 0 0 1 0 0\n\n3 1 0 0 1 1 0 1 2 0\n")
    pls = PolylinesSkeleton.from_txt(path)
    assert len(pls.polylines) == 2
    assert pls.total_points() == 5
    for pl in pls.polylines:
        assert pl.ndim == 2 and pl.shape[1] == 3
    lo, hi = pls.bounds()
    np.testing.assert_array_equal(lo, [0, 0, 0])
    np.testing.assert_array_equal(hi, [1, 2, 0])


def test_empty_polylines_have_no_bounds():
    pls = PolylinesSkeleton([])
    assert pls.total_points() == 0
    assert pls.bounds() is None


@pytest.mark.parametrize(
    "text",
    ["x 0 0 0\n", "2 0 0 0 1 0\n", "1 0 a 0\n"],
)
def test_load_polylines_rejects_malformed_lines(tmp_path, text: str):
    with pytest.raises(ValueError, match="[Ll]ine 1"):
        PolylinesSkeleton.from_txt(_write(tmp_path, text))


def test_save_and_reload(tmp_path):
    pls = PolylinesSkeleton([np.array([[0.1, 0.2, 0.3], [1.0, 2.0, 3.0]])])
    path = str(tmp_path / "out.polylines.txt")
    pls.to_txt(path)
    again = PolylinesSkeleton.from_txt(path)
    np.testing.assert_array_equal(again.polylines[0], pls.polylines[0])


def test_rejects_bad_shapes():
    with pytest.raises(ValueError):
        PolylinesSkeleton([np.zeros((3, 2))])


def test_to_graph_shares_end_points():
    # Three branches meeting at the origin, one of them slightly off
    pls = PolylinesSkeleton(
        [
            np.array([[0, 0, 0], [5, 0, 0], [10, 0, 0]], dtype=float),
            np.array([[0, 0, 0], [0, 10, 0]], dtype=float),
            np.array([[0.2, 0, 0], [0, 0, 10]], dtype=float),
            np.array([[50, 50, 50]], dtype=float),
        ]
    )

    exact = pls.to_graph()
    assert len(exact.vertices) == 6
    assert len(exact.edges) == 3

    merged = pls.to_graph(merge_distance=0.5)
    assert len(merged.vertices) == 5
    degrees = sorted(merged.degree(vid) for vid in merged.vertices)
    assert degrees == [0, 1, 1, 1, 3]
    hub = next(v for v in merged.vertices.values() if len(v.branches) == 3)
    assert hub.points.shape == (2, 3)
    first = merged.branches(hub.id)[0]
    assert np.isclose(first.length, 10.0)
    np.testing.assert_array_equal(first.slabs, [[5, 0, 0]])
    merged.validate()


def test_to_graph_rejects_negative_merge_distance():
    with pytest.raises(ValueError):
        PolylinesSkeleton([]).to_graph(merge_distance=-1.0)


def test_from_graph_after_pruning():
    pruned = prune_short_edges(create_noisy_junction_graph(n_arms=3), 2.5)
    pls = PolylinesSkeleton.from_graph(pruned)
    assert len(pls.polylines) == 3
    for pl in pls.polylines:
        assert pl.shape == (2, 3)
        assert np.isclose(np.linalg.norm(pl[1] - pl[0]), 20.0)
