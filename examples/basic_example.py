"""
Basic example: clean up a skeleton with a split junction and short spurs.

This example demonstrates the skelprune workflow:
1. Build (or load) a skeleton graph
2. Prune short dead ends and collapse vertex clusters
3. Inspect the result and export it as polylines
"""

import logging

from skelprune import PolylinesSkeleton, create_noisy_junction_graph, prune_short_edges


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    graph = create_noisy_junction_graph(n_arms=4, arm_length=30.0, junction_spread=1.5)
    print("Input:", graph.summary())

    pruned = prune_short_edges(graph, tolerance=3.0, iterate=True, verbosity=1)
    print("Pruned:", pruned.summary())

    for e in pruned.edges.values():
        print(f"  branch {e.v1} -> {e.v2}: length {e.length:.2f}")

    PolylinesSkeleton.from_graph(pruned).to_txt("pruned.polylines.txt")
    print("Wrote pruned.polylines.txt")


if __name__ == "__main__":
    main()
