#!/usr/bin/env python3
"""
Seven Bridges of Koenigsberg, drawn as a simple graph with black and red edges.

Each node lists how many black and red edges it has; a partial seed fixes
part of the layout and the solver fills in the rest while keeping the whole
graph connected.
"""

import sys

from graphsolve import EdgeConstraint, Graph, NodePattern, PuzzleState, SolveSettings, Solved, solve


BLACK = 2
RED = 3


def land(black, red):
    return NodePattern(
        color=0,
        edges=[EdgeConstraint(BLACK, 0)] * black + [EdgeConstraint(RED, 0)] * red,
    )


def main():
    nodes = [
        land(1, 1),
        land(2, 1),
        land(1, 1),
        land(1, 2),
        land(1, 3),
        land(0, 3),
        land(1, 1),
        land(2, 1),
        land(1, 1),
    ]
    g = Graph(nodes=nodes, connected=True)

    seed = PuzzleState(len(nodes))
    for (i, j), c in {
        (0, 1): BLACK,
        (1, 2): BLACK,
        (0, 2): 1,
        (1, 4): RED,
        (2, 3): 1,
        (2, 4): 1,
        (3, 5): 1,
        (3, 7): 1,
        (3, 4): BLACK,
    }.items():
        seed.set(i, j, c)

    out = solve(g, SolveSettings(seed=seed, max_time=60.0))
    if not isinstance(out, Solved):
        reason = getattr(out, "reason", "")
        print(f"<no solution: {type(out).__name__}> {reason}", file=sys.stderr)
        return 1

    names = {BLACK: "black", RED: "red"}
    for i, j, c in out.solution.edges():
        print(f"{i} -- {j}  {names[c]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
