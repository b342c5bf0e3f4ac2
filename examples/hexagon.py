#!/usr/bin/env python3
"""
Six nodes of degree two with the pair (2, 3) required to be adjacent.

Without `connected` two triangles are a valid answer; with it only the
hexagon remains.

Usage: python3 hexagon.py [--connected]
"""

import sys

from graphsolve import Graph, NodePattern, SolveSettings, Solved, format_state, solve


def main():
    connected = "--connected" in sys.argv[1:]
    g = Graph.replicate(NodePattern.regular(2), 6, pairs=[(2, 3)], connected=connected)

    out = solve(g, SolveSettings(max_time=30.0))
    if not isinstance(out, Solved):
        print(f"<no solution: {type(out).__name__}>", file=sys.stderr)
        return 1
    print(format_state(out.solution.state, g))
    return 0


if __name__ == "__main__":
    sys.exit(main())
