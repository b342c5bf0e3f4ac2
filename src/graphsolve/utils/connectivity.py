from __future__ import annotations

from collections import defaultdict


def is_connected_edges(
    edges: list[tuple[int, int]],
    vertices: set[int] | None = None,
) -> bool:
    """Check whether an edge list forms a connected graph.

    If *vertices* is provided, connectivity is checked over that vertex set
    (allowing isolated vertices).  Otherwise the vertex set is inferred from
    the edges.  Self-loops are accepted and ignored.

    Semantics for degenerate cases:
      - No edges, no vertices (or empty set) -> True  (vacuously connected)
      - No edges, one vertex               -> True
      - No edges, two or more vertices      -> False
    """
    if vertices is not None:
        verts = set(vertices)
    else:
        verts = set()
        for u, v in edges:
            verts.add(u)
            verts.add(v)

    if len(verts) <= 1:
        return True

    return len(connected_components_edges(edges, verts)) == 1


def connected_components_edges(
    edges: list[tuple[int, int]],
    vertices: set[int] | None = None,
) -> list[set[int]]:
    """Return the vertex sets of the connected components.

    With *vertices* given, vertices without edges form singleton components
    and edges leaving the vertex set are ignored.  Components are ordered by
    their smallest vertex.
    """
    adj: dict[int, set[int]] = defaultdict(set)
    verts: set[int] = set(vertices) if vertices is not None else set()
    for u, v in edges:
        if vertices is not None and (u not in verts or v not in verts):
            continue
        adj[u].add(v)
        adj[v].add(u)
        verts.add(u)
        verts.add(v)

    remaining = set(verts)
    components: list[set[int]] = []

    while remaining:
        start = min(remaining)
        comp: set[int] = set()
        stack = [start]
        while stack:
            node = stack.pop()
            if node in comp:
                continue
            comp.add(node)
            for nbr in adj[node]:
                if nbr not in comp:
                    stack.append(nbr)
        components.append(comp)
        remaining -= comp

    return components
