"""Development helpers: compare a search state against a known solution."""
from __future__ import annotations

from typing import List, Optional

from .model import UNDETERMINED, Graph
from .state import Cell, PuzzleState


def differences(state: PuzzleState, reference: PuzzleState, *, include_undetermined: bool = False) -> List[Cell]:
    """
    Cells (i <= j) where ``state`` disagrees with ``reference``.

    Undetermined cells of ``state`` are skipped unless
    ``include_undetermined`` is set.
    """
    if state.size != reference.size:
        raise ValueError(f"size mismatch: state has {state.size} nodes, reference has {reference.size}.")
    out: List[Cell] = []
    for i, j in state.cells():
        c = state.get(i, j)
        if c == UNDETERMINED and not include_undetermined:
            continue
        if c != reference.get(i, j):
            out.append((i, j))
    return out


def format_state(state: PuzzleState, graph: Optional[Graph] = None) -> str:
    """Node colors on the first line (when ``graph`` is given), then the matrix."""
    lines: List[str] = []
    if graph is not None:
        lines.append(" ".join(str(node.color) for node in graph.nodes))
        lines.append("=" * 40)
    for row in state.rows():
        lines.append(" ".join(str(c) for c in row))
    return "\n".join(lines)
