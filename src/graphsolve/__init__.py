"""
graphsolve: find an undirected graph from local node descriptions.

Each node states its own color and the exact multiset of colored edges it
needs to neighbors of given colors. The solver searches for a global wiring
that satisfies every node, or proves that none exists.
"""

from .model import (
    Color,
    UNDETERMINED,
    NO_EDGE,
    EdgeConstraint,
    NodePattern,
    Graph,
)
from .state import Cell, PuzzleState

# Constraint checking
from .checker import (
    FeasibilityChecker,
    local_feasible,
    global_feasible,
    has_triangle,
    pairs_feasible,
    commute_feasible,
    connected_feasible,
    is_connected_state,
    meet_quad_satisfied,
)

# Search
from .selector import CellOrder, RowMajorOrder, MostConstrainedOrder, union_domain, mutual_domain
from .settings import SolveSettings
from .outcome import (
    SearchStats,
    Solution,
    Solved,
    Infeasible,
    Exhausted,
    InvalidInput,
    SolveOutcome,
)
from .engine import solve, validate

# Diagnostics
from .diagnostics import differences, format_state

__all__ = [
    # Model
    "Color",
    "UNDETERMINED",
    "NO_EDGE",
    "EdgeConstraint",
    "NodePattern",
    "Graph",
    "Cell",
    "PuzzleState",
    # Checker
    "FeasibilityChecker",
    "local_feasible",
    "global_feasible",
    "has_triangle",
    "pairs_feasible",
    "commute_feasible",
    "connected_feasible",
    "is_connected_state",
    "meet_quad_satisfied",
    # Search
    "CellOrder",
    "RowMajorOrder",
    "MostConstrainedOrder",
    "union_domain",
    "mutual_domain",
    "SolveSettings",
    "SearchStats",
    "Solution",
    "Solved",
    "Infeasible",
    "Exhausted",
    "InvalidInput",
    "SolveOutcome",
    "solve",
    "validate",
    # Diagnostics
    "differences",
    "format_state",
]
