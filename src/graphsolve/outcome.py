"""Search outcomes returned by ``solve`` and the statistics they carry."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .model import Graph
from .state import PuzzleState


@dataclass(frozen=True)
class SearchStats:
    steps: int = 0
    backtracks: int = 0
    elapsed: float = 0.0


@dataclass(frozen=True)
class Solution:
    """
    A graph description together with a complete state satisfying it.

    ``state`` is a private frozen copy taken when the solution is built, so
    later changes to the state it came from do not reach it.
    """

    graph: Graph
    state: PuzzleState

    def __post_init__(self) -> None:
        if not self.state.frozen:
            object.__setattr__(self, "state", self.state.copy().freeze())

    def rows(self):
        return self.state.rows()

    def edges(self):
        return self.state.edges()

    def to_networkx(self):
        return self.state.to_networkx(self.graph)


@dataclass(frozen=True)
class Solved:
    solution: Solution
    stats: SearchStats = SearchStats()

    def unwrap(self) -> Solution:
        return self.solution


@dataclass(frozen=True)
class Infeasible:
    """The whole finite search space was explored without a solution."""

    stats: SearchStats = SearchStats()

    def unwrap(self) -> Solution:
        raise RuntimeError("no solution exists for this graph description")


@dataclass(frozen=True)
class Exhausted:
    """The step or time budget ran out; feasibility is unknown."""

    stats: SearchStats = SearchStats()

    def unwrap(self) -> Solution:
        raise RuntimeError(
            f"search budget exhausted after {self.stats.steps} steps "
            f"({self.stats.elapsed:.3f}s); feasibility unknown"
        )


@dataclass(frozen=True)
class InvalidInput:
    """Rejected before any search step."""

    reason: str
    stats: SearchStats = SearchStats()

    def unwrap(self) -> Solution:
        raise RuntimeError(f"invalid input: {self.reason}")


SolveOutcome = Union[Solved, Infeasible, Exhausted, InvalidInput]
