"""
Depth-first backtracking over node-pair cells with an explicit decision stack.

Each decision records the cell, the committed color and the colors still left
to try there. A failed cell pops decisions until one has an alternative that
keeps the state feasible; an empty stack proves the description infeasible.
"""
from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from typing import List, Optional

from .checker import FeasibilityChecker
from .diagnostics import differences, format_state
from .model import NO_EDGE, UNDETERMINED, Color, Graph
from .outcome import (
    Exhausted,
    Infeasible,
    InvalidInput,
    SearchStats,
    Solution,
    SolveOutcome,
    Solved,
)
from .settings import SolveSettings
from .state import Cell, PuzzleState


@dataclass
class _Decision:
    cell: Cell
    value: Color
    alternatives: List[Color]


def initial_state(graph: Graph, seed: Optional[PuzzleState] = None) -> PuzzleState:
    """Fresh state for ``graph`` with every assigned cell of ``seed`` copied in."""
    state = PuzzleState.for_graph(graph)
    if seed is not None:
        for i, j in seed.assigned():
            state.set(i, j, seed.get(i, j))
    return state


def validate(graph: Graph, settings: SolveSettings) -> Optional[str]:
    """Reason why ``graph`` with ``settings`` cannot enter the search, or None."""
    problems = graph.problems()
    if problems:
        return "; ".join(problems)

    n = len(graph.nodes)
    ref = settings.reference
    if ref is not None and ref.size != n:
        return f"reference has size {ref.size}, graph has {n} nodes"

    seed = settings.seed
    if seed is None:
        return None
    if seed.size != n:
        return f"seed has size {seed.size}, graph has {n} nodes"
    for i, node in enumerate(graph.nodes):
        if not node.self_connected and seed.get(i, i) > NO_EDGE:
            return f"seed puts a self-loop on node {i}, which is not self-connected"

    checker = FeasibilityChecker(graph, self_loop_weight=settings.self_loop_weight)
    reason = checker.violation(initial_state(graph, seed))
    if reason is not None:
        return f"seed is inconsistent: {reason}"
    return None


class _Search:
    def __init__(self, graph: Graph, settings: SolveSettings) -> None:
        self.graph = graph
        self.settings = settings
        self.order = settings.order
        self.weight = settings.self_loop_weight
        self.checker = FeasibilityChecker(graph, self_loop_weight=self.weight)
        self.state = initial_state(graph, settings.seed)
        self.stack: List[_Decision] = []
        self.steps = 0
        self.backtracks = 0
        self.start = time.monotonic()

    def stats(self) -> SearchStats:
        return SearchStats(
            steps=self.steps,
            backtracks=self.backtracks,
            elapsed=time.monotonic() - self.start,
        )

    def _over_budget(self) -> bool:
        s = self.settings
        if s.max_steps is not None and self.steps >= s.max_steps:
            return True
        limit = s.time_limit
        if limit is not None and time.monotonic() - self.start > limit:
            return True
        return False

    def _log(self, msg: str) -> None:
        print(f"[step {self.steps}] {msg}", file=sys.stderr)

    def _commit(self, decision: _Decision) -> None:
        self.stack.append(decision)
        if self.settings.debug:
            i, j = decision.cell
            self._log(f"set ({i}, {j}) = {decision.value}, depth={len(self.stack)}")
        ref = self.settings.reference
        if ref is not None:
            diff = differences(self.state, ref)
            if diff:
                self._log(f"{len(diff)} cell(s) differ from reference: {diff}")

    def _try(self, cell: Cell, candidates: List[Color]) -> Optional[_Decision]:
        """Assign the first feasible candidate, consuming tried ones."""
        i, j = cell
        while candidates:
            value = candidates.pop(0)
            self.state.set(i, j, value)
            if self.checker.after_assignment(self.state, cell):
                return _Decision(cell, value, candidates)
        self.state.set(i, j, UNDETERMINED)
        return None

    def _backtrack(self) -> bool:
        """Pop decisions until one takes an alternative. False when the stack empties."""
        while self.stack:
            d = self.stack.pop()
            self.backtracks += 1
            self.state.set(*d.cell, UNDETERMINED)
            if self.settings.debug:
                self._log(f"backtrack ({d.cell[0]}, {d.cell[1]}) from {d.value}")
            nxt = self._try(d.cell, d.alternatives)
            if nxt is not None:
                self._commit(nxt)
                return True
        return False

    def _domain(self, cell: Cell) -> List[Color]:
        domain = list(self.order.domain(self.graph, self.state, cell, self.weight))
        if UNDETERMINED in domain:
            raise ValueError(f"{self.order!r} proposed reserved color 0 for cell {cell}.")
        return domain

    def run(self) -> SolveOutcome:
        while True:
            if self._over_budget():
                return Exhausted(stats=self.stats())
            self.steps += 1

            cell = self.order.select(self.graph, self.state, self.weight)
            if cell is None:
                if self.checker.is_solved(self.state):
                    solution = Solution(graph=self.graph, state=self.state)
                    return Solved(solution=solution, stats=self.stats())
                if not self._backtrack():
                    return Infeasible(stats=self.stats())
                continue

            if self.state.get(*cell) != UNDETERMINED:
                raise ValueError(f"{self.order!r} selected cell {cell}, which is already determined.")
            decision = self._try(cell, self._domain(cell))
            if decision is not None:
                self._commit(decision)
            elif not self._backtrack():
                return Infeasible(stats=self.stats())


def solve(graph: Graph, settings: Optional[SolveSettings] = None) -> SolveOutcome:
    """
    Search for a complete state satisfying every rule of ``graph``.

    Returns Solved, Infeasible, Exhausted (budget ran out, feasibility
    unknown) or InvalidInput (rejected before the search started).
    """
    if settings is None:
        settings = SolveSettings()
    reason = validate(graph, settings)
    if reason is not None:
        return InvalidInput(reason=reason)

    search = _Search(graph, settings)
    if settings.debug:
        print(
            f"[graphsolve] solving {len(graph.nodes)} nodes with {settings.order!r}",
            file=sys.stderr,
        )
    outcome = search.run()
    if settings.debug:
        if isinstance(outcome, Solved):
            print(format_state(outcome.solution.state, graph), file=sys.stderr)
        s = outcome.stats
        print(
            f"[graphsolve] {type(outcome).__name__}: steps={s.steps} "
            f"backtracks={s.backtracks} elapsed={s.elapsed:.3f}s",
            file=sys.stderr,
        )
    return outcome
