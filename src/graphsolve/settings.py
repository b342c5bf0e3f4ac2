"""Options controlling one call to ``solve``."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import timedelta
from typing import Optional, Union

from .selector import CellOrder, RowMajorOrder
from .state import PuzzleState


@dataclass(frozen=True)
class SolveSettings:
    """
    Options for one solve.

    max_steps:        stop with Exhausted after this many decision attempts.
    max_time:         stop with Exhausted after this much wall time
                      (seconds or a timedelta).
    order:            branching strategy (cell order + candidate domain).
    seed:             partially filled state to start from.
    reference:        known solution; cells that differ from it are reported
                      to stderr after each committed assignment.
    self_loop_weight: how many entries a self-loop adds to its node's edge
                      multiset (1 or 2).
    debug:            report each committed assignment and backtrack to stderr.
    """

    max_steps: Optional[int] = None
    max_time: Optional[Union[float, timedelta]] = None
    order: CellOrder = field(default_factory=RowMajorOrder)
    seed: Optional[PuzzleState] = None
    reference: Optional[PuzzleState] = None
    self_loop_weight: int = 1
    debug: bool = False

    def __post_init__(self) -> None:
        if self.max_steps is not None and self.max_steps < 0:
            raise ValueError("max_steps must be >= 0.")
        if self.time_limit is not None and self.time_limit < 0:
            raise ValueError("max_time must be >= 0.")
        if self.self_loop_weight not in (1, 2):
            raise ValueError("self_loop_weight must be 1 or 2.")

    @property
    def time_limit(self) -> Optional[float]:
        """``max_time`` in seconds."""
        if isinstance(self.max_time, timedelta):
            return self.max_time.total_seconds()
        return self.max_time

    def with_seed(self, seed: Optional[PuzzleState]) -> "SolveSettings":
        return replace(self, seed=seed)

    def with_reference(self, reference: Optional[PuzzleState]) -> "SolveSettings":
        return replace(self, reference=reference)

    def with_budget(
        self,
        *,
        max_steps: Optional[int] = None,
        max_time: Optional[Union[float, timedelta]] = None,
    ) -> "SolveSettings":
        return replace(self, max_steps=max_steps, max_time=max_time)
