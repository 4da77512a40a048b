from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional, Union

from wealthplan.core.schedule import (
    RawAmount,
    create_schedule,
    mark_completed,
    parse_amount,
    parse_frequency,
)
from wealthplan.models import Frequency, SavingsGoal, ScheduleCell

logger = logging.getLogger(__name__)


class GoalValidationError(ValueError):
    def __init__(self, errors: Dict[str, str]):
        super().__init__("; ".join(f"{key}: {msg}" for key, msg in errors.items()))
        self.errors = errors


class GoalNotFoundError(LookupError):
    pass


class CellNotFoundError(LookupError):
    pass


@dataclass(frozen=True)
class CellChange:
    goal_id: str
    cell_id: str
    completed: bool


ChangeHandler = Callable[[CellChange], None]


class ChangeFeed:
    """Fan-out of cell changes to subscribed observers."""

    def __init__(self) -> None:
        self._handlers: List[ChangeHandler] = []
        self._lock = threading.Lock()

    def subscribe(self, handler: ChangeHandler) -> Callable[[], None]:
        with self._lock:
            self._handlers.append(handler)

        def unsubscribe() -> None:
            with self._lock:
                if handler in self._handlers:
                    self._handlers.remove(handler)

        return unsubscribe

    def publish(self, change: CellChange) -> None:
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(change)
            except Exception:
                logger.exception(
                    "Change handler failed",
                    extra={"goal_id": change.goal_id, "cell_id": change.cell_id},
                )


class GoalStore:
    """
    In-process store for cofrinho goals and their cells.

    A goal and its cells are written and removed together. After creation the
    only mutation is flipping a cell to completed, which is idempotent, so
    replaying a change from the feed any number of times is harmless.
    """

    def __init__(self, feed: Optional[ChangeFeed] = None) -> None:
        self.feed = feed or ChangeFeed()
        self._goals: Dict[str, SavingsGoal] = {}
        self._cells: Dict[str, Dict[str, ScheduleCell]] = {}
        self._lock = threading.Lock()

    def create_goal(
        self,
        name: str,
        total_target: RawAmount,
        frequency: Union[str, Frequency, None],
        start_date: Optional[date],
        end_date: Optional[date],
    ) -> SavingsGoal:
        goal_id = uuid.uuid4().hex
        outcome = create_schedule(total_target, frequency, start_date, end_date, goal_id=goal_id)

        errors = dict(outcome.errors)
        if not name or not name.strip():
            errors["name"] = "name is required"
        if errors:
            raise GoalValidationError(errors)

        goal = SavingsGoal(
            id=goal_id,
            name=name.strip(),
            total_target=parse_amount(total_target),
            frequency=parse_frequency(frequency),
            start_date=start_date,
            end_date=end_date,
        )
        with self._lock:
            self._goals[goal.id] = goal
            self._cells[goal.id] = {cell.id: cell for cell in outcome.cells}

        logger.info(
            "Goal created",
            extra={"goal_id": goal.id, "frequency": goal.frequency.value, "cells": len(outcome.cells)},
        )
        return goal

    def get_goal(self, goal_id: str) -> SavingsGoal:
        with self._lock:
            goal = self._goals.get(goal_id)
        if goal is None:
            raise GoalNotFoundError(goal_id)
        return goal

    def list_goals(self) -> List[SavingsGoal]:
        # insertion order, newest first
        with self._lock:
            return list(reversed(self._goals.values()))

    def get_cells(self, goal_id: str) -> List[ScheduleCell]:
        with self._lock:
            cells = self._cells.get(goal_id)
            if cells is None:
                raise GoalNotFoundError(goal_id)
            ordered = sorted(cells.values(), key=lambda c: c.position)
        return ordered

    def delete_goal(self, goal_id: str) -> None:
        with self._lock:
            if goal_id not in self._goals:
                raise GoalNotFoundError(goal_id)
            del self._goals[goal_id]
            del self._cells[goal_id]
        logger.info("Goal deleted", extra={"goal_id": goal_id})

    def mark_cell(self, goal_id: str, cell_id: str) -> ScheduleCell:
        """Mark a cell completed and publish the change if the flag flipped."""
        with self._lock:
            cells = self._cells.get(goal_id)
            if cells is None:
                raise GoalNotFoundError(goal_id)
            cell = cells.get(cell_id)
            if cell is None:
                raise CellNotFoundError(cell_id)
            updated = mark_completed(cell)
            cells[cell_id] = updated

        if updated is not cell:
            logger.info("Cell completed", extra={"goal_id": goal_id, "cell_id": cell_id})
            self.feed.publish(CellChange(goal_id=goal_id, cell_id=cell_id, completed=True))
        return updated

    def apply_change(self, change: CellChange) -> Optional[ScheduleCell]:
        """Apply a change delivered by a feed; unknown goals or cells are skipped."""
        if not change.completed:
            # completion is the only transition a cell supports
            return None
        with self._lock:
            cells = self._cells.get(change.goal_id)
            if cells is None or change.cell_id not in cells:
                logger.debug("Ignoring change for missing cell", extra={"cell_id": change.cell_id})
                return None
            updated = mark_completed(cells[change.cell_id])
            cells[change.cell_id] = updated
        return updated
