"""Cofrinho schedule generation, completion and progress."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from wealthplan.config import settings
from wealthplan.core.dates import max_step_count, step_dates, today_in, whole_days_between
from wealthplan.models import Frequency, SavingsGoal, ScheduleCell

RawAmount = Union[str, int, float, Decimal, None]

# ten years of daily cells
MAX_SCHEDULE_CELLS = 3660


@dataclass
class ScheduleOutcome:
    cells: List[ScheduleCell] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class Progress(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_contributed: Decimal
    remaining_amount: Decimal
    remaining_cells: int
    percent_complete: float
    days_remaining: int


def minor_unit(digits: Optional[int] = None) -> Decimal:
    digits = settings.currency_minor_digits if digits is None else digits
    return Decimal(1).scaleb(-digits)


def parse_amount(raw: RawAmount) -> Optional[Decimal]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, float):
        raw = repr(raw)
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def parse_frequency(raw: Union[str, Frequency, None]) -> Optional[Frequency]:
    if raw is None:
        return None
    try:
        return Frequency(raw)
    except ValueError:
        return None


def split_amount(total: Decimal, count: int, unit: Optional[Decimal] = None) -> List[Decimal]:
    """
    Equal split of ``total`` into ``count`` parts truncated to the minor unit.

    The last part absorbs the residual so the parts add up to the rounded
    total exactly and never go negative:
        100.00 / 3 -> [33.33, 33.33, 33.34]
    """
    unit = unit or minor_unit()
    total = total.quantize(unit, rounding=ROUND_HALF_UP)
    base = (total / count).quantize(unit, rounding=ROUND_DOWN)
    parts = [base] * (count - 1)
    parts.append(total - base * (count - 1))
    return parts


def _rounded_target(target: Optional[Decimal]) -> Optional[Decimal]:
    if target is None:
        return None
    try:
        return target.quantize(minor_unit(), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # more digits than the decimal context carries
        return None


def validate_schedule(
    total_target: RawAmount,
    frequency: Union[str, Frequency, None],
    start_date: Optional[date],
    end_date: Optional[date],
) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    target = _rounded_target(parse_amount(total_target))
    if target is None or target <= 0:
        errors["total_target"] = "invalid target"

    freq = parse_frequency(frequency)
    if freq is None:
        errors["frequency"] = "invalid frequency"

    if start_date is None or end_date is None or end_date < start_date:
        errors["period"] = "invalid period"
    elif freq is not None and max_step_count(start_date, end_date, freq.step_unit) > MAX_SCHEDULE_CELLS:
        errors["period"] = "too many periods"

    return errors


def create_schedule(
    total_target: RawAmount,
    frequency: Union[str, Frequency, None],
    start_date: Optional[date],
    end_date: Optional[date],
    goal_id: Optional[str] = None,
) -> ScheduleOutcome:
    """
    Partition [start_date, end_date] into one cell per period.

    Due dates start at ``start_date`` and step by one day, seven days or one
    calendar month. Monthly dates are always taken from the start date with
    the day clamped to the month end (Jan 31 -> Feb 29 -> Mar 31 -> Apr 30).
    Every cell carries the same amount except the last, which takes the
    rounding residual.
    """
    errors = validate_schedule(total_target, frequency, start_date, end_date)
    if errors:
        return ScheduleOutcome(errors=errors)

    freq = parse_frequency(frequency)
    due_dates = step_dates(start_date, end_date, freq.step_unit)
    amounts = split_amount(parse_amount(total_target), len(due_dates))
    goal_id = goal_id or uuid.uuid4().hex

    cells = [
        ScheduleCell(
            id=uuid.uuid4().hex,
            goal_id=goal_id,
            due_date=due,
            amount=amount,
            position=position,
            completed=False,
        )
        for position, (due, amount) in enumerate(zip(due_dates, amounts))
    ]
    return ScheduleOutcome(cells=cells)


def mark_completed(cell: ScheduleCell) -> ScheduleCell:
    """Return the cell flagged as completed; already-completed cells come back unchanged."""
    if cell.completed:
        return cell
    return cell.model_copy(update={"completed": True})


def compute_progress(
    goal: SavingsGoal,
    cells: Iterable[ScheduleCell],
    today: Optional[date] = None,
) -> Progress:
    cells = list(cells)
    today = today or today_in(settings.timezone)

    contributed = sum((c.amount for c in cells if c.completed), Decimal(0))
    remaining_cells = sum(1 for c in cells if not c.completed)

    target = goal.total_target
    percent = min(100.0, float(contributed / target * 100)) if target > 0 else 0.0

    return Progress(
        total_contributed=contributed,
        remaining_amount=max(Decimal(0), target - contributed),
        remaining_cells=remaining_cells,
        percent_complete=percent,
        days_remaining=max(0, whole_days_between(today, goal.end_date)),
    )


__all__ = [
    "ScheduleOutcome",
    "Progress",
    "minor_unit",
    "parse_amount",
    "parse_frequency",
    "split_amount",
    "validate_schedule",
    "create_schedule",
    "mark_completed",
    "compute_progress",
]
