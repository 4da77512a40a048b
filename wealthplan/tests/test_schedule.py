from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from wealthplan.core.dates import add_months, max_step_count, step_dates
from wealthplan.core.schedule import (
    compute_progress,
    create_schedule,
    mark_completed,
    split_amount,
)
from wealthplan.models import Frequency, SavingsGoal


def dates_of(outcome) -> list:
    return [cell.due_date for cell in outcome.cells]


def test_daily_schedule_splits_target_evenly():
    outcome = create_schedule(10000, "daily", date(2024, 1, 1), date(2024, 1, 10))

    assert outcome.ok
    assert len(outcome.cells) == 10
    assert all(cell.amount == Decimal("1000.00") for cell in outcome.cells)
    assert dates_of(outcome) == [date(2024, 1, d) for d in range(1, 11)]
    assert [cell.position for cell in outcome.cells] == list(range(10))
    assert not any(cell.completed for cell in outcome.cells)


def test_weekly_schedule_steps_seven_days():
    outcome = create_schedule("500", Frequency.WEEKLY, date(2024, 1, 1), date(2024, 1, 30))

    assert dates_of(outcome) == [date(2024, 1, d) for d in (1, 8, 15, 22, 29)]
    assert sum(cell.amount for cell in outcome.cells) == Decimal("500")


def test_monthly_schedule_clamps_to_month_end_from_anchor():
    """Jan 31 anchor: Feb clamps to the 29th (leap year), March and April keep the anchor day when they can."""
    outcome = create_schedule(1200, "monthly", date(2024, 1, 31), date(2024, 4, 30))

    assert dates_of(outcome) == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]
    assert all(cell.amount == Decimal("300.00") for cell in outcome.cells)


def test_monthly_clamp_in_non_leap_year():
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2023, 1, 31), 2) == date(2023, 3, 31)
    assert step_dates(date(2023, 1, 31), date(2023, 3, 30), "month") == [date(2023, 1, 31), date(2023, 2, 28)]


def test_single_day_period_yields_one_cell():
    outcome = create_schedule(250, "daily", date(2024, 5, 5), date(2024, 5, 5))

    assert len(outcome.cells) == 1
    assert outcome.cells[0].amount == Decimal("250.00")
    assert outcome.cells[0].due_date == date(2024, 5, 5)


def test_last_cell_absorbs_rounding_residual():
    outcome = create_schedule(100, "daily", date(2024, 1, 1), date(2024, 1, 3))

    assert [cell.amount for cell in outcome.cells] == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]
    assert sum(cell.amount for cell in outcome.cells) == Decimal("100")


def test_split_never_produces_negative_cells():
    parts = split_amount(Decimal("0.05"), 9)

    assert sum(parts) == Decimal("0.05")
    assert all(part >= 0 for part in parts)


@pytest.mark.parametrize("frequency", ["daily", "weekly", "monthly"])
def test_dates_increase_and_stay_inside_period(frequency):
    start, end = date(2024, 1, 15), date(2025, 3, 2)
    outcome = create_schedule("12345.67", frequency, start, end)

    due = dates_of(outcome)
    assert due[0] == start
    assert due[-1] <= end
    assert all(a < b for a, b in zip(due, due[1:]))
    assert sum(cell.amount for cell in outcome.cells) == Decimal("12345.67")


def test_portuguese_frequency_codes_are_accepted():
    outcome = create_schedule(70, "semanal", date(2024, 1, 1), date(2024, 1, 7))
    assert len(outcome.cells) == 1


def test_invalid_inputs_are_reported_together():
    outcome = create_schedule(0, "yearly", date(2024, 2, 1), date(2024, 1, 1))

    assert outcome.cells == []
    assert outcome.errors == {
        "total_target": "invalid target",
        "frequency": "invalid frequency",
        "period": "invalid period",
    }


def test_mark_completed_is_idempotent():
    cell = create_schedule(100, "daily", date(2024, 1, 1), date(2024, 1, 2)).cells[0]

    once = mark_completed(cell)
    twice = mark_completed(once)

    assert not cell.completed
    assert once.completed and twice.completed
    assert twice is once
    assert (twice.amount, twice.due_date, twice.position, twice.id) == (cell.amount, cell.due_date, cell.position, cell.id)


def make_goal(end: date) -> SavingsGoal:
    return SavingsGoal(
        id="goal-1",
        name="Viagem",
        total_target=Decimal("1000"),
        frequency=Frequency.DAILY,
        start_date=date(2024, 1, 1),
        end_date=end,
    )


def test_progress_counts_completed_cells():
    goal = make_goal(date(2024, 1, 10))
    cells = create_schedule(1000, "daily", goal.start_date, goal.end_date, goal_id=goal.id).cells
    cells = [mark_completed(c) if c.position < 3 else c for c in cells]

    progress = compute_progress(goal, cells, today=date(2024, 1, 4))

    assert progress.total_contributed == Decimal("300")
    assert progress.remaining_amount == Decimal("700")
    assert progress.remaining_cells == 7
    assert progress.percent_complete == 30.0
    assert progress.days_remaining == 6


def test_progress_is_clamped():
    goal = make_goal(date(2024, 1, 10))
    cells = create_schedule(2000, "daily", goal.start_date, goal.end_date).cells
    cells = [mark_completed(c) for c in cells]

    progress = compute_progress(goal, cells, today=goal.end_date + timedelta(days=30))

    assert progress.percent_complete == 100.0
    assert progress.remaining_amount == Decimal("0")
    assert progress.days_remaining == 0


def test_target_beyond_decimal_precision_is_invalid():
    outcome = create_schedule("1e30", "daily", date(2024, 1, 1), date(2024, 1, 10))

    assert outcome.cells == []
    assert outcome.errors == {"total_target": "invalid target"}


def test_schedule_stops_at_last_representable_date():
    monthly = create_schedule("100", "monthly", date(9999, 11, 1), date(9999, 12, 31))
    daily = create_schedule("100", "daily", date(9999, 12, 30), date.max)

    assert dates_of(monthly) == [date(9999, 11, 1), date(9999, 12, 1)]
    assert dates_of(daily) == [date(9999, 12, 30), date.max]


def test_too_many_cells_is_rejected():
    outcome = create_schedule("100", "daily", date(2000, 1, 1), date(2030, 1, 1))

    assert outcome.cells == []
    assert outcome.errors == {"period": "too many periods"}


@pytest.mark.parametrize("unit", ["day", "week", "month"])
def test_max_step_count_bounds_step_dates(unit):
    start, end = date(2024, 1, 31), date(2025, 3, 15)

    assert max_step_count(start, end, unit) >= len(step_dates(start, end, unit))
