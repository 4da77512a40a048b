"""Progress metrics for simple target/current/monthly-contribution goals."""

from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GoalMetricsRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    target_amount: float = Field(gt=0)
    current_amount: float = Field(0.0, ge=0)
    monthly_contribution: float = Field(0.0, ge=0)


class GoalMetrics(BaseModel):
    remaining_amount: float
    completion_percentage: float
    is_completed: bool
    # None when the goal is already met or nothing is being contributed
    estimated_months: Optional[float] = None
    estimated_years: Optional[int] = None
    estimated_extra_months: Optional[int] = None


def goal_metrics(target_amount: float, current_amount: float, monthly_contribution: float) -> GoalMetrics:
    """
    Remaining amount, clamped completion percentage and a linear time estimate.

    The estimate ignores interest: months = remaining / monthly contribution,
    split into whole years plus the (rounded up) leftover months.
    """
    remaining = target_amount - current_amount
    completion = min(100.0, current_amount / target_amount * 100.0)

    if remaining <= 0:
        return GoalMetrics(remaining_amount=remaining, completion_percentage=completion, is_completed=True)

    if monthly_contribution <= 0:
        return GoalMetrics(remaining_amount=remaining, completion_percentage=completion, is_completed=False)

    months = remaining / monthly_contribution
    return GoalMetrics(
        remaining_amount=remaining,
        completion_percentage=completion,
        is_completed=False,
        estimated_months=months,
        estimated_years=math.floor(months / 12),
        estimated_extra_months=math.ceil(months % 12),
    )
