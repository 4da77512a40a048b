from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Frequency"]:
        # codes stored by the original planner ("diaria", "semanal", "mensal")
        if isinstance(value, str):
            return _FREQUENCY_ALIASES.get(value.strip().lower())
        return None

    @property
    def step_unit(self) -> str:
        return {
            Frequency.DAILY: "day",
            Frequency.WEEKLY: "week",
            Frequency.MONTHLY: "month",
        }[self]


_FREQUENCY_ALIASES = {
    "daily": Frequency.DAILY,
    "weekly": Frequency.WEEKLY,
    "monthly": Frequency.MONTHLY,
    "diaria": Frequency.DAILY,
    "diária": Frequency.DAILY,
    "semanal": Frequency.WEEKLY,
    "mensal": Frequency.MONTHLY,
}


class SavingsGoal(BaseModel):
    """A cofrinho: a target split into dated contribution cells."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    name: str
    total_target: Decimal = Field(gt=0)
    frequency: Frequency
    start_date: date
    end_date: date
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def ensure_period(self) -> "SavingsGoal":
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class ScheduleCell(BaseModel):
    """One dated contribution slot; only ``completed`` ever changes."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    goal_id: str
    due_date: date
    amount: Decimal
    position: int = Field(ge=0)
    completed: bool = False
