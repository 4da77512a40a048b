"""Data contracts for cofrinho schedules."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from wealthplan.core.formatting import format_date_br, frequency_label
from wealthplan.core.schedule import Progress
from wealthplan.models import SavingsGoal, ScheduleCell


class ScheduleRequest(BaseModel):
    """Inputs for previewing a schedule without storing it."""

    model_config = ConfigDict(extra="forbid")

    total_target: Union[str, float, int, None] = Field(None, description="Goal amount, e.g. 10000 or '10000.00'.")
    frequency: Optional[str] = Field(None, description="daily | weekly | monthly (diaria | semanal | mensal).")
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class CreateGoalRequest(ScheduleRequest):
    name: str = ""


class CellSchema(BaseModel):
    id: str
    goal_id: str
    due_date: date
    due_date_label: str
    amount: Decimal
    position: int
    completed: bool


class GoalSchema(BaseModel):
    id: str
    name: str
    total_target: Decimal
    frequency: str
    frequency_label: str
    start_date: date
    end_date: date
    created_at: datetime


class ScheduleResponse(BaseModel):
    cells: List[CellSchema]
    count: int
    total: Decimal


class GoalDetailResponse(BaseModel):
    goal: GoalSchema
    cells: List[CellSchema]
    progress: Progress


def cell_schema(cell: ScheduleCell) -> CellSchema:
    return CellSchema(**cell.model_dump(), due_date_label=format_date_br(cell.due_date))


def goal_schema(goal: SavingsGoal) -> GoalSchema:
    data = goal.model_dump()
    data["frequency"] = goal.frequency.value
    return GoalSchema(**data, frequency_label=frequency_label(goal.frequency))
