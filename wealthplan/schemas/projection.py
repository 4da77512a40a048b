"""Data contracts for the planner projection."""

from pydantic import BaseModel

from wealthplan.core.formatting import format_currency, to_brl
from wealthplan.core.projection import ProjectionResult


class MoneyDisplay(BaseModel):
    usd: str
    brl: str


class ProjectionResponse(ProjectionResult):
    """Projection plus display strings for the headline figures."""

    futureValueDisplay: MoneyDisplay
    requiredContributionDisplay: MoneyDisplay


def money_display(value: float) -> MoneyDisplay:
    return MoneyDisplay(
        usd=format_currency(value, "USD"),
        brl=format_currency(to_brl(value), "BRL"),
    )


def projection_response(result: ProjectionResult) -> ProjectionResponse:
    return ProjectionResponse(
        **result.model_dump(),
        futureValueDisplay=money_display(result.futureValue),
        requiredContributionDisplay=money_display(result.requiredContribution),
    )
