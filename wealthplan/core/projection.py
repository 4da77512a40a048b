from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

RawNumber = Union[str, int, float, None]

# |i| below this is treated as a 0% rate (annuity factor degenerates to n)
RATE_EPSILON = 1e-12

MAX_TERM_YEARS = 100


# -----------------------------
# Input / output models
# -----------------------------


class ProjectionInput(BaseModel):
    """Raw planner form values; anything may arrive as a string."""

    model_config = ConfigDict(extra="forbid")

    targetAmount: RawNumber = None
    monthlyContribution: RawNumber = None
    annualRatePercent: RawNumber = None
    termYears: RawNumber = None


class AnnualDataPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    balance: float
    totalInvested: float
    totalInterest: float


class ProjectionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    futureValue: float
    requiredContribution: float
    annualData: List[AnnualDataPoint]


@dataclass
class ParsedInput:
    target_amount: float
    monthly_contribution: float
    annual_rate_percent: float
    term_years: int


@dataclass
class ValidationResult:
    errors: Dict[str, str] = field(default_factory=dict)
    parsed: Optional[ParsedInput] = None

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class ProjectionOutcome:
    result: Optional[ProjectionResult]
    errors: Dict[str, str]


# -----------------------------
# Parsing
# -----------------------------


def parse_number(raw: RawNumber) -> Optional[float]:
    """Parse a form value into a finite float, or None when it is not a number."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_whole_number(raw: RawNumber) -> Optional[int]:
    value = parse_number(raw)
    if value is None or not value.is_integer():
        return None
    return int(value)


def validate(data: ProjectionInput) -> ValidationResult:
    """Check every field independently and collect all errors."""
    errors: Dict[str, str] = {}

    target = parse_number(data.targetAmount)
    if target is None or target <= 0:
        errors["targetAmount"] = "target must be positive."

    # a zero contribution makes the forward projection meaningless
    contribution = parse_number(data.monthlyContribution)
    if contribution is None or contribution <= 0:
        errors["monthlyContribution"] = "contribution must be positive."

    rate = parse_number(data.annualRatePercent)
    if rate is None or rate <= 0:
        errors["annualRatePercent"] = "rate must be positive."

    term = parse_whole_number(data.termYears)
    if term is None or term <= 0:
        errors["termYears"] = "term must be positive."
    elif term > MAX_TERM_YEARS:
        errors["termYears"] = "term too long."

    if errors:
        return ValidationResult(errors=errors)

    return ValidationResult(
        parsed=ParsedInput(
            target_amount=target,
            monthly_contribution=contribution,
            annual_rate_percent=rate,
            term_years=term,
        )
    )


# -----------------------------
# Formulas
# -----------------------------


def monthly_rate(annual_rate_percent: float) -> float:
    """Effective monthly rate equivalent to an effective annual rate: (1+R)^(1/12) - 1"""
    return (1.0 + annual_rate_percent / 100.0) ** (1.0 / 12.0) - 1.0


def future_value(contribution: float, rate: float, periods: int) -> float:
    """Future value of an ordinary annuity: P * ((1+i)^n - 1) / i"""
    if periods <= 0:
        return 0.0
    if abs(rate) < RATE_EPSILON:
        return contribution * periods
    return contribution * (((1.0 + rate) ** periods - 1.0) / rate)


def required_contribution(target: float, rate: float, periods: int) -> float:
    """Payment that grows to ``target`` after ``periods``: FV * i / ((1+i)^n - 1)"""
    if periods <= 0:
        return target
    if abs(rate) < RATE_EPSILON:
        return target / periods
    return target * (rate / ((1.0 + rate) ** periods - 1.0))


def annual_breakpoints(contribution: float, rate: float, periods: int) -> List[AnnualDataPoint]:
    """One row per completed year, plus the final partial year if there is one."""
    months = list(range(12, periods + 1, 12))
    if periods > 0 and periods % 12:
        months.append(periods)

    points: List[AnnualDataPoint] = []
    for month in months:
        balance = future_value(contribution, rate, month)
        invested = contribution * month
        points.append(
            AnnualDataPoint(
                year=math.ceil(month / 12),
                balance=balance,
                totalInvested=invested,
                totalInterest=balance - invested,
            )
        )
    return points


def project(data: ProjectionInput) -> ProjectionOutcome:
    """
    Validate the form values and build the projection.

    Invalid input returns the collected field errors and no result; nothing
    is raised to the caller. Inputs whose results would not fit in a float
    are reported the same way.
    """
    validation = validate(data)
    if not validation.ok:
        logger.debug("projection rejected", extra={"fields": sorted(validation.errors)})
        return ProjectionOutcome(result=None, errors=validation.errors)

    parsed = validation.parsed
    i = monthly_rate(parsed.annual_rate_percent)
    n = parsed.term_years * 12

    try:
        fv = future_value(parsed.monthly_contribution, i, n)
        required = required_contribution(parsed.target_amount, i, n)
    except OverflowError:
        return ProjectionOutcome(result=None, errors={"annualRatePercent": "rate too high."})

    errors: Dict[str, str] = {}
    if not math.isfinite(fv):
        errors["monthlyContribution"] = "contribution too large."
    if not math.isfinite(required):
        errors["targetAmount"] = "target too large."
    if errors:
        return ProjectionOutcome(result=None, errors=errors)

    result = ProjectionResult(
        futureValue=fv,
        requiredContribution=required,
        annualData=annual_breakpoints(parsed.monthly_contribution, i, n),
    )
    return ProjectionOutcome(result=result, errors={})


__all__ = [
    "ProjectionInput",
    "AnnualDataPoint",
    "ProjectionResult",
    "ValidationResult",
    "ProjectionOutcome",
    "parse_number",
    "parse_whole_number",
    "validate",
    "monthly_rate",
    "future_value",
    "required_contribution",
    "annual_breakpoints",
    "project",
]
