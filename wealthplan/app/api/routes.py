"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from wealthplan.core.goals import GoalMetricsRequest, goal_metrics
from wealthplan.core.projection import ProjectionInput, project
from wealthplan.core.schedule import compute_progress, create_schedule
from wealthplan.domain.goal_store import (
    CellNotFoundError,
    GoalNotFoundError,
    GoalStore,
    GoalValidationError,
)
from wealthplan.schemas.common import FieldErrorsResponse, PingResponse
from wealthplan.schemas.projection import projection_response
from wealthplan.schemas.schedule import (
    CreateGoalRequest,
    GoalDetailResponse,
    ScheduleRequest,
    ScheduleResponse,
    cell_schema,
    goal_schema,
)

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


def _store() -> GoalStore:
    return current_app.extensions["goal_store"]


def _json_body() -> Dict[str, Any]:
    return request.get_json(force=True, silent=False)


def _field_errors(errors: Dict[str, str]):
    return jsonify(FieldErrorsResponse(errors=errors).model_dump()), HTTPStatus.BAD_REQUEST


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return jsonify({"detail": exc.errors(include_url=False, include_context=False)}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(GoalValidationError)
def _handle_goal_validation_error(exc: GoalValidationError):
    return _field_errors(exc.errors)


@api_bp.errorhandler(GoalNotFoundError)
def _handle_goal_not_found(exc: GoalNotFoundError):
    return jsonify({"error": "goal not found"}), HTTPStatus.NOT_FOUND


@api_bp.errorhandler(CellNotFoundError)
def _handle_cell_not_found(exc: CellNotFoundError):
    return jsonify({"error": "cell not found"}), HTTPStatus.NOT_FOUND


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    return jsonify(PingResponse(message="pong").model_dump())


@api_bp.post("/calc/projection")
def projection() -> Any:
    """Future value, required contribution and the yearly table for the planner form."""
    payload = ProjectionInput.model_validate(_json_body())
    outcome = project(payload)
    if outcome.errors:
        return _field_errors(outcome.errors)
    return jsonify(projection_response(outcome.result).model_dump())


@api_bp.post("/calc/schedule")
def schedule_preview() -> Any:
    """Cells a cofrinho would get, without storing anything."""
    payload = ScheduleRequest.model_validate(_json_body())
    outcome = create_schedule(
        payload.total_target,
        payload.frequency,
        payload.start_date,
        payload.end_date,
    )
    if outcome.errors:
        return _field_errors(outcome.errors)

    response = ScheduleResponse(
        cells=[cell_schema(cell) for cell in outcome.cells],
        count=len(outcome.cells),
        total=sum(cell.amount for cell in outcome.cells),
    )
    return jsonify(response.model_dump(mode="json"))


@api_bp.post("/calc/goal-metrics")
def metrics() -> Any:
    payload = GoalMetricsRequest.model_validate(_json_body())
    result = goal_metrics(payload.target_amount, payload.current_amount, payload.monthly_contribution)
    return jsonify(result.model_dump())


@api_bp.post("/cofrinhos")
def create_goal() -> Any:
    payload = CreateGoalRequest.model_validate(_json_body())
    goal = _store().create_goal(
        name=payload.name,
        total_target=payload.total_target,
        frequency=payload.frequency,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    return jsonify(_goal_detail(goal.id).model_dump(mode="json")), HTTPStatus.CREATED


@api_bp.get("/cofrinhos")
def list_goals() -> Any:
    goals = [goal_schema(goal).model_dump(mode="json") for goal in _store().list_goals()]
    return jsonify(goals)


@api_bp.get("/cofrinhos/<goal_id>")
def get_goal(goal_id: str) -> Any:
    return jsonify(_goal_detail(goal_id).model_dump(mode="json"))


@api_bp.delete("/cofrinhos/<goal_id>")
def delete_goal(goal_id: str) -> Any:
    _store().delete_goal(goal_id)
    return "", HTTPStatus.NO_CONTENT


@api_bp.post("/cofrinhos/<goal_id>/cells/<cell_id>/complete")
def complete_cell(goal_id: str, cell_id: str) -> Any:
    """Register the contribution for one cell; repeating the call is a no-op."""
    _store().mark_cell(goal_id, cell_id)
    return jsonify(_goal_detail(goal_id).model_dump(mode="json"))


def _goal_detail(goal_id: str) -> GoalDetailResponse:
    store = _store()
    goal = store.get_goal(goal_id)
    cells = store.get_cells(goal_id)
    return GoalDetailResponse(
        goal=goal_schema(goal),
        cells=[cell_schema(cell) for cell in cells],
        progress=compute_progress(goal, cells),
    )
