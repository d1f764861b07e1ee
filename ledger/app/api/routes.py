"""HTTP routes for the Flask API."""

from http import HTTPStatus
from typing import Any

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from ledger.core.bonuses import timeline
from ledger.core.metrics import portfolio_summary
from ledger.core.projection import project
from ledger.domain.validation import (
    LedgerValidationError,
    describe_errors,
    validate_account,
    validate_bonus,
    validate_settings,
)
from ledger.schemas.ledger import PingResponse, ProjectionRequest
from ledger.storage import LedgerStore, RecordNotFound

api_bp = Blueprint("api", __name__)


def _store() -> LedgerStore:
    return current_app.extensions["ledger_store"]


def _json_body() -> Any:
    return request.get_json(force=True, silent=True)


def _years_arg() -> int:
    years = request.args.get("years", default=current_app.config["HORIZON_YEARS"], type=int)
    limit = current_app.config["MAX_HORIZON_YEARS"]
    if not 0 <= years <= limit:
        raise LedgerValidationError([f"years: must be between 0 and {limit}"])
    return years


@api_bp.errorhandler(LedgerValidationError)
def _handle_ledger_validation_error(exc: LedgerValidationError):
    current_app.logger.warning("rejected %s %s: %s", request.method, request.path, exc)
    return jsonify({"error": exc.errors}), HTTPStatus.BAD_REQUEST


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return jsonify({"detail": describe_errors(exc)}), HTTPStatus.BAD_REQUEST


@api_bp.errorhandler(RecordNotFound)
def _handle_not_found(exc: RecordNotFound):
    return jsonify({"error": str(exc)}), HTTPStatus.NOT_FOUND


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    return jsonify(PingResponse(message="pong").model_dump())


# ----------------------------------------------------------------------
# investments
# ----------------------------------------------------------------------


@api_bp.get("/investments")
def list_investments() -> Any:
    return jsonify([account.model_dump(mode="json") for account in _store().list_accounts()])


@api_bp.post("/investments")
def create_investment() -> Any:
    payload = validate_account(_json_body())
    account = _store().create_account(payload)
    return jsonify(account.model_dump(mode="json")), HTTPStatus.CREATED


@api_bp.put("/investments/<int:account_id>")
def update_investment(account_id: int) -> Any:
    payload = validate_account(_json_body())
    account = _store().update_account(account_id, payload)
    return jsonify(account.model_dump(mode="json"))


@api_bp.delete("/investments/<int:account_id>")
def delete_investment(account_id: int) -> Any:
    _store().delete_account(account_id)
    return jsonify({"message": "Investment deleted"})


# ----------------------------------------------------------------------
# bonuses
# ----------------------------------------------------------------------


@api_bp.get("/bonuses")
def list_bonuses() -> Any:
    return jsonify([bonus.model_dump(mode="json") for bonus in _store().list_bonuses()])


@api_bp.post("/bonuses")
def create_bonus() -> Any:
    payload = validate_bonus(_json_body())
    bonus = _store().create_bonus(payload)
    return jsonify(bonus.model_dump(mode="json")), HTTPStatus.CREATED


@api_bp.put("/bonuses/<int:bonus_id>")
def update_bonus(bonus_id: int) -> Any:
    payload = validate_bonus(_json_body())
    bonus = _store().update_bonus(bonus_id, payload)
    return jsonify(bonus.model_dump(mode="json"))


@api_bp.delete("/bonuses/<int:bonus_id>")
def delete_bonus(bonus_id: int) -> Any:
    _store().delete_bonus(bonus_id)
    return jsonify({"message": "Bonus deleted"})


@api_bp.get("/bonuses/timeline")
def bonus_timeline() -> Any:
    entries = timeline(_store().list_bonuses(), years=_years_arg())
    return jsonify([entry.model_dump(mode="json") for entry in entries])


# ----------------------------------------------------------------------
# settings
# ----------------------------------------------------------------------


@api_bp.get("/settings")
def get_settings() -> Any:
    return jsonify(_store().get_settings().model_dump())


@api_bp.put("/settings")
def update_settings() -> Any:
    payload = validate_settings(_json_body())
    return jsonify(_store().update_settings(payload).model_dump())


# ----------------------------------------------------------------------
# projection & metrics
# ----------------------------------------------------------------------


@api_bp.get("/projection")
def stored_projection() -> Any:
    """Project the accounts, bonuses and contribution currently on file."""
    snapshot = _store().snapshot()
    rows = project(
        snapshot.accounts,
        monthly_contribution=snapshot.monthly_contribution,
        bonuses=snapshot.bonuses,
        horizon_years=_years_arg(),
    )
    return jsonify([row.model_dump() for row in rows])


@api_bp.post("/projection")
def adhoc_projection() -> Any:
    """Project a snapshot supplied in the request body."""
    raw_payload = _json_body()
    if not isinstance(raw_payload, dict):
        raise LedgerValidationError(["payload: expected a JSON object"])
    payload = ProjectionRequest.model_validate(raw_payload)
    if payload.horizon_years > current_app.config["MAX_HORIZON_YEARS"]:
        raise LedgerValidationError(
            [f"horizon_years: must be at most {current_app.config['MAX_HORIZON_YEARS']}"]
        )
    rows = project(
        payload.accounts,
        monthly_contribution=payload.monthly_contribution,
        bonuses=payload.bonuses,
        horizon_years=payload.horizon_years,
    )
    return jsonify([row.model_dump() for row in rows])


@api_bp.get("/metrics")
def metrics() -> Any:
    snapshot = _store().snapshot()
    summary = portfolio_summary(
        snapshot.accounts,
        bonuses=snapshot.bonuses,
        monthly_contribution=snapshot.monthly_contribution,
    )
    return jsonify(summary.model_dump())
