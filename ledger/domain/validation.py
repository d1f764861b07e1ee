from __future__ import annotations

from typing import Any, List, Mapping, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ledger.schemas.ledger import AccountPayload, BonusPayload, SettingsPayload

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class LedgerValidationError(ValueError):
    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class InvalidAccount(LedgerValidationError):
    pass


class InvalidBonus(LedgerValidationError):
    pass


class InvalidSettings(LedgerValidationError):
    pass


def describe_errors(exc: ValidationError) -> List[str]:
    messages: List[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "payload"
        messages.append(f"{location}: {error['msg']}")
    return messages


def _validate(
    payload: Mapping[str, Any],
    schema: Type[PayloadT],
    error_type: Type[LedgerValidationError],
) -> PayloadT:
    if not isinstance(payload, Mapping):
        raise error_type(["payload: expected a JSON object"])
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        raise error_type(describe_errors(exc)) from exc


def validate_account(payload: Mapping[str, Any]) -> AccountPayload:
    """Empty name, non-positive principal and negative rate are rejected."""
    return _validate(payload, AccountPayload, InvalidAccount)


def validate_bonus(payload: Mapping[str, Any]) -> BonusPayload:
    """Non-positive amount and months outside 1..12 are rejected."""
    return _validate(payload, BonusPayload, InvalidBonus)


def validate_settings(payload: Mapping[str, Any]) -> SettingsPayload:
    return _validate(payload, SettingsPayload, InvalidSettings)


__all__ = [
    "LedgerValidationError",
    "InvalidAccount",
    "InvalidBonus",
    "InvalidSettings",
    "describe_errors",
    "validate_account",
    "validate_bonus",
    "validate_settings",
]
