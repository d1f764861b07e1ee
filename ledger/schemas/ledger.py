"""Request contracts for the ledger API."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ledger.models import Account, BonusEvent


class PingResponse(BaseModel):
    message: str


class AccountPayload(BaseModel):
    """Fields a client may send when creating or editing an investment."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    name: str = Field(..., min_length=1, description="Display label.")
    principal: float = Field(..., gt=0, description="Starting value in currency units.")
    annual_rate: float = Field(..., ge=0, description="Annual rate in percent, e.g. 3.5.")
    participates_in_monthly_contribution: bool = Field(
        True,
        description="Whether the account receives a share of contributions and bonuses.",
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class BonusPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    name: str = ""
    amount: float = Field(..., gt=0, description="Amount received in currency units.")
    month: int = Field(..., ge=1, le=12, description="Calendar month the bonus arrives.")


class SettingsPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    monthly_contribution: float = Field(0.0, ge=0)


class ProjectionRequest(BaseModel):
    """Ad-hoc snapshot to project without touching storage."""

    model_config = ConfigDict(allow_inf_nan=False)

    accounts: List[Account] = Field(default_factory=list)
    monthly_contribution: Optional[float] = Field(default=None, ge=0)
    bonuses: List[BonusEvent] = Field(default_factory=list)
    horizon_years: int = Field(default=10, ge=0, le=100)

    @model_validator(mode="after")
    def ensure_unique_ids(self) -> "ProjectionRequest":
        ids = [account.id for account in self.accounts if account.id is not None]
        if len(set(ids)) != len(ids):
            raise ValueError("account ids must be unique")
        return self
