from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Account(BaseModel):
    """Snapshot of one investment holding as the engine sees it."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    id: Optional[int] = None
    name: str
    principal: float
    annual_rate: float  # percent, 3.5 means 3.5%/year
    participates_in_monthly_contribution: bool = True
    created_at: Optional[datetime] = None

    @property
    def rate(self) -> float:
        return self.annual_rate / 100


class BonusEvent(BaseModel):
    """One-off amount received (and invested) in a calendar month."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    id: Optional[int] = None
    name: str = ""
    amount: float
    month: int
    created_at: Optional[datetime] = None


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    monthly_contribution: float = 0.0


class LedgerSnapshot(BaseModel):
    """Everything the projection needs, read in one go from storage."""

    model_config = ConfigDict(frozen=True)

    accounts: List[Account] = Field(default_factory=list)
    bonuses: List[BonusEvent] = Field(default_factory=list)
    monthly_contribution: float = 0.0
