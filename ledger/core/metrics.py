"""Per-account and portfolio-level figures derived from principal and rate."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from pydantic import BaseModel

from ledger.models import Account, BonusEvent


class IncomeRow(BaseModel):
    id: Optional[int] = None
    name: str
    daily_income: float
    monthly_income: float
    yearly_income: float
    participates_in_monthly_contribution: bool


class PortfolioSummary(BaseModel):
    total_principal: float
    participating_principal: float
    weighted_average_rate: float
    total_annual_bonus: float
    monthly_contribution: float
    income: List[IncomeRow]


def daily_income(account: Account) -> float:
    return round(account.principal * account.annual_rate / 100 / 365, 2)


def monthly_income(account: Account) -> float:
    return round(account.principal * account.annual_rate / 100 / 12, 2)


def yearly_income(account: Account) -> float:
    return round(account.principal * account.annual_rate / 100, 2)


def income_breakdown(accounts: Iterable[Account]) -> List[IncomeRow]:
    return [
        IncomeRow(
            id=account.id,
            name=account.name,
            daily_income=daily_income(account),
            monthly_income=monthly_income(account),
            yearly_income=yearly_income(account),
            participates_in_monthly_contribution=account.participates_in_monthly_contribution,
        )
        for account in accounts
    ]


def total_principal(accounts: Iterable[Account]) -> float:
    return round(sum(account.principal for account in accounts), 2)


def participating_principal(accounts: Iterable[Account]) -> float:
    return round(
        sum(
            account.principal
            for account in accounts
            if account.participates_in_monthly_contribution
        ),
        2,
    )


def weighted_average_rate(accounts: Sequence[Account]) -> float:
    """Principal-weighted mean of the annual rates, 0 when there is no principal."""
    principal = sum(account.principal for account in accounts)
    if principal == 0:
        return 0.0
    weighted = sum(account.annual_rate * account.principal for account in accounts)
    return round(weighted / principal, 4)


def total_annual_bonus(bonuses: Iterable[BonusEvent]) -> float:
    return round(sum(bonus.amount for bonus in bonuses), 2)


def portfolio_summary(
    accounts: Sequence[Account],
    bonuses: Sequence[BonusEvent] = (),
    monthly_contribution: float = 0.0,
) -> PortfolioSummary:
    return PortfolioSummary(
        total_principal=total_principal(accounts),
        participating_principal=participating_principal(accounts),
        weighted_average_rate=weighted_average_rate(accounts),
        total_annual_bonus=total_annual_bonus(bonuses),
        monthly_contribution=monthly_contribution,
        income=income_breakdown(accounts),
    )


__all__ = [
    "IncomeRow",
    "PortfolioSummary",
    "daily_income",
    "monthly_income",
    "yearly_income",
    "income_breakdown",
    "total_principal",
    "participating_principal",
    "weighted_average_rate",
    "total_annual_bonus",
    "portfolio_summary",
]
