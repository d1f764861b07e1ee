from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel

from ledger.core.bonuses import monthly_totals
from ledger.models import Account, BonusEvent

DEFAULT_HORIZON_YEARS = 10


class AccountValue(BaseModel):
    position: int  # index in the input account list
    id: Optional[int] = None
    name: str
    value: float
    participates_in_monthly_contribution: bool


class ProjectionYear(BaseModel):
    year: int
    accounts: List[AccountValue]
    total_assets: float

    @property
    def per_account_value(self) -> Dict[int, float]:
        """
        Values keyed by account id, or by input position when any id is
        missing or repeated.
        """
        ids = [row.id for row in self.accounts]
        if None not in ids and len(set(ids)) == len(ids):
            return {row.id: row.value for row in self.accounts}
        return {row.position: row.value for row in self.accounts}


def annuity_future_value(payment: float, monthly_rate: float, months: int) -> float:
    """Future value of `months` equal deposits made at the end of each month."""
    if monthly_rate > 0:
        return payment * (((1 + monthly_rate) ** months - 1) / monthly_rate)
    return payment * months


def bonus_growth(bonus_share: float, month: int, year: int, monthly_rate: float) -> float:
    """
    Value at the end of `year` of a bonus share received in `month`.

    The bonus is counted once for every elapsed year 1..year, each copy
    compounding from its own receipt month to the end of `year`.
    """
    value = 0.0
    for invest_year in range(1, year + 1):
        months_invested = (year - invest_year) * 12 + (12 - month + 1)
        if months_invested > 0:
            value += bonus_share * (1 + monthly_rate) ** months_invested
        elif months_invested == 0 and invest_year == year:
            value += bonus_share
    return value


def _account_value(
    account: Account,
    year: int,
    monthly_contribution: float,
    bonus_totals: Dict[int, float],
    base_principal: float,
) -> float:
    rate = account.rate
    monthly_rate = rate / 12

    # 1) compound the principal
    value = account.principal * (1 + rate) ** year

    if not account.participates_in_monthly_contribution or base_principal <= 0:
        return value

    share = account.principal / base_principal

    # 2) monthly contribution annuity, pro-rata by principal
    if monthly_contribution > 0 and year > 0:
        value += annuity_future_value(monthly_contribution * share, monthly_rate, year * 12)

    # 3) bonus injections, same share
    for month, total in sorted(bonus_totals.items()):
        value += bonus_growth(total * share, month, year, monthly_rate)

    return value


def project(
    accounts: Sequence[Account],
    monthly_contribution: Optional[float] = 0.0,
    bonuses: Iterable[BonusEvent] = (),
    horizon_years: int = DEFAULT_HORIZON_YEARS,
) -> List[ProjectionYear]:
    """
    Year-by-year forecast for years 0..horizon_years (inclusive).

    Per account and year:
      1) principal * (1 + rate)^year
      2) + ordinary annuity of the account's share of the monthly contribution
      3) + bonus injections in their receipt month, compounded monthly

    Shares are principal / (sum of principal of participating accounts). When
    that base is zero nothing is distributed. Account values are rounded to
    cents before being summed into the year total.
    """
    contribution = monthly_contribution or 0.0
    bonus_totals = monthly_totals(bonuses)
    base_principal = sum(
        account.principal
        for account in accounts
        if account.participates_in_monthly_contribution
    )

    rows: List[ProjectionYear] = []
    for year in range(horizon_years + 1):
        values: List[AccountValue] = []
        for position, account in enumerate(accounts):
            value = _account_value(account, year, contribution, bonus_totals, base_principal)
            values.append(
                AccountValue(
                    position=position,
                    id=account.id,
                    name=account.name,
                    value=round(value, 2),
                    participates_in_monthly_contribution=account.participates_in_monthly_contribution,
                )
            )

        rows.append(
            ProjectionYear(
                year=year,
                accounts=values,
                total_assets=round(sum(row.value for row in values), 2),
            )
        )

    return rows


__all__ = [
    "DEFAULT_HORIZON_YEARS",
    "AccountValue",
    "ProjectionYear",
    "annuity_future_value",
    "bonus_growth",
    "project",
]
