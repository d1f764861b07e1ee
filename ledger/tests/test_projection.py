from __future__ import annotations

from math import isclose

import pytest

from ledger.core.projection import annuity_future_value, bonus_growth, project
from ledger.models import Account, BonusEvent


def compound_only(account: Account, year: int) -> float:
    return round(account.principal * (1 + account.annual_rate / 100) ** year, 2)


def test_year_zero_is_principal_for_any_inputs(accounts, bonuses):
    rows = project(accounts, monthly_contribution=2500.0, bonuses=bonuses)

    year0 = rows[0]
    assert year0.year == 0
    for account in accounts:
        assert year0.per_account_value[account.id] == account.principal
    assert year0.total_assets == 45000.0


def test_default_horizon_has_eleven_rows(accounts):
    rows = project(accounts)

    assert len(rows) == 11
    assert [row.year for row in rows] == list(range(11))


def test_custom_horizon(accounts):
    rows = project(accounts, horizon_years=3)

    assert [row.year for row in rows] == [0, 1, 2, 3]


def test_no_contribution_is_plain_compounding(accounts):
    rows = project(accounts, monthly_contribution=0.0, bonuses=[])

    for row in rows:
        for account in accounts:
            assert row.per_account_value[account.id] == compound_only(account, row.year)


def test_missing_contribution_is_treated_as_zero(accounts):
    assert project(accounts, monthly_contribution=None) == project(accounts, monthly_contribution=0.0)


def test_zero_rate_accumulates_contributions_only():
    account = Account(id=7, name="Savings", principal=1000.0, annual_rate=0.0)

    rows = project([account], monthly_contribution=250.0)

    for row in rows[1:]:
        assert isclose(row.per_account_value[7], 1000.0 + 250.0 * 12 * row.year, abs_tol=0.001)


def test_non_participating_account_ignores_contributions_and_bonuses(accounts, bonuses):
    cash = accounts[2]
    assert not cash.participates_in_monthly_contribution

    rows = project(accounts, monthly_contribution=5000.0, bonuses=bonuses)

    for row in rows:
        assert row.per_account_value[cash.id] == compound_only(cash, row.year)


def test_pro_rata_shares_partition_the_contribution(accounts):
    contribution = 1200.0
    participating = [account for account in accounts if account.participates_in_monthly_contribution]

    rows = project(accounts, monthly_contribution=contribution)

    for row in rows[1:]:
        added = sum(
            row.per_account_value[account.id] - compound_only(account, row.year)
            for account in participating
        )
        # both participating accounts earn 5%, so the split is exact up to cent rounding
        expected = annuity_future_value(contribution, 0.05 / 12, row.year * 12)
        assert isclose(added, expected, abs_tol=0.02)


def test_contribution_is_split_by_principal_share(accounts):
    rows = project(accounts, monthly_contribution=1000.0, horizon_years=1)

    small, large = accounts[0], accounts[1]
    small_added = rows[1].per_account_value[small.id] - compound_only(small, 1)
    large_added = rows[1].per_account_value[large.id] - compound_only(large, 1)
    assert isclose(large_added / small_added, 3.0, rel_tol=1e-4)


def test_single_account_one_year_scenario():
    account = Account(id=1, name="Index fund", principal=10000.0, annual_rate=5.0)
    monthly_rate = 0.05 / 12

    rows = project([account], monthly_contribution=1000.0, horizon_years=1)

    expected = round(10000 * 1.05 + 1000 * (((1 + monthly_rate) ** 12 - 1) / monthly_rate), 2)
    assert rows[1].per_account_value[1] == expected
    assert rows[1].per_account_value[1] == pytest.approx(22778.86, abs=0.01)
    assert rows[1].total_assets == expected


def test_empty_accounts_produce_zero_rows():
    rows = project([], 1000.0, [])

    assert len(rows) == 11
    for row in rows:
        assert row.total_assets == 0
        assert row.accounts == []
        assert row.per_account_value == {}


def test_nobody_participating_drops_contributions(bonuses):
    holdings = [
        Account(id=1, name="A", principal=1000.0, annual_rate=4.0, participates_in_monthly_contribution=False),
        Account(id=2, name="B", principal=2000.0, annual_rate=3.0, participates_in_monthly_contribution=False),
    ]

    rows = project(holdings, monthly_contribution=500.0, bonuses=bonuses)

    for row in rows:
        for account in holdings:
            assert row.per_account_value[account.id] == compound_only(account, row.year)


def test_zero_principal_base_drops_contributions():
    empty = Account(id=1, name="New account", principal=0.0, annual_rate=4.0)

    rows = project([empty], monthly_contribution=500.0)

    assert all(row.total_assets == 0 for row in rows)


def test_account_order_is_preserved(accounts):
    reversed_accounts = list(reversed(accounts))

    rows = project(reversed_accounts, monthly_contribution=100.0)

    for row in rows:
        assert [value.name for value in row.accounts] == [a.name for a in reversed_accounts]


def test_total_is_sum_of_rounded_account_values(accounts, bonuses):
    rows = project(accounts, monthly_contribution=333.33, bonuses=bonuses)

    for row in rows:
        assert row.total_assets == round(sum(value.value for value in row.accounts), 2)


def test_bonus_compounds_from_receipt_month():
    account = Account(id=1, name="Fund", principal=1000.0, annual_rate=12.0)
    bonus = BonusEvent(name="Bonus", amount=600.0, month=12)

    rows = project([account], bonuses=[bonus], horizon_years=1)

    # received in December, one month of growth at 1%/month before year end
    assert rows[1].per_account_value[1] == pytest.approx(1120.0 + 606.0, abs=0.01)


def test_bonus_is_counted_once_per_elapsed_year():
    account = Account(id=1, name="Fund", principal=1000.0, annual_rate=0.0)
    bonus = BonusEvent(name="Bonus", amount=600.0, month=6)

    rows = project([account], bonuses=[bonus], horizon_years=3)

    assert [row.total_assets for row in rows] == [1000.0, 1600.0, 2200.0, 2800.0]


def test_bonuses_in_same_month_are_aggregated():
    account = Account(id=1, name="Fund", principal=1000.0, annual_rate=6.0)
    split = [
        BonusEvent(name="Part 1", amount=300.0, month=3),
        BonusEvent(name="Part 2", amount=700.0, month=3),
    ]
    whole = [BonusEvent(name="Whole", amount=1000.0, month=3)]

    split_rows = project([account], bonuses=split, horizon_years=5)
    whole_rows = project([account], bonuses=whole, horizon_years=5)

    assert [row.total_assets for row in split_rows] == [row.total_assets for row in whole_rows]


def test_out_of_range_bonus_months_contribute_nothing(accounts):
    strays = [
        BonusEvent(name="Bad month", amount=5000.0, month=13),
        BonusEvent(name="Also bad", amount=5000.0, month=0),
    ]

    assert project(accounts, 100.0, strays) == project(accounts, 100.0, [])


def test_bonus_growth_helper_matches_manual_sum():
    monthly_rate = 0.01
    value = bonus_growth(100.0, month=1, year=2, monthly_rate=monthly_rate)

    # invest year 1: 12 + 12 months, invest year 2: 12 months
    expected = 100.0 * 1.01 ** 24 + 100.0 * 1.01 ** 12
    assert isclose(value, expected, rel_tol=1e-12)
    assert bonus_growth(100.0, month=5, year=0, monthly_rate=monthly_rate) == 0.0


def test_annuity_helper_zero_rate_is_linear():
    assert annuity_future_value(100.0, 0.0, 24) == 2400.0


def test_accounts_without_ids_are_keyed_by_position():
    holdings = [
        Account(name="A", principal=100.0, annual_rate=1.0),
        Account(name="B", principal=200.0, annual_rate=2.0),
    ]

    rows = project(holdings, horizon_years=1)

    assert rows[0].per_account_value == {0: 100.0, 1: 200.0}
    assert rows[1].per_account_value == {0: 101.0, 1: 204.0}


def test_repeated_ids_are_keyed_by_position():
    holdings = [
        Account(id=5, name="A", principal=100.0, annual_rate=0.0),
        Account(id=5, name="B", principal=300.0, annual_rate=0.0),
    ]

    rows = project(holdings, horizon_years=0)

    assert rows[0].per_account_value == {0: 100.0, 1: 300.0}
    assert [value.position for value in rows[0].accounts] == [0, 1]
