from __future__ import annotations

import pytest
from flask import Flask
from flask.testing import FlaskClient

from ledger.app import create_app
from ledger.models import Account, BonusEvent


@pytest.fixture()
def app(tmp_path) -> Flask:
    return create_app({"TESTING": True, "DATABASE": str(tmp_path / "ledger.db")})


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def store(app: Flask):
    return app.extensions["ledger_store"]


@pytest.fixture()
def accounts() -> list:
    return [
        Account(id=1, name="Index fund", principal=10000.0, annual_rate=5.0),
        Account(id=2, name="Bond ladder", principal=30000.0, annual_rate=5.0),
        Account(
            id=3,
            name="Emergency cash",
            principal=5000.0,
            annual_rate=1.5,
            participates_in_monthly_contribution=False,
        ),
    ]


@pytest.fixture()
def bonuses() -> list:
    return [
        BonusEvent(id=1, name="Year-end bonus", amount=20000.0, month=12),
        BonusEvent(id=2, name="Tax refund", amount=1500.0, month=4),
        BonusEvent(id=3, name="Holiday pay", amount=500.0, month=12),
    ]
