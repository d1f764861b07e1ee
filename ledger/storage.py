"""SQLite persistence for accounts, bonuses and the monthly contribution."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Union

from ledger.models import Account, BonusEvent, LedgerSnapshot, Settings
from ledger.schemas.ledger import AccountPayload, BonusPayload, SettingsPayload

logger = logging.getLogger(__name__)

ACCOUNT_SELECT = """
    select id, name, principal, annual_rate,
           coalesce(participates, 1) as participates, created_at
    from accounts
"""
BONUS_SELECT = "select id, name, amount, month, created_at from bonuses"


class RecordNotFound(LookupError):
    def __init__(self, kind: str, record_id: int):
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class LedgerStore:
    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            conn.executescript(
                """
                create table if not exists accounts (
                    id integer primary key autoincrement,
                    name text not null,
                    principal real not null,
                    annual_rate real not null,
                    participates integer default 1,
                    created_at text not null
                );
                create table if not exists bonuses (
                    id integer primary key autoincrement,
                    name text not null default '',
                    amount real not null,
                    month integer not null,
                    created_at text not null
                );
                create table if not exists settings (
                    id integer primary key,
                    monthly_contribution real not null default 0
                );
                insert or ignore into settings (id, monthly_contribution) values (1, 0);
                """
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("ledger database ready at %s", self.db_path)

    # ------------------------------------------------------------------
    # accounts
    # ------------------------------------------------------------------

    @staticmethod
    def _account(row: sqlite3.Row) -> Account:
        return Account(
            id=row["id"],
            name=row["name"],
            principal=row["principal"],
            annual_rate=row["annual_rate"],
            participates_in_monthly_contribution=bool(row["participates"]),
            created_at=row["created_at"],
        )

    def list_accounts(self) -> List[Account]:
        conn = self._connect()
        try:
            rows = conn.execute(ACCOUNT_SELECT + " order by id").fetchall()
            return [self._account(row) for row in rows]
        finally:
            conn.close()

    def get_account(self, account_id: int) -> Account:
        conn = self._connect()
        try:
            row = conn.execute(ACCOUNT_SELECT + " where id = ?", (account_id,)).fetchone()
        finally:
            conn.close()
        if row is None:
            raise RecordNotFound("account", account_id)
        return self._account(row)

    def create_account(self, payload: AccountPayload) -> Account:
        conn = self._connect()
        try:
            cursor = conn.execute(
                """
                insert into accounts (name, principal, annual_rate, participates, created_at)
                values (?, ?, ?, ?, ?)
                """,
                (
                    payload.name,
                    payload.principal,
                    payload.annual_rate,
                    int(payload.participates_in_monthly_contribution),
                    _now(),
                ),
            )
            conn.commit()
            account_id = cursor.lastrowid
        finally:
            conn.close()
        logger.info("created account %s (%s)", account_id, payload.name)
        return self.get_account(account_id)

    def update_account(self, account_id: int, payload: AccountPayload) -> Account:
        conn = self._connect()
        try:
            cursor = conn.execute(
                """
                update accounts
                set name = ?, principal = ?, annual_rate = ?, participates = ?
                where id = ?
                """,
                (
                    payload.name,
                    payload.principal,
                    payload.annual_rate,
                    int(payload.participates_in_monthly_contribution),
                    account_id,
                ),
            )
            conn.commit()
            updated = cursor.rowcount
        finally:
            conn.close()
        if not updated:
            raise RecordNotFound("account", account_id)
        logger.info("updated account %s", account_id)
        return self.get_account(account_id)

    def delete_account(self, account_id: int) -> None:
        self._delete("accounts", "account", account_id)

    # ------------------------------------------------------------------
    # bonuses
    # ------------------------------------------------------------------

    @staticmethod
    def _bonus(row: sqlite3.Row) -> BonusEvent:
        return BonusEvent(
            id=row["id"],
            name=row["name"],
            amount=row["amount"],
            month=row["month"],
            created_at=row["created_at"],
        )

    def list_bonuses(self) -> List[BonusEvent]:
        conn = self._connect()
        try:
            rows = conn.execute(BONUS_SELECT + " order by month asc, id asc").fetchall()
            return [self._bonus(row) for row in rows]
        finally:
            conn.close()

    def get_bonus(self, bonus_id: int) -> BonusEvent:
        conn = self._connect()
        try:
            row = conn.execute(BONUS_SELECT + " where id = ?", (bonus_id,)).fetchone()
        finally:
            conn.close()
        if row is None:
            raise RecordNotFound("bonus", bonus_id)
        return self._bonus(row)

    def create_bonus(self, payload: BonusPayload) -> BonusEvent:
        conn = self._connect()
        try:
            cursor = conn.execute(
                "insert into bonuses (name, amount, month, created_at) values (?, ?, ?, ?)",
                (payload.name, payload.amount, payload.month, _now()),
            )
            conn.commit()
            bonus_id = cursor.lastrowid
        finally:
            conn.close()
        logger.info("created bonus %s in month %s", bonus_id, payload.month)
        return self.get_bonus(bonus_id)

    def update_bonus(self, bonus_id: int, payload: BonusPayload) -> BonusEvent:
        conn = self._connect()
        try:
            cursor = conn.execute(
                "update bonuses set name = ?, amount = ?, month = ? where id = ?",
                (payload.name, payload.amount, payload.month, bonus_id),
            )
            conn.commit()
            updated = cursor.rowcount
        finally:
            conn.close()
        if not updated:
            raise RecordNotFound("bonus", bonus_id)
        logger.info("updated bonus %s", bonus_id)
        return self.get_bonus(bonus_id)

    def delete_bonus(self, bonus_id: int) -> None:
        self._delete("bonuses", "bonus", bonus_id)

    # ------------------------------------------------------------------
    # settings
    # ------------------------------------------------------------------

    def get_settings(self) -> Settings:
        conn = self._connect()
        try:
            row = conn.execute(
                "select monthly_contribution from settings where id = 1"
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            return Settings()
        return Settings(monthly_contribution=row["monthly_contribution"])

    def update_settings(self, payload: SettingsPayload) -> Settings:
        conn = self._connect()
        try:
            conn.execute(
                """
                insert into settings (id, monthly_contribution) values (1, ?)
                on conflict(id) do update set monthly_contribution = excluded.monthly_contribution
                """,
                (payload.monthly_contribution,),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("monthly contribution set to %s", payload.monthly_contribution)
        return self.get_settings()

    def snapshot(self) -> LedgerSnapshot:
        """Accounts, bonuses and contribution read over a single connection."""
        conn = self._connect()
        try:
            conn.execute("begin")
            accounts = conn.execute(ACCOUNT_SELECT + " order by id").fetchall()
            bonuses = conn.execute(BONUS_SELECT + " order by month asc, id asc").fetchall()
            settings = conn.execute(
                "select monthly_contribution from settings where id = 1"
            ).fetchone()
        finally:
            conn.close()
        return LedgerSnapshot(
            accounts=[self._account(row) for row in accounts],
            bonuses=[self._bonus(row) for row in bonuses],
            monthly_contribution=settings["monthly_contribution"] if settings else 0.0,
        )

    def _delete(self, table: str, kind: str, record_id: int) -> None:
        conn = self._connect()
        try:
            cursor = conn.execute(f"delete from {table} where id = ?", (record_id,))
            conn.commit()
            deleted = cursor.rowcount
        finally:
            conn.close()
        if not deleted:
            raise RecordNotFound(kind, record_id)
        logger.info("deleted %s %s", kind, record_id)


__all__ = ["LedgerStore", "RecordNotFound"]
