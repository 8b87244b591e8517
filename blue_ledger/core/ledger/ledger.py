# ===============================
# core/ledger/ledger.py
# ===============================

import logging
import sqlite3
import threading
from contextlib import contextmanager

import pandas as pd

from blue_ledger.core.ledger.errors import LockError, StoreError, ValidationError
from blue_ledger.core.ledger.journal_entry import (
    Account,
    Classification,
    FixedAsset,
    JournalEntry,
    LossCarryforward,
    RentDetail,
    validate_date,
    validate_entry_legs,
)

logger = logging.getLogger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS accounts (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    code           INTEGER NOT NULL,
    name           TEXT    NOT NULL,
    classification TEXT    NOT NULL
);

CREATE TABLE IF NOT EXISTS journal_entries (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    date              TEXT    NOT NULL,
    debit_account_id  INTEGER NOT NULL REFERENCES accounts(id),
    debit_amount      INTEGER NOT NULL,
    credit_account_id INTEGER NOT NULL REFERENCES accounts(id),
    credit_amount     INTEGER NOT NULL,
    description       TEXT    NOT NULL DEFAULT '',
    created_at        TEXT    NOT NULL DEFAULT (datetime('now', 'localtime'))
);

CREATE TABLE IF NOT EXISTS fixed_assets (
    id                  INTEGER PRIMARY KEY AUTOINCREMENT,
    name                TEXT    NOT NULL,
    acquisition_date    TEXT    NOT NULL,
    acquisition_cost    INTEGER NOT NULL,
    useful_life         INTEGER NOT NULL,
    depreciation_method TEXT    NOT NULL DEFAULT '定額法',
    depreciation_rate   INTEGER NOT NULL,
    accumulated_dep     INTEGER NOT NULL DEFAULT 0,
    memo                TEXT    NOT NULL DEFAULT '',
    is_active           INTEGER NOT NULL DEFAULT 1
);

CREATE TABLE IF NOT EXISTS rent_details (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    payee_address  TEXT    NOT NULL DEFAULT '',
    payee_name     TEXT    NOT NULL DEFAULT '',
    rent_type      TEXT    NOT NULL DEFAULT '',
    monthly_rent   INTEGER NOT NULL DEFAULT 0,
    annual_total   INTEGER NOT NULL DEFAULT 0,
    business_ratio INTEGER NOT NULL DEFAULT 100,
    memo           TEXT    NOT NULL DEFAULT ''
);

CREATE TABLE IF NOT EXISTS loss_carryforward (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    loss_year   INTEGER NOT NULL,
    loss_amount INTEGER NOT NULL,
    used_year_1 INTEGER NOT NULL DEFAULT 0,
    used_year_2 INTEGER NOT NULL DEFAULT 0,
    used_year_3 INTEGER NOT NULL DEFAULT 0,
    memo        TEXT    NOT NULL DEFAULT ''
);
"""

ENTRY_SELECT = """
    SELECT j.id, j.date, j.debit_account_id, da.name, j.debit_amount,
           j.credit_account_id, ca.name, j.credit_amount, j.description, j.created_at
    FROM journal_entries j
    JOIN accounts da ON da.id = j.debit_account_id
    JOIN accounts ca ON ca.id = j.credit_account_id
"""

LEDGER_DF_COLUMNS = ["entry_id", "date", "account_id", "dr_cr", "amount", "description"]


class LedgerReader:
    """
    LedgerReader
    --------------
    ・ロック取得済みのコネクションに紐づく読み取り口
    ・決算書の各計算はこのクラスだけを受け取る
    ・日付条件はすべて YYYY-MM-DD 文字列の辞書順比較（両端含む）
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    # -------------------------------------------------
    # 低レベル実行
    # -------------------------------------------------
    def _query(self, sql: str, params=()) -> list:
        try:
            return self.conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            logger.error("store query failed: %s", e)
            raise StoreError(str(e)) from e

    def _execute(self, sql: str, params=()) -> sqlite3.Cursor:
        try:
            with self.conn:
                return self.conn.execute(sql, params)
        except sqlite3.Error as e:
            logger.error("store write failed: %s", e)
            raise StoreError(str(e)) from e

    # -------------------------------------------------
    # 勘定科目
    # -------------------------------------------------
    def accounts(self) -> list[Account]:
        rows = self._query(
            "SELECT id, code, name, classification FROM accounts ORDER BY code, id"
        )
        return [Account(*r) for r in rows]

    # -------------------------------------------------
    # 仕訳
    # -------------------------------------------------
    def entries_in_range(self, date_from: str, date_to: str) -> list[JournalEntry]:
        rows = self._query(
            ENTRY_SELECT + " WHERE j.date >= ? AND j.date <= ? ORDER BY j.date, j.id",
            (date_from, date_to),
        )
        return [
            JournalEntry(
                id=r[0],
                date=r[1],
                debit_account_id=r[2],
                debit_account_name=r[3],
                debit_amount=r[4],
                credit_account_id=r[5],
                credit_account_name=r[6],
                credit_amount=r[7],
                description=r[8],
                created_at=r[9],
            )
            for r in rows
        ]

    def get_df(self, date_from: str, date_to: str) -> pd.DataFrame:
        """
        期間内の仕訳を 1仕訳 → 借方行・貸方行の 2行 の DataFrame にする
        """
        rows = []
        for e in self.entries_in_range(date_from, date_to):
            # 借方
            rows.append({
                "entry_id": e.id,
                "date": e.date,
                "account_id": e.debit_account_id,
                "dr_cr": "debit",
                "amount": e.debit_amount,
                "description": e.description,
            })
            # 貸方
            rows.append({
                "entry_id": e.id,
                "date": e.date,
                "account_id": e.credit_account_id,
                "dr_cr": "credit",
                "amount": e.credit_amount,
                "description": e.description,
            })

        return pd.DataFrame(rows, columns=LEDGER_DF_COLUMNS)

    # -------------------------------------------------
    # 固定資産・地代家賃・繰越損失
    # -------------------------------------------------
    def fixed_assets(self) -> list[FixedAsset]:
        rows = self._query(
            "SELECT id, name, acquisition_date, acquisition_cost, useful_life,"
            " depreciation_method, depreciation_rate, accumulated_dep, memo, is_active"
            " FROM fixed_assets ORDER BY acquisition_date, id"
        )
        return [FixedAsset(*r[:9], is_active=bool(r[9])) for r in rows]

    def rent_details(self) -> list[RentDetail]:
        rows = self._query(
            "SELECT id, payee_address, payee_name, rent_type, monthly_rent,"
            " annual_total, business_ratio, memo FROM rent_details ORDER BY id"
        )
        return [RentDetail(*r) for r in rows]

    def loss_records(self) -> list[LossCarryforward]:
        rows = self._query(
            "SELECT id, loss_year, loss_amount, used_year_1, used_year_2, used_year_3, memo"
            " FROM loss_carryforward ORDER BY loss_year, id"
        )
        return [LossCarryforward(*r) for r in rows]

    def loss_records_in_year_range(self, from_year: int, to_year: int) -> list[LossCarryforward]:
        rows = self._query(
            "SELECT id, loss_year, loss_amount, used_year_1, used_year_2, used_year_3, memo"
            " FROM loss_carryforward WHERE loss_year >= ? AND loss_year <= ?"
            " ORDER BY loss_year, id",
            (from_year, to_year),
        )
        return [LossCarryforward(*r) for r in rows]


class LedgerStore:
    """
    LedgerStore
    --------------
    ・SQLite コネクション1本を threading.Lock で保護して共有する
    ・読み取りも書き込みも session() でロックを握ったまま実行する
    ・書き込みは入力チェック（ValidationError）を通ってから DB に触る
    """

    def __init__(self, db_path: str = ":memory:", lock_timeout: float = 5.0):
        self.db_path = db_path
        self.lock_timeout = lock_timeout
        self._lock = threading.Lock()

        self._conn = None
        try:
            self._conn = sqlite3.connect(db_path, check_same_thread=False)
            self._conn.execute("PRAGMA foreign_keys=ON")
            if db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.executescript(SCHEMA)
        except sqlite3.Error as e:
            logger.error("failed to open ledger store %s: %s", db_path, e)
            if self._conn is not None:
                self._conn.close()
            raise StoreError(str(e)) from e

        logger.info("ledger store opened: %s", db_path)

    @classmethod
    def from_params(cls, params) -> "LedgerStore":
        return cls(db_path=params.db_path, lock_timeout=params.lock_timeout)

    # -------------------------------------------------
    # ロック
    # -------------------------------------------------
    @contextmanager
    def session(self):
        """
        ロックを取得して LedgerReader を渡す。
        例外を含むすべての出口でロックを解放する。
        """
        if not self._lock.acquire(timeout=self.lock_timeout):
            logger.error("could not acquire ledger lock within %ss", self.lock_timeout)
            raise LockError(f"台帳のロックを取得できませんでした（{self.lock_timeout}秒）")
        try:
            yield LedgerReader(self._conn)
        finally:
            self._lock.release()

    def close(self):
        with self.session():
            self._conn.close()
        logger.info("ledger store closed: %s", self.db_path)

    # -------------------------------------------------
    # 勘定科目
    # -------------------------------------------------
    def add_account(self, code: int, name: str, classification: str) -> Account:
        parsed = Classification.parse(classification)
        if parsed is None:
            raise ValidationError(f"区分が不正です: {classification!r}")
        tag = parsed.value

        with self.session() as reader:
            cur = reader._execute(
                "INSERT INTO accounts (code, name, classification) VALUES (?, ?, ?)",
                (code, name, tag),
            )
        logger.info("account added: %s %s (%s)", code, name, tag)
        return Account(id=cur.lastrowid, code=code, name=name, classification=tag)

    def delete_account(self, account_id: int) -> int:
        with self.session() as reader:
            cur = reader._execute("DELETE FROM accounts WHERE id = ?", (account_id,))
        return cur.rowcount

    # -------------------------------------------------
    # 仕訳
    # -------------------------------------------------
    def add_entry(
        self,
        date: str,
        debit_account_id: int,
        debit_amount: int,
        credit_account_id: int,
        credit_amount: int,
        description: str = "",
    ) -> int:
        validate_entry_legs(debit_amount, credit_amount)
        validate_date(date)

        with self.session() as reader:
            cur = reader._execute(
                "INSERT INTO journal_entries"
                " (date, debit_account_id, debit_amount, credit_account_id, credit_amount, description)"
                " VALUES (?, ?, ?, ?, ?, ?)",
                (date, debit_account_id, debit_amount, credit_account_id, credit_amount, description),
            )
        logger.info("journal entry added: %s %s (%s)", date, debit_amount, description)
        return cur.lastrowid

    def add_journal_entry(self, entry: JournalEntry) -> int:
        """make_entry_pair() で作った JournalEntry をそのまま登録する"""
        return self.add_entry(
            entry.date,
            entry.debit_account_id,
            entry.debit_amount,
            entry.credit_account_id,
            entry.credit_amount,
            entry.description,
        )

    def update_entry(
        self,
        entry_id: int,
        date: str,
        debit_account_id: int,
        debit_amount: int,
        credit_account_id: int,
        credit_amount: int,
        description: str = "",
    ) -> int:
        validate_entry_legs(debit_amount, credit_amount)
        validate_date(date)

        with self.session() as reader:
            cur = reader._execute(
                "UPDATE journal_entries"
                " SET date = ?, debit_account_id = ?, debit_amount = ?,"
                "     credit_account_id = ?, credit_amount = ?, description = ?"
                " WHERE id = ?",
                (date, debit_account_id, debit_amount, credit_account_id, credit_amount,
                 description, entry_id),
            )
        logger.info("journal entry updated: id=%s", entry_id)
        return cur.rowcount

    def delete_entry(self, entry_id: int) -> int:
        with self.session() as reader:
            cur = reader._execute("DELETE FROM journal_entries WHERE id = ?", (entry_id,))
        logger.info("journal entry deleted: id=%s", entry_id)
        return cur.rowcount

    # -------------------------------------------------
    # 固定資産
    # -------------------------------------------------
    def add_fixed_asset(
        self,
        name: str,
        acquisition_date: str,
        acquisition_cost: int,
        useful_life: int,
        depreciation_rate: int,
        depreciation_method: str = "定額法",
        accumulated_dep: int = 0,
        memo: str = "",
    ) -> int:
        if acquisition_cost <= 0:
            raise ValidationError("取得価額は1円以上を入力してください")
        if accumulated_dep < 0:
            raise ValidationError("償却累計額は0円以上を入力してください")
        if depreciation_rate < 0:
            raise ValidationError("償却率は0以上を入力してください")
        validate_date(acquisition_date)

        with self.session() as reader:
            cur = reader._execute(
                "INSERT INTO fixed_assets (name, acquisition_date, acquisition_cost, useful_life,"
                " depreciation_method, depreciation_rate, accumulated_dep, memo)"
                " VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (name, acquisition_date, acquisition_cost, useful_life,
                 depreciation_method, depreciation_rate, accumulated_dep, memo),
            )
        logger.info("fixed asset added: %s (%s)", name, acquisition_cost)
        return cur.lastrowid

    def record_depreciation(self, asset_id: int, accumulated_dep: int) -> int:
        """
        年度締めで確定した償却累計額を書き戻す。
        減価償却の計算側は読み取り専用なので、ここだけが更新口。
        """
        if accumulated_dep < 0:
            raise ValidationError("償却累計額は0円以上を入力してください")

        with self.session() as reader:
            cur = reader._execute(
                "UPDATE fixed_assets SET accumulated_dep = ? WHERE id = ?",
                (accumulated_dep, asset_id),
            )
        logger.info("depreciation recorded: asset=%s accumulated=%s", asset_id, accumulated_dep)
        return cur.rowcount

    def set_fixed_asset_active(self, asset_id: int, is_active: bool) -> int:
        with self.session() as reader:
            cur = reader._execute(
                "UPDATE fixed_assets SET is_active = ? WHERE id = ?",
                (1 if is_active else 0, asset_id),
            )
        return cur.rowcount

    def delete_fixed_asset(self, asset_id: int) -> int:
        with self.session() as reader:
            cur = reader._execute("DELETE FROM fixed_assets WHERE id = ?", (asset_id,))
        logger.info("fixed asset deleted: id=%s", asset_id)
        return cur.rowcount

    # -------------------------------------------------
    # 地代家賃の内訳
    # -------------------------------------------------
    def add_rent_detail(
        self,
        payee_address: str,
        payee_name: str,
        rent_type: str,
        monthly_rent: int,
        annual_total: int,
        business_ratio: int,
        memo: str = "",
    ) -> int:
        if not 0 <= business_ratio <= 100:
            raise ValidationError("事業割合は0〜100（%）で入力してください")
        if monthly_rent < 0 or annual_total < 0:
            raise ValidationError("賃借料は0円以上を入力してください")

        with self.session() as reader:
            cur = reader._execute(
                "INSERT INTO rent_details (payee_address, payee_name, rent_type, monthly_rent,"
                " annual_total, business_ratio, memo) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (payee_address, payee_name, rent_type, monthly_rent,
                 annual_total, business_ratio, memo),
            )
        logger.info("rent detail added: %s (%s)", payee_name, annual_total)
        return cur.lastrowid

    def delete_rent_detail(self, rent_id: int) -> int:
        with self.session() as reader:
            cur = reader._execute("DELETE FROM rent_details WHERE id = ?", (rent_id,))
        return cur.rowcount

    # -------------------------------------------------
    # 純損失の繰越
    # -------------------------------------------------
    def add_loss_carryforward(self, loss_year: int, loss_amount: int, memo: str = "") -> int:
        if loss_amount <= 0:
            raise ValidationError("繰越損失額は1円以上を入力してください")

        with self.session() as reader:
            cur = reader._execute(
                "INSERT INTO loss_carryforward (loss_year, loss_amount, memo) VALUES (?, ?, ?)",
                (loss_year, loss_amount, memo),
            )
        logger.info("loss carryforward added: %s (%s)", loss_year, loss_amount)
        return cur.lastrowid

    def update_loss_carryforward_usage(
        self,
        loss_id: int,
        used_year_1: int,
        used_year_2: int,
        used_year_3: int,
    ) -> int:
        if min(used_year_1, used_year_2, used_year_3) < 0:
            raise ValidationError("使用額は0円以上を入力してください")

        with self.session() as reader:
            cur = reader._execute(
                "UPDATE loss_carryforward SET used_year_1 = ?, used_year_2 = ?, used_year_3 = ?"
                " WHERE id = ?",
                (used_year_1, used_year_2, used_year_3, loss_id),
            )
        logger.info(
            "loss carryforward usage updated: id=%s (%s, %s, %s)",
            loss_id, used_year_1, used_year_2, used_year_3,
        )
        return cur.rowcount

    def delete_loss_carryforward(self, loss_id: int) -> int:
        with self.session() as reader:
            cur = reader._execute("DELETE FROM loss_carryforward WHERE id = ?", (loss_id,))
        return cur.rowcount

# ===== end ledger.py =====
