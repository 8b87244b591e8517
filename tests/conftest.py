"""
blue_ledger - 共通フィクスチャ

インメモリの LedgerStore に勘定科目一式を登録して返す。
"""

from types import SimpleNamespace

import pytest

from blue_ledger.config.params import ReportParams
from blue_ledger.core.engine.statement_engine import StatementEngine
from blue_ledger.core.ledger.ledger import LedgerStore


CHART_OF_ACCOUNTS = [
    ("cash", 1100, "現金", "資産"),
    ("equipment", 1500, "工具器具備品", "資産"),
    ("loan", 2100, "借入金", "負債"),
    ("capital", 3100, "元入金", "純資産"),
    ("sales", 4100, "売上高", "収益"),
    ("misc_income", 4200, "雑収入", "収益"),
    ("purchases", 5100, "仕入高", "費用"),
    ("rent", 5200, "地代家賃", "費用"),
]


@pytest.fixture
def params():
    return ReportParams(db_path=":memory:", lock_timeout=0.5)


@pytest.fixture
def store(params):
    s = LedgerStore.from_params(params)
    yield s
    s.close()


@pytest.fixture
def accounts(store):
    """科目名 → Account"""
    return SimpleNamespace(**{
        key: store.add_account(code, name, classification)
        for key, code, name, classification in CHART_OF_ACCOUNTS
    })


@pytest.fixture
def engine(store, params):
    return StatementEngine(store, params)


@pytest.fixture
def post(store):
    """同額の借方・貸方で仕訳を1件登録するヘルパー"""

    def _post(date, debit, credit, amount, description=""):
        return store.add_entry(date, debit.id, amount, credit.id, amount, description)

    return _post
