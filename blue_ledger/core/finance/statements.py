# ===========================================
# core/finance/statements.py
# 決算書の値オブジェクト（毎回計算し直し、保存しない）
# ===========================================

from dataclasses import asdict, dataclass, field
from typing import List

import pandas as pd

from blue_ledger.core.ledger.journal_entry import RentDetail


def rows_to_df(rows, columns) -> pd.DataFrame:
    """表示用：dataclass の行リスト → DataFrame（行が無くても列は残す）"""
    return pd.DataFrame([asdict(r) for r in rows], columns=columns)


# -----------------------------------------
# 試算表
# -----------------------------------------
@dataclass
class TrialBalanceRow:
    account_id: int
    account_code: int
    account_name: str
    classification: str
    debit_total: int
    credit_total: int
    balance: int


@dataclass
class TrialBalance:
    rows: List[TrialBalanceRow] = field(default_factory=list)
    debit_grand_total: int = 0
    credit_grand_total: int = 0

    @property
    def is_balanced(self) -> bool:
        return self.debit_grand_total == self.credit_grand_total

    def to_df(self) -> pd.DataFrame:
        return rows_to_df(self.rows, [
            "account_id", "account_code", "account_name", "classification",
            "debit_total", "credit_total", "balance",
        ])


# -----------------------------------------
# 損益計算書・貸借対照表
# -----------------------------------------
@dataclass
class StatementRow:
    account_id: int
    account_code: int
    account_name: str
    amount: int


STATEMENT_COLUMNS = ["account_id", "account_code", "account_name", "amount"]


@dataclass
class ProfitLoss:
    revenue_rows: List[StatementRow] = field(default_factory=list)
    expense_rows: List[StatementRow] = field(default_factory=list)
    total_revenue: int = 0
    total_expense: int = 0
    net_income: int = 0


@dataclass
class BalanceSheet:
    asset_rows: List[StatementRow] = field(default_factory=list)
    liability_rows: List[StatementRow] = field(default_factory=list)
    equity_rows: List[StatementRow] = field(default_factory=list)
    total_assets: int = 0
    total_liabilities: int = 0
    total_equity: int = 0
    net_income: int = 0         # 当期の青色申告特別控除前所得（未処分）


# -----------------------------------------
# 減価償却
# -----------------------------------------
@dataclass
class DepreciationRow:
    asset_id: int
    asset_name: str
    acquisition_date: str
    acquisition_cost: int
    depreciation_method: str
    useful_life: int
    depreciation_rate: int
    accumulated_dep_prev: int
    current_year_dep: int
    accumulated_dep_end: int
    book_value_end: int


DEPRECIATION_COLUMNS = [
    "asset_id", "asset_name", "acquisition_date", "acquisition_cost",
    "depreciation_method", "useful_life", "depreciation_rate",
    "accumulated_dep_prev", "current_year_dep", "accumulated_dep_end", "book_value_end",
]


# -----------------------------------------
# 純損失の繰越控除
# -----------------------------------------
@dataclass
class LossCarryforwardApplied:
    loss_year: int
    original_loss: int
    already_used: int
    applied_this_year: int
    remaining: int


LOSS_CARRYFORWARD_COLUMNS = [
    "loss_year", "original_loss", "already_used", "applied_this_year", "remaining",
]


@dataclass
class LossCarryforwardSummary:
    rows: List[LossCarryforwardApplied] = field(default_factory=list)
    total_applied: int = 0
    income_before: int = 0
    income_after: int = 0


# -----------------------------------------
# 月別売上・仕入
# -----------------------------------------
@dataclass
class MonthlySalesPurchase:
    month: int
    sales: int = 0
    purchases: int = 0


# -----------------------------------------
# 青色申告決算書（統合）
# -----------------------------------------
@dataclass
class FinalStatement:
    profit_loss: ProfitLoss
    monthly: List[MonthlySalesPurchase]
    annual_sales_total: int
    annual_purchases_total: int
    depreciation_rows: List[DepreciationRow]
    depreciation_total: int
    rent_details: List[RentDetail]
    rent_total: int
    balance_sheet: BalanceSheet
    loss_carryforward: LossCarryforwardSummary

# ===========================================
# END statements.py
# ===========================================
