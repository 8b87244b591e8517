#==== core/engine/statement_engine.py ====

import logging
from typing import Optional

from blue_ledger.config.params import ReportParams
from blue_ledger.core.depreciation.unit import build_depreciation_schedule
from blue_ledger.core.finance.fs_builder import FinancialStatementBuilder
from blue_ledger.core.finance.period import period_range
from blue_ledger.core.finance.statements import (
    BalanceSheet,
    DepreciationRow,
    FinalStatement,
    LossCarryforwardSummary,
    MonthlySalesPurchase,
    ProfitLoss,
    TrialBalance,
)
from blue_ledger.core.ledger.journal_entry import JournalEntry
from blue_ledger.core.ledger.ledger import LedgerStore
from blue_ledger.core.reporting.export import journal_to_csv
from blue_ledger.core.reporting.final_statement import build_final_statement
from blue_ledger.core.reporting.monthly import monthly_sales_purchases
from blue_ledger.core.tax.loss_carryforward import LossCarryforwardEngine

logger = logging.getLogger(__name__)


class StatementEngine:
    """
    決算書の読み取り窓口。

    各メソッドは呼び出しの間ずっと台帳ストアのロックを握り、
    その時点のストアの内容から毎回すべてを計算し直す。
    キャッシュも途中結果も持たない。失敗時は例外がそのまま呼び出し元へ届く。
    """

    def __init__(self, store: LedgerStore, params: Optional[ReportParams] = None):
        self.store = store
        self.params = params or ReportParams()

    # -------------------------------------------------
    # 仕訳帳
    # -------------------------------------------------
    def journal(self, year: int, month: Optional[int] = None) -> list[JournalEntry]:
        dr = period_range(year, month)
        with self.store.session() as reader:
            return reader.entries_in_range(dr.date_from, dr.date_to)

    def export_journal_csv(self, year: int, month: Optional[int] = None) -> str:
        return journal_to_csv(self.journal(year, month))

    # -------------------------------------------------
    # 試算表・損益計算書・貸借対照表
    # -------------------------------------------------
    def trial_balance(self, year: int, month: Optional[int] = None) -> TrialBalance:
        logger.debug("trial balance: year=%s month=%s", year, month)
        with self.store.session() as reader:
            tb = FinancialStatementBuilder(reader).build_trial_balance(year, month)

        if not tb.is_balanced:
            logger.warning(
                "trial balance out of balance: debit=%s credit=%s",
                tb.debit_grand_total, tb.credit_grand_total,
            )
        return tb

    def profit_loss(self, year: int) -> ProfitLoss:
        logger.debug("profit and loss: year=%s", year)
        with self.store.session() as reader:
            return FinancialStatementBuilder(reader).build_profit_loss(year)

    def balance_sheet(self, year: int) -> BalanceSheet:
        logger.debug("balance sheet: year=%s", year)
        with self.store.session() as reader:
            return FinancialStatementBuilder(reader).build_balance_sheet(year)

    # -------------------------------------------------
    # 減価償却・月別売上仕入・繰越控除
    # -------------------------------------------------
    def depreciation_schedule(self, year: int) -> list[DepreciationRow]:
        logger.debug("depreciation: year=%s", year)
        with self.store.session() as reader:
            return build_depreciation_schedule(reader, year, self.params)

    def monthly_sales_purchases(self, year: int) -> list[MonthlySalesPurchase]:
        with self.store.session() as reader:
            return monthly_sales_purchases(reader, year, self.params)

    def loss_carryforward(self, year: int) -> LossCarryforwardSummary:
        logger.debug("loss carryforward: year=%s", year)
        with self.store.session() as reader:
            return LossCarryforwardEngine(reader, self.params.carryforward_years).calculate(year)

    # -------------------------------------------------
    # 青色申告決算書
    # -------------------------------------------------
    def final_statement(self, year: int) -> FinalStatement:
        logger.debug("final statement: year=%s", year)
        with self.store.session() as reader:
            return build_final_statement(reader, year, self.params)

#======= end core/engine/statement_engine.py ======
