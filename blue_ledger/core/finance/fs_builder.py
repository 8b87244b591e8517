# ===========================================
# core/finance/fs_builder.py
# 試算表・損益計算書・貸借対照表を台帳から組み立てる
# ===========================================

from typing import Optional

from blue_ledger.core.finance.fs_mapping import (
    BS_CLASSIFICATIONS,
    PL_CLASSIFICATIONS,
    signed_balance,
)
from blue_ledger.core.finance.period import aggregate_period, period_range
from blue_ledger.core.finance.statements import (
    BalanceSheet,
    ProfitLoss,
    StatementRow,
    TrialBalance,
    TrialBalanceRow,
)
from blue_ledger.core.ledger.journal_entry import Classification


class FinancialStatementBuilder:
    """
    LedgerReader の仕訳データから
    ・試算表（年次 / 月次）
    ・損益計算書（年次）
    ・貸借対照表（年次）
    を構築する。読み取りのみで、状態は持たない。
    """

    def __init__(self, reader):
        self.reader = reader

    # -----------------------------------------
    # 1. 試算表
    # -----------------------------------------
    def build_trial_balance(self, year: int, month: Optional[int] = None) -> TrialBalance:
        rows = [
            TrialBalanceRow(
                account_id=t.account.id,
                account_code=t.account.code,
                account_name=t.account.name,
                classification=t.account.classification,
                debit_total=t.debit_total,
                credit_total=t.credit_total,
                balance=signed_balance(t.account.classification, t.debit_total, t.credit_total),
            )
            for t in aggregate_period(self.reader, period_range(year, month))
        ]

        # 簿記検証用（借方合計＝貸方合計）
        return TrialBalance(
            rows=rows,
            debit_grand_total=sum(r.debit_total for r in rows),
            credit_grand_total=sum(r.credit_total for r in rows),
        )

    # -----------------------------------------
    # 2. 損益計算書
    # -----------------------------------------
    def build_profit_loss(self, year: int) -> ProfitLoss:
        pl = ProfitLoss()

        for t in aggregate_period(self.reader, period_range(year), PL_CLASSIFICATIONS):
            row = StatementRow(
                account_id=t.account.id,
                account_code=t.account.code,
                account_name=t.account.name,
                amount=signed_balance(t.classification, t.debit_total, t.credit_total),
            )
            if t.classification is Classification.REVENUE:
                pl.revenue_rows.append(row)
            else:
                pl.expense_rows.append(row)

        pl.total_revenue = sum(r.amount for r in pl.revenue_rows)
        pl.total_expense = sum(r.amount for r in pl.expense_rows)
        pl.net_income = pl.total_revenue - pl.total_expense
        return pl

    # -----------------------------------------
    # 3. 貸借対照表
    # -----------------------------------------
    def build_balance_sheet(self, year: int) -> BalanceSheet:
        """
        当期の所得（net_income）は仕訳として計上されないため、
        損益計算書から持ってきて添える。
        """
        bs = BalanceSheet()
        targets = {
            Classification.ASSET: bs.asset_rows,
            Classification.LIABILITY: bs.liability_rows,
            Classification.EQUITY: bs.equity_rows,
        }

        for t in aggregate_period(self.reader, period_range(year), BS_CLASSIFICATIONS):
            targets[t.classification].append(StatementRow(
                account_id=t.account.id,
                account_code=t.account.code,
                account_name=t.account.name,
                amount=signed_balance(t.classification, t.debit_total, t.credit_total),
            ))

        bs.total_assets = sum(r.amount for r in bs.asset_rows)
        bs.total_liabilities = sum(r.amount for r in bs.liability_rows)
        bs.total_equity = sum(r.amount for r in bs.equity_rows)
        bs.net_income = self.build_profit_loss(year).net_income
        return bs

# ===========================================
# END fs_builder.py
# ===========================================
