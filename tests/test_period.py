"""
blue_ledger - 期間の決定と科目別集計のテスト
"""

import pytest

from blue_ledger.core.finance.period import DateRange, aggregate_period, period_range
from blue_ledger.core.ledger.errors import ValidationError
from blue_ledger.core.ledger.journal_entry import Classification


# =============================================================================
# period_range
# =============================================================================

class TestPeriodRange:
    """年度・月の期間"""

    def test_full_year(self):
        assert period_range(2024) == DateRange("2024-01-01", "2024-12-31")

    def test_month_upper_bound_is_always_31(self):
        assert period_range(2024, 2) == DateRange("2024-02-01", "2024-02-31")
        assert period_range(2023, 11) == DateRange("2023-11-01", "2023-11-31")

    def test_month_is_zero_padded(self):
        assert period_range(2024, 3).date_from == "2024-03-01"

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_invalid_month(self, month):
        with pytest.raises(ValidationError):
            period_range(2024, month)


# =============================================================================
# aggregate_period
# =============================================================================

class TestAggregatePeriod:
    """科目別の借方合計・貸方合計"""

    def test_totals_per_account(self, store, accounts, post):
        post("2024-01-10", accounts.cash, accounts.capital, 1_000_000)
        post("2024-04-20", accounts.rent, accounts.cash, 50_000)

        with store.session() as reader:
            rows = aggregate_period(reader, period_range(2024))

        by_code = {r.account.code: r for r in rows}
        assert (by_code[1100].debit_total, by_code[1100].credit_total) == (1_000_000, 50_000)
        assert (by_code[3100].debit_total, by_code[3100].credit_total) == (0, 1_000_000)
        assert (by_code[5200].debit_total, by_code[5200].credit_total) == (50_000, 0)

    def test_accounts_without_activity_are_dropped(self, store, accounts, post):
        post("2024-01-10", accounts.cash, accounts.capital, 1_000)

        with store.session() as reader:
            rows = aggregate_period(reader, period_range(2024))

        assert [r.account.code for r in rows] == [1100, 3100]

    def test_rows_are_ordered_by_code(self, store, accounts, post):
        post("2024-05-01", accounts.rent, accounts.loan, 10)
        post("2024-05-02", accounts.cash, accounts.sales, 20)

        with store.session() as reader:
            rows = aggregate_period(reader, period_range(2024))

        codes = [r.account.code for r in rows]
        assert codes == sorted(codes)

    def test_month_slice(self, store, accounts, post):
        post("2024-02-01", accounts.cash, accounts.sales, 100)
        post("2024-02-29", accounts.cash, accounts.sales, 200)
        post("2024-03-01", accounts.cash, accounts.sales, 400)
        post("2024-01-31", accounts.cash, accounts.sales, 800)

        with store.session() as reader:
            rows = aggregate_period(reader, period_range(2024, 2))

        sales = next(r for r in rows if r.account.code == 4100)
        assert sales.credit_total == 300

    def test_restricted_to_classifications(self, store, accounts, post):
        post("2024-03-15", accounts.purchases, accounts.sales, 10_000)
        post("2024-03-16", accounts.cash, accounts.capital, 5_000)

        with store.session() as reader:
            rows = aggregate_period(
                reader, period_range(2024),
                [Classification.REVENUE, Classification.EXPENSE],
            )

        assert {r.account.code for r in rows} == {4100, 5100}

    def test_empty_ledger(self, store, accounts):
        with store.session() as reader:
            assert aggregate_period(reader, period_range(2024)) == []

    def test_same_account_on_both_legs(self, store, accounts, post):
        post("2024-06-01", accounts.cash, accounts.cash, 700)

        with store.session() as reader:
            rows = aggregate_period(reader, period_range(2024))

        assert len(rows) == 1
        assert (rows[0].debit_total, rows[0].credit_total) == (700, 700)
