"""
blue_ledger - 純損失の繰越控除のテスト

過去3年分の純損失を古い年度から順に控除し、
使用枠を記録したあとの再計算で二重控除しないことを確認する。
"""

import pytest


@pytest.fixture
def income(accounts, post):
    """year の所得が amount になるよう売上を計上する"""

    def _income(year, amount):
        post(f"{year}-06-30", accounts.cash, accounts.sales, amount, "売上")

    return _income


# =============================================================================
# 基本
# =============================================================================

class TestLossCarryforward:
    """繰越控除の計算"""

    def test_single_loss_two_years_old(self, store, engine, income):
        store.add_loss_carryforward(2021, 100_000)
        income(2023, 150_000)

        summary = engine.loss_carryforward(2023)

        assert summary.income_before == 150_000
        assert summary.total_applied == 100_000
        assert summary.income_after == 50_000
        assert len(summary.rows) == 1
        row = summary.rows[0]
        assert row.loss_year == 2021
        assert row.original_loss == 100_000
        assert row.already_used == 0
        assert row.applied_this_year == 100_000
        assert row.remaining == 0

    def test_no_income_means_no_application(self, store, engine, accounts, post):
        store.add_loss_carryforward(2022, 100_000)
        post("2023-05-01", accounts.rent, accounts.cash, 30_000)

        summary = engine.loss_carryforward(2023)

        assert summary.rows == []
        assert summary.total_applied == 0
        assert summary.income_before == -30_000
        assert summary.income_after == -30_000

    def test_zero_income(self, store, engine, accounts):
        store.add_loss_carryforward(2022, 100_000)

        summary = engine.loss_carryforward(2023)

        assert summary.rows == []
        assert summary.income_after == 0

    def test_capped_at_income(self, store, engine, income):
        store.add_loss_carryforward(2022, 500_000)
        income(2023, 120_000)

        summary = engine.loss_carryforward(2023)

        assert summary.total_applied == 120_000
        assert summary.income_after == 0
        assert summary.rows[0].remaining == 380_000

    def test_oldest_loss_first(self, store, engine, income):
        store.add_loss_carryforward(2021, 50_000)
        store.add_loss_carryforward(2020, 80_000)
        store.add_loss_carryforward(2022, 10_000)
        income(2023, 100_000)

        summary = engine.loss_carryforward(2023)

        assert [(r.loss_year, r.applied_this_year, r.remaining) for r in summary.rows] == [
            (2020, 80_000, 0),
            (2021, 20_000, 30_000),
        ]
        assert summary.total_applied == 100_000
        assert summary.income_after == 0

    def test_outside_window_is_ignored(self, store, engine, income):
        store.add_loss_carryforward(2019, 100_000)
        store.add_loss_carryforward(2023, 100_000)
        income(2023, 150_000)

        summary = engine.loss_carryforward(2023)

        assert summary.rows == []
        assert summary.total_applied == 0
        assert summary.income_after == 150_000

    def test_exhausted_loss_is_skipped(self, store, engine, income):
        loss_id = store.add_loss_carryforward(2021, 100_000)
        store.update_loss_carryforward_usage(loss_id, 100_000, 0, 0)
        income(2023, 150_000)

        summary = engine.loss_carryforward(2023)

        assert summary.rows == []
        assert summary.total_applied == 0


# =============================================================================
# 使用枠と冪等性
# =============================================================================

class TestUsageSlots:
    """used_year_1〜3 の扱い"""

    def test_earlier_slot_reduces_available(self, store, engine, income):
        loss_id = store.add_loss_carryforward(2021, 100_000)
        store.update_loss_carryforward_usage(loss_id, 30_000, 0, 0)
        income(2023, 150_000)

        row = engine.loss_carryforward(2023).rows[0]

        assert row.already_used == 30_000
        assert row.applied_this_year == 70_000
        assert row.remaining == 0

    def test_current_slot_already_used_is_not_reapplied(self, store, engine, income):
        loss_id = store.add_loss_carryforward(2021, 100_000)
        store.update_loss_carryforward_usage(loss_id, 0, 40_000, 0)
        income(2023, 150_000)

        summary = engine.loss_carryforward(2023)

        assert summary.total_applied == 0
        assert summary.income_after == 150_000
        row = summary.rows[0]
        assert row.applied_this_year == 0
        assert row.already_used == 40_000
        assert row.remaining == 60_000

    def test_used_slot_does_not_stop_later_losses(self, store, engine, income):
        first = store.add_loss_carryforward(2021, 100_000)
        store.update_loss_carryforward_usage(first, 0, 40_000, 0)
        store.add_loss_carryforward(2022, 30_000)
        income(2023, 150_000)

        summary = engine.loss_carryforward(2023)

        assert [r.applied_this_year for r in summary.rows] == [0, 30_000]
        assert summary.total_applied == 30_000

    def test_repeated_calls_are_identical(self, store, engine, income):
        store.add_loss_carryforward(2020, 80_000)
        store.add_loss_carryforward(2021, 50_000)
        income(2023, 100_000)

        assert engine.loss_carryforward(2023) == engine.loss_carryforward(2023)

    def test_recording_usage_prevents_double_application(self, store, engine, income):
        old = store.add_loss_carryforward(2020, 80_000)
        newer = store.add_loss_carryforward(2021, 50_000)
        income(2023, 100_000)

        first = engine.loss_carryforward(2023)
        applied = {r.loss_year: r.applied_this_year for r in first.rows}

        # 利用者が結果を確定 → 2023年は 2020年損失の3年目、2021年損失の2年目
        store.update_loss_carryforward_usage(old, 0, 0, applied[2020])
        store.update_loss_carryforward_usage(newer, 0, applied[2021], 0)

        second = engine.loss_carryforward(2023)

        assert first.total_applied == 100_000
        assert second.total_applied == 0
        assert second.income_after == second.income_before

    def test_next_year_uses_the_remaining_balance(self, store, engine, income):
        loss_id = store.add_loss_carryforward(2021, 100_000)
        income(2022, 60_000)
        income(2023, 150_000)

        applied_2022 = engine.loss_carryforward(2022).total_applied
        store.update_loss_carryforward_usage(loss_id, applied_2022, 0, 0)

        summary = engine.loss_carryforward(2023)

        assert applied_2022 == 60_000
        assert summary.total_applied == 40_000
        assert summary.income_after == 110_000


# =============================================================================
# 上限の性質
# =============================================================================

class TestCarryforwardCap:
    """0 ≤ total_applied ≤ income_before"""

    @pytest.mark.parametrize("income_amount", [1, 10_000, 150_000, 1_000_000])
    def test_cap(self, store, engine, income, income_amount):
        store.add_loss_carryforward(2020, 70_000)
        store.add_loss_carryforward(2021, 90_000)
        store.add_loss_carryforward(2022, 40_000)
        income(2023, income_amount)

        summary = engine.loss_carryforward(2023)

        assert 0 <= summary.total_applied <= summary.income_before
        assert summary.total_applied == min(income_amount, 200_000)
        assert summary.income_after == summary.income_before - summary.total_applied
