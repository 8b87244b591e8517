#==== core/tax/loss_carryforward.py ====

from blue_ledger.core.finance.fs_builder import FinancialStatementBuilder
from blue_ledger.core.finance.statements import (
    LossCarryforwardApplied,
    LossCarryforwardSummary,
)

CARRYFORWARD_YEARS = 3


class LossCarryforwardEngine:
    """
    青色申告の純損失の繰越控除。
    過去3年分の純損失を、古い年度から順に当期の所得から差し引く。

    使用枠（used_year_1〜3）の書き込みは利用者が結果を確定したあとに
    別途行うので、このエンジンは推奨額を返すだけ。
    """

    def __init__(self, reader, carryforward_years: int = CARRYFORWARD_YEARS):
        self.reader = reader
        self.carryforward_years = carryforward_years

    def calculate(self, year: int) -> LossCarryforwardSummary:
        income_before = FinancialStatementBuilder(self.reader).build_profit_loss(year).net_income

        # 所得が0以下なら控除なし
        if income_before <= 0:
            return LossCarryforwardSummary(
                total_applied=0,
                income_before=income_before,
                income_after=income_before,
            )

        losses = self.reader.loss_records_in_year_range(year - self.carryforward_years, year - 1)

        remaining_income = income_before
        total_applied = 0
        rows = []

        for loss in losses:
            if remaining_income <= 0:
                break

            available = loss.available
            if available <= 0:
                continue

            # 損失発生から何年目か（1〜3 以外は対象外）
            offset = year - loss.loss_year
            if not 1 <= offset <= self.carryforward_years:
                continue

            # この年目の枠を使用済みなら、二重に控除しない
            if loss.used_in_slot(offset) > 0:
                rows.append(LossCarryforwardApplied(
                    loss_year=loss.loss_year,
                    original_loss=loss.loss_amount,
                    already_used=loss.already_used,
                    applied_this_year=0,
                    remaining=available,
                ))
                continue

            apply = min(available, remaining_income)
            remaining_income -= apply
            total_applied += apply

            rows.append(LossCarryforwardApplied(
                loss_year=loss.loss_year,
                original_loss=loss.loss_amount,
                already_used=loss.already_used,
                applied_this_year=apply,
                remaining=available - apply,
            ))

        return LossCarryforwardSummary(
            rows=rows,
            total_applied=total_applied,
            income_before=income_before,
            income_after=income_before - total_applied,
        )

#======= end core/tax/loss_carryforward.py ======
