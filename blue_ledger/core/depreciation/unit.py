# ===== core/depreciation/unit.py =====

from dataclasses import dataclass
from typing import Optional

from blue_ledger.config.params import ReportParams
from blue_ledger.core.finance.statements import DepreciationRow
from blue_ledger.core.ledger.journal_entry import FixedAsset


@dataclass
class DepreciationUnit:
    """
    固定資産1件を管理する「レンガ」。
    ・取得価額と前期末の償却累計額
    ・償却率（×rate_basis の固定小数点）
    ・取得年月
    をもち、指定年度の償却費（定額法）を返す。

    計算するだけで、償却累計額は書き戻さない。
    """

    asset: FixedAsset
    memorandum_value: int = ReportParams.memorandum_value    # 備忘価額
    rate_basis: int = ReportParams.rate_basis

    def __post_init__(self):
        date = self.asset.acquisition_date or ""
        try:
            self.acq_year: Optional[int] = int(date[:4])
        except ValueError:
            self.acq_year = None
        try:
            self.acq_month = int(date[5:7])
        except ValueError:
            self.acq_month = 1

    def annual_amount(self) -> int:
        """年間償却額（端数切り捨て）。Python の int は桁あふれしない"""
        return self.asset.acquisition_cost * self.asset.depreciation_rate // self.rate_basis

    def get_annual_depreciation(self, year: int) -> Optional[int]:
        """
        指定年度の償却費。対象外（取得前・償却済み）なら None。
        """
        a = self.asset
        acq_year = year if self.acq_year is None else self.acq_year

        # ① 取得年より前の年度は対象外
        if year < acq_year:
            return None

        # ② 備忘価額まで償却済み
        if a.acquisition_cost - a.accumulated_dep <= self.memorandum_value:
            return None

        dep = self.annual_amount()

        # ③ 取得初年度は月割り（取得月を1か月と数える）
        if year == acq_year:
            months = 12 - self.acq_month + 1
            dep = dep * months // 12

        # ④ 備忘価額を残す
        ceiling = a.acquisition_cost - self.memorandum_value
        if a.accumulated_dep + dep > ceiling:
            dep = ceiling - a.accumulated_dep
        return max(dep, 0)

    def to_row(self, year: int) -> Optional[DepreciationRow]:
        dep = self.get_annual_depreciation(year)
        if dep is None:
            return None

        a = self.asset
        accumulated_end = a.accumulated_dep + dep
        return DepreciationRow(
            asset_id=a.id,
            asset_name=a.name,
            acquisition_date=a.acquisition_date,
            acquisition_cost=a.acquisition_cost,
            depreciation_method=a.depreciation_method,
            useful_life=a.useful_life,
            depreciation_rate=a.depreciation_rate,
            accumulated_dep_prev=a.accumulated_dep,
            current_year_dep=dep,
            accumulated_dep_end=accumulated_end,
            book_value_end=a.acquisition_cost - accumulated_end,
        )


def build_depreciation_schedule(reader, year: int, params=None) -> list[DepreciationRow]:
    """
    有効な固定資産すべてについて当期の減価償却費を計算する（取得日順）。
    """
    params = params or ReportParams()

    rows = []
    for asset in reader.fixed_assets():
        if not asset.is_active:
            continue

        row = DepreciationUnit(asset, params.memorandum_value, params.rate_basis).to_row(year)
        if row is not None:
            rows.append(row)
    return rows

# ===== end unit.py =====
