# ===========================================
# core/reporting/final_statement.py
# 青色申告決算書（統合データ）の組み立て
# ===========================================

from blue_ledger.core.depreciation.unit import build_depreciation_schedule
from blue_ledger.core.finance.fs_builder import FinancialStatementBuilder
from blue_ledger.core.finance.statements import FinalStatement
from blue_ledger.core.reporting.monthly import monthly_sales_purchases
from blue_ledger.core.tax.loss_carryforward import LossCarryforwardEngine
from blue_ledger.core.tax.rent_allocation import allocate_rent


def build_final_statement(reader, year: int, params) -> FinalStatement:
    """
    損益計算書・月別売上仕入・減価償却・地代家賃・貸借対照表・繰越控除を
    そのまま1つにまとめる。ここで追加の加工はしない。
    """
    fs = FinancialStatementBuilder(reader)

    pl = fs.build_profit_loss(year)
    bs = fs.build_balance_sheet(year)
    monthly = monthly_sales_purchases(reader, year, params)
    dep_rows = build_depreciation_schedule(reader, year, params)
    rents = reader.rent_details()
    loss_cf = LossCarryforwardEngine(reader, params.carryforward_years).calculate(year)

    return FinalStatement(
        profit_loss=pl,
        monthly=monthly,
        annual_sales_total=sum(m.sales for m in monthly),
        annual_purchases_total=sum(m.purchases for m in monthly),
        depreciation_rows=dep_rows,
        depreciation_total=sum(d.current_year_dep for d in dep_rows),
        rent_details=rents,
        rent_total=allocate_rent(rents),
        balance_sheet=bs,
        loss_carryforward=loss_cf,
    )

# ===========================================
# END final_statement.py
# ===========================================
