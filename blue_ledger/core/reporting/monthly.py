#============== core/reporting/monthly.py

from blue_ledger.config.params import ReportParams
from blue_ledger.core.finance.period import period_range
from blue_ledger.core.finance.statements import MonthlySalesPurchase


def monthly_sales_purchases(reader, year: int, params=None) -> list[MonthlySalesPurchase]:
    """
    Ledger → 月別売上（収入）金額及び仕入金額

    売上 = 貸方に売上高の科目（params.sales_account_code）が使われた仕訳の金額
    仕入 = 借方に仕入高の科目（params.purchases_account_code）が使われた仕訳の金額

    取引の無い月も 0 で埋め、必ず 1〜12 月の 12 行を返す。
    """
    params = params or ReportParams()
    codes = {a.id: a.code for a in reader.accounts()}
    dr = period_range(year)

    monthly = {m: MonthlySalesPurchase(month=m) for m in range(1, 13)}

    for e in reader.entries_in_range(dr.date_from, dr.date_to):
        row = monthly[int(e.date[5:7])]
        if codes.get(e.credit_account_id) == params.sales_account_code:
            row.sales += e.credit_amount
        if codes.get(e.debit_account_id) == params.purchases_account_code:
            row.purchases += e.debit_amount

    return list(monthly.values())

# ============== end core/reporting/monthly.py
