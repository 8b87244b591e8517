# ===========================================
# core/finance/period.py
# 期間の決定と、科目別の借方・貸方集計
# ===========================================

from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

from blue_ledger.core.ledger.errors import ValidationError
from blue_ledger.core.ledger.journal_entry import Account, Classification


@dataclass(frozen=True)
class DateRange:
    date_from: str
    date_to: str


def period_range(year: int, month: Optional[int] = None) -> DateRange:
    """
    年度または月の期間（両端含む、YYYY-MM-DD）。

    月指定の末日は実在日によらず常に "31"。
    比較は文字列の辞書順なので、その月の仕訳はすべて範囲に入る。
    """
    if month is None:
        return DateRange(f"{year:04d}-01-01", f"{year:04d}-12-31")

    if not 1 <= month <= 12:
        raise ValidationError(f"月は1〜12で指定してください: {month}")
    return DateRange(f"{year:04d}-{month:02d}-01", f"{year:04d}-{month:02d}-31")


@dataclass
class AccountTotals:
    account: Account
    debit_total: int
    credit_total: int

    @property
    def classification(self) -> Optional[Classification]:
        return Classification.parse(self.account.classification)


def aggregate_period(
    reader,
    date_range: DateRange,
    classifications: Optional[Iterable[Classification]] = None,
) -> list[AccountTotals]:
    """
    期間内の仕訳から科目別の借方合計・貸方合計を出す。

    ・classifications 指定時はその区分の科目だけ
    ・借方・貸方とも 0 の科目は結果に含めない
    ・結果は科目コード順

    仕訳の貸借一致は書き込み時に保証されている前提で、ここでは検証しない。
    """
    accounts = reader.accounts()
    if classifications is not None:
        wanted = set(classifications)
        accounts = [a for a in accounts if Classification.parse(a.classification) in wanted]

    df = reader.get_df(date_range.date_from, date_range.date_to)
    amounts = df["amount"].astype(object)
    df["debit_amount"] = np.where(df["dr_cr"] == "debit", amounts, 0)
    df["credit_amount"] = np.where(df["dr_cr"] == "credit", amounts, 0)

    # 合計は Python の int で積み上げる（int64 だと桁あふれする）
    totals = {}
    for account_id, debit, credit in zip(df["account_id"], df["debit_amount"], df["credit_amount"]):
        d, c = totals.get(int(account_id), (0, 0))
        totals[int(account_id)] = (d + int(debit), c + int(credit))

    rows = []
    for account in accounts:
        if account.id not in totals:
            continue

        debit_total, credit_total = totals[account.id]
        if debit_total == 0 and credit_total == 0:
            continue

        rows.append(AccountTotals(account, debit_total, credit_total))

    return rows

# ===========================================
# END period.py
# ===========================================
