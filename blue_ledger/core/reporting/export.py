#============== core/reporting/export.py

import pandas as pd

CSV_HEADER = ["日付", "借方科目", "借方金額", "貸方科目", "貸方金額", "摘要"]
BOM = "\ufeff"


def journal_to_csv(entries) -> str:
    """
    仕訳帳 → CSV 文字列（Excel で文字化けしないよう BOM 付き UTF-8）
    """
    df = pd.DataFrame(
        [
            [
                e.date,
                e.debit_account_name or "",
                e.debit_amount,
                e.credit_account_name or "",
                e.credit_amount,
                e.description,
            ]
            for e in entries
        ],
        columns=CSV_HEADER,
    )
    return BOM + df.to_csv(index=False, lineterminator="\n")

#============== end core/reporting/export.py
