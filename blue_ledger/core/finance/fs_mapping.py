# ============================================
# core/finance/fs_mapping.py
# 勘定科目区分 → 残高の符号 マスター
# ============================================

from blue_ledger.core.ledger.journal_entry import Classification

# ----------------------------
# 借方残高が正（資産・費用）: +1
# 貸方残高が正（負債・純資産・収益）: -1
# ----------------------------
NATURAL_SIGN = {
    Classification.ASSET: 1,
    Classification.EXPENSE: 1,
    Classification.LIABILITY: -1,
    Classification.EQUITY: -1,
    Classification.REVENUE: -1,
}

# ----------------------------
# 各決算書に載せる区分
# ----------------------------
PL_CLASSIFICATIONS = (Classification.REVENUE, Classification.EXPENSE)
BS_CLASSIFICATIONS = (Classification.ASSET, Classification.LIABILITY, Classification.EQUITY)


def signed_balance(classification, debit_total: int, credit_total: int) -> int:
    """
    区分に応じて借方合計・貸方合計を残高に変換する。

    資産・費用         → 借方合計 − 貸方合計
    負債・純資産・収益 → 貸方合計 − 借方合計
    未知の区分         → 0（決算書全体は止めない）
    """
    sign = NATURAL_SIGN.get(Classification.parse(classification), 0)
    return sign * (debit_total - credit_total)

# ============================================
# END fs_mapping.py
# ============================================
