# ===============================
# core/ledger/errors.py
# ===============================


class LedgerError(Exception):
    """blue_ledger が送出する例外の基底クラス"""


class ValidationError(LedgerError):
    """
    書き込み境界での入力チェック違反。
    （貸借不一致・金額0以下・日付形式不正など）
    """


class StoreError(LedgerError):
    """
    台帳ストア（SQLite）の問い合わせ・接続エラー。
    メッセージにはストア側の詳細をそのまま載せる。
    """


class LockError(LedgerError):
    """共有コネクションのロックを取得できなかった"""

# ===== end errors.py =====
