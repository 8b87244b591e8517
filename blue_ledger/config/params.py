#=========== blue_ledger/config/params.py

from dataclasses import dataclass
import os


ENV_PREFIX = "BLUE_LEDGER_"


@dataclass
class ReportParams:
    # 台帳ストア
    db_path: str = "blue_ledger.db"
    lock_timeout: float = 5.0          # 秒。-1 なら無期限に待つ

    # 月別売上（収入）金額及び仕入金額の集計対象科目
    sales_account_code: int = 4100     # 売上高（貸方）
    purchases_account_code: int = 5100  # 仕入高（借方）

    # 減価償却
    memorandum_value: int = 1          # 備忘価額（円）
    rate_basis: int = 10000            # 償却率の固定小数点基数

    # 純損失の繰越控除（使用枠は3年分で固定）
    carryforward_years: int = 3

    log_level: str = "INFO"

    def __post_init__(self):
        if self.carryforward_years != 3:
            raise ValueError(
                f"carryforward_years は 3 のみ対応しています（got {self.carryforward_years}）"
            )
        if self.rate_basis <= 0:
            raise ValueError("rate_basis は正の整数で指定してください")
        if self.memorandum_value < 0:
            raise ValueError("memorandum_value は 0 以上で指定してください")

    @classmethod
    def from_env(cls, environ=None) -> "ReportParams":
        """
        BLUE_LEDGER_* 環境変数から params を組み立てる。
        未設定の項目はデフォルト値のまま。
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def pick(name, cast):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is None or raw == "":
                return getattr(defaults, name)
            return cast(raw)

        return cls(
            db_path=pick("db_path", str),
            lock_timeout=pick("lock_timeout", float),
            sales_account_code=pick("sales_account_code", int),
            purchases_account_code=pick("purchases_account_code", int),
            memorandum_value=pick("memorandum_value", int),
            rate_basis=pick("rate_basis", int),
            carryforward_years=pick("carryforward_years", int),
            log_level=pick("log_level", str).upper(),
        )

#=========== end params.py
