# ================================
# core/ledger/journal_entry.py
# ================================

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from blue_ledger.core.ledger.errors import ValidationError


class Classification(str, Enum):
    """
    勘定科目の区分。
    値は台帳ストアに保存されるタグ文字列そのもの。
    """

    ASSET = "資産"
    LIABILITY = "負債"
    EQUITY = "純資産"
    REVENUE = "収益"
    EXPENSE = "費用"

    @classmethod
    def parse(cls, tag) -> Optional["Classification"]:
        """タグ文字列 → Classification。未知のタグは None"""
        if isinstance(tag, cls):
            return tag
        try:
            return cls(tag)
        except ValueError:
            return None


@dataclass
class Account:
    id: int
    code: int
    name: str
    classification: str     # 区分タグ（Classification の値）


@dataclass
class JournalEntry:
    """
    借方1行・貸方1行の2行仕訳。

    ・借方（debit_account_id, debit_amount）
    ・貸方（credit_account_id, credit_amount）

    debit_amount == credit_amount > 0 は書き込み時に検証済みとして扱い、
    集計側では再チェックしない。
    """

    id: int
    date: str                   # YYYY-MM-DD
    debit_account_id: int
    debit_amount: int
    credit_account_id: int
    credit_amount: int
    description: str = ""
    created_at: str = ""
    debit_account_name: Optional[str] = None
    credit_account_name: Optional[str] = None


@dataclass
class FixedAsset:
    id: int
    name: str
    acquisition_date: str       # YYYY-MM-DD
    acquisition_cost: int       # 取得価額
    useful_life: int            # 耐用年数
    depreciation_method: str    # 償却方法（定額法）
    depreciation_rate: int      # 償却率 ×10000
    accumulated_dep: int = 0    # 前期末までの償却累計額
    memo: str = ""
    is_active: bool = True


@dataclass
class RentDetail:
    id: int
    payee_address: str
    payee_name: str
    rent_type: str
    monthly_rent: int
    annual_total: int
    business_ratio: int         # 事業割合（%）
    memo: str = ""


@dataclass
class LossCarryforward:
    """
    純損失1年分と、その損失を何年目にいくら使ったかの使用枠。
    used_year_N は「損失発生から N 年目に控除した金額」。
    """

    id: int
    loss_year: int
    loss_amount: int
    used_year_1: int = 0
    used_year_2: int = 0
    used_year_3: int = 0
    memo: str = ""

    @property
    def already_used(self) -> int:
        return self.used_year_1 + self.used_year_2 + self.used_year_3

    @property
    def available(self) -> int:
        return self.loss_amount - self.already_used

    def used_in_slot(self, offset: int) -> int:
        """offset 年目の使用枠。1〜3 以外は 0"""
        return {
            1: self.used_year_1,
            2: self.used_year_2,
            3: self.used_year_3,
        }.get(offset, 0)


# =======================================
# 書き込み境界のチェック
# =======================================

def validate_date(value: str) -> str:
    """YYYY-MM-DD 形式かつ実在する日付であること"""
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d")
    except (TypeError, ValueError):
        raise ValidationError(f"日付は YYYY-MM-DD 形式で入力してください: {value!r}")
    if parsed.strftime("%Y-%m-%d") != value:
        raise ValidationError(f"日付は YYYY-MM-DD 形式で入力してください: {value!r}")
    return value


def validate_entry_legs(debit_amount: int, credit_amount: int):
    """借方金額と貸方金額が一致し、1円以上であること"""
    if debit_amount != credit_amount:
        raise ValidationError("借方金額と貸方金額が一致しません")
    if debit_amount <= 0:
        raise ValidationError("金額は1円以上を入力してください")


def make_entry_pair(
    date: str,
    debit_account_id: int,
    credit_account_id: int,
    amount: int,
    description: str = "",
) -> JournalEntry:
    """
    同額の借方・貸方から未保存の JournalEntry（id=0）を作る。

        make_entry_pair("2024-03-15", purchases_id, sales_id, 10000, "仕入")
    """
    validate_date(date)
    validate_entry_legs(amount, amount)
    return JournalEntry(
        id=0,
        date=date,
        debit_account_id=debit_account_id,
        debit_amount=amount,
        credit_account_id=credit_account_id,
        credit_amount=amount,
        description=description,
    )

# ================================
# END journal_entry.py
# ================================
