# ===============================================
# core/tax/rent_allocation.py
# ===============================================

def business_rent(annual_total: int, business_ratio: int) -> int:
    """
    年間賃借料のうち必要経費に算入する部分（事業割合で按分）

    annual_total: 年間の賃借料
    business_ratio: 事業専用割合（%、整数）
    """
    return annual_total * business_ratio // 100


def allocate_rent(rent_details) -> int:
    """地代家賃の内訳すべての経費算入額の合計"""
    return sum(business_rent(r.annual_total, r.business_ratio) for r in rent_details)

# core/tax/rent_allocation.py end
