"""
blue_ledger
-----------
個人事業主（青色申告）向け複式簿記の決算書作成エンジン。
"""

__version__ = "0.1.0"
