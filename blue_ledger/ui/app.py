# ============== blue_ledger/ui/app.py ==============
# streamlit run blue_ledger/ui/app.py

import datetime
import logging
import traceback

import pandas as pd
import streamlit as st

from blue_ledger.config.params import ReportParams
from blue_ledger.core.engine.statement_engine import StatementEngine
from blue_ledger.core.finance.statements import (
    DEPRECIATION_COLUMNS,
    LOSS_CARRYFORWARD_COLUMNS,
    STATEMENT_COLUMNS,
    rows_to_df,
)
from blue_ledger.core.ledger.errors import LedgerError
from blue_ledger.core.ledger.ledger import LedgerStore

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# 1. 表示用フォーマット
# ----------------------------------------------------------------------
def format_yen(val) -> str:
    if pd.isna(val):
        return ""
    return f"¥{int(val):,}"


def yen_columns(df: pd.DataFrame, columns) -> pd.DataFrame:
    df = df.copy()
    for col in columns:
        if col in df.columns:
            df[col] = df[col].apply(format_yen)
    return df


# ----------------------------------------------------------------------
# 2. サイドバー
# ----------------------------------------------------------------------
def setup_sidebar(params: ReportParams):
    st.sidebar.markdown("## 🛠 表示条件")
    db_path = st.sidebar.text_input("データベース", value=params.db_path)
    year = st.sidebar.number_input(
        "年度", min_value=1900, max_value=9999, value=datetime.date.today().year, step=1
    )
    month_label = st.sidebar.selectbox(
        "月（試算表・仕訳帳）", ["年間"] + [f"{m}月" for m in range(1, 13)]
    )
    month = None if month_label == "年間" else int(month_label.rstrip("月"))
    return db_path, int(year), month


@st.cache_resource
def open_store(db_path: str, lock_timeout: float) -> LedgerStore:
    return LedgerStore(db_path=db_path, lock_timeout=lock_timeout)


# ----------------------------------------------------------------------
# 3. 各タブ
# ----------------------------------------------------------------------
def show_trial_balance(engine: StatementEngine, year: int, month):
    tb = engine.trial_balance(year, month)
    st.dataframe(
        yen_columns(tb.to_df(), ["debit_total", "credit_total", "balance"]),
        use_container_width=True,
    )
    col_l, col_r = st.columns(2)
    col_l.metric("借方合計", format_yen(tb.debit_grand_total))
    col_r.metric("貸方合計", format_yen(tb.credit_grand_total))
    if not tb.is_balanced:
        st.error("⚠️ 借方合計と貸方合計が一致しません")


def show_profit_loss(engine: StatementEngine, year: int):
    pl = engine.profit_loss(year)
    st.markdown("#### 収益")
    st.dataframe(yen_columns(rows_to_df(pl.revenue_rows, STATEMENT_COLUMNS), ["amount"]))
    st.markdown("#### 費用")
    st.dataframe(yen_columns(rows_to_df(pl.expense_rows, STATEMENT_COLUMNS), ["amount"]))
    st.metric("所得金額", format_yen(pl.net_income))


def show_balance_sheet(engine: StatementEngine, year: int):
    bs = engine.balance_sheet(year)
    for label, rows, total in [
        ("資産", bs.asset_rows, bs.total_assets),
        ("負債", bs.liability_rows, bs.total_liabilities),
        ("純資産", bs.equity_rows, bs.total_equity),
    ]:
        st.markdown(f"#### {label}（合計 {format_yen(total)}）")
        st.dataframe(yen_columns(rows_to_df(rows, STATEMENT_COLUMNS), ["amount"]))
    st.metric("青色申告特別控除前の所得金額", format_yen(bs.net_income))


def depreciation_table(rows):
    dep_df = rows_to_df(rows, DEPRECIATION_COLUMNS)
    st.dataframe(
        yen_columns(dep_df, [
            "acquisition_cost", "accumulated_dep_prev", "current_year_dep",
            "accumulated_dep_end", "book_value_end",
        ]),
        use_container_width=True,
    )


def loss_carryforward_table(lc):
    st.dataframe(
        yen_columns(
            rows_to_df(lc.rows, LOSS_CARRYFORWARD_COLUMNS),
            ["original_loss", "already_used", "applied_this_year", "remaining"],
        ),
        use_container_width=True,
    )


def show_depreciation(engine: StatementEngine, year: int):
    rows = engine.depreciation_schedule(year)
    if not rows:
        st.info("当期に償却する固定資産はありません")
        return
    depreciation_table(rows)
    st.metric("減価償却費合計", format_yen(sum(r.current_year_dep for r in rows)))


def show_loss_carryforward(engine: StatementEngine, year: int):
    lc = engine.loss_carryforward(year)
    loss_carryforward_table(lc)
    col_l, col_m, col_r = st.columns(3)
    col_l.metric("繰越控除前の所得金額", format_yen(lc.income_before))
    col_m.metric("繰越控除額", format_yen(lc.total_applied))
    col_r.metric("繰越控除後の所得金額", format_yen(lc.income_after))


def show_final_statement(engine: StatementEngine, year: int):
    fs = engine.final_statement(year)

    st.markdown("#### 月別売上（収入）金額及び仕入金額")
    monthly_df = pd.DataFrame(
        [{"月": m.month, "売上": m.sales, "仕入": m.purchases} for m in fs.monthly]
    )
    st.dataframe(yen_columns(monthly_df, ["売上", "仕入"]), use_container_width=True)

    st.markdown("#### 減価償却費の計算")
    depreciation_table(fs.depreciation_rows)

    st.markdown("#### 純損失の繰越控除")
    lc = fs.loss_carryforward
    loss_carryforward_table(lc)

    col_l, col_r = st.columns(2)
    col_l.metric("売上合計", format_yen(fs.annual_sales_total))
    col_l.metric("仕入合計", format_yen(fs.annual_purchases_total))
    col_l.metric("減価償却費合計", format_yen(fs.depreciation_total))
    col_r.metric("地代家賃（経費算入額）", format_yen(fs.rent_total))
    col_r.metric("繰越控除額", format_yen(lc.total_applied))
    col_r.metric("繰越控除後の所得金額", format_yen(lc.income_after))


def show_journal(engine: StatementEngine, year: int, month):
    entries = engine.journal(year, month)
    df = pd.DataFrame(
        [
            {
                "日付": e.date,
                "借方科目": e.debit_account_name,
                "借方金額": e.debit_amount,
                "貸方科目": e.credit_account_name,
                "貸方金額": e.credit_amount,
                "摘要": e.description,
            }
            for e in entries
        ]
    )
    st.dataframe(yen_columns(df, ["借方金額", "貸方金額"]), use_container_width=True)
    st.download_button(
        "📥 仕訳帳をCSVで保存",
        data=engine.export_journal_csv(year, month).encode("utf-8"),
        file_name=f"journal_{year}{'' if month is None else f'_{month:02d}'}.csv",
        mime="text/csv",
    )


# ----------------------------------------------------------------------
# 4. メイン
# ----------------------------------------------------------------------
def main():
    params = ReportParams.from_env()
    logging.basicConfig(level=params.log_level)

    st.set_page_config(layout="wide", page_title="青色申告決算書")
    st.title("📒 青色申告決算書")

    db_path, year, month = setup_sidebar(params)

    try:
        engine = StatementEngine(open_store(db_path, params.lock_timeout), params)

        tabs = st.tabs([
            "🧮 試算表", "📊 損益計算書", "🏦 貸借対照表", "🏗 減価償却",
            "📉 繰越控除", "📑 決算書", "📒 仕訳帳",
        ])
        with tabs[0]:
            show_trial_balance(engine, year, month)
        with tabs[1]:
            show_profit_loss(engine, year)
        with tabs[2]:
            show_balance_sheet(engine, year)
        with tabs[3]:
            show_depreciation(engine, year)
        with tabs[4]:
            show_loss_carryforward(engine, year)
        with tabs[5]:
            show_final_statement(engine, year)
        with tabs[6]:
            show_journal(engine, year, month)

    except LedgerError as e:
        logger.error("statement failed: %s", e)
        st.error(f"決算書の作成に失敗しました: {e}")
        st.code(traceback.format_exc())


if __name__ == "__main__":
    main()

# ============== end blue_ledger/ui/app.py ==============
