import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import datetime, time as dtime

import streamlit as st
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from budgettracker.aggregates import category_name, top_categories
from budgettracker.alerts import BudgetAlert, alert_message
from budgettracker.budgets import BudgetStatus
from budgettracker.config import Settings, configure_logging
from budgettracker.domain import (
    Budget,
    BudgetPeriod,
    DateRange,
    Transaction,
    TransactionType,
    new_id,
)
from budgettracker.events import BUDGET_ALERT
from budgettracker.filters import FilterConfig
from budgettracker.formatting import format_currency, format_percent, format_short_date
from budgettracker.functional import parse_amount
from budgettracker.periods import start_of_month
from budgettracker.reports import spending_trend, transactions_frame
from budgettracker.services import BudgetService, ReportService
from budgettracker.storage import JsonStorage
from budgettracker.store import RecordStore
from budgettracker.viewmodel import TransactionView

st.set_page_config(page_title="Budget Tracker", layout="wide")

STATUS_COLORS = {
    BudgetStatus.ON_TRACK: "green",
    BudgetStatus.WARNING: "orange",
    BudgetStatus.OVER: "red",
    BudgetStatus.INVALID: "gray",
}


@st.cache_resource
def get_store() -> RecordStore:
    settings = Settings.from_env()
    configure_logging(settings)
    store = RecordStore(JsonStorage(settings.data_dir), alert_threshold=settings.alert_threshold)
    store.events.subscribe(BUDGET_ALERT, queue_alert)
    return store.open()


def queue_alert(event, payload) -> None:
    st.session_state.setdefault("alerts", []).append(
        BudgetAlert(payload["budget"], payload["progress"])
    )


store = get_store()
snap = store.snapshot()

if "tx_view" not in st.session_state:
    st.session_state.tx_view = TransactionView(store)
view: TransactionView = st.session_state.tx_view


def report_result(result, ok_message: str) -> None:
    # queued so the message survives st.rerun()
    if result.is_right():
        flash = ("success", ok_message)
    else:
        flash = ("error", result.get_error()["message"])
    st.session_state.setdefault("flash", []).append(flash)


for alert in st.session_state.pop("alerts", []):
    st.warning(alert_message(alert, category_name(snap.categories, alert.budget.category_id)))

for level, message in st.session_state.pop("flash", []):
    getattr(st, level)(message)

menu = st.sidebar.radio(
    "Menu",
    ["🏠 Dashboard", "🧾 Transactions", "💰 Budgets", "📑 Reports"]
)

if menu == "🏠 Dashboard":
    st.title("🏠 Dashboard")
    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Balance", format_currency(view.balance()))
    with k2:
        st.metric("Income", format_currency(view.total_income()))
    with k3:
        st.metric("Expenses", format_currency(view.total_expenses()))

    st.subheader("💰 Budget Progress")
    rows = BudgetService().overview(snap)
    if not rows:
        st.info("No budgets defined")
    for row in rows:
        st.markdown(
            f"**{row['category']}** ({row['period']}) "
            f"{format_currency(row['spent'])} / {format_currency(row['limit'])} "
            f":{STATUS_COLORS[row['status']]}[{format_percent(row['progress'])}]"
        )
        st.progress(row["display_progress"])

    st.subheader("🕒 Recent Transactions")
    recent = view.recent(5)
    if recent:
        disp = transactions_frame(recent, snap.categories)[["date", "title", "category", "signed_amount"]]
        disp["date"] = disp["date"].map(format_short_date)
        disp["signed_amount"] = disp["signed_amount"].map(format_currency)
        st.table(disp.reset_index(drop=True))
    else:
        st.info("No transactions yet")

    top = list(top_categories(view.filtered, snap.categories, 3))
    if top:
        st.caption("Top spending: " + ", ".join(f"{name} {format_currency(total)}" for name, total in top))

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")

    cat_names = {c.id: c.name for c in snap.categories}
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        query = st.text_input("Search", value=view.config.query)
    with col2:
        type_choice = st.selectbox("Type", ["All"] + [t.value for t in TransactionType])
    with col3:
        cat_choice = st.selectbox("Category", [None] + list(cat_names), format_func=lambda c: "All" if c is None else cat_names[c])
    with col4:
        ranges = list(DateRange)
        range_choice = st.selectbox("Period", ranges, index=ranges.index(view.config.date_range), format_func=lambda r: r.value)

    view.config = FilterConfig(
        query=query,
        type=None if type_choice == "All" else TransactionType(type_choice),
        category_id=cat_choice,
        date_range=range_choice,
    )

    filtered = view.filtered
    if filtered:
        df = transactions_frame(filtered, snap.categories)
        st.dataframe(df[["date", "title", "category", "type", "amount", "notes"]], use_container_width=True)
        st.download_button("⬇ Download CSV", df.to_csv(index=False), file_name="transactions.csv", mime="text/csv")
    else:
        st.info("No transactions match the selected filters")

    st.subheader("➕ Add Transaction")
    with st.form("tx_form", clear_on_submit=True):
        c1, c2 = st.columns(2)
        with c1:
            title = st.text_input("Title")
            amount_text = st.text_input("Amount")
            t_type = st.radio("Type", [t.value for t in TransactionType], horizontal=True)
        with c2:
            cat_id = st.selectbox("Category", list(cat_names), format_func=lambda c: cat_names[c])
            day = st.date_input("Date")
            notes = st.text_input("Notes (optional)")
        if st.form_submit_button("Save"):
            parsed = parse_amount(amount_text)
            if parsed.is_left():
                st.error(parsed.get_error()["message"])
            else:
                result = view.add(Transaction(
                    id=new_id(),
                    amount=parsed.get_or_else(0.0),
                    title=title,
                    category_id=cat_id,
                    date=datetime.combine(day, datetime.now().time()),
                    type=TransactionType(t_type),
                    notes=notes or None,
                ))
                report_result(result, "Transaction added")
                st.rerun()

    if filtered:
        to_delete = st.selectbox("Delete transaction", [t.id for t in filtered],
                                 format_func=lambda tid: next(t.title for t in filtered if t.id == tid))
        if st.button("🗑 Delete"):
            report_result(view.delete(to_delete), "Transaction deleted")
            st.rerun()

elif menu == "💰 Budgets":
    st.title("💰 Budgets")

    for row in BudgetService().overview(snap):
        b = row["budget"]
        c1, c2 = st.columns([4, 1])
        with c1:
            st.markdown(f"**{row['category']}** · {row['period']} · remaining {format_currency(row['remaining'])}")
            label = "invalid limit" if row["status"] == BudgetStatus.INVALID else format_percent(row["progress"])
            st.progress(row["display_progress"], text=label)
        with c2:
            if st.button("Delete", key=f"del_{b.id}"):
                report_result(store.delete_budget(b.id), "Budget deleted")
                st.rerun()

    st.subheader("➕ New Budget")
    expense_cats = [c for c in snap.categories if c.name.lower() != "income"]
    with st.form("budget_form", clear_on_submit=True):
        cat = st.selectbox("Category", expense_cats, format_func=lambda c: c.name)
        amount_text = st.text_input("Amount")
        period = st.selectbox("Period", list(BudgetPeriod), index=1, format_func=lambda p: p.value)
        start = st.date_input("Start Date", value=start_of_month(datetime.now()).date())
        if st.form_submit_button("Save"):
            parsed = parse_amount(amount_text)
            if parsed.is_left():
                st.error(parsed.get_error()["message"])
            elif cat is None:
                st.error("Please select a category.")
            else:
                report_result(store.add_budget(Budget(
                    id=new_id(),
                    category_id=cat.id,
                    amount=parsed.get_or_else(0.0),
                    period=period,
                    start_date=datetime.combine(start, dtime.min),
                )), "Budget saved")
                st.rerun()

elif menu == "📑 Reports":
    st.title("📑 Reports")
    ranges = list(DateRange)
    range_choice = st.selectbox("Period", ranges, index=ranges.index(view.config.date_range), format_func=lambda r: r.value)
    view.set_date_range(range_choice)
    filtered = view.filtered

    if not filtered:
        st.info("No data for this period")
    else:
        result = ReportService().summary(filtered, snap.categories)["result"]
        k1, k2 = st.columns(2)
        with k1:
            st.metric("Income", format_currency(result["income"]))
        with k2:
            st.metric("Expenses", format_currency(result["expenses"]))

        breakdown = pd.DataFrame(result["breakdown"])
        if not breakdown.empty:
            colors = {c.name: c.color.to_hex() for c in snap.categories}
            fig_cat = px.pie(breakdown, values="total", names="category", color="category",
                             color_discrete_map=colors, title="Spending by Category")
            st.plotly_chart(fig_cat, use_container_width=True)

        fig_bar = go.Figure(go.Bar(x=["Income", "Expenses"], y=[result["income"], result["expenses"]],
                                   marker_color=["green", "red"]))
        fig_bar.update_layout(title="Income vs Expenses")
        st.plotly_chart(fig_bar, use_container_width=True)

        trend = spending_trend(filtered)
        if len(trend) > 1:
            fig_ts = px.line(x=trend.index, y=trend.values, markers=True,
                             labels={"x": "Day", "y": "Spent"}, title="Spending Trends")
            st.plotly_chart(fig_ts, use_container_width=True)
        else:
            st.caption("Not enough data to display chart")
