import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date

import pandas as pd
import streamlit as st

from finalerts import config
from finalerts.domain import Severity
from finalerts.events import ALERTS_DERIVED, EventBus, badge_handler
from finalerts.services import AlertService
from finalerts.transforms import (
    load_snapshot,
    mark_bill_paid,
    mark_bill_unpaid,
    overdue_bills,
    total_due_this_month,
    upcoming_bills,
)

config.configure_logging()
st.set_page_config(page_title="Finance Alerts", layout="wide")

today = st.sidebar.date_input("Evaluate as of", value=date.today())

bills, budgets, goals, load_errors = load_snapshot(config.seed_path(), today)

if "bills" not in st.session_state:
    st.session_state.bills = bills

SEVERITY_ICONS = {
    Severity.ERROR: "🔴",
    Severity.WARNING: "🟠",
    Severity.INFO: "🔵",
    Severity.SUCCESS: "🟢",
}

bus = EventBus()
bus.subscribe(ALERTS_DERIVED, badge_handler)
service = AlertService(
    bill_source=lambda: st.session_state.bills,
    budget_source=lambda: budgets,
    goal_source=lambda: goals,
    bus=bus,
    cached=True,
)
feed = service.refresh(now=today)

st.title("🔔 Notifications")

k1, k2, k3, k4 = st.columns(4)
with k1:
    st.metric("Unread", feed["unread_count"])
with k2:
    st.metric("Errors", feed["by_severity"][Severity.ERROR.value])
with k3:
    st.metric("Warnings", feed["by_severity"][Severity.WARNING.value])
with k4:
    st.metric("Due this month", f"{total_due_this_month(st.session_state.bills, today):,.0f}")

for err in load_errors:
    st.warning(f"Skipped {err['section']} row: {err['message']}")
for err in feed["errors"]:
    st.error(f"Could not load {err['source']}: {err['message']}")

if feed["alerts"]:
    for a in feed["alerts"]:
        st.markdown(f"{SEVERITY_ICONS[a.severity]} **{a.title}**: {a.message}  \n"
                    f"<small>{a.occurred_on.isoformat()} · {a.link_hint or ''}</small>",
                    unsafe_allow_html=True)
    df_alerts = pd.DataFrame([a.as_row() for a in feed["alerts"]])
    with st.expander("Alert table"):
        st.dataframe(df_alerts[["severity", "kind", "title", "message", "occurred_on"]],
                     use_container_width=True)
else:
    st.info("No alerts. Everything is on track.")

st.header("🧾 Bills")


def bills_frame(rows):
    return pd.DataFrame([
        {"name": b.name, "due_date": b.due_date.isoformat(), "amount": float(b.amount), "paid": b.is_paid}
        for b in rows
    ])


col1, col2 = st.columns(2)
with col1:
    st.subheader("Upcoming")
    up = upcoming_bills(st.session_state.bills, today, config.upcoming_days())
    if up:
        st.table(bills_frame(up))
    else:
        st.caption("Nothing due soon.")
with col2:
    st.subheader("Overdue")
    late = overdue_bills(st.session_state.bills, today)
    if late:
        st.table(bills_frame(late))
    else:
        st.caption("No overdue bills.")

st.subheader("Mark as paid")
for b in st.session_state.bills:
    paid = st.checkbox(f"{b.name} ({b.due_date.isoformat()})", value=b.is_paid, key=f"paid-{b.id}")
    if paid != b.is_paid:
        toggle = mark_bill_paid if paid else mark_bill_unpaid
        st.session_state.bills = toggle(st.session_state.bills, b.id)
        st.rerun()
