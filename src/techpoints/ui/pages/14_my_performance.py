import pandas as pd
import streamlit as st

from techpoints.logging import logger
from techpoints.services.formatting import format_currency, format_date, format_datetime
from techpoints.services.payment_service import goal_progress, points_above_minimum
from techpoints.ui.api_client import get_client, APIError
from techpoints.ui.auth import is_token_error, logout_technician, require_technician
from techpoints.ui.state import get_tech_token, get_tech_user

st.set_page_config(page_title="My Performance", layout="wide")
require_technician()

client = get_client()
user = get_tech_user()

try:
    perf = client.get_technician_performance(get_tech_token())
except APIError as e:
    if is_token_error(e):
        logger.info("Technician session expired: %s", e.detail)
        logout_technician()
    st.error(e.detail)
    st.page_link("pages/13_login.py", label="Back to login")
    st.stop()

head, action = st.columns([5, 1])
head.title(f"Hello, {user.name}! 👋")
head.caption(f"Period: {format_date(perf.cycle_start)} to {format_date(perf.cycle_end)}")
if action.button("Sign out"):
    logout_technician()

rules = perf.config
types = list(perf.by_service_type)

c1, c2, c3, c4 = st.columns(4)
c1.metric("Total Points", perf.total_points)
c2.metric("Estimated Payment", format_currency(perf.payment))
c3.metric("Total Services", perf.total_services)
c4.metric("Service Types", len(types))

st.divider()

# --- Goal ---
st.subheader("🎯 Monthly Goal")
reached = perf.total_points >= rules.min_points
st.progress(
    goal_progress(perf.total_points, rules.min_points) / 100,
    text=f"{perf.total_points} / {rules.min_points} points",
)
if reached:
    st.success(
        f"🏆 Goal reached! You passed it by {perf.total_points - rules.min_points} points."
    )
else:
    st.info(f"{rules.min_points - perf.total_points} points left to reach the goal.")

# --- Charts ---
if types:
    left, right = st.columns(2)
    with left:
        st.subheader("Services per Type")
        st.bar_chart(pd.Series({t: perf.by_service_type[t].count for t in types}, name="Count"))
    with right:
        st.subheader("Points Distribution")
        st.bar_chart(
            pd.Series({t: perf.by_service_type[t].total for t in types}, name="Points"),
            horizontal=True,
        )

# --- Latest services ---
st.subheader("Latest Services")
if not perf.services:
    st.info("No services in this cycle yet.")
else:
    st.dataframe(
        [
            {"Date": format_datetime(s.performed_at), "Service": s.type, "Points": s.points}
            for s in perf.services[:50]
        ],
        use_container_width=True,
        hide_index=True,
    )

# --- Payment summary ---
st.subheader("💵 Payment Summary")
extra = points_above_minimum(perf.total_points, rules.min_points)
p1, p2, p3 = st.columns(3)
p1.write(f"**Minimum goal**  \n{rules.min_points} points = {format_currency(rules.base_payment)}")
p2.write(
    f"**Extra points**  \n{extra} × {format_currency(rules.point_rate)} = "
    f"{format_currency(extra * rules.point_rate)}"
)
p3.metric("Total to receive", format_currency(perf.payment))
