import pandas as pd
import streamlit as st

from techpoints.services.dashboard_service import (
    DATE_PRESETS, dashboard_stats, daily_points, date_preset, filter_services,
    technician_ranking,
)
from techpoints.services.formatting import format_int
from techpoints.ui.api_client import get_client, APIError
from techpoints.ui.auth import require_admin

st.set_page_config(page_title="Dashboard", layout="wide")
require_admin()

st.title("📊 Points Dashboard")

client = get_client()

try:
    filters = client.get_dashboard_filters()
except APIError as e:
    st.error(f"Failed to load filters: {e.detail}")
    st.stop()

if "dash_range" not in st.session_state:
    st.session_state["dash_range"] = date_preset("month")

# --- Sidebar filters ---
st.sidebar.subheader("📅 Period")
preset_cols = st.sidebar.columns(len(DATE_PRESETS))
for col, (key, label) in zip(preset_cols, DATE_PRESETS.items()):
    if col.button(label, key=f"preset_{key}"):
        st.session_state["dash_range"] = date_preset(key)

start, end = st.session_state["dash_range"]
start = st.sidebar.date_input("Start", value=start)
end = st.sidebar.date_input("End", value=end)
st.session_state["dash_range"] = (start, end)

user_names = {u.id: u.name for u in filters.users}
type_names = {t.id: t.name for t in filters.types}

st.sidebar.subheader("👷 Technicians")
selected_users = st.sidebar.multiselect(
    "Technicians", options=list(user_names), default=list(user_names),
    format_func=user_names.get, label_visibility="collapsed",
)
st.sidebar.subheader("🔧 Service types")
selected_types = st.sidebar.multiselect(
    "Service types", options=list(type_names), default=list(type_names),
    format_func=type_names.get, label_visibility="collapsed",
)

if st.sidebar.button("🔄 Refresh"):
    st.rerun()

# --- Data ---
with st.spinner("⏳ Loading..."):
    try:
        data = client.get_dashboard_data(start.isoformat(), end.isoformat())
    except APIError as e:
        st.error(f"❌ Failed to load data: {e.detail}")
        st.stop()

st.caption(f"✅ {format_int(data.count)} records")

filtered = filter_services(data.services, set(selected_users), set(selected_types))
stats = dashboard_stats(filtered)

c1, c2, c3, c4 = st.columns(4)
c1.metric("Total Points", format_int(stats.total_points))
c2.metric("Technicians", stats.technician_count)
c3.metric("Average per Technician", format_int(stats.average_points))
c4.metric("Services", format_int(stats.service_count))

st.divider()

ranking = technician_ranking(filtered, filters.users, limit=10)

left, right = st.columns(2)

with left:
    st.subheader("🏆 Top Technicians")
    if ranking:
        st.bar_chart(
            pd.DataFrame({"Technician": [r.name for r in ranking], "Points": [r.points for r in ranking]}),
            x="Technician", y="Points",
        )
    else:
        st.info("No data found for the selected period.")
    if st.button("📊 Points per technician"):
        st.session_state["tech_range"] = (start, end)
        st.switch_page("pages/2_technicians.py")

with right:
    st.subheader("📈 Daily Points")
    by_day = daily_points(filtered)
    if by_day:
        st.line_chart(pd.Series(by_day, name="Points"))
    else:
        st.info("No data found for the selected period.")

st.divider()

st.subheader("Ranking")
if not ranking:
    st.info("No data found for the selected period.")
else:
    medals = {0: "🥇", 1: "🥈", 2: "🥉"}
    st.table([
        {
            "#": medals.get(i, str(i + 1)),
            "Technician": r.name,
            "Services": r.services,
            "Points": format_int(r.points),
        }
        for i, r in enumerate(ranking)
    ])
