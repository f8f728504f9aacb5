import pandas as pd
import streamlit as st

from techpoints.services.dashboard_service import (
    DATE_PRESETS, date_preset, services_by_type_per_technician, technician_ranking,
)
from techpoints.services.formatting import format_int
from techpoints.ui.api_client import get_client, APIError
from techpoints.ui.auth import require_admin

st.set_page_config(page_title="Technician Analysis", layout="wide")
require_admin()

st.title("👥 Technician Analysis")

client = get_client()

try:
    filters = client.get_dashboard_filters()
except APIError as e:
    st.error(f"Failed to load filters: {e.detail}")
    st.stop()

# The dashboard hands over its period; otherwise default to 30 days.
if "tech_range" not in st.session_state:
    st.session_state["tech_range"] = date_preset("month")

preset_cols = st.columns(len(DATE_PRESETS))
for col, (key, label) in zip(preset_cols, DATE_PRESETS.items()):
    if col.button(label, key=f"tech_preset_{key}"):
        st.session_state["tech_range"] = date_preset(key)

start, end = st.session_state["tech_range"]
c1, c2 = st.columns(2)
start = c1.date_input("Start", value=start)
end = c2.date_input("End", value=end)
st.session_state["tech_range"] = (start, end)

with st.spinner("Loading..."):
    try:
        data = client.get_dashboard_data(start.isoformat(), end.isoformat())
    except APIError as e:
        st.error(f"Failed to load data: {e.detail}")
        st.stop()

ranking = technician_ranking(data.services, filters.users)

if not ranking:
    st.info("No services found for the selected period.")
    st.stop()

names = [r.name for r in ranking]
chart_height = max(400, len(ranking) * 35)

# --- Points per technician ---
st.subheader("Points per Technician")
st.bar_chart(
    pd.DataFrame({"Technician": names, "Points": [r.points for r in ranking]}),
    x="Technician", y="Points", horizontal=True, height=chart_height,
)

# --- Services per type, stacked ---
st.subheader("Services per Type")
grid = services_by_type_per_technician(data.services)
stacked = pd.DataFrame(
    {t.name: [grid.get(r.id, {}).get(t.id, 0) for r in ranking] for t in filters.types},
    index=pd.Index(names, name="Technician"),
)
st.bar_chart(stacked, horizontal=True, height=chart_height)

st.divider()

# --- Individual report ---
st.subheader("📋 Technician Report")
options = {r.id: r.name for r in ranking}
selected = st.selectbox("Technician", options=list(options), format_func=options.get)

if selected:
    try:
        report = client.get_technician_report(selected, start.isoformat(), end.isoformat())
    except APIError as e:
        st.error(f"Failed to load report: {e.detail}")
    else:
        m1, m2 = st.columns(2)
        m1.metric("Total Points", format_int(report.total_points))
        m2.metric("Services", format_int(report.total_services))
        st.table([
            {
                "Service type": row.name,
                "Count": row.count,
                "Points each": row.points_each,
                "Total points": format_int(row.total_points),
            }
            for row in report.by_service_type
        ])
