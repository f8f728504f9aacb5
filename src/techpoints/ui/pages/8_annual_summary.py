from datetime import date

import streamlit as st

from techpoints.services.formatting import format_currency, format_int
from techpoints.ui.api_client import get_client, APIError
from techpoints.ui.auth import require_admin

st.set_page_config(page_title="Annual Summary", layout="wide")
require_admin()

st.title("📅 Annual Payment Summary")

client = get_client()

current_year = date.today().year
year = st.selectbox("Year", [current_year - i for i in range(6)])

with st.spinner("Loading annual summary..."):
    try:
        data = client.get_annual_summary(year)
    except APIError as e:
        st.error(f"Failed to load annual summary: {e.detail}")
        st.stop()

cfg = data.config
st.caption(
    f"Minimum: **{cfg.min_points} pts** · Base: **{format_currency(cfg.base_payment)}** · "
    f"Per point: **{format_currency(cfg.point_rate)}** · Cycle: **day {cfg.cycle_start_day} → {cfg.cycle_end_day}**"
)

c1, c2, c3, c4 = st.columns(4)
c1.metric("Paid in the Year", format_currency(data.totals.total_payment))
c2.metric("Total Points", format_int(data.totals.total_points))
c3.metric("Qualifications", data.totals.qualified_technicians)
c4.metric("Total Services", format_int(data.totals.total_services))

st.divider()

table = [
    {
        "Month": f"{m.month}. {m.month_name}",
        "Period": m.period,
        "Services": format_int(m.total_services),
        "Points": format_int(m.total_points),
        "Qualified": f"{m.qualified_technicians}/{m.total_technicians}" if m.qualified_technicians else "-",
        "Total Paid": format_currency(m.total_payment),
    }
    for m in data.months
]
table.append({
    "Month": f"TOTAL {year}",
    "Period": "-",
    "Services": format_int(data.totals.total_services),
    "Points": format_int(data.totals.total_points),
    "Qualified": str(data.totals.qualified_technicians),
    "Total Paid": format_currency(data.totals.total_payment),
})
st.table(table)

st.info(
    f"**Monthly cycle:** each month runs from day {cfg.cycle_start_day} of the previous month "
    f"to day {cfg.cycle_end_day} of the month itself.  \n"
    f"**Payment:** technicians with ≥ {cfg.min_points} points receive "
    f"{format_currency(cfg.base_payment)} + (points - {cfg.min_points}) × {format_currency(cfg.point_rate)}.",
    icon="💡",
)
