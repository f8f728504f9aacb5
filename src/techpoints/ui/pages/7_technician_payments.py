from datetime import date

import pandas as pd
import streamlit as st

from techpoints.services.formatting import format_currency
from techpoints.services.payment_service import filter_by_name
from techpoints.ui.api_client import get_client, APIError
from techpoints.ui.auth import require_admin

st.set_page_config(page_title="Payments per Technician", layout="wide")
require_admin()

st.title("📊 Payments per Technician")

client = get_client()

current_year = date.today().year
c1, c2 = st.columns([1, 3])
year = c1.selectbox("Year", [current_year - i for i in range(6)])
term = c2.text_input("Search technician", placeholder="Name...")

with st.spinner("Loading payments..."):
    try:
        data = client.get_technicians_annual_payments(year)
    except APIError as e:
        st.error(f"Failed to load payments: {e.detail}")
        st.stop()

shown = filter_by_name(data.technicians, term)

m1, m2, m3 = st.columns(3)
m1.metric("Paid in the Year", format_currency(data.grand_total))
m2.metric("Technicians", len(shown))
m3.metric("Rules", f"≥ {data.config.min_points} pts · day {data.config.cycle_start_day} → {data.config.cycle_end_day}")

if not shown:
    st.info("No technicians found.")
    st.stop()

months = data.month_names
grid = pd.DataFrame(
    [t.monthly_payments + [t.year_total] for t in shown],
    index=pd.Index([t.name for t in shown], name="Technician"),
    columns=months + ["Total"],
)
grid.loc["TOTAL"] = data.monthly_totals + [data.grand_total]

show_points = st.toggle("Show points instead of payments")
if show_points:
    points = pd.DataFrame(
        [t.monthly_points for t in shown],
        index=pd.Index([t.name for t in shown], name="Technician"),
        columns=months,
    )
    st.dataframe(points, use_container_width=True)
else:
    st.dataframe(
        grid.map(lambda v: format_currency(v, decimals=0) if v else "-"),
        use_container_width=True,
    )

st.caption(
    "Qualified technicians per month: "
    + " · ".join(f"{m} {q}" for m, q in zip(months, data.monthly_qualified))
)
