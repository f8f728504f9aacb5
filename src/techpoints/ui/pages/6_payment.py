import streamlit as st

from techpoints.services.formatting import format_currency, format_date, format_int
from techpoints.services.payment_service import (
    current_cycle, filter_by_name, payment_totals, technician_payments,
)
from techpoints.ui.api_client import get_client, APIError
from techpoints.ui.auth import require_admin

st.set_page_config(page_title="Payment Calculation", layout="wide")
require_admin()

st.title("💸 Payment Calculation")

client = get_client()

try:
    config = client.get_payment_config()
except APIError as e:
    st.error(f"Failed to load payment configuration: {e.detail}")
    st.stop()

cycle_start, cycle_end = current_cycle(config)

left, right = st.columns([2, 3])

with left:
    st.subheader("📅 Calculation Period")
    start = st.date_input("Start", value=cycle_start)
    end = st.date_input("End", value=cycle_end)
    st.caption(f"Current cycle: {format_date(cycle_start)} to {format_date(cycle_end)}")

with right:
    st.subheader("Payment Rules")
    r1, r2, r3 = st.columns(3)
    r1.metric("Minimum", f"{config.min_points} pts")
    r2.metric("Base", format_currency(config.base_payment))
    r3.metric("Per point", format_currency(config.point_rate))

with st.spinner("Calculating..."):
    try:
        data = client.get_dashboard_data(start.isoformat(), end.isoformat())
    except APIError as e:
        st.error(f"Failed to load services: {e.detail}")
        st.stop()

rows = technician_payments(data.services, config)
term = st.text_input("Search technician", placeholder="Name...")
shown = filter_by_name(rows, term)
totals = payment_totals(shown)

st.divider()

c1, c2, c3, c4 = st.columns(4)
c1.metric("Total to Pay", format_currency(totals.total_payment))
c2.metric("Qualified", f"{totals.qualified_count}/{len(shown)}")
c3.metric("Total Points", format_int(totals.total_points))
c4.metric("Services", format_int(totals.total_services))

if not shown:
    st.info("No technicians found for this period.")
else:
    st.dataframe(
        [
            {
                "Technician": r.name,
                "Services": r.service_count,
                "Points": r.total_points,
                "Points above minimum": r.points_above_min,
                "Payment": format_currency(r.payment),
                "Status": "✅ Qualified" if r.qualified else "❌ Below minimum",
            }
            for r in shown
        ],
        use_container_width=True,
        hide_index=True,
    )

st.page_link("pages/8_annual_summary.py", label="Annual summary", icon="📅")
