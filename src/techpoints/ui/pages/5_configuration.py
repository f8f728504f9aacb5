import streamlit as st
from pydantic import ValidationError

from techpoints.schemas.payment import PaymentConfigUpdate, PaymentRules
from techpoints.services.formatting import format_currency, format_datetime
from techpoints.services.payment_service import filter_by_name, payment_examples
from techpoints.ui.api_client import get_client, APIError
from techpoints.ui.auth import require_admin

st.set_page_config(page_title="Configuration", layout="wide")
require_admin()

st.title("⚙️ Points Configuration")

client = get_client()

# ------------------------------------------------------------------
# 1. Payment configuration
# ------------------------------------------------------------------
st.subheader("💰 Payment Configuration")

try:
    config = client.get_payment_config()
except APIError as e:
    st.error(f"Failed to load payment configuration: {e.detail}")
    config = None

if config is not None:
    with st.form("payment_config"):
        c1, c2, c3 = st.columns(3)
        min_points = c1.number_input("Minimum points", min_value=0, step=1, value=config.min_points)
        base_payment = c2.number_input(
            "Base payment (R$)", min_value=0.0, step=10.0, value=float(config.base_payment),
        )
        point_rate = c3.number_input(
            "Rate per extra point (R$)", min_value=0.0, step=0.1, value=float(config.point_rate),
        )
        d1, d2 = st.columns(2)
        cycle_start_day = d1.number_input(
            "Cycle start day (previous month)", min_value=1, max_value=31, value=config.cycle_start_day,
        )
        cycle_end_day = d2.number_input(
            "Cycle end day (current month)", min_value=1, max_value=31, value=config.cycle_end_day,
        )
        submitted = st.form_submit_button("Save payment configuration")

    if submitted:
        try:
            update = PaymentConfigUpdate(
                min_points=int(min_points),
                base_payment=base_payment,
                point_rate=point_rate,
                cycle_start_day=int(cycle_start_day),
                cycle_end_day=int(cycle_end_day),
            )
            config = client.update_payment_config(update)
            st.toast("Payment configuration updated.", icon="✅")
        except ValidationError as e:
            st.error(f"Invalid configuration: {e.errors()[0]['msg']}")
        except APIError as e:
            st.error(f"Failed to save payment configuration: {e.detail}")

    if config.updated_at:
        st.caption(f"Last updated {format_datetime(config.updated_at)}")

    # Preview with the values currently in the form
    preview = PaymentRules(
        min_points=int(min_points), base_payment=base_payment, point_rate=point_rate,
    )
    st.write("**Examples**")
    cols = st.columns(4)
    for col, ex in zip(cols, payment_examples(preview)):
        col.metric(f"{ex.points} points", format_currency(ex.payment))
    st.caption(
        f"Technicians with at least {preview.min_points} points receive "
        f"{format_currency(preview.base_payment)} + (points - {preview.min_points}) × "
        f"{format_currency(preview.point_rate)}."
    )

st.divider()

# ------------------------------------------------------------------
# 2. Service type points
# ------------------------------------------------------------------
st.subheader("🔧 Service Types")

try:
    types = client.list_service_types()
except APIError as e:
    st.error(f"Failed to load service types: {e.detail}")
    st.stop()

term = st.text_input("Search service type", placeholder="Type to filter...")
shown = filter_by_name(types, term)

if not shown:
    st.info("No service types found.")
else:
    for t in shown:
        with st.container(border=True):
            c1, c2, c3 = st.columns([5, 2, 1])
            c1.write(f"**{t.name}**")
            new_points = c2.number_input(
                "Points", min_value=0, step=1, value=t.points,
                key=f"points_{t.id}", label_visibility="collapsed",
            )
            if c3.button("Save", key=f"save_type_{t.id}", disabled=new_points == t.points):
                try:
                    updated = client.update_service_type_points(t.id, int(new_points))
                    st.toast(f'Points for "{updated.name}" set to {updated.points}.', icon="✅")
                    st.rerun()
                except APIError as e:
                    st.error(f"Failed to save points: {e.detail}")
