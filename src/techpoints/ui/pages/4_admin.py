import streamlit as st

from techpoints.config import settings
from techpoints.schemas.services import ImportStatus
from techpoints.services.formatting import format_datetime, format_int
from techpoints.ui.api_client import get_client, APIError
from techpoints.ui.auth import require_admin

st.set_page_config(page_title="Management Panel", layout="wide")
require_admin()

st.title("Management Panel")

client = get_client()

c1, c2, c3 = st.columns(3)
c1.page_link("pages/1_dashboard.py", label="View charts", icon="📊")
c3.page_link("pages/3_import.py", label="New import", icon="➕")

# --- Cleanup ---
with c2.popover("🗑️ Clean up errors"):
    st.warning("This deletes every technician with ZERO points.")
    if st.button("Delete technicians without points", type="primary"):
        try:
            result = client.run_cleanup()
            st.toast(f"Cleanup finished: {result.count} users removed", icon="✅")
            st.rerun()
        except APIError as e:
            st.error(f"Cleanup failed: {e.detail}")

try:
    data = client.get_admin_data()
except APIError as e:
    st.error(f"Failed to load data: {e.detail}")
    st.stop()

# --- Import history ---
st.subheader("📂 Import History")

if not data.history:
    st.info("No imports yet.")
else:
    for h in data.history:
        with st.container(border=True):
            cols = st.columns([2, 3, 2, 2, 2])
            cols[0].write(format_datetime(h.created_at))
            cols[1].write(h.filename)
            cols[2].write(f"{format_int(h.row_count)} services")
            if h.status == ImportStatus.COMPLETED:
                cols[3].success(h.status)
                if cols[4].button("↺ Undo", key=f"admin_revert_{h.id}"):
                    st.session_state["pending_revert"] = h.id
            else:
                cols[3].error(h.status)
                cols[4].caption("Cancelled")

            if st.session_state.get("pending_revert") == h.id:
                st.warning(f"Undoing this import deletes {h.row_count} points. Confirm?")
                y, n = st.columns(2)
                if y.button("Yes, undo", key=f"admin_revert_yes_{h.id}"):
                    st.session_state.pop("pending_revert", None)
                    try:
                        client.revert_import(h.id)
                        st.rerun()
                    except APIError as e:
                        st.error(f"Failed to revert import: {e.detail}")
                if n.button("No", key=f"admin_revert_no_{h.id}"):
                    st.session_state.pop("pending_revert", None)
                    st.rerun()

st.divider()

# --- Technicians and score links ---
st.subheader("👷 Technicians")

base = settings.APP_BASE_URL.rstrip("/")
rows = []
for u in data.users:
    points = sum(s.service_type.points for s in u.services)
    rows.append({
        "Technician": u.name,
        "Services": len(u.services),
        "Points": points,
        "Score link": f"{base}/score?user_id={u.id}",
    })

if not rows:
    st.info("No technicians found.")
else:
    st.dataframe(
        rows,
        use_container_width=True,
        column_config={"Score link": st.column_config.LinkColumn("Score link")},
    )
