import streamlit as st

from techpoints.services.formatting import format_datetime
from techpoints.ui.api_client import get_client, APIError
from techpoints.ui.auth import require_admin

st.set_page_config(page_title="Technician Management", layout="wide")
require_admin()

st.title("🔑 Technician Management")
st.caption("Generate login credentials for the technician area.")

client = get_client()

# Credentials are shown once, right after generation.
creds = st.session_state.pop("generated_credentials", None)
if creds is not None:
    with st.container(border=True):
        st.success(creds.message or "Credentials generated.")
        st.write("Username")
        st.code(creds.username, language=None)
        st.write("Password")
        st.code(creds.password, language=None)
        st.warning("Save the password now: it will not be shown again.")

if st.button("🔄 Refresh list"):
    st.rerun()

try:
    technicians = client.list_technicians()
except APIError as e:
    st.error(f"Failed to load technicians: {e.detail}")
    st.stop()

if not technicians:
    st.info("No technicians found.")
    st.stop()

with_access = sum(1 for t in technicians if t.has_credentials)
st.write(f"{with_access} of {len(technicians)} technicians have access.")

for t in technicians:
    with st.container(border=True):
        c1, c2, c3, c4 = st.columns([3, 2, 2, 2])
        c1.write(f"**{t.name}**")
        c2.write(f"@{t.username}" if t.username else "-")
        c3.caption(f"Last login: {format_datetime(t.last_login)}")
        label = "Regenerate" if t.has_credentials else "Generate access"
        if c4.button(label, key=f"gen_{t.id}"):
            try:
                st.session_state["generated_credentials"] = client.generate_credentials(t.id)
                st.rerun()
            except APIError as e:
                st.error(f"Failed to generate credentials: {e.detail}")
