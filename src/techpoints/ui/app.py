"""Streamlit entry point: ``streamlit run src/techpoints/ui/app.py``."""
import streamlit as st

from techpoints.ui.state import get_admin_user, get_tech_user
from techpoints.ui.validation import run_all_checks

st.set_page_config(page_title="Technician Points", page_icon="📊", layout="wide")

st.title("Welcome")
st.write("Choose your access profile to continue.")

if "techpoints_preflight" not in st.session_state:
    st.session_state["techpoints_preflight"] = run_all_checks()

for err in st.session_state["techpoints_preflight"]:
    st.sidebar.error(err)

c1, c2 = st.columns(2)

with c1:
    with st.container(border=True):
        st.subheader("📊 Administration")
        st.caption("Dashboard, imports, payments and user management")
        if st.button("Go to dashboard", use_container_width=True):
            st.switch_page("pages/1_dashboard.py")

with c2:
    with st.container(border=True):
        st.subheader("🔧 Technician area")
        st.caption("Your points and estimated payment for the current cycle")
        if st.button("Technician login", use_container_width=True):
            st.switch_page("pages/13_login.py")

admin = get_admin_user()
tech = get_tech_user()
if admin:
    st.sidebar.success(f"Admin: {admin.name}")
if tech:
    st.sidebar.success(f"Technician: {tech.name}")
