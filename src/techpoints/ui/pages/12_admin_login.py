import streamlit as st

from techpoints.ui.api_client import get_client, APIError
from techpoints.ui.state import set_admin_session

st.set_page_config(page_title="Admin Login")

st.title("🛡️ Administration")
st.caption("Sign in to the management panel.")

client = get_client()

with st.form("admin_login"):
    username = st.text_input("Username")
    password = st.text_input("Password", type="password")
    submitted = st.form_submit_button("Sign in", use_container_width=True)

if submitted:
    if not username.strip() or not password.strip():
        st.error("Fill in all fields.")
    else:
        with st.spinner("Signing in..."):
            try:
                login = client.admin_login(username, password)
            except APIError as e:
                st.error(e.detail)
            else:
                set_admin_session(login)
                st.switch_page("pages/1_dashboard.py")

st.page_link("app.py", label="Back to start", icon="⬅️")
