import streamlit as st

from techpoints.ui.api_client import get_client, APIError
from techpoints.ui.state import set_tech_session

st.set_page_config(page_title="Technician Area")

st.title("🔧 Technician Area")
st.caption("Access your performance dashboard.")

client = get_client()

with st.form("tech_login"):
    username = st.text_input("Username")
    password = st.text_input("Password", type="password")
    submitted = st.form_submit_button("Sign in", use_container_width=True)

if submitted:
    if not username.strip() or not password.strip():
        st.error("Fill in all fields.")
    else:
        with st.spinner("Signing in..."):
            try:
                login = client.login(username, password)
            except APIError as e:
                st.error(e.detail)
            else:
                set_tech_session(login)
                st.switch_page("pages/14_my_performance.py")

st.caption("Credentials are provided by your administrator.")
