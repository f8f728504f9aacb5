import streamlit as st
from pydantic import ValidationError

from techpoints.schemas.auth import AdminUserCreate
from techpoints.services.formatting import format_datetime
from techpoints.ui.api_client import get_client, APIError
from techpoints.ui.auth import require_admin
from techpoints.ui.state import get_admin_token, get_admin_user

st.set_page_config(page_title="Administrators", layout="wide")
require_admin()

st.title("👥 Administrators")

client = get_client()
token = get_admin_token()
me = get_admin_user()


def _first_error(exc: ValidationError) -> str:
    return exc.errors()[0]["msg"].removeprefix("Value error, ")


# --- Create ---
with st.expander("➕ New administrator", expanded=False):
    with st.form("create_admin", clear_on_submit=True):
        name = st.text_input("Name")
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        confirm = st.text_input("Confirm password", type="password")
        submitted = st.form_submit_button("Create")

    if submitted:
        if not name or not username or not password:
            st.error("Fill in all fields.")
        elif password != confirm:
            st.error("Passwords do not match.")
        else:
            try:
                client.create_admin_user(
                    token, AdminUserCreate(name=name, username=username, password=password),
                )
                st.toast("Administrator created.", icon="✅")
                st.rerun()
            except ValidationError as e:
                st.error(_first_error(e))
            except APIError as e:
                st.error(f"Failed to create administrator: {e.detail}")

st.divider()

# --- List ---
try:
    admins = client.list_admin_users(token)
except APIError as e:
    st.error(f"Failed to load administrators: {e.detail}")
    st.stop()

if not admins:
    st.info("No administrators found.")

for a in admins:
    with st.container(border=True):
        c1, c2, c3, c4 = st.columns([3, 2, 2, 3])
        c1.write(f"**{a.name}**")
        c2.write(f"@{a.username}")
        c3.caption(f"Last login: {format_datetime(a.last_login)}")

        is_me = me is not None and me.id == a.id
        with c4.popover("🔑 Reset password"):
            new_password = st.text_input("New password", type="password", key=f"pw_{a.id}")
            new_confirm = st.text_input("Confirm", type="password", key=f"pw2_{a.id}")
            if st.button("Save", key=f"reset_{a.id}"):
                if new_password != new_confirm:
                    st.error("Passwords do not match.")
                else:
                    try:
                        client.reset_admin_password(token, a.id, new_password)
                        st.success("Password updated.")
                    except ValidationError as e:
                        st.error(_first_error(e))
                    except APIError as e:
                        st.error(f"Failed to reset password: {e.detail}")

        with c4.popover("🗑️ Remove", disabled=is_me):
            st.warning(f"Remove administrator **{a.name}**?")
            if st.button("Yes, remove", key=f"delete_{a.id}"):
                try:
                    client.delete_admin_user(token, a.id)
                    st.toast("Administrator removed.", icon="✅")
                    st.rerun()
                except APIError as e:
                    st.error(f"Failed to remove administrator: {e.detail}")
