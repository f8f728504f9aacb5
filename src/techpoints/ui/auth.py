"""Page guards for the admin and technician areas."""
from __future__ import annotations

from typing import MutableMapping

import httpx
import streamlit as st

from techpoints.logging import logger
from techpoints.ui.api_client import APIError, TechPointsClient, get_client
from techpoints.ui.state import (
    clear_admin_session, clear_tech_session, get_admin_token, get_tech_token, get_tech_user,
)

ADMIN_LOGIN_PAGE = "pages/12_admin_login.py"
TECH_LOGIN_PAGE = "pages/13_login.py"


def check_admin_session(client: TechPointsClient, store: MutableMapping | None = None) -> bool:
    """True when the stored admin token is accepted by the backend.

    A rejected token, a failed verification call or an unreadable response
    clears the admin session.
    """
    token = get_admin_token(store)
    if not token:
        return False
    try:
        result = client.verify_admin_token(token)
    except (APIError, httpx.HTTPError, ValueError) as exc:
        logger.warning("Admin token verification failed: %s", exc)
        result = None
    if result is None or not result.valid:
        clear_admin_session(store)
        return False
    return True


def require_admin() -> None:
    """Stop the page and go to the admin login unless the session is valid."""
    with st.spinner("Checking authentication..."):
        ok = check_admin_session(get_client())
    if not ok:
        st.switch_page(ADMIN_LOGIN_PAGE)
        st.stop()


def has_tech_session(store: MutableMapping | None = None) -> bool:
    return bool(get_tech_token(store)) and get_tech_user(store) is not None


def is_token_error(exc: APIError) -> bool:
    return "token" in exc.detail.lower() or exc.status_code == 401


def require_technician() -> None:
    if not has_tech_session():
        st.switch_page(TECH_LOGIN_PAGE)
        st.stop()


def logout_technician() -> None:
    clear_tech_session()
    st.switch_page(TECH_LOGIN_PAGE)
