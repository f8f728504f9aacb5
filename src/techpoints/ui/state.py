"""Session-state helpers for the Streamlit UI.

Tokens live in ``st.session_state`` for the lifetime of the browser session.
Every helper takes an optional ``store`` so the logic can run against a plain
dict outside Streamlit.
"""
from __future__ import annotations

from typing import MutableMapping, Optional

import streamlit as st

from techpoints.schemas.auth import LoginResponse, SessionUser

ADMIN_TOKEN = "admin_token"
ADMIN_USER = "admin_user"
TECH_TOKEN = "tech_token"
TECH_USER = "tech_user"


def _store(store: MutableMapping | None) -> MutableMapping:
    return st.session_state if store is None else store


def get_admin_token(store: MutableMapping | None = None) -> Optional[str]:
    return _store(store).get(ADMIN_TOKEN)


def get_admin_user(store: MutableMapping | None = None) -> Optional[SessionUser]:
    return _store(store).get(ADMIN_USER)


def set_admin_session(login: LoginResponse, store: MutableMapping | None = None) -> None:
    s = _store(store)
    s[ADMIN_TOKEN] = login.token
    s[ADMIN_USER] = login.user


def clear_admin_session(store: MutableMapping | None = None) -> None:
    s = _store(store)
    s.pop(ADMIN_TOKEN, None)
    s.pop(ADMIN_USER, None)


def get_tech_token(store: MutableMapping | None = None) -> Optional[str]:
    return _store(store).get(TECH_TOKEN)


def get_tech_user(store: MutableMapping | None = None) -> Optional[SessionUser]:
    return _store(store).get(TECH_USER)


def set_tech_session(login: LoginResponse, store: MutableMapping | None = None) -> None:
    s = _store(store)
    s[TECH_TOKEN] = login.token
    s[TECH_USER] = login.user


def clear_tech_session(store: MutableMapping | None = None) -> None:
    s = _store(store)
    s.pop(TECH_TOKEN, None)
    s.pop(TECH_USER, None)
