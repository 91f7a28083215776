from __future__ import annotations

import streamlit as st

from xeno_crm.auth import clear_session, current_session, sign_in, store_session
from xeno_crm.ui_utils import backend_client, page_setup

settings = page_setup("Welcome back")
client = backend_client(settings)
state = st.session_state


def _on_sign_out() -> None:
    clear_session(state)
    st.logout()


session = current_session(state)

if session is not None:
    st.success(f"Signed in as {session.name} ({session.email})")
    st.button("Sign Out", on_click=_on_sign_out)
    st.stop()

if not st.user.is_logged_in:
    st.caption("Sign in to your account")
    st.button(
        f"Sign in with {settings.auth_provider.title()}",
        type="primary",
        on_click=st.login,
        args=(settings.auth_provider,),
    )
    st.stop()

# The identity provider has signed the user in; link them to a backend customer.
session = sign_in(client, st.user.get("email"), st.user.get("name"))
if session is None:
    st.error("**Error**\n\nSign-in was rejected. Please try again with another account.")
    st.button("Sign Out", on_click=_on_sign_out)
    st.stop()

store_session(state, session)
st.switch_page("app.py")
