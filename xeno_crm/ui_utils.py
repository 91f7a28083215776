from __future__ import annotations

from typing import Iterable, MutableMapping, Optional

import numpy as np
import pandas as pd
import streamlit as st

from xeno_crm.api_client import BackendClient
from xeno_crm.auth import current_session
from xeno_crm.config import Settings, configure_logging, load_settings
from xeno_crm.models import Order, Segment, Session

CLIENT_KEY = "xeno_backend_client"


def _missing(x) -> bool:
    return x is None or (isinstance(x, float) and np.isnan(x))


def fmt_num(x: float) -> str:
    if _missing(x):
        return "—"
    return f"{x:,.0f}"


def fmt_money(x: float) -> str:
    if _missing(x):
        return "—"
    return f"${x:.2f}"


def fmt_datetime(s: Optional[str]) -> str:
    ts = pd.to_datetime(s, errors="coerce")
    if pd.isna(ts):
        return s or "—"
    return ts.strftime("%Y-%m-%d %H:%M")


def fmt_date(s: Optional[str]) -> str:
    ts = pd.to_datetime(s, errors="coerce")
    if pd.isna(ts):
        return s or "—"
    return ts.strftime("%Y-%m-%d")


def orders_frame(orders: Iterable[Order]) -> pd.DataFrame:
    rows = [
        {
            "Order ID": o.id,
            "Customer": o.customer.name,
            "Order Date": fmt_date(o.order_date),
            "Revenue": fmt_money(o.revenue),
            "Cost": fmt_money(o.cost),
            "Profit": fmt_money(o.profit),
        }
        for o in orders
    ]
    return pd.DataFrame(rows, columns=["Order ID", "Customer", "Order Date", "Revenue", "Cost", "Profit"])


def segments_frame(segments: Iterable[Segment]) -> pd.DataFrame:
    return pd.DataFrame(
        [s.to_row() for s in segments],
        columns=["id", "name", "conditions", "customers", "createdAt", "updatedAt"],
    )


# Per-page error slot: one message, replaced by the next error, cleared on success.

def set_error(state: MutableMapping, page: str, message: Optional[str]) -> None:
    state[f"{page}_error"] = message


def get_error(state: MutableMapping, page: str) -> Optional[str]:
    return state.get(f"{page}_error")


def show_error(page: str) -> None:
    msg = get_error(st.session_state, page)
    if msg:
        st.error(f"**Error**\n\n{msg}")


def backend_client(settings: Settings) -> BackendClient:
    client = st.session_state.get(CLIENT_KEY)
    if client is None:
        client = BackendClient(settings.backend_url, timeout=settings.timeout_seconds)
        st.session_state[CLIENT_KEY] = client
    return client


@st.cache_resource(show_spinner=False)
def _settings() -> Settings:
    return load_settings()


def page_setup(title: str) -> Settings:
    """Common prologue for every screen: settings, logging, title, sidebar badge."""
    settings = _settings()
    configure_logging(settings.log_level)
    st.title(title)
    session_badge(current_session(st.session_state))
    return settings


def session_badge(session: Optional[Session]) -> None:
    if session is None:
        st.sidebar.caption("Not signed in. Use the Login page to sign in.")
    else:
        st.sidebar.markdown(f"Signed in as **{session.name}**")
        st.sidebar.caption(session.email)
