from __future__ import annotations

import streamlit as st

from xeno_crm import data_access
from xeno_crm.auth import current_session
from xeno_crm.ui_utils import backend_client, orders_frame, page_setup

settings = page_setup("Your Orders")
client = backend_client(settings)

st.page_link("pages/04_create_order.py", label="Create Order", icon=":material/add:")

with st.spinner("Loading orders..."):
    res = data_access.load_orders(client, current_session(st.session_state))

if not res.ok:
    st.error(f"**Error**\n\n{res.error}")
    st.stop()

if not res.data:
    st.caption("No orders found for this customer.")
    st.stop()

st.dataframe(orders_frame(res.data), use_container_width=True, hide_index=True)
