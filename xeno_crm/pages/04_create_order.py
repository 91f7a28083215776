from __future__ import annotations

import streamlit as st

from xeno_crm import data_access
from xeno_crm.auth import current_session
from xeno_crm.ui_utils import backend_client, page_setup

settings = page_setup("Create New Order")
client = backend_client(settings)

session = current_session(st.session_state)
if session is None:
    st.info("You need to be logged in to create an order.")
    st.stop()

with st.form("create_order"):
    order_date = st.date_input("Order Date", value=None)
    revenue = st.number_input("Revenue", min_value=0.0, step=0.01, format="%.2f")
    cost = st.number_input("Cost", min_value=0.0, step=0.01, format="%.2f")
    submitted = st.form_submit_button("Create Order", type="primary", use_container_width=True)

if submitted:
    with st.spinner("Creating..."):
        res = data_access.create_order(
            client,
            session,
            order_date=order_date.isoformat() if order_date else "",
            revenue=float(revenue),
            cost=float(cost),
        )
    if res.ok:
        st.switch_page("pages/03_orders.py")
    st.error(f"**Error**\n\n{res.error}")
