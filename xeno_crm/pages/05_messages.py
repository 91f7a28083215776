from __future__ import annotations

import streamlit as st

from xeno_crm import data_access
from xeno_crm.auth import current_session
from xeno_crm.ui_utils import backend_client, page_setup

settings = page_setup("Your Messages")
client = backend_client(settings)

with st.spinner("Loading messages..."):
    res = data_access.load_messages(client, current_session(st.session_state))

if not res.ok:
    st.error(f"**Error**\n\n{res.error}")
    st.stop()

if not res.data:
    st.caption("No messages found.")
    st.stop()

for message in res.data:
    with st.container(border=True):
        icon = ":material/check_circle:" if message.delivered else ":material/cancel:"
        st.markdown(f"**Message #{message.id}** {icon}")
        st.write(message.message)
        st.caption(f"Sent at: {message.sent_at}")
        st.caption(f"Status: {message.status}")
        if message.error_message:
            st.markdown(f":red[Error: {message.error_message}]")
