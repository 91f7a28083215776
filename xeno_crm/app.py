from __future__ import annotations

import sys
from pathlib import Path
import streamlit as st

# Make imports stable regardless of where Streamlit is launched
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from xeno_crm.ui_utils import page_setup  # noqa: E402


st.set_page_config(
    page_title="Xeno CRM",
    layout="wide",
)

page_setup("Xeno CRM.")
st.caption("Discover the perfect campaign.")

st.markdown(
    """
- **Audience:** build segments from spending, visit and recency conditions
- **Campaign:** schedule personalised messages for a segment
- **Orders:** review and record your orders
- **Messages:** see what was sent to you and whether it arrived
"""
)

st.page_link("pages/01_audience.py", label="Explore Audience")

st.sidebar.markdown("---")
st.sidebar.write("Run locally:")
st.sidebar.code("streamlit run xeno_crm/app.py", language="bash")
