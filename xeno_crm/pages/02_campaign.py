from __future__ import annotations

from datetime import datetime, time

import streamlit as st

from xeno_crm import data_access
from xeno_crm.models import CampaignDraft
from xeno_crm.ui_utils import backend_client, fmt_datetime, page_setup, set_error, show_error

PAGE = "campaign"

settings = page_setup("Campaign Management")
client = backend_client(settings)
state = st.session_state


def _load_campaigns(segment_id: int) -> None:
    res = data_access.load_campaigns(client, segment_id)
    if res.ok:
        state["campaigns"] = res.data
    else:
        set_error(state, PAGE, res.error)


def _on_segment_change() -> None:
    seg = state.get("camp_segment")
    if seg is not None:
        _load_campaigns(seg.id)


def _on_create() -> None:
    seg = state.get("camp_segment")
    day = state.get("camp_date")
    at = datetime.combine(day, state.get("camp_time") or time(0, 0)) if day else None
    draft = CampaignDraft(
        audience_segment_id=seg.id if seg else 0,
        message=state.get("camp_message", ""),
        scheduled_at=at.isoformat(timespec="minutes") if at else "",
    )
    res = data_access.create_campaign(client, draft)
    if not res.ok:
        set_error(state, PAGE, res.error)
        return
    set_error(state, PAGE, None)
    _load_campaigns(draft.audience_segment_id)
    state["camp_message"] = ""
    st.toast("Campaign created successfully.")


if "campaign_segments" not in state:
    state["campaigns"] = []
    res = data_access.load_campaign_segments(client)
    state["campaign_segments"] = res.data or []
    if not res.ok:
        set_error(state, PAGE, res.error)

show_error(PAGE)

segments = state["campaign_segments"]

with st.container(border=True):
    st.subheader("Create New Campaign")
    st.selectbox(
        "Audience segment",
        segments,
        key="camp_segment",
        index=None,
        placeholder="Select audience segment",
        format_func=lambda s: s.name,
        on_change=_on_segment_change,
    )
    st.text_area("Campaign message", key="camp_message", placeholder="Hi [Name], ...")
    c1, c2 = st.columns(2)
    c1.date_input("Scheduled date", key="camp_date", value=None)
    c2.time_input("Scheduled time", key="camp_time", value=None)
    st.button("Create Campaign", type="primary", on_click=_on_create, use_container_width=True)

st.subheader("Existing Campaigns")
for segment in segments:
    st.markdown(f"#### {segment.name} Campaigns")
    mine = [c for c in state["campaigns"] if c.audience_segment_id == segment.id]
    if not mine:
        st.caption("No campaigns for this segment yet.")
        continue
    for campaign in mine:
        with st.container(border=True):
            st.markdown(f"**Campaign for {campaign.audience_segment.name}**")
            st.write(campaign.message)
            st.caption(f"Scheduled for: {fmt_datetime(campaign.scheduled_at)}")
            if campaign.sent_at:
                st.caption(f"Sent at: {fmt_datetime(campaign.sent_at)}")
