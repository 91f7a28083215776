from __future__ import annotations

import streamlit as st

from xeno_crm import data_access
from xeno_crm.conditions import COMBINATORS, FIELD_OPTIONS, allowed_operators, format_condition, operator_label
from xeno_crm.models import Segment
from xeno_crm.ui_utils import backend_client, fmt_num, page_setup, segments_frame, set_error, show_error

PAGE = "audience"

settings = page_setup("Audience Segments")
client = backend_client(settings)
state = st.session_state

if "segment_draft" not in state:
    state["segment_draft"] = Segment.draft()
    state["audience_size"] = None


def _draft() -> Segment:
    return state["segment_draft"]


def _refresh_segments() -> None:
    res = data_access.load_segments(client)
    if res.ok:
        state["segments"] = res.data
    else:
        set_error(state, PAGE, res.error)


def _reset_draft() -> None:
    state["segment_draft"] = Segment.draft()
    state["audience_size"] = None
    for k in [k for k in state.keys() if str(k).startswith(("cond_", "seg_"))]:
        del state[k]


def _sync_draft() -> None:
    # Button callbacks run before the body re-reads the widgets.
    d = _draft()
    d.name = state.get("seg_name", d.name)
    d.conditions.set_combinator(state.get("seg_combinator", d.conditions.operator))
    for i, cond in enumerate(d.conditions.conditions):
        op = state.get(f"cond_op_{i}", cond.operator)
        if op not in allowed_operators(cond.field):
            op = cond.operator
        d.conditions.update_condition(i, operator=op, value=state.get(f"cond_value_{i}", cond.value))


def _on_field_change(i: int) -> None:
    cond = _draft().conditions.update_condition(i, field=state[f"cond_field_{i}"])
    state[f"cond_op_{i}"] = cond.operator
    state[f"cond_value_{i}"] = cond.value


def _on_add_condition() -> None:
    _draft().conditions.add_condition()


def _on_calculate() -> None:
    _sync_draft()
    res = data_access.estimate_audience_size(client, _draft())
    if res.ok:
        state["audience_size"] = res.data
    set_error(state, PAGE, res.error)


def _on_create() -> None:
    _sync_draft()
    res = data_access.create_segment(client, _draft())
    if not res.ok:
        set_error(state, PAGE, res.error)
        return
    _reset_draft()
    set_error(state, PAGE, None)
    _refresh_segments()


if "segments" not in state:
    state["segments"] = []
    _refresh_segments()

show_error(PAGE)

draft = _draft()
group = draft.conditions

with st.container(border=True):
    st.subheader("Create New Segment")

    state.setdefault("seg_name", draft.name)
    state.setdefault("seg_combinator", group.operator)
    draft.name = st.text_input("Segment Name", key="seg_name", placeholder="Segment Name")
    group.set_combinator(st.selectbox("Match", COMBINATORS, key="seg_combinator"))

    for i, cond in enumerate(group.conditions):
        state.setdefault(f"cond_field_{i}", cond.field)
        state.setdefault(f"cond_op_{i}", cond.operator)
        state.setdefault(f"cond_value_{i}", cond.value)

        c1, c2, c3 = st.columns([2, 2, 3])
        c1.selectbox(
            "Field",
            list(FIELD_OPTIONS),
            key=f"cond_field_{i}",
            format_func=FIELD_OPTIONS.get,
            on_change=_on_field_change,
            args=(i,),
        )
        op = c2.selectbox(
            "Operator",
            allowed_operators(cond.field),
            key=f"cond_op_{i}",
            format_func=lambda o, f=cond.field: operator_label(f, o),
        )
        value = c3.text_input("Value", key=f"cond_value_{i}", placeholder="Value")
        group.update_condition(i, operator=op, value=value)

    st.button("Add Condition", on_click=_on_add_condition)
    st.button("Calculate Audience Size", on_click=_on_calculate, use_container_width=True)

    if state["audience_size"] is not None:
        st.markdown(f"**Estimated Audience Size: {fmt_num(state['audience_size'])}**")

    st.button("Create Segment", type="primary", on_click=_on_create, use_container_width=True)

head, refresh = st.columns([4, 1])
head.subheader("Existing Segments")
refresh.button("Refresh", on_click=_refresh_segments)

segments = state["segments"]
for segment in segments:
    with st.container(border=True):
        c1, c2 = st.columns([4, 1])
        c1.markdown(f"#### {segment.name}")
        c2.markdown(f":material/group: {len(segment.customers)} customers")

        st.markdown(f"**Conditions ({segment.conditions.operator})**")
        st.markdown("\n".join(f"- {format_condition(c)}" for c in segment.conditions.conditions))

        if segment.customers:
            with st.expander("Show Customers"):
                for customer in segment.customers:
                    st.write(f"{customer.name} ({customer.email})")

if segments:
    st.download_button(
        "Download segments (CSV)",
        segments_frame(segments).to_csv(index=False),
        file_name="segments.csv",
        mime="text/csv",
    )
