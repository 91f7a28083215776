from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from xeno_crm.api_client import BackendClient, BackendError, BackendRejected
from xeno_crm.conditions import ParseError
from xeno_crm.models import CampaignDraft, OrderDraft, Segment, Session, ValidationError

logger = logging.getLogger(__name__)

NOT_SIGNED_IN = "User not authenticated or customer ID not found."


@dataclass(frozen=True)
class Result:
    """Outcome of a page action: either ``data`` or a single user-facing ``error``."""

    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def load_segments(client: BackendClient) -> Result:
    # One malformed record fails the whole list.
    try:
        return Result(data=client.list_segments())
    except (BackendError, ParseError):
        logger.exception("Error fetching segments")
        return Result(error="Failed to fetch existing segments. Please try again.")


def create_segment(client: BackendClient, segment: Segment) -> Result:
    try:
        segment.validate()
    except ValidationError as e:
        return Result(error=str(e))
    try:
        return Result(data=client.create_segment(segment))
    except BackendError:
        logger.exception("Error creating segment")
        return Result(error="Failed to create segment. Please try again.")


def estimate_audience_size(client: BackendClient, segment: Segment) -> Result:
    try:
        return Result(data=client.estimate_audience_size(segment))
    except BackendError:
        logger.exception("Error calculating audience size")
        return Result(error="Failed to calculate audience size. Please try again.")


def load_campaign_segments(client: BackendClient) -> Result:
    try:
        return Result(data=client.list_segment_refs())
    except BackendError:
        logger.exception("Error fetching audience segments")
        return Result(error="Failed to fetch audience segments. Please try again.")


def load_campaigns(client: BackendClient, segment_id: int) -> Result:
    try:
        return Result(data=client.list_campaigns(segment_id))
    except BackendError:
        logger.exception("Error fetching campaigns")
        return Result(error="Failed to fetch campaigns. Please try again.")


def create_campaign(client: BackendClient, draft: CampaignDraft) -> Result:
    try:
        draft.validate()
    except ValidationError as e:
        logger.warning("Campaign rejected: %s", e)
        return Result(error=str(e))
    try:
        return Result(data=client.create_campaign(draft))
    except BackendError:
        logger.exception("Error creating campaign")
        return Result(error="Failed to create campaign. Please try again.")


def load_orders(client: BackendClient, session: Optional[Session]) -> Result:
    if session is None:
        return Result(error=NOT_SIGNED_IN)
    try:
        orders = client.list_orders(session.customer_id)
    except BackendRejected as e:
        logger.warning("Error response from API: %s", e)
        return Result(data=[], error=str(e))
    except BackendError:
        logger.exception("Error fetching orders")
        return Result(data=[], error="An error occurred while fetching orders. Please try again later.")
    logger.debug("Fetched %d orders for customer %s", len(orders), session.customer_id)
    return Result(data=orders)


def create_order(client: BackendClient, session: Optional[Session], order_date: str, revenue: float, cost: float) -> Result:
    if session is None:
        return Result(error="You need to be logged in to create an order.")
    draft = OrderDraft(customer_id=session.customer_id, order_date=order_date, revenue=revenue, cost=cost)
    try:
        draft.validate()
    except ValidationError as e:
        return Result(error=str(e))
    try:
        return Result(data=client.create_order(draft))
    except BackendError:
        logger.exception("Error creating order")
        return Result(error="An error occurred while creating the order. Please try again.")


def load_messages(client: BackendClient, session: Optional[Session]) -> Result:
    if session is None:
        return Result(error=NOT_SIGNED_IN)
    try:
        messages = client.list_messages(session.customer_id)
    except BackendRejected as e:
        logger.warning("Error response from API: %s", e)
        return Result(data=[], error=str(e))
    except BackendError:
        logger.exception("Error fetching messages")
        return Result(data=[], error="Failed to fetch messages. Please try again later.")
    return Result(data=messages)
