from __future__ import annotations

import logging
from typing import Any, List, Optional

import requests

from xeno_crm.conditions import ParseError
from xeno_crm.models import (
    Campaign,
    CampaignDraft,
    Customer,
    Message,
    Order,
    OrderDraft,
    Segment,
    SegmentRef,
)

logger = logging.getLogger(__name__)


class BackendError(RuntimeError):
    """A backend call failed: transport, HTTP status, body shape, or a reported failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BackendRejected(BackendError):
    """The backend answered but reported a business failure with its own message."""


def _unexpected(what: str, e: Exception) -> BackendError:
    return BackendError(f"Unexpected {what} response format: {e}")


class BackendClient:
    """Thin wrapper over the Xeno CRM REST API."""

    def __init__(self, base_url: str, timeout: float = 10, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = session or requests.Session()

    def _request(self, method: str, path: str, body: Optional[dict] = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            r = self.http.request(method, url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise BackendError(f"{method} {path} failed: {e}") from e

        if not r.ok:
            raise BackendError(f"{method} {path} returned HTTP {r.status_code}", status_code=r.status_code)
        try:
            return r.json()
        except ValueError as e:
            raise BackendError(f"{method} {path} returned a non-JSON body", status_code=r.status_code) from e

    # Segments

    def list_segments(self) -> List[Segment]:
        data = self._request("GET", "/audience/all")
        try:
            return [Segment.from_record(s) for s in data["segments"]]
        except ParseError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise _unexpected("segment list", e) from e

    def list_segment_refs(self) -> List[SegmentRef]:
        data = self._request("GET", "/audience/all")
        try:
            return [SegmentRef.from_record(s) for s in data["segments"]]
        except (KeyError, TypeError, ValueError) as e:
            raise _unexpected("segment list", e) from e

    def create_segment(self, segment: Segment) -> dict:
        return self._request("POST", "/audience", segment.to_payload())

    def estimate_audience_size(self, segment: Segment) -> int:
        data = self._request("POST", "/audience/size", segment.to_payload())
        try:
            return int(data["size"]["audienceSize"])
        except (KeyError, TypeError, ValueError) as e:
            raise _unexpected("audience size", e) from e

    # Campaigns

    def list_campaigns(self, segment_id: int) -> List[Campaign]:
        data = self._request("GET", f"/campaign/{segment_id}")
        try:
            return [Campaign.from_record(c) for c in data["campaigns"]]
        except (KeyError, TypeError, ValueError) as e:
            raise _unexpected("campaign list", e) from e

    def create_campaign(self, draft: CampaignDraft) -> dict:
        return self._request("POST", "/campaign", draft.to_payload())

    # Orders

    def list_orders(self, customer_id: int) -> List[Order]:
        data = self._request("GET", f"/orders/customer/{customer_id}")
        if isinstance(data, dict) and "error" in data and "message" in data:
            raise BackendRejected(data["message"] or "An unknown error occurred.")
        if not isinstance(data, list):
            raise BackendError("Unexpected response format")
        try:
            return [Order.from_record(o) for o in data]
        except (KeyError, TypeError, ValueError) as e:
            raise _unexpected("order list", e) from e

    def create_order(self, draft: OrderDraft) -> dict:
        return self._request("POST", "/orders", draft.to_payload())

    # Customers

    def list_messages(self, customer_id: int) -> List[Message]:
        data = self._request("GET", f"/customers/messages/{customer_id}")
        if not isinstance(data, dict):
            raise BackendError("Unexpected response format")
        if data.get("error") or data.get("data") is None:
            raise BackendRejected(data.get("message") or "No messages found for this customer.")
        try:
            return [Message.from_record(m) for m in data["data"]]
        except (KeyError, TypeError, ValueError) as e:
            raise _unexpected("message list", e) from e

    def register_customer(self, email: str) -> Customer:
        data = self._request("POST", "/customers", {"email": email})
        if not isinstance(data, dict) or not data.get("success") or not data.get("data"):
            message = data.get("message") if isinstance(data, dict) else None
            raise BackendRejected(message or "Backend rejected sign-in")
        try:
            return Customer.from_record(data["data"])
        except (KeyError, TypeError, ValueError) as e:
            raise _unexpected("customer", e) from e
