from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from xeno_crm.conditions import ConditionGroup, deserialize, group_from_dict, serialize

NAME_PLACEHOLDER = "[Name]"


class ValidationError(ValueError):
    """Form input rejected before anything is sent to the backend."""


@dataclass(frozen=True)
class Session:
    customer_id: int
    name: str
    email: str


@dataclass(frozen=True)
class Customer:
    id: int
    name: str
    email: str
    total_spending: str = "0"
    created_at: str = ""
    updated_at: str = ""

    @staticmethod
    def from_record(r: dict) -> "Customer":
        return Customer(
            id=int(r["id"]),
            name=r.get("name") or "",
            email=r.get("email") or "",
            total_spending=str(r.get("totalSpending", "0")),
            created_at=r.get("createdAt", ""),
            updated_at=r.get("updatedAt", ""),
        )


@dataclass
class Segment:
    id: int = 0
    name: str = ""
    conditions: ConditionGroup = field(default_factory=ConditionGroup)
    created_at: str = ""
    updated_at: str = ""
    customers: List[Customer] = field(default_factory=list)

    @staticmethod
    def draft() -> "Segment":
        return Segment()

    def validate(self) -> None:
        if not self.name.strip():
            raise ValidationError("Segment name is required.")

    @staticmethod
    def from_record(r: dict) -> "Segment":
        raw = r["conditions"]
        # Listings carry conditions as a JSON string; tolerate an already-decoded object.
        group = deserialize(raw) if isinstance(raw, str) else group_from_dict(raw)
        return Segment(
            id=int(r["id"]),
            name=r["name"],
            conditions=group,
            created_at=r.get("createdAt", ""),
            updated_at=r.get("updatedAt", ""),
            customers=[Customer.from_record(c) for c in r.get("customers") or []],
        )

    def to_payload(self) -> dict:
        """Body for POST /audience and POST /audience/size."""
        return {
            "name": self.name,
            "conditions": self.conditions.to_dict(),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "customers": [],
        }

    def to_row(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "conditions": serialize(self.conditions),
            "customers": len(self.customers),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class SegmentRef:
    id: int
    name: str
    conditions: str = ""

    @staticmethod
    def from_record(r: dict) -> "SegmentRef":
        return SegmentRef(id=int(r["id"]), name=r["name"], conditions=r.get("conditions") or "")


@dataclass(frozen=True)
class Campaign:
    id: int
    audience_segment_id: int
    message: str
    scheduled_at: str
    sent_at: Optional[str]
    audience_segment: SegmentRef

    @staticmethod
    def from_record(r: dict) -> "Campaign":
        return Campaign(
            id=int(r["id"]),
            audience_segment_id=int(r["audienceSegmentId"]),
            message=r.get("message", ""),
            scheduled_at=r.get("scheduledAt", ""),
            sent_at=r.get("sentAt"),
            audience_segment=SegmentRef.from_record(r["audienceSegment"]),
        )


@dataclass
class CampaignDraft:
    audience_segment_id: int = 0
    message: str = ""
    scheduled_at: str = ""

    def validate(self) -> None:
        if NAME_PLACEHOLDER not in self.message:
            raise ValidationError(
                f'The message must include the placeholder "{NAME_PLACEHOLDER}" for personalization.'
            )
        if self.audience_segment_id <= 0:
            raise ValidationError("Please select an audience segment.")
        if not self.scheduled_at:
            raise ValidationError("Please choose when to send the campaign.")

    def to_payload(self) -> dict:
        return {
            "audienceSegmentId": self.audience_segment_id,
            "message": self.message,
            "scheduledAt": self.scheduled_at,
        }


@dataclass(frozen=True)
class Order:
    id: int
    customer_id: int
    order_date: str
    revenue: float
    cost: float
    customer: Customer

    @property
    def profit(self) -> float:
        return self.revenue - self.cost

    @staticmethod
    def from_record(r: dict) -> "Order":
        return Order(
            id=int(r["id"]),
            customer_id=int(r["customerId"]),
            order_date=r["orderDate"],
            revenue=float(r["revenue"]),
            cost=float(r["cost"]),
            customer=Customer.from_record(r["customer"]),
        )


@dataclass(frozen=True)
class OrderDraft:
    customer_id: int
    order_date: str
    revenue: float
    cost: float

    def validate(self) -> None:
        if not self.order_date:
            raise ValidationError("Order date is required.")

    def to_payload(self) -> dict:
        return {
            "customerId": self.customer_id,
            "orderDate": self.order_date,
            "revenue": self.revenue,
            "cost": self.cost,
        }


@dataclass(frozen=True)
class Message:
    id: int
    customer_id: int
    message: str
    sent_at: str
    status: str
    error_message: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    @property
    def delivered(self) -> bool:
        return self.status == "COMPLETED"

    @staticmethod
    def from_record(r: dict) -> "Message":
        return Message(
            id=int(r["id"]),
            customer_id=int(r["customerId"]),
            message=r.get("message", ""),
            sent_at=r.get("sentAt", ""),
            status=r["status"],
            error_message=r.get("errorMessage"),
            created_at=r.get("createdAt", ""),
            updated_at=r.get("updatedAt", ""),
        )
