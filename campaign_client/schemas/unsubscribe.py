"""Unsubscribe schemas for the tracking endpoint."""

from pydantic import BaseModel


class UnsubscribeResult(BaseModel):
    """Subscription state returned after an unsubscribe call."""

    is_subscribed: int
    k: str
    receiver_email: str
    sender_email: str


class UnsubscribeEnvelope(BaseModel):
    status: int
    message: str = ""
    data: UnsubscribeResult | None = None
