"""Payment provider event schemas."""

from pydantic import BaseModel, Field


class CheckoutCompleted(BaseModel):
    """The subset of a completed checkout session the entitlement logic needs."""

    session_id: str
    user_id: str
    pack_size: int = Field(..., gt=0)
    amount_total: int | None = Field(None, description="Amount in minor currency units")
    payment_status: str | None = None
