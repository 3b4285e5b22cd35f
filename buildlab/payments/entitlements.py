"""Submission-pack entitlements granted by completed checkouts."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from ..errors import WebhookError
from ..models import Profile, Transaction
from ..schemas.payments import CheckoutCompleted

logger = structlog.get_logger()

CHECKOUT_COMPLETED = "checkout.session.completed"
SUBMISSION_PACK = "submission_pack"


def _field(obj: Any, key: str) -> Any:
    # Provider events support item access but not always dict methods
    if obj is None:
        return None
    try:
        return obj[key]
    except KeyError:
        return None


def _pack_size(raw: Any) -> int:
    try:
        return int(raw or 0)
    except (TypeError, ValueError):
        return 0


def checkout_from_stripe_event(event: Any) -> CheckoutCompleted | None:
    """Extract a completed checkout from a verified provider event.

    Returns None for event types that carry no entitlement.

    Raises:
        WebhookError: The checkout session lacks the user or pack size metadata.
    """
    if event["type"] != CHECKOUT_COMPLETED:
        return None

    session = event["data"]["object"]
    metadata = _field(session, "metadata")
    user_id = _field(metadata, "user_id")
    pack_size = _pack_size(_field(metadata, "pack_size"))

    if not user_id or pack_size <= 0:
        logger.error("checkout_metadata_missing", session_id=_field(session, "id"))
        raise WebhookError("Missing metadata")

    return CheckoutCompleted(
        session_id=session["id"],
        user_id=user_id,
        pack_size=pack_size,
        amount_total=_field(session, "amount_total"),
        payment_status=_field(session, "payment_status"),
    )


async def apply_checkout_completed(session: AsyncSession, checkout: CheckoutCompleted) -> Transaction:
    """Add the purchased submissions to the profile and record the transaction."""
    profile = await session.get(Profile, checkout.user_id)
    if profile is None:
        raise WebhookError(f"Profile not found: {checkout.user_id}")

    profile.extra_submissions = (profile.extra_submissions or 0) + checkout.pack_size

    transaction = Transaction(
        user_id=checkout.user_id,
        type=SUBMISSION_PACK,
        amount=checkout.amount_total / 100 if checkout.amount_total else 0.0,
        stripe_payment_id=checkout.session_id,
        status="completed",
        meta={
            "pack_size": checkout.pack_size,
            "payment_status": checkout.payment_status,
        },
    )
    session.add(transaction)
    await session.commit()

    logger.info(
        "submissions_added",
        user_id=checkout.user_id,
        pack_size=checkout.pack_size,
        extra_submissions=profile.extra_submissions,
    )
    return transaction
