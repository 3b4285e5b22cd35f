"""Payment provider webhook router."""

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession
import stripe
import structlog

from ...config import Settings, get_settings
from ...errors import WebhookError
from ...payments import apply_checkout_completed, checkout_from_stripe_event
from ..database import get_async_session

logger = structlog.get_logger()

router = APIRouter(prefix="/webhooks", tags=["payments"])


@router.post("/stripe")
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_async_session),
) -> dict:
    """Grant purchased submissions once the provider confirms a checkout."""
    if not stripe_signature:
        raise WebhookError("No signature")

    payload = await request.body()
    try:
        event = stripe.Webhook.construct_event(
            payload, stripe_signature, settings.stripe_webhook_secret
        )
    except (ValueError, stripe.SignatureVerificationError) as e:
        logger.warning("stripe_webhook_rejected", error=str(e))
        raise WebhookError(f"Webhook error: {e}") from e

    checkout = checkout_from_stripe_event(event)
    if checkout is None:
        logger.info("stripe_event_ignored", event_type=event["type"])
    else:
        await apply_checkout_completed(db, checkout)

    return {"received": True}
