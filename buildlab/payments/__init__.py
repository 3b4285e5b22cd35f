"""Payment side effects on user entitlements."""

from .entitlements import (
    CHECKOUT_COMPLETED,
    apply_checkout_completed,
    checkout_from_stripe_event,
)

__all__ = ["CHECKOUT_COMPLETED", "apply_checkout_completed", "checkout_from_stripe_event"]
