"""Tests for checkout event parsing."""

import pytest

from buildlab.errors import WebhookError
from buildlab.payments import checkout_from_stripe_event


def checkout_event(metadata=None, **session_fields) -> dict:
    session = {
        "id": "cs_test_123",
        "amount_total": 999,
        "payment_status": "paid",
        "metadata": {"user_id": "user-1", "pack_size": "5"} if metadata is None else metadata,
    }
    session.update(session_fields)
    return {"type": "checkout.session.completed", "data": {"object": session}}


class TestCheckoutFromStripeEvent:
    def test_completed_checkout(self):
        checkout = checkout_from_stripe_event(checkout_event())

        assert checkout.session_id == "cs_test_123"
        assert checkout.user_id == "user-1"
        assert checkout.pack_size == 5  # noqa: PLR2004
        assert checkout.amount_total == 999  # noqa: PLR2004
        assert checkout.payment_status == "paid"

    def test_other_event_types_ignored(self):
        event = {"type": "payment_intent.created", "data": {"object": {"id": "pi_1"}}}
        assert checkout_from_stripe_event(event) is None

    @pytest.mark.parametrize(
        "metadata",
        [
            {},
            {"user_id": "user-1"},
            {"pack_size": "5"},
            {"user_id": "user-1", "pack_size": "0"},
            {"user_id": "user-1", "pack_size": "lots"},
        ],
    )
    def test_missing_metadata(self, metadata):
        with pytest.raises(WebhookError, match="Missing metadata"):
            checkout_from_stripe_event(checkout_event(metadata=metadata))

    def test_null_metadata(self):
        event = checkout_event()
        event["data"]["object"]["metadata"] = None
        with pytest.raises(WebhookError):
            checkout_from_stripe_event(event)

    def test_missing_amount(self):
        event = checkout_event()
        del event["data"]["object"]["amount_total"]
        assert checkout_from_stripe_event(event).amount_total is None
