"""Stripe Checkout adapter.

The rest of the code only sees ``create_checkout_session`` and
``retrieve_session``; tests swap this class out through
``get_payment_gateway``.
"""
from typing import Any

import stripe

from ticketpoint.core.config import settings
from ticketpoint.core.errors import NotFound


class StripeGateway:
    def __init__(self, api_key: str | None, currency: str = "usd", client_domain: str = "") -> None:
        self.api_key = api_key
        self.currency = currency
        self.client_domain = client_domain.rstrip("/")

    def create_checkout_session(
        self,
        *,
        title: str,
        image: str | None,
        unit_amount: int,
        quantity: int,
        customer_email: str,
        metadata: dict[str, str],
    ) -> dict[str, Any]:
        product_data: dict[str, Any] = {"name": title}
        if image:
            product_data["images"] = [image]
        session = stripe.checkout.Session.create(
            api_key=self.api_key,
            mode="payment",
            customer_email=customer_email,
            line_items=[
                {
                    "price_data": {
                        "currency": self.currency,
                        "product_data": product_data,
                        "unit_amount": unit_amount,
                    },
                    "quantity": quantity,
                }
            ],
            metadata=metadata,
            success_url=f"{self.client_domain}/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{self.client_domain}/dashboard/my-booked-tickets",
        )
        return {"id": session.id, "url": session.url}

    def retrieve_session(self, session_id: str) -> dict[str, Any]:
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self.api_key)
        except stripe.InvalidRequestError as e:
            raise NotFound("Payment session not found") from e
        return {
            "id": session.id,
            "payment_status": session.payment_status,
            "amount_total": session.amount_total,
            "payment_intent": session.payment_intent,
            "customer_email": session.customer_email,
            "metadata": dict(session.metadata or {}),
        }


def get_payment_gateway() -> StripeGateway:
    return StripeGateway(settings.stripe_secret_key, settings.stripe_currency, settings.client_domain)
