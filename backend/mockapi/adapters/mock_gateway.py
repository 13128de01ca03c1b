from numbers import Number
from typing import Any, Dict
from uuid import uuid4

from mockapi.utils.clock import SystemClock


class GatewayValidationError(Exception):
    """Raised when a charge request lacks the fields the upstream requires."""
    pass


class MockGatewayAdapter:
    """
    Stand-in for an external payment gateway (Stripe-like).
    No network is involved; a successful charge returns a fresh transaction id.
    """

    name = "mock_stripe_v3"
    service_header = "Stripe-Mock"

    def __init__(self, delay_ms: int = 0, clock=None):
        self.clock = clock or SystemClock()
        self.delay_seconds = delay_ms / 1000.0

    def charge(self, body: Any) -> Dict:
        """
        Validate and "capture" a payment.

        Args:
            body: request payload; needs a positive numeric `amount` and a
                non-empty string `currency`.

        Raises:
            GatewayValidationError: if either field is missing or unusable.
        """
        body = body if isinstance(body, dict) else {}
        amount = body.get("amount")
        currency = body.get("currency")
        if isinstance(amount, bool) or not isinstance(amount, Number) or not amount > 0:
            raise GatewayValidationError("amount")
        if not isinstance(currency, str) or not currency:
            raise GatewayValidationError("currency")

        self.clock.sleep(self.delay_seconds)
        return {
            "transactionId": f"txn_{uuid4().hex[:9]}",
            "status": "succeeded",
            "gateway": self.name,
            "captured": True,
        }

    def health_check(self) -> bool:
        return True
