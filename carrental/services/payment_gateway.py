import json
import random
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from flask import current_app


@dataclass(frozen=True)
class ChargeRequest:
    amount: Decimal
    method: str
    reference: str
    card_number: Optional[str] = None
    card_holder: Optional[str] = None


@dataclass(frozen=True)
class GatewayResult:
    success: bool
    failure_reason: Optional[str] = None
    raw_response: str = ""


class PaymentGateway:
    """Charges a payment method.

    A decline is reported through ``GatewayResult.success``; implementations
    raise ``InfrastructureError`` only when the provider cannot be reached.
    """

    name = "base"

    def charge(self, request):
        raise NotImplementedError


class SimulatedGateway(PaymentGateway):
    name = "simulated"
    DECLINE_REASONS = ("Insufficient funds", "Card declined", "Invalid card number", "Expired card")

    def __init__(self, success_rate=0.95, delay=0.0, rng=None):
        self.success_rate = success_rate
        self.delay = delay
        self.rng = rng or random.Random()

    def charge(self, request):
        if self.delay > 0:
            time.sleep(self.delay)
        timestamp = datetime.now(timezone.utc).isoformat()
        if self.rng.random() < self.success_rate:
            response = {"status": "success", "transaction_id": str(uuid4()), "timestamp": timestamp}
            return GatewayResult(success=True, raw_response=json.dumps(response))

        reason = self.rng.choice(self.DECLINE_REASONS)
        response = {"status": "failed", "error": reason, "timestamp": timestamp}
        return GatewayResult(success=False, failure_reason=reason, raw_response=json.dumps(response))


def build_gateway(config):
    name = (config.get("PAYMENT_GATEWAY") or SimulatedGateway.name).strip().lower()
    if name != SimulatedGateway.name:
        raise ValueError(f"Unknown payment gateway: {name}")
    return SimulatedGateway(
        success_rate=float(config.get("PAYMENT_SUCCESS_RATE", 0.95)),
        delay=float(config.get("PAYMENT_GATEWAY_DELAY", 0.0)),
    )


def get_gateway():
    return current_app.extensions["payment_gateway"]
