"""Payment gateways.

Checkout asks a gateway for a transaction reference and never looks at the
payment mode itself. The manual gateway trusts what the buyer typed in; the
sandbox gateway stands in for a real automatic integration.
"""
import logging
import secrets
import string
from typing import Optional, Protocol

import models
from errors import ValidationError
from site_settings import SiteSettings

logger = logging.getLogger(__name__)


class PaymentGateway(Protocol):
    name: str

    def charge(self, amount: float, method: str, reference: Optional[str]) -> str:
        """Settle ``amount`` through ``method`` and return the transaction reference."""
        ...


class ManualGateway:
    name = "manual"

    def charge(self, amount: float, method: str, reference: Optional[str]) -> str:
        reference = (reference or "").strip()
        if not reference:
            raise ValidationError("Transaction ID is required")
        return reference


class SandboxGateway:
    name = "sandbox"
    _alphabet = string.ascii_uppercase + string.digits

    def charge(self, amount: float, method: str, reference: Optional[str]) -> str:
        reference = (reference or "").strip()
        if reference:
            return reference
        reference = "AUTO_" + "".join(secrets.choice(self._alphabet) for _ in range(9))
        logger.info("Sandbox charge of %.2f via %s -> %s", amount, method, reference)
        return reference


def resolve_gateway(settings: SiteSettings, method: Optional[models.PaymentMethod] = None) -> PaymentGateway:
    if settings.payment_mode == "auto" or (method is not None and method.type == "auto"):
        return SandboxGateway()
    return ManualGateway()
