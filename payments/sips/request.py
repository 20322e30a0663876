from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from enum import Enum
from typing import Dict, List, Optional
from urllib.parse import urlparse

from .composer import HMAC_SHA256, SHA256, SealComposer, to_parameter_string
from .exceptions import ValidationError


class Mode(str, Enum):
    TEST = "TEST"
    SIMULATION = "SIMU"
    PRODUCTION = "PRODUCTION"


ENDPOINTS: Dict[Mode, str] = {
    Mode.TEST: "https://payment-webinit.test.sips-atos.com/paymentInit",
    Mode.SIMULATION: "https://payment-webinit.simu.sips-atos.com/paymentInit",
    Mode.PRODUCTION: "https://payment-webinit.sips-atos.com/paymentInit",
}

ALLOWED_LANGUAGES = ("nl", "fr", "de", "it", "es", "cy", "en")
DEFAULT_LANGUAGE = "en"

# ISO 4217 alpha -> numeric, as accepted by the paypage
CURRENCIES: Dict[str, str] = {
    "EUR": "978",
    "USD": "840",
    "CHF": "756",
    "GBP": "826",
    "CAD": "124",
    "JPY": "392",
    "MXN": "484",
    "TRY": "949",
    "AUD": "036",
    "NZD": "554",
    "NOK": "578",
    "BRL": "986",
    "ARS": "032",
    "KHR": "116",
    "TWD": "901",
    "SEK": "752",
    "DKK": "208",
    "KRW": "410",
    "SGD": "702",
    "XPF": "953",
    "XOF": "952",
}

# brand -> payment mean type
BRANDS: Dict[str, str] = {
    "ACCEPTGIRO": "CREDIT_TRANSFER",
    "AMEX": "CARD",
    "BCMC": "CARD",
    "BUYSTER": "CARD",
    "BANK CARD": "CARD",
    "CB": "CARD",
    "IDEAL": "CREDIT_TRANSFER",
    "INCASSO": "DIRECT_DEBIT",
    "MAESTRO": "CARD",
    "MASTERCARD": "CARD",
    "MINITIX": "OTHER",
    "NETBANKING": "CREDIT_TRANSFER",
    "PAYPAL": "CARD",
    "PAYSAFECARD": "CARD",
    "REFINANCEMENT": "CARD",
    "SOFORT": "CREDIT_TRANSFER",
    "VISA": "CARD",
    "VPAY": "CARD",
}

TRANSACTION_REFERENCE_RE = re.compile(r"^[A-Za-z0-9]{1,35}$")


@dataclass(frozen=True)
class OrderSnapshot:
    """What the builder needs to know about an order."""

    total: Decimal
    currency: str
    language: str = DEFAULT_LANGUAGE


@dataclass(frozen=True)
class PaymentRequest:
    merchant_id: str
    key_version: Optional[int]
    interface_version: str
    amount: int
    currency: str
    transaction_reference: str
    normal_return_url: str
    language: str = DEFAULT_LANGUAGE
    payment_brand: str = ""
    mode: Mode = Mode.TEST
    seal_algorithm: str = SHA256
    seal: str = ""

    @property
    def endpoint(self) -> str:
        return ENDPOINTS[self.mode]

    def to_parameters(self) -> Dict[str, str]:
        params = {
            "amount": str(self.amount),
            "currencyCode": CURRENCIES.get(self.currency.upper(), ""),
            "merchantId": self.merchant_id,
            "transactionReference": self.transaction_reference,
            "keyVersion": "" if self.key_version is None else str(self.key_version),
            "customerLanguage": self.language,
            "paymentMeanBrandList": self.payment_brand.upper(),
            "normalReturnUrl": self.normal_return_url,
        }
        if self.seal_algorithm == HMAC_SHA256:
            params["sealAlgorithm"] = self.seal_algorithm
        return {k: v for k, v in params.items() if v}

    def to_parameter_string(self) -> str:
        return to_parameter_string(self.to_parameters())

    def validate(self) -> None:
        """Raise ValidationError listing every missing or malformed field."""
        errors: List[str] = []

        if not (self.merchant_id or "").strip():
            errors.append("merchantId can not be empty")
        if self.key_version is None or str(self.key_version).strip() == "":
            errors.append("keyVersion can not be empty")
        elif not isinstance(self.key_version, int) or self.key_version <= 0:
            errors.append("keyVersion must be a positive integer")
        if not (self.interface_version or "").strip():
            errors.append("interfaceVersion can not be empty")

        if not isinstance(self.amount, int) or isinstance(self.amount, bool):
            errors.append("amount must be an integer number of minor units")
        elif self.amount <= 0:
            errors.append("amount must be a positive number")

        if not self.currency:
            errors.append("currencyCode can not be empty")
        elif self.currency.upper() not in CURRENCIES:
            errors.append(f"Unknown currency [{self.currency}]")

        if not self.transaction_reference:
            errors.append("transactionReference can not be empty")
        elif not TRANSACTION_REFERENCE_RE.match(self.transaction_reference):
            errors.append("transactionReference must be 1 to 35 alphanumeric characters")

        if not self.normal_return_url:
            errors.append("normalReturnUrl can not be empty")
        else:
            parsed = urlparse(self.normal_return_url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                errors.append(f"normalReturnUrl is not an absolute URL [{self.normal_return_url}]")

        if self.language not in ALLOWED_LANGUAGES:
            errors.append(f"Invalid language [{self.language}]")

        if self.payment_brand and self.payment_brand.upper() not in BRANDS:
            errors.append(f"Unknown Brand [{self.payment_brand}]")

        if errors:
            raise ValidationError(errors)


def to_minor_units(total) -> int:
    """
    Decimal major units -> integer minor units (x100, truncated).
    Goes through str() so floats never leak binary rounding in.
    """
    try:
        number = Decimal(str(total))
    except (InvalidOperation, ValueError):
        raise ValidationError([f"amount is not a number [{total}]"])
    return int((number * 100).to_integral_value(rounding=ROUND_DOWN))


def resolve_language(language_code: Optional[str]) -> str:
    code = (language_code or "").strip().lower()
    # "fr-be" -> "fr"
    code = code.split("-")[0].split("_")[0]
    return code if code in ALLOWED_LANGUAGES else DEFAULT_LANGUAGE


def build_payment_request(
    order: OrderSnapshot,
    config,
    return_url: str,
    transaction_reference: str,
    payment_brand: str = "",
) -> PaymentRequest:
    """
    Assemble, validate and seal the request for `order`.

    `config` is a payments.conf.GatewayConfig (or anything with the same
    attributes). Raises ValidationError without touching the network.
    """
    request = PaymentRequest(
        merchant_id=config.merchant_id,
        key_version=config.key_version,
        interface_version=config.interface_version,
        amount=to_minor_units(order.total),
        currency=(order.currency or "").upper(),
        transaction_reference=transaction_reference,
        normal_return_url=return_url,
        language=resolve_language(order.language),
        payment_brand=payment_brand or "",
        mode=config.mode,
        seal_algorithm=config.seal_algorithm,
    )
    request.validate()

    composer = SealComposer(config.passphrase, request.seal_algorithm)
    return dataclasses.replace(request, seal=composer.seal(request.to_parameters()))
