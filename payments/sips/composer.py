"""
Seal computation for SIPS messages.

A seal authenticates a set of parameters between the merchant and the
gateway. Both sides serialize the parameters in the same fixed order and
hash them together with the shared secret (the passphrase).
"""
from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Tuple

SHA256 = "SHA-256"
HMAC_SHA256 = "HMAC-SHA-256"
ALGORITHMS = (SHA256, HMAC_SHA256)

# Every parameter the paypage protocol defines, in declared order.
ALL_PARAMETERS: Tuple[str, ...] = (
    "amount",
    "cardExpiryDate",
    "cardNumber",
    "cardCSCValue",
    "currencyCode",
    "merchantId",
    "interfaceVersion",
    "sealAlgorithm",
    "transactionReference",
    "keyVersion",
    "paymentMeanBrand",
    "customerLanguage",
    "billingAddress.city",
    "billingAddress.company",
    "billingAddress.country",
    "billingAddress",
    "billingAddress.postBox",
    "billingAddress.state",
    "billingAddress.street",
    "billingAddress.streetNumber",
    "billingAddress.zipCode",
    "billingContact.email",
    "billingContact.firstname",
    "billingContact.gender",
    "billingContact.lastname",
    "billingContact.mobile",
    "billingContact.phone",
    "customerAddress",
    "customerAddress.city",
    "customerAddress.company",
    "customerAddress.country",
    "customerAddress.postBox",
    "customerAddress.state",
    "customerAddress.street",
    "customerAddress.streetNumber",
    "customerAddress.zipCode",
    "customerContact",
    "customerContact.email",
    "customerContact.firstname",
    "customerContact.gender",
    "customerContact.lastname",
    "customerContact.mobile",
    "customerContact.phone",
    "customerContact.title",
    "expirationDate",
    "automaticResponseUrl",
    "templateName",
    "paymentMeanBrandList",
    "normalReturnUrl",
    "captureDay",
    "captureMode",
    "orderChannel",
    "orderId",
    "returnContext",
    "statementReference",
    "customerId",
    "customerIpAddress",
    "transactionDateTime",
    "authorisationId",
    "acquirerResponseCode",
    "responseCode",
    "maskedPan",
    "panExpiryDate",
    "paymentMeanType",
    "complementaryCode",
    "complementaryInfo",
    "holderAuthentRelegation",
    "holderAuthentStatus",
    "scoreValue",
    "scoreColor",
    "scoreInfo",
    "scoreThreshold",
    "scoreProfile",
    "transactionOrigin",
)

_DECLARED_INDEX = {name: i for i, name in enumerate(ALL_PARAMETERS)}


def ordered_items(parameters: Mapping[str, object]) -> List[Tuple[str, str]]:
    """
    "All parameters" ordering: declared parameters first in declared order,
    then anything unknown sorted by name. Empty values are dropped.
    """
    items = [(str(k), "" if v is None else str(v)) for k, v in parameters.items()]
    items = [(k, v) for k, v in items if v != ""]
    known = sorted((kv for kv in items if kv[0] in _DECLARED_INDEX), key=lambda kv: _DECLARED_INDEX[kv[0]])
    unknown = sorted(kv for kv in items if kv[0] not in _DECLARED_INDEX)
    return known + unknown


def to_parameter_string(parameters: Mapping[str, object]) -> str:
    """Serialize to the `Data` wire format: key=value|key=value."""
    return "|".join(f"{k}={v}" for k, v in ordered_items(parameters))


class Passphrase:
    """Shared secret. Masked in repr/str so it never leaks into logs."""

    __slots__ = ("_value",)

    def __init__(self, value: str):
        self._value = str(value or "")

    def reveal(self) -> str:
        return self._value

    def __bool__(self) -> bool:
        return bool(self._value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Passphrase):
            return NotImplemented
        return hmac.compare_digest(self._value.encode("utf-8"), other._value.encode("utf-8"))

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return "Passphrase('********')"

    __str__ = __repr__


@dataclass(frozen=True)
class SealComposer:
    passphrase: Passphrase
    algorithm: str = SHA256

    def __post_init__(self):
        if self.algorithm not in ALGORITHMS:
            raise ValueError(f"Unsupported seal algorithm: {self.algorithm!r}")

    def compose(self, parameters: Mapping[str, object]) -> str:
        values = "".join(v for _, v in ordered_items(parameters))
        if self.algorithm == SHA256:
            return values + self.passphrase.reveal()
        return values

    def sign(self, canonical: str) -> str:
        data = canonical.encode("utf-8")
        if self.algorithm == SHA256:
            return hashlib.sha256(data).hexdigest()
        key = self.passphrase.reveal().encode("utf-8")
        return hmac.new(key, data, hashlib.sha256).hexdigest()

    def seal(self, parameters: Mapping[str, object]) -> str:
        return self.sign(self.compose(parameters))

    def verify(self, parameters: Mapping[str, object], candidate_seal: str) -> bool:
        if not candidate_seal:
            return False
        expected = self.seal(parameters)
        candidate = str(candidate_seal).strip().lower().encode("utf-8")
        return hmac.compare_digest(expected.lower().encode("utf-8"), candidate)


def exclude(parameters: Mapping[str, object], names: Iterable[str]) -> dict:
    lowered = {n.lower() for n in names}
    return {k: v for k, v in parameters.items() if k.lower() not in lowered}
