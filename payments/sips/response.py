from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from .composer import SealComposer, exclude

SUCCESS_CODE = "00"
PENDING = "pending"

SEAL_FIELD = "Seal"
# POST fields that travel next to Data and are not covered by the seal
TRANSPORT_FIELDS = ("Seal", "InterfaceVersion", "Encode")

RESPONSE_CODES: Dict[str, str] = {
    "00": "Authorisation accepted",
    "02": "Authorisation request to be performed via telephone with the issuer, as the card authorisation threshold has been exceeded, if the forcing is authorised for the merchant",
    "03": "Invalid distance selling contract",
    "05": "Authorisation refused",
    "12": "Invalid transaction, verify the parameters transferred in the request.",
    "14": "invalid bank details or card security code",
    "17": "Buyer cancellation",
    "24": "Operation impossible. The operation the merchant wishes to perform is not compatible with the status of the transaction.",
    "25": "Transaction not found in the Sips database",
    "30": "Format error",
    "34": "Suspicion of fraud",
    "40": "Function not supported: the operation that the merchant would like to perform is not part of the list of operations for which the merchant is authorised",
    "51": "mount too high",
    "54": "Card is past expiry date",
    "60": "Transaction pending",
    "63": "Security rules not observed, transaction stopped",
    "75": "Number of attempts at entering the card number exceeded",
    "90": "Service temporarily unavailable",
    "94": "Duplicated transaction: for a given day, the TransactionReference has already been used",
    "97": "Timeframe exceeded, transaction refused",
    "99": "Temporary problem at the Sips Office Server level",
}


def describe_response_code(code: Optional[str]) -> str:
    description = RESPONSE_CODES.get(code or "")
    if not description:
        return f"Unknown error code - [{code}]"
    return description


def parse_data(data: str) -> Dict[str, str]:
    """Parse the `Data` field: key=value|key=value."""
    params: Dict[str, str] = {}
    for chunk in (data or "").split("|"):
        if not chunk:
            continue
        key, sep, value = chunk.partition("=")
        if not sep:
            continue
        params[key.strip()] = value
    return params


class PaymentResponse:
    """
    Parameters returned by the gateway on the buyer's way back.

    Accepts either the paypage POST (Data + Seal) or flat fields. Lookups are
    case-insensitive, so RESPONSECODE and responseCode are the same key.
    """

    def __init__(self, raw_params: Mapping[str, object]):
        raw = {str(k): "" if v is None else str(v) for k, v in dict(raw_params).items()}
        self.seal = _lookup(raw, SEAL_FIELD) or ""
        data = _lookup(raw, "Data")
        if data:
            self.parameters = parse_data(data)
        else:
            self.parameters = exclude(raw, TRANSPORT_FIELDS)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        value = _lookup(self.parameters, name)
        return default if value is None else value

    @property
    def response_code(self) -> str:
        return self.get("responseCode", "") or ""

    @property
    def transaction_reference(self) -> str:
        return self.get("transactionReference", "") or ""

    def is_valid(self, composer: SealComposer) -> bool:
        return composer.verify(self.parameters, self.seal)


@dataclass(frozen=True)
class ValidationResult:
    seal_valid: bool
    reference_matches: bool
    state_pending: bool
    response_code: str
    transaction_reference: str

    @property
    def ok(self) -> bool:
        return self.seal_valid and self.reference_matches and self.state_pending

    @property
    def successful(self) -> bool:
        return self.ok and self.response_code == SUCCESS_CODE

    @property
    def description(self) -> str:
        return describe_response_code(self.response_code)


def validate_response(
    raw_params: Mapping[str, object],
    expected_transaction_reference: str,
    expected_remote_state: str,
    composer: SealComposer,
) -> ValidationResult:
    """
    Run every check and report each outcome; nothing is short-circuited so a
    rejected callback can be logged with the full picture.
    """
    response = PaymentResponse(raw_params)
    return ValidationResult(
        seal_valid=response.is_valid(composer),
        reference_matches=response.transaction_reference == (expected_transaction_reference or "")
        and bool(response.transaction_reference),
        state_pending=expected_remote_state == PENDING,
        response_code=response.response_code,
        transaction_reference=response.transaction_reference,
    )


def _lookup(params: Mapping[str, str], name: str) -> Optional[str]:
    if name in params:
        return params[name]
    lowered = name.lower()
    for key, value in params.items():
        if key.lower() == lowered:
            return value
    return None
