"""
SIPS (Atos / Worldline) paypage protocol: request building, sealing,
dispatch and response validation. Framework independent.
"""
from .client import dispatch
from .composer import HMAC_SHA256, SHA256, Passphrase, SealComposer, to_parameter_string
from .exceptions import (
    AuthenticityError,
    DeclinedError,
    DispatchError,
    ReplayError,
    SipsError,
    ValidationError,
)
from .request import (
    ALLOWED_LANGUAGES,
    BRANDS,
    ENDPOINTS,
    Mode,
    OrderSnapshot,
    PaymentRequest,
    build_payment_request,
    resolve_language,
    to_minor_units,
)
from .response import (
    RESPONSE_CODES,
    SUCCESS_CODE,
    PaymentResponse,
    ValidationResult,
    describe_response_code,
    validate_response,
)

__all__ = [
    "ALLOWED_LANGUAGES",
    "AuthenticityError",
    "BRANDS",
    "DeclinedError",
    "DispatchError",
    "ENDPOINTS",
    "HMAC_SHA256",
    "Mode",
    "OrderSnapshot",
    "Passphrase",
    "PaymentRequest",
    "PaymentResponse",
    "RESPONSE_CODES",
    "ReplayError",
    "SHA256",
    "SUCCESS_CODE",
    "SealComposer",
    "SipsError",
    "ValidationError",
    "ValidationResult",
    "build_payment_request",
    "describe_response_code",
    "dispatch",
    "resolve_language",
    "to_minor_units",
    "to_parameter_string",
    "validate_response",
]
