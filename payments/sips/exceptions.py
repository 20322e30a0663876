from __future__ import annotations

from typing import List, Optional


class SipsError(Exception):
    """Base class for everything the SIPS integration raises."""

    # Shown to the buyer. Internal detail stays in the log.
    user_message = "An error occurred while processing your request."


class ValidationError(SipsError):
    """
    Outbound request is incomplete or malformed. Raised before any network call.
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid payment request")


class DispatchError(SipsError):
    """Transport failure while posting to the gateway. Safe to retry."""

    user_message = "The payment platform could not be reached. Please try again later."

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class AuthenticityError(SipsError):
    """Seal or transaction reference mismatch on a callback."""


class ReplayError(SipsError):
    """Callback for a payment that is already resolved."""


class DeclinedError(SipsError):
    """Callback is authentic but the gateway reported a failure."""

    def __init__(self, code: str, description: str):
        self.code = code
        self.description = description
        super().__init__(f"[{code}] {description}")

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return f"An error occurred in the SIPS platform: [{self.code}] {self.description}"
