from __future__ import annotations

import logging
from typing import Optional

import requests

from .exceptions import DispatchError
from .request import PaymentRequest

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20


def dispatch(
    payment_request: PaymentRequest,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """
    POST the sealed request to the endpoint of its mode and return the body.

    The body is the gateway's own HTML page (it redirects the buyer to the
    hosted payment form) and must be rendered as is. No retry here.
    """
    if not payment_request.seal:
        raise DispatchError("Refusing to dispatch an unsealed payment request")

    http = session or requests
    form = {
        "Data": payment_request.to_parameter_string(),
        "InterfaceVersion": payment_request.interface_version,
        "Seal": payment_request.seal,
    }

    try:
        resp = http.post(payment_request.endpoint, data=form, timeout=timeout)
    except requests.RequestException as e:
        log.exception("SIPS request failed ref=%s", payment_request.transaction_reference)
        raise DispatchError(f"Request exception: {e!r}") from e

    if not 200 <= resp.status_code < 300:
        log.warning("SIPS answered HTTP %s ref=%s", resp.status_code, payment_request.transaction_reference)
        raise DispatchError(
            f"Gateway answered HTTP {resp.status_code}",
            status_code=resp.status_code,
        )

    log.info(
        "SIPS request dispatched ref=%s mode=%s status=%s",
        payment_request.transaction_reference,
        payment_request.mode.value,
        resp.status_code,
    )
    return resp.text
