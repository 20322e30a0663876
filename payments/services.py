from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional

import requests
from django.db import transaction
from django.urls import reverse
from django.utils import timezone

from orders.checkout import CheckoutFlow
from orders.models import Order

from .conf import GATEWAY_ID, GatewayConfig
from .models import Payment, PaymentMethod
from .sips import (
    BRANDS,
    AuthenticityError,
    DeclinedError,
    DispatchError,
    OrderSnapshot,
    ReplayError,
    SealComposer,
    SipsError,
    ValidationError,
    build_payment_request,
    dispatch,
    validate_response,
)
from .state_machine import advance_checkout, mark_done, mark_failed, revert_checkout

log = logging.getLogger(__name__)

AUTHORIZATION_WINDOW = timedelta(hours=24)

# Options offered to the buyer on the payment information step.
PAYMENT_OPTIONS = (
    ("VISA", "Visa"),
    ("MASTERCARD", "MasterCard"),
    ("MAESTRO", "Maestro"),
)


@dataclass
class InitiateOutcome:
    body: Optional[str] = None
    redirect_to: Optional[str] = None
    error: Optional[SipsError] = None
    payment: Optional[Payment] = None


@dataclass
class CallbackOutcome:
    redirect_to: str
    error: Optional[SipsError] = None
    # what the buyer gets told, if anything
    message: Optional[str] = None


def cart_url() -> str:
    return reverse("orders:cart")


def checkout_url(order: Order, step: str) -> str:
    return reverse("orders:checkout", kwargs={"order_id": order.id, "step": step})


def order_snapshot(order: Order) -> OrderSnapshot:
    return OrderSnapshot(
        total=order.total,
        currency=order.currency,
        language=order.language,
    )


# -----------------------------
# Payment information
# -----------------------------
def create_payment_method(order: Order, payment_details: Mapping[str, Any]) -> PaymentMethod:
    """
    Store the buyer's chosen option and attach it (and the gateway) to the order.
    """
    if order.is_free:
        raise ValueError("A free order does not need payment information.")

    option = str(payment_details.get("payment_option") or "").upper().strip()
    if not option:
        raise ValueError("payment_details must contain the payment_option key.")
    if option not in BRANDS:
        raise ValueError(f"Unknown Brand [{option}].")

    with transaction.atomic():
        payment_method = PaymentMethod.objects.create(
            payment_gateway=GATEWAY_ID,
            payment_option=option,
            reusable=False,
        )
        order.payment_gateway = GATEWAY_ID
        order.payment_method = payment_method
        order.save(update_fields=["payment_gateway", "payment_method"])
    return payment_method


# -----------------------------
# Outbound
# -----------------------------
def create_payment(order: Order, config: GatewayConfig, now: Optional[datetime] = None) -> Payment:
    """New/pending payment whose remote id doubles as the transaction reference."""
    now = now or timezone.now()
    attempt = order.payments.count()
    return Payment.objects.create(
        order=order,
        payment_method=order.payment_method,
        payment_gateway=GATEWAY_ID,
        state=Payment.State.NEW,
        remote_state=Payment.RemoteState.PENDING,
        remote_id=f"{order.id.hex[:22]}{int(now.timestamp())}{attempt % 1000:03d}",
        amount=order.total,
        currency=order.currency,
        authorization_expires=now + AUTHORIZATION_WINDOW,
        test=config.is_test,
    )


def initiate_payment(
    order: Order,
    config: GatewayConfig,
    base_url: str,
    session: Optional[requests.Session] = None,
    now: Optional[datetime] = None,
) -> InitiateOutcome:
    """
    Create a payment, build and seal the request, post it to SIPS and hand
    back the page SIPS answered with.

    An invalid request rolls back the payment and sends the buyer to the
    cart. A transport failure keeps the payment pending.
    """
    payment_method = order.payment_method
    if payment_method is None:
        log.warning("SIPS payment started without a payment method order=%s", order.id)
        return InitiateOutcome(
            redirect_to=cart_url(),
            error=ValidationError(["no payment method selected"]),
        )

    try:
        with transaction.atomic():
            # Serializes double clicks: the attempt counter in the remote id
            # is read under this lock.
            order = Order.objects.select_for_update().get(pk=order.pk)
            if order.state != Order.State.DRAFT:
                return InitiateOutcome(redirect_to=cart_url())

            flow = CheckoutFlow(order)
            payment_step = flow.get_payment_step_id()
            if order.checkout_step != payment_step:
                order.checkout_step = payment_step
                order.save(update_fields=["checkout_step"])

            payment = create_payment(order, config, now=now)
            return_url = base_url.rstrip("/") + reverse(
                "payments:handle_response",
                kwargs={"order_id": order.id, "payment_id": payment.pk},
            )
            payment_request = build_payment_request(
                order_snapshot(order),
                config,
                return_url=return_url,
                transaction_reference=payment.remote_id,
                payment_brand=payment_method.payment_option,
            )
            payment_method.seal = payment_request.seal
            payment_method.save(update_fields=["seal"])
    except ValidationError as e:
        log.warning("Payment request did not validate. Reason: %s", e)
        return InitiateOutcome(redirect_to=cart_url(), error=e)

    try:
        body = dispatch(payment_request, session=session, timeout=config.timeout)
    except DispatchError as e:
        log.warning("SIPS dispatch failed ref=%s: %s", payment.remote_id, e)
        return InitiateOutcome(error=e, payment=payment)

    return InitiateOutcome(body=body, payment=payment)


# -----------------------------
# Inbound
# -----------------------------
def handle_callback(
    order_id,
    payment_id,
    raw_params: Mapping[str, Any],
    config: GatewayConfig,
) -> CallbackOutcome:
    """
    Validate what SIPS sent back and settle the payment and checkout.

    The payment row is locked for the whole read-validate-write sequence, and
    the terminal write is conditional on the payment still being pending.
    """
    try:
        with transaction.atomic():
            return _handle_callback(order_id, payment_id, raw_params, config)
    except ReplayError as e:
        log.warning("SIPS response for a resolved payment order=%s payment=%s: %s", order_id, payment_id, e)
        return CallbackOutcome(redirect_to=cart_url(), error=e)


def _handle_callback(order_id, payment_id, raw_params, config) -> CallbackOutcome:
    order = Order.objects.select_for_update().filter(id=order_id).first()
    if order is None:
        log.warning("User arrived to the SIPS response handler without an order.")
        return CallbackOutcome(redirect_to=cart_url(), error=ReplayError(f"unknown order {order_id}"))

    payment = Payment.objects.select_for_update().filter(pk=payment_id, order=order).first()
    if payment is None or payment.is_resolved:
        raise ReplayError(f"no payment in state new for id {payment_id}")

    composer = SealComposer(config.passphrase, config.seal_algorithm)
    result = validate_response(raw_params, payment.remote_id, payment.remote_state, composer)

    if not result.ok:
        log.warning(
            "User arrived to the SIPS response handler without valid information: "
            "[transaction reference equals: %s - %s] [Is remote state pending: %s] [Valid SIPS answer: %s]",
            result.transaction_reference,
            payment.remote_id,
            payment.remote_state,
            "Yes" if result.seal_valid else "No",
        )
        if not result.state_pending:
            raise ReplayError(f"payment {payment.remote_id} is {payment.remote_state}")
        error = AuthenticityError(
            f"seal valid={result.seal_valid} reference matches={result.reference_matches}"
        )
        return CallbackOutcome(redirect_to=cart_url(), error=error, message=error.user_message)

    payment_method = payment.payment_method or order.payment_method
    if payment_method is not None:
        payment_method.response_code = result.response_code
        payment_method.save(update_fields=["response_code"])

    flow = CheckoutFlow(order)

    if result.successful:
        mark_done(payment)
        step = advance_checkout(order, flow)
        return CallbackOutcome(redirect_to=checkout_url(order, step))

    mark_failed(payment)
    step = revert_checkout(order, flow)
    error = DeclinedError(result.response_code, result.description)
    log.info("SIPS payment declined ref=%s code=%s", payment.remote_id, result.response_code)
    return CallbackOutcome(redirect_to=checkout_url(order, step), error=error, message=error.user_message)
