from __future__ import annotations

import logging

from django.conf import settings
from django.contrib import messages
from django.http import HttpRequest, HttpResponse, HttpResponseRedirect
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods, require_POST

from orders.checkout import CheckoutFlow
from orders.models import Order

from .conf import gateway_config
from .forms import PaymentMethodAddForm
from .services import (
    cart_url,
    checkout_url,
    create_payment_method,
    handle_callback,
    initiate_payment,
)

log = logging.getLogger(__name__)


def _misconfigured(config) -> HttpResponse | None:
    missing = config.missing()
    if missing:
        log.error("SIPS gateway misconfigured, empty settings: %s", ", ".join(missing))
        return HttpResponse(f"Misconfigured: {', '.join(missing)} is empty", status=500)
    return None


@require_POST
def payment_information(request: HttpRequest, order_id: str) -> HttpResponse:
    """
    POST /payments/<uuid>/information/
    Stores the chosen payment option and moves on to the next checkout step.
    """
    order = get_object_or_404(Order, id=order_id, state=Order.State.DRAFT)
    flow = CheckoutFlow(order)

    if order.is_free:
        return HttpResponseRedirect(checkout_url(order, flow.get_next_step_id() or flow.get_step_id()))

    form = PaymentMethodAddForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Please choose a payment option.")
        return HttpResponseRedirect(checkout_url(order, flow.get_step_id()))

    try:
        create_payment_method(order, form.cleaned_data)
    except ValueError as e:
        log.warning("Exception thrown when creating the payment method: %s", e)
        messages.error(
            request,
            "We encountered an unexpected error processing your payment method. Please try again later.",
        )
        return HttpResponseRedirect(checkout_url(order, flow.get_step_id()))

    next_step = flow.get_next_step_id() or flow.get_step_id()
    order.checkout_step = next_step
    order.save(update_fields=["checkout_step"])
    return HttpResponseRedirect(checkout_url(order, next_step))


@require_POST
def start_payment(request: HttpRequest, order_id: str) -> HttpResponse:
    """
    POST /payments/<uuid>/start/
    Creates the payment, posts the sealed request to SIPS and renders whatever
    SIPS answered (an auto-submitting page to the hosted payment form).
    """
    order = get_object_or_404(Order, id=order_id)
    if order.state != Order.State.DRAFT:
        return HttpResponseRedirect(cart_url())

    config = gateway_config()
    bad = _misconfigured(config)
    if bad is not None:
        return bad

    outcome = initiate_payment(order, config, base_url=settings.PUBLIC_BASE_URL)

    if outcome.redirect_to:
        return HttpResponseRedirect(outcome.redirect_to)

    if outcome.error is not None:
        return HttpResponse(outcome.error.user_message, status=502)

    return HttpResponse(outcome.body)


@csrf_exempt
@require_http_methods(["GET", "POST"])
def handle_response(request: HttpRequest, order_id: str, payment_id: int) -> HttpResponse:
    """
    GET|POST /payments/<uuid>/<payment_id>/response/
    Where SIPS sends the buyer back to (normalReturnUrl).
    """
    config = gateway_config()
    bad = _misconfigured(config)
    if bad is not None:
        return bad

    raw = request.POST.dict() if request.method == "POST" else request.GET.dict()
    outcome = handle_callback(order_id, payment_id, raw, config)

    if outcome.message:
        messages.error(request, outcome.message)

    return HttpResponseRedirect(outcome.redirect_to)
