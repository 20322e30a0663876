"""Payment lifecycle transitions and the checkout moves that follow them."""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from django.utils import timezone

from orders.checkout import CheckoutFlow
from orders.models import Order

from .models import Payment
from .sips import ReplayError

log = logging.getLogger(__name__)

NEW = (Payment.State.NEW.value, Payment.RemoteState.PENDING.value)
DONE = (Payment.State.CAPTURE_COMPLETED.value, Payment.RemoteState.DONE.value)
FAILED = (Payment.State.VOID.value, Payment.RemoteState.FAILED.value)

ALLOWED_TRANSITIONS: dict[Tuple[str, str], set[Tuple[str, str]]] = {
    NEW: {DONE, FAILED},
    DONE: set(),
    FAILED: set(),
}


def validate_transition(current: Tuple[str, str], new: Tuple[str, str]) -> None:
    """Raise when a transition is not allowed by the state machine."""

    if new not in ALLOWED_TRANSITIONS.get(tuple(str(s) for s in current), set()):
        raise ValueError(f"Invalid transition: {current} -> {new}")


def _transition(payment: Payment, target: Tuple[str, str]) -> None:
    validate_transition((payment.state, payment.remote_state), target)
    state, remote_state = target
    completed_at = timezone.now()

    # Conditional write: only one callback can move a payment out of pending.
    updated = Payment.objects.filter(
        pk=payment.pk,
        state=Payment.State.NEW,
        remote_state=Payment.RemoteState.PENDING,
    ).update(state=state, remote_state=remote_state, completed_at=completed_at)
    if updated != 1:
        raise ReplayError(f"Payment {payment.pk} was resolved concurrently")

    payment.state, payment.remote_state, payment.completed_at = state, remote_state, completed_at
    log.info("payment %s -> %s/%s", payment.remote_id, state, remote_state)


def mark_done(payment: Payment) -> None:
    _transition(payment, DONE)


def mark_failed(payment: Payment) -> None:
    _transition(payment, FAILED)


def advance_checkout(order, flow: CheckoutFlow) -> str:
    """
    Move the order to the flow's next step; placing it when that step is the
    final one. Returns the step the buyer should land on.
    """
    step_id = flow.get_step_id()
    next_step_id = flow.get_next_step_id()
    if next_step_id:
        order.checkout_step = next_step_id
        step_id = next_step_id
        if flow.is_complete(next_step_id):
            order.apply_transition("place")
    order.save()
    return step_id


def revert_checkout(order, flow: CheckoutFlow) -> Optional[str]:
    """Move the order back one step so the buyer can try again. Placed orders stay put."""
    if order.state != Order.State.DRAFT:
        return order.checkout_step
    previous_step_id = flow.get_previous_step_id() or flow.get_step_id()
    order.checkout_step = previous_step_id
    order.save()
    return previous_step_id
