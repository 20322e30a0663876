from django.shortcuts import get_object_or_404, redirect, render

from payments.forms import PaymentMethodAddForm
from .checkout import CheckoutFlow
from .models import Order


def cart(request):
    orders = Order.objects.filter(state=Order.State.DRAFT).order_by("-created_at")
    return render(request, "orders/cart.html", {"orders": orders})


def checkout(request, order_id, step: str):
    order = get_object_or_404(Order, id=order_id)
    flow = CheckoutFlow(order)

    if step not in flow.steps:
        return redirect("orders:checkout", order_id=order.id, step=flow.get_step_id())

    # A placed order can only show its completion page, and only a placed one can.
    if order.state != Order.State.DRAFT and not flow.is_complete(step):
        return redirect("orders:cart")
    if order.state == Order.State.DRAFT and flow.is_complete(step):
        current = flow.get_step_id()
        if flow.is_complete(current):
            current = flow.get_payment_step_id()
        return redirect("orders:checkout", order_id=order.id, step=current)

    return render(
        request,
        "orders/checkout.html",
        {
            "order": order,
            "step": step,
            "payments": order.payments.order_by("-created_at"),
            "payment_form": PaymentMethodAddForm(),
        },
    )
