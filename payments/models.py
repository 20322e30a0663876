from django.db import models

from orders.models import Order


class PaymentMethod(models.Model):
    """A buyer's chosen SIPS payment option. Never reused between orders."""

    payment_gateway = models.CharField(max_length=64, default="sips_payment")
    payment_option = models.CharField(max_length=32)  # VISA, MASTERCARD, ...
    response_code = models.CharField(max_length=8, blank=True, default="")
    seal = models.CharField(max_length=128, blank=True, default="")
    reusable = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"SIPS option: {self.payment_option}"


class Payment(models.Model):
    class State(models.TextChoices):
        NEW = "new", "New"
        CAPTURE_COMPLETED = "capture_completed", "Completed"
        VOID = "void", "Voided"

    class RemoteState(models.TextChoices):
        PENDING = "pending", "Pending"
        DONE = "done", "Done"
        FAILED = "failed", "Failed"

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="payments")
    payment_method = models.ForeignKey(
        PaymentMethod, null=True, blank=True, on_delete=models.SET_NULL, related_name="payments"
    )
    payment_gateway = models.CharField(max_length=64, default="sips_payment")

    state = models.CharField(max_length=32, choices=State.choices, default=State.NEW)
    remote_state = models.CharField(max_length=16, choices=RemoteState.choices, default=RemoteState.PENDING)
    remote_id = models.CharField(max_length=35, unique=True)

    amount = models.DecimalField(max_digits=19, decimal_places=6)
    currency = models.CharField(max_length=3)

    authorization_expires = models.DateTimeField()
    test = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    def __str__(self) -> str:
        return f"{self.payment_gateway} {self.remote_id} {self.state}/{self.remote_state}"

    @property
    def is_resolved(self) -> bool:
        return self.state != self.State.NEW or self.remote_state != self.RemoteState.PENDING
