import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Order(models.Model):
    class State(models.TextChoices):
        DRAFT = "draft", "Draft"
        COMPLETED = "completed", "Completed"

    # transition name -> (allowed from, to)
    TRANSITIONS = {
        "place": ((State.DRAFT,), State.COMPLETED),
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    state = models.CharField(max_length=32, choices=State.choices, default=State.DRAFT)
    checkout_step = models.CharField(max_length=64, blank=True, default="")

    total = models.DecimalField(
        max_digits=19,
        decimal_places=6,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    currency = models.CharField(max_length=3, default="EUR")
    language = models.CharField(max_length=12, default=settings.LANGUAGE_CODE)

    payment_gateway = models.CharField(max_length=64, blank=True, default="")
    payment_method = models.ForeignKey(
        "payments.PaymentMethod",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="orders",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    placed_at = models.DateTimeField(null=True, blank=True)

    def __str__(self) -> str:
        return f"Order {self.id} ({self.state})"

    @property
    def is_free(self) -> bool:
        return (self.total or Decimal("0")) == 0

    def apply_transition(self, name: str) -> None:
        """Apply a workflow transition in memory. The caller saves."""
        if name not in self.TRANSITIONS:
            raise ValueError(f"Unknown transition: {name}")
        sources, target = self.TRANSITIONS[name]
        if self.state not in sources:
            raise ValueError(f"Invalid transition: {self.state} -[{name}]-> {target}")
        self.state = target
        if name == "place":
            self.placed_at = timezone.now()
