from __future__ import annotations

from typing import Optional, Sequence

from django.conf import settings

COMPLETE_STEP = "complete"
DEFAULT_STEPS = ("order_information", "review", "payment", COMPLETE_STEP)


class CheckoutFlow:
    """Ordered checkout steps for one order."""

    def __init__(self, order, steps: Optional[Sequence[str]] = None):
        self.order = order
        self.steps = tuple(steps or getattr(settings, "CHECKOUT_STEPS", DEFAULT_STEPS))
        if not self.steps:
            raise ValueError("A checkout flow needs at least one step")

    def get_step_id(self) -> str:
        step = getattr(self.order, "checkout_step", "") or ""
        return step if step in self.steps else self.steps[0]

    def get_next_step_id(self) -> Optional[str]:
        i = self.steps.index(self.get_step_id())
        return self.steps[i + 1] if i + 1 < len(self.steps) else None

    def get_previous_step_id(self) -> Optional[str]:
        i = self.steps.index(self.get_step_id())
        return self.steps[i - 1] if i > 0 else None

    def is_complete(self, step_id: Optional[str]) -> bool:
        return step_id == COMPLETE_STEP

    def get_payment_step_id(self) -> str:
        """The step hosting the offsite payment, right before completion."""
        if COMPLETE_STEP in self.steps:
            i = self.steps.index(COMPLETE_STEP)
            if i > 0:
                return self.steps[i - 1]
        return self.steps[-1]
