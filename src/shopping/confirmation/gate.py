"""Confirmation Gate — destructive cart operations wait for an explicit yes.

State machine::

    closed → open(intent) → closed

While a confirmation is open a second request is rejected; the pending one
must be confirmed or cancelled first.
"""

from dataclasses import dataclass
from enum import Enum

import structlog
from protean.exceptions import ValidationError

from shopping.cart.aggregator import CartAggregator

logger = structlog.get_logger(__name__)


class IntentKind(Enum):
    REMOVE_LINE = "removeLine"
    CLEAR_CART = "clearCart"


@dataclass(frozen=True)
class PendingConfirmation:
    intent: IntentKind
    title: str
    message: str
    target_line_id: str | None = None


class ConfirmationGate:
    def __init__(self, aggregator: CartAggregator):
        self._aggregator = aggregator
        self.pending: PendingConfirmation | None = None

    @property
    def is_open(self) -> bool:
        return self.pending is not None

    def request_remove(self, line_id: str) -> PendingConfirmation:
        line = self._aggregator.snapshot().line(line_id)
        if line is None:
            raise ValidationError({"line_id": [f"No cart line for {line_id}"]})

        return self._open(
            PendingConfirmation(
                intent=IntentKind.REMOVE_LINE,
                title="Remove Item",
                message=f"Are you sure you want to remove {line.name} from your cart?",
                target_line_id=line.line_id,
            )
        )

    def request_clear(self) -> PendingConfirmation:
        return self._open(
            PendingConfirmation(
                intent=IntentKind.CLEAR_CART,
                title="Clear Cart",
                message="Are you sure you want to clear all items from your cart?",
            )
        )

    def confirm(self) -> PendingConfirmation:
        """Forward the pending intent to the aggregator, then close."""
        pending = self.pending
        if pending is None:
            raise ValidationError({"confirmation": ["Nothing is waiting for confirmation"]})

        try:
            if pending.intent == IntentKind.REMOVE_LINE:
                self._aggregator.remove_line(pending.target_line_id)
            else:
                self._aggregator.clear()
        finally:
            self.pending = None

        logger.info("Confirmation accepted", intent=pending.intent.value, line_id=pending.target_line_id)
        return pending

    def cancel(self) -> PendingConfirmation | None:
        pending, self.pending = self.pending, None
        if pending is not None:
            logger.info("Confirmation cancelled", intent=pending.intent.value)
        return pending

    def _open(self, confirmation: PendingConfirmation) -> PendingConfirmation:
        if self.pending is not None:
            raise ValidationError(
                {"confirmation": [f"A {self.pending.intent.value} confirmation is already pending"]}
            )
        self.pending = confirmation
        logger.debug("Confirmation opened", intent=confirmation.intent.value, line_id=confirmation.target_line_id)
        return confirmation
