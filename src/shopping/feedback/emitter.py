"""Feedback Emitter — one self-expiring status message at a time.

State machine::

    idle → success | warning → idle

Reversion to idle is scheduled on the clock when a message is shown. Every
message bumps a generation counter, and a reversion only applies if it
still carries the current generation, so a newer message can never be
cleared by an older message's timer.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

import structlog
from protean.core.event import BaseEvent

from shopping.cart.events import CartCleared, CartLineAdded, CartLineIncremented, CartLineRemoved
from shopping.clock import Clock, TimerHandle
from shopping.feedback.devices import FeedbackDevice, notify_devices

logger = structlog.get_logger(__name__)


class FeedbackKind(Enum):
    IDLE = "idle"
    SUCCESS = "success"
    WARNING = "warning"


@dataclass(frozen=True)
class FeedbackState:
    kind: FeedbackKind
    text: str
    expires_at: float | None = None
    generation: int = 0


class FeedbackEmitter:
    def __init__(
        self,
        clock: Clock,
        success_display: float = 1.8,
        warning_display: float = 1.4,
        idle_text: str = "Ready to scan",
        devices: Iterable[FeedbackDevice] = (),
    ):
        self._clock = clock
        self.success_display = success_display
        self.warning_display = warning_display
        self.idle_text = idle_text
        self.devices = list(devices)
        self._generation = 0
        self._timer: TimerHandle | None = None
        self.state = FeedbackState(FeedbackKind.IDLE, idle_text)

    # -------------------------------------------------------------------
    # Triggers
    # -------------------------------------------------------------------
    def product_added(self, name: str) -> FeedbackState:
        return self.show(FeedbackKind.SUCCESS, f"{name} added to cart")

    def unknown_barcode(self, barcode: str) -> FeedbackState:
        return self.show(FeedbackKind.WARNING, f"Unknown barcode: {barcode}")

    def line_removed(self) -> FeedbackState:
        return self.show(FeedbackKind.WARNING, "Item removed")

    def cart_cleared(self) -> FeedbackState:
        return self.show(FeedbackKind.WARNING, "Cart cleared")

    def on_cart_event(self, event: BaseEvent) -> None:
        """Subscriber for events published by the cart aggregator."""
        if isinstance(event, (CartLineAdded, CartLineIncremented)):
            self.product_added(event.name)
        elif isinstance(event, CartLineRemoved):
            self.line_removed()
        elif isinstance(event, CartCleared):
            self.cart_cleared()

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    def show(self, kind: FeedbackKind, text: str) -> FeedbackState:
        if kind == FeedbackKind.IDLE:
            raise ValueError("Use reset() to return to idle")

        duration = self.success_display if kind == FeedbackKind.SUCCESS else self.warning_display
        self._cancel_timer()
        self._generation += 1
        generation = self._generation

        self.state = FeedbackState(kind, text, expires_at=self._clock.now() + duration, generation=generation)
        self._timer = self._clock.call_later(duration, lambda: self._revert(generation))
        logger.debug("Feedback shown", kind=kind.value, text=text, generation=generation)

        notify_devices(self.devices, self.state)
        return self.state

    def reset(self) -> None:
        """Return to idle immediately, dropping any pending reversion."""
        self._cancel_timer()
        self._generation += 1
        self.state = FeedbackState(FeedbackKind.IDLE, self.idle_text, generation=self._generation)

    def close(self) -> None:
        self._cancel_timer()

    def _revert(self, generation: int) -> None:
        if generation != self._generation:
            logger.debug("Stale feedback reversion ignored", generation=generation, current=self._generation)
            return
        self._timer = None
        self.state = FeedbackState(FeedbackKind.IDLE, self.idle_text, generation=generation)

    def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
