"""Feedback devices — fire-and-forget side effects such as beeps or lights.

A device failure must never disturb the engine, so ``notify_devices`` logs
and swallows whatever a device raises.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

import structlog

logger = structlog.get_logger(__name__)


class FeedbackDevice(ABC):
    @abstractmethod
    def signal(self, state) -> None:
        """React to a new success or warning ``FeedbackState``."""
        ...


class LogDevice(FeedbackDevice):
    """Writes every signal to the log; stands in for a beeper in development."""

    def __init__(self):
        self.signals = []

    def signal(self, state) -> None:
        self.signals.append(state)
        logger.info("Feedback signalled", kind=state.kind.value, text=state.text)


def notify_devices(devices: Iterable[FeedbackDevice], state) -> None:
    for device in devices:
        try:
            device.signal(state)
        except Exception:
            logger.exception("Feedback device failed", device=type(device).__name__)
