"""Lookup Gate — debounces scan events and resolves barcodes against the catalogue.

Camera decoders fire repeatedly while a barcode stays in frame, so a camera
event for a barcode accepted less than ``cooldown`` seconds ago is dropped.
Wedge events are never debounced.

Accepted events start a catalogue lookup as an independent task. Several
lookups may be in flight at once and their outcomes are delivered in the
order the responses arrive. A lookup that fails, raises or exceeds
``timeout`` resolves to ``NotFound``.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from shopping.catalog.port import CatalogPort
from shopping.catalog.product import Product
from shopping.scanning.events import ScanEvent, ScanSource

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Found:
    event: ScanEvent
    product: Product


@dataclass(frozen=True)
class NotFound:
    event: ScanEvent
    reason: str = "not_found"

    @property
    def barcode(self) -> str:
        return self.event.barcode


ProductOutcome = Found | NotFound


class LookupGate:
    def __init__(
        self,
        catalog: CatalogPort,
        on_outcome: Callable[[ProductOutcome], None],
        cooldown: float = 0.6,
        timeout: float = 5.0,
    ):
        self._catalog = catalog
        self._on_outcome = on_outcome
        self.cooldown = cooldown
        self.timeout = timeout
        self._last_accepted: dict[str, float] = {}
        self._in_flight: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    @property
    def tracked(self) -> int:
        """Barcodes still inside their camera cool-down window."""
        return len(self._last_accepted)

    def accepts(self, event: ScanEvent) -> bool:
        """Apply the camera cool-down. Records the event when accepted."""
        if event.source != ScanSource.CAMERA:
            return True

        self._expire(event.observed_at)
        last = self._last_accepted.get(event.barcode)
        if last is not None and event.observed_at - last < self.cooldown:
            return False

        self._last_accepted[event.barcode] = event.observed_at
        return True

    def _expire(self, now: float) -> None:
        stale = [barcode for barcode, at in self._last_accepted.items() if now - at >= self.cooldown]
        for barcode in stale:
            del self._last_accepted[barcode]

    def submit(self, event: ScanEvent) -> asyncio.Task | None:
        """Debounce ``event`` and, if accepted, start its catalogue lookup."""
        if not self.accepts(event):
            logger.debug("Repeat scan suppressed", barcode=event.barcode, source=event.source.value)
            return None

        task = asyncio.get_running_loop().create_task(self.resolve(event))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def resolve(self, event: ScanEvent) -> ProductOutcome:
        outcome = await self._lookup(event)
        self._on_outcome(outcome)
        return outcome

    async def _lookup(self, event: ScanEvent) -> ProductOutcome:
        try:
            product = await asyncio.wait_for(self._catalog.lookup(event.barcode), timeout=self.timeout)
        except TimeoutError:
            logger.warning("Catalogue lookup timed out", barcode=event.barcode, timeout=self.timeout)
            return NotFound(event, reason="timeout")
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.warning("Catalogue lookup failed", barcode=event.barcode, exc_info=True)
            return NotFound(event, reason="error")

        if product is None:
            logger.info("Barcode not in catalogue", barcode=event.barcode)
            return NotFound(event)
        return Found(event, product)

    async def drain(self) -> None:
        """Wait until every in-flight lookup has delivered its outcome."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    def cancel_all(self) -> None:
        for task in list(self._in_flight):
            task.cancel()
