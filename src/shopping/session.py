"""Scan session — the engine's presentation boundary.

Wires the components together::

    device input → InputNormalizer → inbound queue → LookupGate
        → CartAggregator → FeedbackEmitter
    UI intent → ConfirmationGate → CartAggregator

Both input channels write into one ``asyncio.Queue`` and a single consumer
task feeds the Lookup Gate, so debouncing happens in arrival order on the
loop thread. The presentation layer reads frozen snapshots and sends
intents; it never touches the cart directly.
"""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from shared.logging import scan_context
from shopping.cart.aggregator import CartAggregator, CartSnapshot, LineSnapshot
from shopping.catalog import get_catalog
from shopping.catalog.port import CatalogPort
from shopping.clock import Clock, LoopClock
from shopping.confirmation.gate import ConfirmationGate, PendingConfirmation
from shopping.domain import shopping
from shopping.feedback.devices import FeedbackDevice
from shopping.feedback.emitter import FeedbackEmitter, FeedbackState
from shopping.scanning.camera import get_camera
from shopping.scanning.camera.port import CameraPort
from shopping.scanning.events import ScanEvent, ScanSource
from shopping.scanning.gate import Found, LookupGate, ProductOutcome
from shopping.scanning.normalizer import InputNormalizer, ScanMode
from shopping.settings import ScanSettings

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SessionView:
    """Everything the presentation layer renders, captured at one instant."""

    mode: ScanMode
    camera_error: str | None
    cart: CartSnapshot
    feedback: FeedbackState
    pending_confirmation: PendingConfirmation | None


class ScanSession:
    def __init__(
        self,
        catalog: CatalogPort | None = None,
        camera: CameraPort | None = None,
        clock: Clock | None = None,
        settings: ScanSettings | None = None,
        devices: Iterable[FeedbackDevice] = (),
    ):
        self.settings = settings or ScanSettings()
        self.clock = clock or LoopClock()
        self.catalog = catalog or get_catalog()
        self._queue: asyncio.Queue[ScanEvent] = asyncio.Queue()
        self._consumer: asyncio.Task | None = None

        self.aggregator = CartAggregator()
        self.feedback = FeedbackEmitter(
            self.clock,
            success_display=self.settings.success_display,
            warning_display=self.settings.warning_display,
            idle_text=self.settings.idle_text,
            devices=devices,
        )
        self.aggregator.subscribe(self.feedback.on_cart_event)
        self.confirmation = ConfirmationGate(self.aggregator)
        self.normalizer = InputNormalizer(
            self._queue,
            self.clock,
            camera or get_camera(),
            terminators=self.settings.wedge_terminators,
        )
        self.gate = LookupGate(
            self.catalog,
            self._apply_outcome,
            cooldown=self.settings.camera_cooldown,
            timeout=self.settings.lookup_timeout,
        )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self._consumer is not None and not self._consumer.done()

    async def start(self) -> None:
        if self.running:
            return
        with shopping.domain_context(), scan_context(cart_id=self.aggregator.cart_id):
            self._consumer = asyncio.get_running_loop().create_task(self._consume(), name="scan-consumer")
        if self.normalizer.mode == ScanMode.CAMERA:
            self.normalizer.retry_camera()
        logger.info("Scan session started", cart_id=self.aggregator.cart_id)

    async def stop(self) -> None:
        """Tear down: release the camera, stop consuming and abandon lookups."""
        self.normalizer.close()
        consumer, self._consumer = self._consumer, None
        if consumer is not None:
            consumer.cancel()
            await asyncio.gather(consumer, return_exceptions=True)
        self.gate.cancel_all()
        await self.gate.drain()
        self.feedback.close()
        logger.info("Scan session stopped", cart_id=self.aggregator.cart_id)

    async def __aenter__(self) -> "ScanSession":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    async def settle(self) -> None:
        """Wait until every queued scan has been resolved and applied."""
        if not self.running:
            raise RuntimeError("Scan session is not running")
        while True:
            await self._queue.join()
            await self.gate.drain()
            if self._queue.empty() and not self.gate.in_flight:
                return

    async def _consume(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                self.gate.submit(event)
            finally:
                self._queue.task_done()

    def _apply_outcome(self, outcome: ProductOutcome) -> None:
        if isinstance(outcome, Found):
            self.aggregator.add_product(outcome.product)
        else:
            self.feedback.unknown_barcode(outcome.barcode)

    # -------------------------------------------------------------------
    # Input intents
    # -------------------------------------------------------------------
    def scan(self, event: ScanEvent) -> None:
        self._queue.put_nowait(event)

    def scan_barcode(self, barcode: str, source: ScanSource = ScanSource.WEDGE) -> ScanEvent | None:
        """Submit an already-decoded barcode observed now. Blank input is dropped."""
        barcode = (barcode or "").strip()
        if not barcode:
            return None
        event = ScanEvent(barcode=barcode, source=ScanSource(source), observed_at=self.clock.now())
        self.scan(event)
        return event

    def press_key(self, key: str) -> ScanEvent | None:
        return self.normalizer.press_key(key)

    def press_keys(self, keys: Iterable[str]) -> list[ScanEvent]:
        events = (self.normalizer.press_key(key) for key in keys)
        return [event for event in events if event is not None]

    def set_mode(self, mode: ScanMode) -> None:
        self.normalizer.set_mode(mode)

    def retry_camera(self) -> None:
        self.normalizer.retry_camera()

    # -------------------------------------------------------------------
    # Destructive intents (go through the confirmation gate)
    # -------------------------------------------------------------------
    def request_remove(self, line_id: str) -> PendingConfirmation:
        return self.confirmation.request_remove(line_id)

    def request_clear(self) -> PendingConfirmation:
        return self.confirmation.request_clear()

    def confirm(self) -> PendingConfirmation:
        return self.confirmation.confirm()

    def cancel(self) -> PendingConfirmation | None:
        return self.confirmation.cancel()

    # -------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------
    @property
    def cart(self) -> CartSnapshot:
        return self.aggregator.snapshot()

    @property
    def feedback_state(self) -> FeedbackState:
        return self.feedback.state

    @property
    def pending_confirmation(self) -> PendingConfirmation | None:
        return self.confirmation.pending

    @property
    def mode(self) -> ScanMode:
        return self.normalizer.mode

    @property
    def camera_error(self) -> str | None:
        return self.normalizer.camera_error

    def view(self) -> SessionView:
        return SessionView(
            mode=self.mode,
            camera_error=self.camera_error,
            cart=self.cart,
            feedback=self.feedback_state,
            pending_confirmation=self.pending_confirmation,
        )

    def line(self, line_id: str) -> LineSnapshot | None:
        return self.cart.line(line_id)
