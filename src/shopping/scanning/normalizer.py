"""Input Normalizer — turns raw device input into ``ScanEvent``s.

Two channels feed one inbound queue:

- the wedge channel receives key presses from a keyboard-emulating scanner
  and emits one event per terminated, non-blank line;
- the camera channel receives decode callbacks from a camera decoder and
  emits one event per successful decode.

Only the channel matching the current mode is live. The camera is held
through a ``CameraHandle`` that is acquired when camera mode is enabled and
released when it is disabled, when the decoder reports a failure, or on
teardown.
"""

import asyncio
from collections.abc import Callable, Iterable
from enum import Enum

import structlog

from shopping.clock import Clock
from shopping.scanning.camera.port import CameraPort, CameraUnavailable
from shopping.scanning.events import ScanEvent, ScanSource
from shopping.settings import WEDGE_TERMINATORS

logger = structlog.get_logger(__name__)


class ScanMode(Enum):
    WEDGE = "wedge"
    CAMERA = "camera"


class WedgeBuffer:
    """Accumulates wedge key presses until a terminator key arrives."""

    def __init__(self, terminators: Iterable[str] = WEDGE_TERMINATORS):
        self.terminators = frozenset(terminators)
        self._chars: list[str] = []

    def press(self, key: str) -> str | None:
        """Feed one key. Returns the trimmed barcode on a non-blank terminated line."""
        if key in self.terminators:
            text = "".join(self._chars).strip()
            self._chars.clear()
            return text or None

        # Named keys (Shift, Tab, ...) carry no barcode characters
        if len(key) == 1:
            self._chars.append(key)
        return None

    def reset(self) -> None:
        self._chars.clear()

    @property
    def pending(self) -> str:
        return "".join(self._chars)


class CameraHandle:
    """Exclusive, scoped ownership of the camera decoder.

    Callbacks delivered after ``release()`` are dropped, so a decoder that
    fires late cannot leak events past a mode switch.
    """

    def __init__(self, port: CameraPort, on_decode: Callable[[str], None], on_error: Callable[[str], None]):
        self._port = port
        self._on_decode = on_decode
        self._on_error = on_error
        self._live = False
        self._released = False

    @property
    def live(self) -> bool:
        return self._live

    def acquire(self) -> "CameraHandle":
        try:
            self._port.open(self._decoded, self._failed)
        except BaseException:
            self.release()
            raise
        self._live = True
        return self

    def release(self) -> None:
        self._live = False
        if self._released:
            return
        self._released = True
        self._port.close()

    def _decoded(self, text: str) -> None:
        if self._live:
            self._on_decode(text)

    def _failed(self, reason: str) -> None:
        if self._live:
            self._on_error(reason)

    def __enter__(self) -> "CameraHandle":
        return self.acquire()

    def __exit__(self, *exc_info) -> None:
        self.release()


class InputNormalizer:
    """Multiplexes the wedge and camera channels into one inbound queue."""

    def __init__(
        self,
        queue: asyncio.Queue,
        clock: Clock,
        camera: CameraPort,
        terminators: Iterable[str] = WEDGE_TERMINATORS,
    ):
        self._queue = queue
        self._clock = clock
        self._camera = camera
        self._wedge = WedgeBuffer(terminators)
        self._handle: CameraHandle | None = None
        self.mode = ScanMode.WEDGE
        self.camera_error: str | None = None

    @property
    def camera(self) -> CameraPort:
        return self._camera

    @property
    def camera_live(self) -> bool:
        return self._handle is not None and self._handle.live

    # -------------------------------------------------------------------
    # Wedge channel
    # -------------------------------------------------------------------
    def press_key(self, key: str) -> ScanEvent | None:
        if self.mode != ScanMode.WEDGE:
            return None

        barcode = self._wedge.press(key)
        if barcode is None:
            return None
        return self._emit(barcode, ScanSource.WEDGE)

    # -------------------------------------------------------------------
    # Camera channel
    # -------------------------------------------------------------------
    def _camera_decoded(self, text: str) -> None:
        barcode = (text or "").strip()
        if barcode:
            self._emit(barcode, ScanSource.CAMERA)

    def _camera_failed(self, reason: str) -> None:
        logger.warning("Camera failed", reason=reason)
        self._release_camera()
        self.camera_error = reason or "Camera unavailable"

    # -------------------------------------------------------------------
    # Mode control
    # -------------------------------------------------------------------
    def set_mode(self, mode: ScanMode) -> None:
        mode = ScanMode(mode)
        if mode == self.mode:
            return

        self._release_camera()
        self._wedge.reset()
        self.camera_error = None
        self.mode = mode
        logger.info("Scan mode switched", mode=mode.value)

        if mode == ScanMode.CAMERA:
            self._enable_camera()

    def retry_camera(self) -> None:
        """Re-acquire the camera after a failure. Ignored outside camera mode."""
        if self.mode != ScanMode.CAMERA:
            return
        self._release_camera()
        self.camera_error = None
        self._enable_camera()

    def close(self) -> None:
        self._release_camera()
        self._wedge.reset()

    def _enable_camera(self) -> None:
        handle = CameraHandle(self._camera, self._camera_decoded, self._camera_failed)
        try:
            handle.acquire()
        except CameraUnavailable as exc:
            self.camera_error = str(exc) or "Camera unavailable"
            logger.warning("Camera unavailable", reason=self.camera_error)
            return
        except Exception as exc:
            self.camera_error = f"Camera failed to start: {exc}"
            logger.exception("Camera decoder failed to start")
            return
        self._handle = handle

    def _release_camera(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.release()

    def _emit(self, barcode: str, source: ScanSource) -> ScanEvent:
        event = ScanEvent(barcode=barcode, source=source, observed_at=self._clock.now())
        self._queue.put_nowait(event)
        logger.debug("Scan normalized", barcode=barcode, source=source.value)
        return event
