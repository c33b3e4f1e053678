"""Fake camera adapter — deterministic decoder for testing and development.

Decodes are pushed by calling ``emit()``; failures by ``fail()`` or by
configuring the next ``open()`` to raise.
"""

from shopping.scanning.camera.port import CameraPort, CameraUnavailable, DecodeCallback, ErrorCallback


class FakeCamera(CameraPort):
    """Fake camera that opens successfully by default."""

    def __init__(self):
        self.should_open = True
        self.failure_reason = "Camera permission denied"
        self.open_count = 0
        self.close_count = 0
        self._on_decode: DecodeCallback | None = None
        self._on_error: ErrorCallback | None = None

    def configure(self, should_open: bool = True, failure_reason: str = "Camera permission denied"):
        """Configure the fake camera behavior for testing."""
        self.should_open = should_open
        self.failure_reason = failure_reason

    @property
    def is_open(self) -> bool:
        return self._on_decode is not None

    def open(self, on_decode: DecodeCallback, on_error: ErrorCallback) -> None:
        self.open_count += 1
        if not self.should_open:
            raise CameraUnavailable(self.failure_reason)
        self._on_decode = on_decode
        self._on_error = on_error

    def close(self) -> None:
        if self._on_decode is not None:
            self.close_count += 1
        self._on_decode = None
        self._on_error = None

    def emit(self, decoded_text: str) -> bool:
        """Simulate a successful decode. Returns False if the camera is closed."""
        if self._on_decode is None:
            return False
        self._on_decode(decoded_text)
        return True

    def fail(self, reason: str) -> bool:
        """Simulate a runtime hardware failure."""
        if self._on_error is None:
            return False
        self._on_error(reason)
        return True
