"""Camera port — abstract interface for camera barcode decoders.

A decoder is opened with two callbacks: one for each successful decode and
one for hardware or permission failures after start-up. ``open`` raises
``CameraUnavailable`` when the device cannot be acquired. ``close`` must be
safe to call more than once and must stop all further callbacks.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

DecodeCallback = Callable[[str], None]
ErrorCallback = Callable[[str], None]


class CameraUnavailable(Exception):
    """The camera could not be acquired or the decoder failed to start."""


class CameraPort(ABC):
    """Abstract interface for camera decoder adapters."""

    @abstractmethod
    def open(self, on_decode: DecodeCallback, on_error: ErrorCallback) -> None:
        """Acquire the camera and start decoding."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Stop decoding and release the camera."""
        ...
