"""Camera adapter registry — pluggable camera barcode decoders.

Uses ``FakeCamera`` by default. Set ``CAMERA_ADAPTER=opencv`` (and
optionally ``CAMERA_INDEX``) to decode from a local webcam; this needs the
``camera`` extra installed.
"""

import os

from shopping.scanning.camera.port import CameraPort, CameraUnavailable

__all__ = ["CameraPort", "CameraUnavailable", "get_camera", "reset_camera", "set_camera"]

_camera_instance: CameraPort | None = None


def get_camera() -> CameraPort:
    """Return the configured camera adapter (singleton)."""
    global _camera_instance
    if _camera_instance is None:
        adapter = os.environ.get("CAMERA_ADAPTER", "fake")
        if adapter == "fake":
            from shopping.scanning.camera.fake_adapter import FakeCamera

            _camera_instance = FakeCamera()
        elif adapter == "opencv":
            from shopping.scanning.camera.opencv_adapter import OpenCVCamera

            _camera_instance = OpenCVCamera(camera_index=int(os.environ.get("CAMERA_INDEX", "0")))
        else:
            raise ValueError(f"Unknown camera adapter: {adapter}")
    return _camera_instance


def set_camera(camera: CameraPort) -> None:
    """Override the active camera adapter (useful for tests)."""
    global _camera_instance
    _camera_instance = camera


def reset_camera() -> None:
    """Reset the camera singleton."""
    global _camera_instance
    _camera_instance = None
