"""OpenCV camera adapter: webcam capture decoded with zxing-cpp.

Frames are grabbed and decoded on a worker thread. Decodes and failures are
handed back to the asyncio loop with ``call_soon_threadsafe`` so that the
normalizer only ever runs on the loop thread.

OpenCV and zxing-cpp come from the ``camera`` extra and are imported when
the camera is first opened.
"""

import asyncio
import threading

import structlog

from shopping.scanning.camera.port import CameraPort, CameraUnavailable, DecodeCallback, ErrorCallback

logger = structlog.get_logger(__name__)


def _decoder_libraries():
    """Import OpenCV and zxing-cpp, reporting a missing ``camera`` extra as ``CameraUnavailable``."""
    try:
        import cv2
        import zxingcpp
    except ImportError as exc:
        raise CameraUnavailable(f"Camera decoder not installed: {exc.name}") from exc
    return cv2, zxingcpp


class OpenCVCamera(CameraPort):
    """Continuous barcode decoding from a local camera."""

    def __init__(self, camera_index: int = 0, width: int = 1280, height: int = 720, read_failures: int = 30):
        self.camera_index = camera_index
        self.width = width
        self.height = height
        self.read_failures = read_failures
        self._capture = None
        self._thread: threading.Thread | None = None
        self._stop = threading.Event()

    def open(self, on_decode: DecodeCallback, on_error: ErrorCallback) -> None:
        cv2, zxingcpp = _decoder_libraries()

        loop = asyncio.get_running_loop()
        capture = cv2.VideoCapture(self.camera_index)
        if not capture.isOpened():
            capture.release()
            raise CameraUnavailable(f"Cannot open camera {self.camera_index}")

        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        if hasattr(cv2, "CAP_PROP_BUFFERSIZE"):
            capture.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        self._capture = capture
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run,
            args=(cv2, zxingcpp, capture, loop, on_decode, on_error),
            name=f"camera-{self.camera_index}",
            daemon=True,
        )
        self._thread.start()
        logger.info("Camera opened", camera_index=self.camera_index)

    def _run(self, cv2, zxingcpp, capture, loop, on_decode, on_error) -> None:
        try:
            self._decode_frames(cv2, zxingcpp, capture, loop, on_decode, on_error)
        except Exception as exc:
            logger.exception("Camera decoder crashed", camera_index=self.camera_index)
            self._report(loop, on_error, f"Camera decoder failed: {exc}")

    def _decode_frames(self, cv2, zxingcpp, capture, loop, on_decode, on_error) -> None:
        misses = 0
        while not self._stop.is_set():
            ok, frame = capture.read()
            if not ok:
                misses += 1
                if misses >= self.read_failures:
                    self._report(loop, on_error, "Camera stopped delivering frames")
                    return
                continue
            misses = 0

            gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
            for result in zxingcpp.read_barcodes(gray):
                if result.text and not self._stop.is_set():
                    loop.call_soon_threadsafe(on_decode, result.text)

    def _report(self, loop, on_error, reason: str) -> None:
        if self._stop.is_set() or loop.is_closed():
            return
        loop.call_soon_threadsafe(on_error, reason)

    def close(self) -> None:
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=2.0)
        capture, self._capture = self._capture, None
        if capture is not None:
            capture.release()
            logger.info("Camera released", camera_index=self.camera_index)
