"""FastAPI endpoints for the scan session (presentation boundary)."""

import os

from fastapi import APIRouter, HTTPException

from shopping.api.schemas import CameraDecodeRequest, KeysRequest, ModeRequest, ScanRequest, SessionResponse
from shopping.scanning.camera.fake_adapter import FakeCamera
from shopping.scanning.events import ScanSource
from shopping.scanning.normalizer import ScanMode
from shopping.session import ScanSession
from shopping.settings import ScanSettings

session_router = APIRouter(prefix="/session", tags=["session"])

_session: ScanSession | None = None


def get_session() -> ScanSession:
    """Return the kiosk's scan session (singleton)."""
    global _session
    if _session is None:
        _session = ScanSession(settings=ScanSettings.from_env())
    return _session


def set_session(session: ScanSession) -> None:
    """Override the active scan session (useful for tests)."""
    global _session
    _session = session


def reset_session() -> None:
    global _session
    _session = None


async def _running_session() -> ScanSession:
    session = get_session()
    await session.start()
    return session


def _response(session: ScanSession) -> SessionResponse:
    return SessionResponse.from_view(session.view())


@session_router.get("", response_model=SessionResponse)
async def read_session() -> SessionResponse:
    return _response(await _running_session())


@session_router.post("/scans", response_model=SessionResponse)
async def submit_scan(body: ScanRequest) -> SessionResponse:
    session = await _running_session()
    session.scan_barcode(body.barcode, ScanSource(body.source))
    await session.settle()
    return _response(session)


@session_router.post("/keys", response_model=SessionResponse)
async def press_keys(body: KeysRequest) -> SessionResponse:
    session = await _running_session()
    session.press_keys(body.keys)
    await session.settle()
    return _response(session)


@session_router.put("/mode", response_model=SessionResponse)
async def set_mode(body: ModeRequest) -> SessionResponse:
    session = await _running_session()
    session.set_mode(ScanMode(body.mode))
    return _response(session)


@session_router.post("/camera/retry", response_model=SessionResponse)
async def retry_camera() -> SessionResponse:
    session = await _running_session()
    session.retry_camera()
    return _response(session)


@session_router.post("/camera/decodes", response_model=SessionResponse)
async def inject_camera_decode(body: CameraDecodeRequest) -> SessionResponse:
    """Push a decode through the FakeCamera (non-production only)."""
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Camera injection not available in production")

    session = await _running_session()
    camera = session.normalizer.camera
    if not isinstance(camera, FakeCamera):
        raise HTTPException(status_code=400, detail="Camera injection only available for FakeCamera")
    if not camera.emit(body.text):
        raise HTTPException(status_code=409, detail="Camera is not live")

    await session.settle()
    return _response(session)


@session_router.post("/lines/{line_id}/remove", response_model=SessionResponse)
async def request_remove(line_id: str) -> SessionResponse:
    session = await _running_session()
    session.request_remove(line_id)
    return _response(session)


@session_router.post("/clear", response_model=SessionResponse)
async def request_clear() -> SessionResponse:
    session = await _running_session()
    session.request_clear()
    return _response(session)


@session_router.post("/confirm", response_model=SessionResponse)
async def confirm() -> SessionResponse:
    session = await _running_session()
    session.confirm()
    return _response(session)


@session_router.post("/cancel", response_model=SessionResponse)
async def cancel() -> SessionResponse:
    session = await _running_session()
    session.cancel()
    return _response(session)
