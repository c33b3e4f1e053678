"""Integration tests for the scan session API via TestClient."""

from contextlib import asynccontextmanager

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers
from shopping.api.routes import get_session, session_router, set_session


@pytest.fixture()
def session(make_session):
    session = make_session()
    set_session(session)
    return session


@pytest.fixture()
def client(session):
    @asynccontextmanager
    async def lifespan(app):
        yield
        await get_session().stop()

    app = FastAPI(lifespan=lifespan)
    app.include_router(session_router)
    register_exception_handlers(app)
    with TestClient(app) as client:
        yield client


def _scan(client, barcode, source="wedge"):
    response = client.post("/session/scans", json={"barcode": barcode, "source": source})
    assert response.status_code == 200
    return response.json()


class TestReadSession:
    def test_fresh_session_is_idle_and_empty(self, client):
        response = client.get("/session")
        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "wedge"
        assert data["cart"]["lines"] == []
        assert data["cart"]["total"] == 0
        assert data["feedback"] == {"kind": "idle", "text": "Ready to scan"}
        assert data["pending_confirmation"] is None


class TestScanning:
    def test_scan_known_barcode(self, client):
        data = _scan(client, "012345")
        assert data["cart"]["lines"][0]["name"] == "Milk 1L"
        assert data["cart"]["lines"][0]["quantity"] == 1
        assert data["cart"]["total"] == pytest.approx(1.99)
        assert data["feedback"]["text"] == "Milk 1L added to cart"

    def test_scan_unknown_barcode(self, client):
        data = _scan(client, "999999")
        assert data["cart"]["line_count"] == 0
        assert data["feedback"] == {"kind": "warning", "text": "Unknown barcode: 999999"}

    def test_wedge_keys(self, client):
        response = client.post("/session/keys", json={"keys": ["0", "1", "2", "3", "4", "8", "Enter"]})
        assert response.status_code == 200
        assert response.json()["cart"]["lines"][0]["name"] == "Apple (1kg)"

    def test_blank_barcode_rejected(self, client):
        response = client.post("/session/scans", json={"barcode": ""})
        assert response.status_code == 422


class TestCameraMode:
    def test_switch_mode_and_inject_decode(self, client, camera):
        response = client.put("/session/mode", json={"mode": "camera"})
        assert response.status_code == 200
        assert response.json()["mode"] == "camera"
        assert camera.is_open

        response = client.post("/session/camera/decodes", json={"text": "012346"})
        assert response.status_code == 200
        assert response.json()["cart"]["lines"][0]["name"] == "Whole Wheat Bread"

    def test_decode_rejected_when_camera_not_live(self, client):
        response = client.post("/session/camera/decodes", json={"text": "012346"})
        assert response.status_code == 409

    def test_decode_rejected_in_production(self, client, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        response = client.post("/session/camera/decodes", json={"text": "012346"})
        assert response.status_code == 403

    def test_camera_error_and_retry(self, client, camera):
        camera.configure(should_open=False, failure_reason="Camera permission denied")
        data = client.put("/session/mode", json={"mode": "camera"}).json()
        assert data["camera_error"] == "Camera permission denied"

        camera.configure(should_open=True)
        data = client.post("/session/camera/retry").json()
        assert data["camera_error"] is None


class TestConfirmations:
    def test_clear_requires_confirmation(self, client):
        _scan(client, "012345")
        data = client.post("/session/clear").json()
        assert data["pending_confirmation"]["intent"] == "clearCart"
        assert data["pending_confirmation"]["title"] == "Clear Cart"
        assert data["cart"]["line_count"] == 1

        data = client.post("/session/confirm").json()
        assert data["cart"]["line_count"] == 0
        assert data["pending_confirmation"] is None
        assert data["feedback"]["text"] == "Cart cleared"

    def test_remove_then_cancel(self, client):
        _scan(client, "012345")
        data = client.post("/session/lines/P1001/remove").json()
        assert data["pending_confirmation"]["target_line_id"] == "P1001"
        assert data["pending_confirmation"]["message"] == (
            "Are you sure you want to remove Milk 1L from your cart?"
        )

        data = client.post("/session/cancel").json()
        assert data["pending_confirmation"] is None
        assert data["cart"]["line_count"] == 1

    def test_remove_unknown_line_is_bad_request(self, client):
        response = client.post("/session/lines/P9999/remove")
        assert response.status_code == 400

    def test_second_request_is_bad_request(self, client):
        _scan(client, "012345")
        client.post("/session/clear")
        response = client.post("/session/lines/P1001/remove")
        assert response.status_code == 400

    def test_confirm_without_request_is_bad_request(self, client):
        response = client.post("/session/confirm")
        assert response.status_code == 400
