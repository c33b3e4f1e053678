"""Scanning against the real catalogue API through HttpCatalog."""

import asyncio
from decimal import Decimal

import httpx
from fastapi.testclient import TestClient
from shopping.catalog.http_adapter import HttpCatalog
from shopping.catalog.local_adapter import LocalCatalog
from shopping.clock import ManualClock
from shopping.feedback.emitter import FeedbackKind
from shopping.scanning.camera.fake_adapter import FakeCamera
from shopping.session import ScanSession


def _catalog(app):
    return HttpCatalog("http://scango.test", transport=httpx.ASGITransport(app=app))


async def _scan_all(app, barcodes):
    catalog = _catalog(app)
    session = ScanSession(catalog=catalog, camera=FakeCamera(), clock=ManualClock())
    try:
        async with session:
            for barcode in barcodes:
                session.scan_barcode(barcode)
            await session.settle()
            return session.view()
    finally:
        await catalog.aclose()


class TestHttpCatalog:
    def test_lookup_known_barcode(self, scango_app, shopping_ctx):
        async def lookup():
            catalog = _catalog(scango_app)
            try:
                return await catalog.lookup("012347")
            finally:
                await catalog.aclose()

        product = asyncio.run(lookup())
        assert product.product_id == "P1003"
        assert product.name == "Eggs 12pc"
        assert product.price == Decimal("3.49")

    def test_lookup_unknown_barcode_is_none(self, scango_app, shopping_ctx):
        async def lookup():
            catalog = _catalog(scango_app)
            try:
                return await catalog.lookup("999999")
            finally:
                await catalog.aclose()

        assert asyncio.run(lookup()) is None


class TestScanToCart:
    def test_scans_build_the_cart(self, scango_app, shopping_ctx):
        view = asyncio.run(_scan_all(scango_app, ["012345", "012346", "012345"]))

        assert [(line.name, line.quantity) for line in view.cart.lines] == [
            ("Milk 1L", 2),
            ("Whole Wheat Bread", 1),
        ]
        assert view.cart.total == Decimal("4.97")

    def test_unknown_barcode_leaves_cart_untouched(self, scango_app, shopping_ctx):
        view = asyncio.run(_scan_all(scango_app, ["999999"]))

        assert view.cart.is_empty
        assert view.feedback.kind == FeedbackKind.WARNING


class TestApplication:
    def test_health(self, scango_app, catalogue_ctx):
        with TestClient(scango_app) as client:
            response = client.get("/health")
        assert response.status_code == 200
        assert set(response.json()["domains"]) == {"catalogue", "shopping"}

    def test_session_routes_mounted(self, scango_app, catalogue_ctx):
        with TestClient(scango_app) as client:
            response = client.post("/session/scans", json={"barcode": "012348"})
        assert response.status_code == 200
        assert response.json()["cart"]["lines"][0]["name"] == "Apple (1kg)"

    def test_registered_product_is_scannable(self, scango_app, catalogue_ctx, monkeypatch):
        monkeypatch.delenv("CATALOG_ADAPTER", raising=False)
        product = {"product_id": "P2001", "name": "Orange Juice 1L", "price": 2.49, "quantity": 20, "barcode": "555001"}

        with TestClient(scango_app) as client:
            assert client.post("/api/products", json=product).status_code == 201
            response = client.post("/session/scans", json={"barcode": "555001"})

        body = response.json()
        assert [(line["name"], line["quantity"]) for line in body["cart"]["lines"]] == [("Orange Juice 1L", 1)]
        assert body["cart"]["total"] == 2.49
        assert body["feedback"]["kind"] == "success"

    def test_explicit_catalog_adapter_is_honoured(self, scango_app, catalogue_ctx, monkeypatch):
        monkeypatch.setenv("CATALOG_ADAPTER", "fake")
        product = {"product_id": "P2002", "name": "Butter 250g", "price": 2.19, "quantity": 10, "barcode": "555002"}

        with TestClient(scango_app) as client:
            client.post("/api/products", json=product)
            response = client.post("/session/scans", json={"barcode": "555002"})

        assert response.json()["cart"]["lines"] == []
        assert response.json()["feedback"]["kind"] == "warning"


class TestLocalCatalog:
    def test_lookup_known_barcode(self, scango_app, shopping_ctx):
        product = asyncio.run(LocalCatalog().lookup("012347"))

        assert product.product_id == "P1003"
        assert product.name == "Eggs 12pc"
        assert product.price == Decimal("3.49")
        assert product.barcode == "012347"

    def test_lookup_unknown_barcode_is_none(self, scango_app, shopping_ctx):
        assert asyncio.run(LocalCatalog().lookup("999999")) is None

    def test_scans_build_the_cart(self, scango_app, shopping_ctx):
        async def scan():
            session = ScanSession(catalog=LocalCatalog(), camera=FakeCamera(), clock=ManualClock())
            async with session:
                session.scan_barcode("012348")
                session.scan_barcode("012348")
                await session.settle()
                return session.view()

        view = asyncio.run(scan())

        assert [(line.product_id, line.quantity) for line in view.cart.lines] == [("P1004", 2)]
