"""Fake catalogue adapter — in-memory sample products for development and tests.

Latency and failures are configurable per barcode so that ordering and
degradation paths can be exercised without a catalogue service.
"""

import asyncio

from shopping.catalog.port import CatalogPort
from shopping.catalog.product import Product

SAMPLE_PRODUCTS = [
    {"id": "P1001", "name": "Milk 1L", "price": 1.99, "quantity": 40, "barcode": "012345"},
    {"id": "P1002", "name": "Whole Wheat Bread", "price": 0.99, "quantity": 25, "barcode": "012346"},
    {"id": "P1003", "name": "Eggs 12pc", "price": 3.49, "quantity": 30, "barcode": "012347"},
    {"id": "P1004", "name": "Apple (1kg)", "price": 2.59, "quantity": 50, "barcode": "012348"},
]


class CatalogUnavailable(Exception):
    """Raised by the fake catalogue when configured to fail."""


class FakeCatalog(CatalogPort):
    """Fake catalogue backed by a barcode → payload dict."""

    def __init__(self, products: list[dict] | None = None):
        self._products = {p["barcode"]: dict(p) for p in (products if products is not None else SAMPLE_PRODUCTS)}
        self._delays: dict[str, float] = {}
        self.should_succeed = True
        self.failure_reason = "Catalogue unavailable"
        self.lookups: list[str] = []

    def configure(self, should_succeed: bool = True, failure_reason: str = "Catalogue unavailable"):
        """Configure the fake catalogue behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def add(self, payload: dict) -> None:
        self._products[payload["barcode"]] = dict(payload)

    def set_delay(self, barcode: str, seconds: float) -> None:
        """Delay responses for one barcode to simulate a slow round-trip."""
        self._delays[barcode] = seconds

    async def lookup(self, barcode: str) -> Product | None:
        self.lookups.append(barcode)
        delay = self._delays.get(barcode, 0.0)
        if delay:
            await asyncio.sleep(delay)
        if not self.should_succeed:
            raise CatalogUnavailable(self.failure_reason)

        payload = self._products.get(barcode)
        if payload is None:
            return None
        return Product.from_payload(payload, barcode=barcode)
