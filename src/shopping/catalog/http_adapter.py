"""HTTP catalogue adapter — talks to the catalogue service over HTTP.

Wire format: ``GET {base_url}/api/products/barcode/{barcode}`` answers
``{id, name, price, quantity, barcode}`` or 404 when the barcode is unknown.
"""

from urllib.parse import quote

import httpx
import structlog

from shopping.catalog.port import CatalogPort
from shopping.catalog.product import Product

logger = structlog.get_logger(__name__)


class HttpCatalog(CatalogPort):
    """Catalogue adapter backed by an ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def lookup(self, barcode: str) -> Product | None:
        response = await self._client.get(f"/api/products/barcode/{quote(barcode, safe='')}")
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()

        payload = response.json()
        logger.debug("Catalogue responded", barcode=barcode, product_id=str(payload.get("id")))
        return Product.from_payload(payload, barcode=barcode)

    async def aclose(self) -> None:
        await self._client.aclose()
