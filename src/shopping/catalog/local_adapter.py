"""Local catalogue adapter: resolves barcodes against the in-process catalogue domain.

Used when the catalogue and the shopping engine run in the same application,
so products registered through ``POST /api/products`` are scannable at once.
"""

import structlog

from shopping.catalog.port import CatalogPort
from shopping.catalog.product import Product

logger = structlog.get_logger(__name__)


class LocalCatalog(CatalogPort):
    """Catalogue adapter that reads the catalogue domain's repository directly."""

    async def lookup(self, barcode: str) -> Product | None:
        from catalogue.domain import catalogue
        from catalogue.product.registration import find_by_barcode

        with catalogue.domain_context():
            record = find_by_barcode(barcode)
            payload = record.to_payload() if record is not None else None

        if payload is None:
            return None
        logger.debug("Catalogue record found", barcode=barcode, product_id=payload["id"])
        return Product.from_payload(payload, barcode=barcode)
