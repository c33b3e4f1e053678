"""Sample products for demo kiosks and local development."""

import structlog
from protean.utils.globals import current_domain

from catalogue.product.registration import RegisterProduct, find_by_barcode

logger = structlog.get_logger(__name__)

SAMPLE_PRODUCTS = [
    {"product_id": "P1001", "name": "Milk 1L", "price": 1.99, "quantity": 40, "barcode": "012345"},
    {"product_id": "P1002", "name": "Whole Wheat Bread", "price": 0.99, "quantity": 25, "barcode": "012346"},
    {"product_id": "P1003", "name": "Eggs 12pc", "price": 3.49, "quantity": 30, "barcode": "012347"},
    {"product_id": "P1004", "name": "Apple (1kg)", "price": 2.59, "quantity": 50, "barcode": "012348"},
]


def seed_sample_products() -> int:
    """Register any sample product whose barcode is not yet known. Returns how many were added."""
    added = 0
    for sample in SAMPLE_PRODUCTS:
        if find_by_barcode(sample["barcode"]) is not None:
            continue
        current_domain.process(RegisterProduct(**sample), asynchronous=False)
        added += 1

    logger.info("Sample products seeded", added=added)
    return added
