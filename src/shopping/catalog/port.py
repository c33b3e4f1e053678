"""Catalogue port — abstract barcode lookup consumed by the Lookup Gate.

Adapters answer with a ``Product`` or ``None`` when the barcode is unknown.
Transport problems are raised; the gate treats them like an unknown barcode.
"""

from abc import ABC, abstractmethod

from shopping.catalog.product import Product


class CatalogPort(ABC):
    """Abstract interface for catalogue adapters."""

    @abstractmethod
    async def lookup(self, barcode: str) -> Product | None:
        """Resolve a barcode to a product, or ``None`` when not found."""
        ...

    async def aclose(self) -> None:
        """Release transport resources held by the adapter."""
        return None
