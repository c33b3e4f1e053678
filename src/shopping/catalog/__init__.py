"""Catalogue adapter registry — pluggable barcode lookup.

Uses ``FakeCatalog`` by default. Set ``CATALOG_ADAPTER=local`` to read the
in-process catalogue domain, or ``CATALOG_ADAPTER=http`` (with
``CATALOG_BASE_URL``) to resolve barcodes against a remote catalogue service.
The application installs ``LocalCatalog`` unless ``CATALOG_ADAPTER`` is set.
"""

import os

from shopping.catalog.port import CatalogPort

_catalog_instance: CatalogPort | None = None


def get_catalog() -> CatalogPort:
    """Return the configured catalogue adapter (singleton)."""
    global _catalog_instance
    if _catalog_instance is None:
        adapter = os.environ.get("CATALOG_ADAPTER", "fake")
        if adapter == "fake":
            from shopping.catalog.fake_adapter import FakeCatalog

            _catalog_instance = FakeCatalog()
        elif adapter == "local":
            from shopping.catalog.local_adapter import LocalCatalog

            _catalog_instance = LocalCatalog()
        elif adapter == "http":
            from shopping.catalog.http_adapter import HttpCatalog

            _catalog_instance = HttpCatalog(os.environ.get("CATALOG_BASE_URL", "http://localhost:8000"))
        else:
            raise ValueError(f"Unknown catalog adapter: {adapter}")
    return _catalog_instance


def set_catalog(catalog: CatalogPort) -> None:
    """Override the active catalogue adapter (useful for tests)."""
    global _catalog_instance
    _catalog_instance = catalog


def reset_catalog() -> None:
    """Reset the catalogue singleton."""
    global _catalog_instance
    _catalog_instance = None
