"""Catalogue bounded context — products that can be scanned in store.

Serves product records by barcode to the shopping context's catalogue
adapter.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

catalogue = Domain(name="catalogue")
