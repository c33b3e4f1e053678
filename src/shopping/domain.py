"""Shopping bounded context — Scan & Go cart building.

Multiplexes wedge-scanner keystrokes and camera decodes into one ordered
stream of scan events, resolves each barcode against the catalogue and
applies the result to the shopper's cart.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

shopping = Domain(name="shopping")
