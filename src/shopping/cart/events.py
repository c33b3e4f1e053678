"""Domain events for the ScanCart aggregate."""

from protean.fields import Identifier, Integer, String

from shopping.domain import shopping


@shopping.event(part_of="ScanCart")
class CartLineAdded:
    """A product was scanned for the first time and got its own line."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    name = String(required=True)
    barcode = String(required=True)


@shopping.event(part_of="ScanCart")
class CartLineIncremented:
    """A product already in the cart was scanned again."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    name = String(required=True)
    quantity = Integer(required=True)


@shopping.event(part_of="ScanCart")
class CartLineRemoved:
    """A line was removed after the shopper confirmed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)


@shopping.event(part_of="ScanCart")
class CartCleared:
    """Every line was removed after the shopper confirmed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    lines_removed = Integer(required=True)
