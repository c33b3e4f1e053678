"""ScanCart aggregate — the shopper's running cart for one session.

Lines are keyed by product id: scanning a product that is already in the
cart increments its line instead of adding a second one. Lines keep their
insertion order for stable display. The cart lives only as long as the
session and is never persisted.
"""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from shopping.cart.events import CartCleared, CartLineAdded, CartLineIncremented, CartLineRemoved
from shopping.catalog.product import Product
from shopping.domain import shopping

CENT = Decimal("0.01")


@shopping.entity(part_of="ScanCart")
class CartLine:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    barcode = String(required=True, max_length=100)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()

    @property
    def line_id(self) -> str:
        return str(self.product_id)

    @property
    def price(self) -> Decimal:
        return Decimal(str(self.unit_price))

    @property
    def subtotal(self) -> Decimal:
        return (self.price * self.quantity).quantize(CENT, rounding=ROUND_HALF_UP)


@shopping.aggregate
class ScanCart:
    lines = HasMany(CartLine)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_product(self):
        product_ids = [str(line.product_id) for line in self.lines]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"lines": ["Each product may only appear on one cart line"]})

    @invariant.post
    def line_quantities_must_be_positive(self):
        if any(line.quantity < 1 for line in self.lines):
            raise ValidationError({"lines": ["Cart line quantity must be at least 1"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls):
        now = datetime.now(UTC)
        return cls(created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def line_for(self, line_id) -> CartLine | None:
        return next((line for line in self.lines if str(line.product_id) == str(line_id)), None)

    @property
    def total(self) -> Decimal:
        return sum((line.price * line.quantity for line in self.lines), Decimal("0")).quantize(
            CENT, rounding=ROUND_HALF_UP
        )

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_product(self, product: Product) -> CartLine:
        """Insert a new line for ``product`` or increment its existing line."""
        now = datetime.now(UTC)
        existing = self.line_for(product.product_id)

        if existing:
            existing.quantity += 1
            line = existing
            self.updated_at = now
            self.raise_(
                CartLineIncremented(
                    cart_id=str(self.id),
                    line_id=line.line_id,
                    name=line.name,
                    quantity=line.quantity,
                )
            )
        else:
            line = CartLine(
                product_id=product.product_id,
                name=product.name,
                barcode=product.barcode,
                unit_price=product.unit_price,
                quantity=1,
                added_at=now,
            )
            self.add_lines(line)
            self.updated_at = now
            self.raise_(
                CartLineAdded(
                    cart_id=str(self.id),
                    line_id=line.line_id,
                    name=line.name,
                    barcode=line.barcode,
                )
            )

        return line

    def remove_line(self, line_id) -> bool:
        """Remove the line for ``line_id``. Absent lines are left alone."""
        line = self.line_for(line_id)
        if line is None:
            return False

        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartLineRemoved(cart_id=str(self.id), line_id=str(line_id)))
        return True

    def clear(self) -> int:
        """Remove every line. Returns how many lines were dropped."""
        lines = list(self.lines)
        for line in lines:
            self.remove_lines(line)

        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(cart_id=str(self.id), lines_removed=len(lines)))
        return len(lines)
