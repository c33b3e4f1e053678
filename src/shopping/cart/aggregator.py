"""Cart Aggregator — the only writer of the session's ``ScanCart``.

Every mutation runs to completion inside one synchronous call, so on the
cooperative event loop no mutation can observe another half-applied. After
each mutation the events raised by the aggregate are drained and handed to
subscribers (the feedback emitter among them).

Readers get ``CartSnapshot`` objects: frozen copies that share nothing
mutable with the aggregate.
"""

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal

import structlog
from protean.core.event import BaseEvent

from shopping.cart.cart import CartLine, ScanCart
from shopping.catalog.product import Product
from shopping.domain import shopping

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LineSnapshot:
    line_id: str
    product_id: str
    name: str
    barcode: str
    unit_price: Decimal
    quantity: int
    subtotal: Decimal

    @classmethod
    def of(cls, line: CartLine) -> "LineSnapshot":
        return cls(
            line_id=line.line_id,
            product_id=str(line.product_id),
            name=line.name,
            barcode=line.barcode,
            unit_price=line.price,
            quantity=line.quantity,
            subtotal=line.subtotal,
        )


@dataclass(frozen=True)
class CartSnapshot:
    lines: tuple[LineSnapshot, ...] = ()
    total: Decimal = Decimal("0.00")
    item_count: int = 0

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def line(self, line_id: str) -> LineSnapshot | None:
        return next((line for line in self.lines if line.line_id == str(line_id)), None)


class CartAggregator:
    def __init__(self, cart: ScanCart | None = None):
        with shopping.domain_context():
            self._cart = cart if cart is not None else ScanCart.create()
        self._subscribers: list[Callable[[BaseEvent], None]] = []

    @property
    def cart_id(self) -> str:
        return str(self._cart.id)

    def subscribe(self, subscriber: Callable[[BaseEvent], None]) -> None:
        self._subscribers.append(subscriber)

    def add_product(self, product: Product) -> LineSnapshot:
        with shopping.domain_context():
            line = self._cart.add_product(product)
            snapshot = LineSnapshot.of(line)
        logger.info("Product added", product_id=snapshot.product_id, quantity=snapshot.quantity)
        self._publish()
        return snapshot

    def remove_line(self, line_id: str) -> bool:
        with shopping.domain_context():
            removed = self._cart.remove_line(line_id)
        if removed:
            logger.info("Cart line removed", line_id=str(line_id))
        else:
            logger.debug("Cart line already gone", line_id=str(line_id))
        self._publish()
        return removed

    def clear(self) -> int:
        with shopping.domain_context():
            removed = self._cart.clear()
        logger.info("Cart cleared", lines_removed=removed)
        self._publish()
        return removed

    def snapshot(self) -> CartSnapshot:
        lines = tuple(LineSnapshot.of(line) for line in self._cart.lines)
        return CartSnapshot(lines=lines, total=self._cart.total, item_count=self._cart.item_count)

    def _publish(self) -> None:
        events = list(self._cart._events)
        self._cart._events.clear()
        for event in events:
            for subscriber in self._subscribers:
                subscriber(event)
