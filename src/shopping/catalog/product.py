"""Product value object — the catalogue record as the shopping context sees it."""

from decimal import Decimal

from protean.fields import Float, String

from shopping.domain import shopping


@shopping.value_object
class Product:
    """Immutable product snapshot returned by a catalogue lookup.

    ``unit_price`` is stored as a float, like every price in the catalogue.
    ``price`` rebuilds the decimal from the float's shortest repr, which
    gives back the catalogue's digits exactly for prices of up to 15
    significant digits. Money arithmetic is done on ``price`` only.
    """

    product_id = String(required=True, max_length=100)
    name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    barcode = String(required=True, max_length=100)

    @property
    def price(self) -> Decimal:
        """Unit price as a decimal, free of binary float artefacts."""
        return Decimal(str(self.unit_price))

    @classmethod
    def from_payload(cls, payload: dict, barcode: str | None = None) -> "Product":
        """Build from the catalogue wire format ``{id, name, price, quantity, barcode}``."""
        return cls(
            product_id=str(payload["id"]),
            name=str(payload["name"]),
            unit_price=float(payload["price"]),
            barcode=str(payload.get("barcode") or barcode),
        )
