"""Product aggregate — a sellable item identified in store by its barcode."""

from protean.exceptions import ValidationError
from protean.fields import Float, Integer, String

from catalogue.domain import catalogue


@catalogue.aggregate
class Product:
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(default=0, min_value=0)  # Shelf stock, informational only
    barcode = String(required=True, max_length=100)

    @classmethod
    def register(cls, name, price, barcode, quantity=0, product_id=None):
        barcode = (barcode or "").strip()
        if not barcode:
            raise ValidationError({"barcode": ["Barcode cannot be blank"]})

        fields = {"name": name, "price": price, "quantity": quantity, "barcode": barcode}
        if product_id:
            fields["id"] = product_id
        return cls(**fields)

    def to_payload(self) -> dict:
        """Wire format served to scanners."""
        return {
            "id": str(self.id),
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "barcode": self.barcode,
        }
