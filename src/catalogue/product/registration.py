"""Product registration — command, handler and barcode lookup."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product


def find_by_barcode(barcode: str) -> Product | None:
    """Return the product carrying ``barcode``, if any. Barcodes match exactly."""
    products = current_domain.repository_for(Product)._dao.query.filter(barcode=barcode).all().items
    return products[0] if products else None


@catalogue.command(part_of="Product")
class RegisterProduct:
    product_id = Identifier()
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(default=0, min_value=0)
    barcode = String(required=True, max_length=100)


@catalogue.command_handler(part_of=Product)
class RegisterProductHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        if find_by_barcode(command.barcode) is not None:
            raise ValidationError({"barcode": [f"Barcode {command.barcode} is already registered"]})

        product = Product.register(
            name=command.name,
            price=command.price,
            barcode=command.barcode,
            quantity=command.quantity,
            product_id=command.product_id,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)
