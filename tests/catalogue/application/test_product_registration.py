"""Application tests for product registration via domain.process()."""

import pytest
from catalogue.product.product import Product
from catalogue.product.registration import RegisterProduct, find_by_barcode
from catalogue.product.seed import SAMPLE_PRODUCTS, seed_sample_products
from protean import current_domain
from protean.exceptions import ValidationError


def _register(**overrides):
    fields = {"product_id": "P2001", "name": "Orange Juice 1L", "price": 2.49, "barcode": "012349"}
    fields.update(overrides)
    return current_domain.process(RegisterProduct(**fields), asynchronous=False)


class TestRegisterProduct:
    def test_register_persists_product(self):
        product_id = _register()
        assert product_id == "P2001"

        product = current_domain.repository_for(Product).get(product_id)
        assert product.name == "Orange Juice 1L"
        assert product.barcode == "012349"

    def test_duplicate_barcode_rejected(self):
        _register()
        with pytest.raises(ValidationError) as exc:
            _register(product_id="P2002", name="Another")
        assert "barcode" in exc.value.messages


class TestFindByBarcode:
    def test_exact_match(self):
        _register()
        assert find_by_barcode("012349").id == "P2001"

    def test_no_partial_match(self):
        _register()
        assert find_by_barcode("01234") is None


class TestSeed:
    def test_seed_registers_sample_products(self):
        assert seed_sample_products() == len(SAMPLE_PRODUCTS)
        assert find_by_barcode("012345").name == "Milk 1L"
        assert find_by_barcode("012348").name == "Apple (1kg)"

    def test_seed_is_idempotent(self):
        seed_sample_products()
        assert seed_sample_products() == 0
