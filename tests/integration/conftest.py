"""Fixtures for cross-context tests: the shopping engine resolving barcodes
against the catalogue service over HTTP (in-process ASGI transport).
"""

import os

import pytest


@pytest.fixture(scope="session")
def scango_app(request):
    """Import the application, which initializes both domains."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from app import app

    return app


@pytest.fixture
def catalogue_ctx(scango_app):
    """Push catalogue domain context with sample products, cleaning up after."""
    from catalogue.domain import catalogue
    from catalogue.product.seed import seed_sample_products

    ctx = catalogue.domain_context()
    ctx.push()
    seed_sample_products()

    yield catalogue

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture
def shopping_ctx(scango_app, catalogue_ctx):
    """Push shopping domain context on top of the catalogue one."""
    from shopping.domain import shopping

    ctx = shopping.domain_context()
    ctx.push()

    yield shopping

    ctx.pop()
