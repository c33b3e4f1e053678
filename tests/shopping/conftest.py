import asyncio

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def shopping_bed():
    from shopping.domain import shopping

    bed = DomainFixture(shopping)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(shopping_bed):
    with shopping_bed.domain_context():
        yield


@pytest.fixture()
def clock():
    from shopping.clock import ManualClock

    return ManualClock(start=100.0)


@pytest.fixture()
def catalog():
    from shopping.catalog.fake_adapter import FakeCatalog

    return FakeCatalog()


@pytest.fixture()
def camera():
    from shopping.scanning.camera.fake_adapter import FakeCamera

    return FakeCamera()


@pytest.fixture()
def make_session(catalog, camera, clock):
    """Build a ScanSession wired to the fakes and the simulated clock."""
    from shopping.session import ScanSession

    def _make(**overrides):
        options = {"catalog": catalog, "camera": camera, "clock": clock}
        options.update(overrides)
        return ScanSession(**options)

    return _make


@pytest.fixture()
def run():
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run
