"""Shared BDD fixtures and step definitions for the shopping engine.

A scenario runs on one event loop that outlives every step, so the session's
consumer task and in-flight lookups survive between steps. Time only moves
when a step advances the simulated clock.
"""

import asyncio
from decimal import Decimal

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when
from shopping.scanning.normalizer import ScanMode


@pytest.fixture()
def loop():
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture()
def error():
    """Container for capturing rejected intents."""
    return {"exc": None}


@pytest.fixture()
def settle(loop):
    def _settle(session):
        loop.run_until_complete(session.settle())

    return _settle


@pytest.fixture()
def session(make_session, loop):
    async def start():
        session = make_session()
        await session.start()
        return session

    session = loop.run_until_complete(start())
    yield session
    loop.run_until_complete(session.stop())


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a running scan session")
def running_session(session):
    assert session.running


@given(parsers.cfparse('the shopper has scanned "{barcode}"'))
def shopper_has_scanned(session, settle, barcode):
    session.press_keys([*barcode, "Enter"])
    settle(session)


@given("the shopper is in camera mode")
def in_camera_mode(session):
    session.set_mode(ScanMode.CAMERA)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the shopper scans "{barcode}" with the wedge'))
def scan_with_wedge(session, settle, barcode):
    session.press_keys([*barcode, "Enter"])
    settle(session)


@when(parsers.cfparse('the camera decodes "{barcode}"'))
@then(parsers.cfparse('the camera decodes "{barcode}"'))
def camera_decodes(session, camera, settle, barcode):
    camera.emit(barcode)
    settle(session)


@when(parsers.cfparse("{millis:d} ms pass"))
def time_passes(clock, millis):
    clock.advance(millis / 1000)


@when("the shopper switches to camera mode")
def switch_to_camera(session):
    session.set_mode(ScanMode.CAMERA)


@when("the shopper switches to wedge mode")
def switch_to_wedge(session):
    session.set_mode(ScanMode.WEDGE)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart has {count:d} line"))
def cart_has_n_line_singular(session, count):
    assert session.cart.line_count == count


@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_n_lines(session, count):
    assert session.cart.line_count == count


@then(parsers.cfparse('line "{line_id}" has quantity {quantity:d}'))
def line_has_quantity(session, line_id, quantity):
    line = session.line(line_id)
    assert line is not None
    assert line.quantity == quantity


@then(parsers.cfparse("the cart total is {total}"))
def cart_total_is(session, total):
    assert session.cart.total == Decimal(total)


@then(parsers.cfparse('the feedback shows {kind} "{text}"'))
def feedback_shows(session, kind, text):
    assert session.feedback_state.kind.value == kind
    assert session.feedback_state.text == text


@then("the request is rejected")
def request_rejected(error):
    assert isinstance(error["exc"], ValidationError)
