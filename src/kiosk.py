"""Console kiosk for ScanGo.

Treats standard input as a wedge scanner: every line typed (or sent by a
USB scanner in keyboard mode) is fed key by key, followed by Enter. Lines
starting with ``:`` are kiosk commands:

    :remove <line_id>   ask to remove a cart line
    :clear              ask to clear the cart
    :yes / :no          answer the pending confirmation
    :camera / :wedge    switch input channel
    :retry              retry the camera after a failure
    :quit               leave

Usage:
    python src/kiosk.py                          # fake catalogue
    python src/kiosk.py --catalog-url http://localhost:8000
"""

import argparse
import asyncio
import sys

from protean.exceptions import ValidationError


def _render(session) -> str:
    view = session.view()
    rows = [f"[{view.mode.value}] {view.feedback.text}"]
    if view.camera_error:
        rows.append(f"  camera error: {view.camera_error}")
    for line in view.cart.lines:
        rows.append(f"  {line.line_id:<8} {line.name:<24} {line.unit_price} x {line.quantity} = {line.subtotal}")
    rows.append(f"  {view.cart.item_count} item(s), total {view.cart.total}")
    if view.pending_confirmation:
        rows.append(f"  {view.pending_confirmation.message} (:yes / :no)")
    return "\n".join(rows)


def _command(session, line: str) -> bool:
    """Run a kiosk command. Returns False when the kiosk should exit."""
    from shopping.scanning.normalizer import ScanMode

    name, _, argument = line[1:].partition(" ")
    actions = {
        "remove": lambda: session.request_remove(argument.strip()),
        "clear": session.request_clear,
        "yes": session.confirm,
        "no": session.cancel,
        "camera": lambda: session.set_mode(ScanMode.CAMERA),
        "wedge": lambda: session.set_mode(ScanMode.WEDGE),
        "retry": session.retry_camera,
    }
    if name == "quit":
        return False
    if name not in actions:
        print(f"Unknown command: {name}")
        return True
    try:
        actions[name]()
    except ValidationError as exc:
        print(f"Rejected: {exc.messages}")
    return True


async def run(catalog_url: str | None) -> None:
    from shopping.catalog import set_catalog
    from shopping.catalog.http_adapter import HttpCatalog
    from shopping.domain import shopping
    from shopping.session import ScanSession
    from shopping.settings import ScanSettings

    shopping.init()
    if catalog_url:
        set_catalog(HttpCatalog(catalog_url))

    loop = asyncio.get_running_loop()
    with shopping.domain_context():
        async with ScanSession(settings=ScanSettings.from_env()) as session:
            print(_render(session))
            while True:
                line = await loop.run_in_executor(None, sys.stdin.readline)
                if not line:
                    break
                line = line.rstrip("\r\n")
                if line.startswith(":"):
                    if not _command(session, line):
                        break
                else:
                    session.press_keys([*line, "Enter"])
                    await session.settle()
                print(_render(session))
            await session.catalog.aclose()


def main():
    parser = argparse.ArgumentParser(description="ScanGo console kiosk")
    parser.add_argument(
        "--catalog-url",
        help="Resolve barcodes against this catalogue service (default: built-in sample products)",
    )
    args = parser.parse_args()

    asyncio.run(run(args.catalog_url))


if __name__ == "__main__":
    main()
