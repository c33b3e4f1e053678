"""ScanGo FastAPI application.

Serves the scan session used by the in-store kiosk and the catalogue the
session resolves barcodes against. Each request is wrapped in the correct
domain context based on URL prefix.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

import os
from contextlib import asynccontextmanager

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
from catalogue.domain import catalogue  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers
from shopping.domain import shopping  # noqa: E402

catalogue.init()
shopping.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/api/products": catalogue,
    "/session": shopping,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    from catalogue.product.seed import seed_sample_products
    from shopping.api.routes import get_session
    from shopping.catalog import set_catalog
    from shopping.catalog.local_adapter import LocalCatalog

    with catalogue.domain_context():
        seed_sample_products()

    if "CATALOG_ADAPTER" not in os.environ:
        set_catalog(LocalCatalog())

    with shopping.domain_context():
        session = get_session()
        await session.start()
    try:
        yield
    finally:
        await session.stop()
        await session.catalog.aclose()


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="ScanGo API",
    description="Scan & Go — barcode scanning cart and product catalogue",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match: health check and docs pass through
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from catalogue.api import product_router  # noqa: E402
from shopping.api import session_router  # noqa: E402

app.include_router(product_router)
app.include_router(session_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "catalogue": {"name": catalogue.name},
                "shopping": {"name": shopping.name},
            },
        }
    )
