"""AgriStore FastAPI application.

Processes commands synchronously over HTTP. Every request runs inside the
agristore domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the domain.toml overlay (e.g. "production" -> PostgreSQL).
import os
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from agristore.domain import agristore
from agristore.utils.logging import bind_request_context, clear_request_context, configure_logging

configure_logging()
agristore.init()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Seed the discount catalogue (and demo products on request) at startup."""
    from agristore.catalog.seed import seed_demo_products, seed_discount_codes

    with agristore.domain_context():
        seed_discount_codes()
        if os.getenv("AGRISTORE_SEED_DEMO_PRODUCTS", "").lower() in ("1", "true", "yes"):
            seed_demo_products()

    logger.info("AgriStore API started", domain=agristore.name)
    yield


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="AgriStore API",
    description="Agricultural marketplace: cart, checkout and order lifecycle",
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
    """Push the agristore domain context for each request."""
    bind_request_context(method=request.method, path=request.url.path)
    try:
        with agristore.domain_context():
            response = await call_next(request)
    finally:
        clear_request_context()
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from agristore.api.routes import (  # noqa: E402
    cart_router,
    catalog_router,
    checkout_router,
    order_router,
    wallet_router,
)

app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(order_router)
app.include_router(wallet_router)
app.include_router(catalog_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": agristore.name})
