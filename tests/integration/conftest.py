import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers

from agristore.api.routes import cart_router, catalog_router, checkout_router, order_router, wallet_router


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(checkout_router)
    app.include_router(order_router)
    app.include_router(wallet_router)
    app.include_router(catalog_router)
    register_exception_handlers(app)
    return TestClient(app)
