import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient


@pytest.fixture
def client():
    """Minimal FastAPI client with every marketplace router and the error handlers."""
    from marketplace.api.errors import register_exception_handlers
    from marketplace.api.routes import (
        account_router,
        admin_router,
        offer_router,
        order_router,
        product_router,
        seller_router,
    )

    app = FastAPI()
    for router in (order_router, admin_router, offer_router, seller_router, account_router, product_router):
        app.include_router(router)
    register_exception_handlers(app)
    return TestClient(app)
