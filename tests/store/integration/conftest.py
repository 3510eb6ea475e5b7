import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from store.api import cart_router, order_router, payment_router, product_router, register_error_handlers
from store.settings import StoreSettings

ADMIN = {"X-User-Id": "admin-001", "X-User-Role": "admin"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.state.settings = StoreSettings()
    app.include_router(product_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(payment_router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def stocked_product(client):
    response = client.post("/products", json={"name": "Ceramic Mug", "price": 25.0, "stock": 10}, headers=ADMIN)
    assert response.status_code == 201
    return response.json()["id"]
