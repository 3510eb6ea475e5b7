"""Shopper journeys: browse → cart → checkout → pay.

Stateful SequentialTaskSets that exercise order placement and the payment
state machine end to end.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    ADMIN_HEADERS,
    checkout_data,
    product_data,
    shopper_headers,
    shopper_id,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState


class CheckoutJourney(SequentialTaskSet):
    """Register products -> Browse -> Add to cart -> Place order -> Pay -> Verify."""

    def on_start(self):
        self.state = ShopperState(user_id=shopper_id())
        self.headers = shopper_headers(self.state.user_id)

    @task
    def stock_products(self):
        for _ in range(random.randint(1, 3)):
            with self.client.post(
                "/products",
                json=product_data(),
                headers=ADMIN_HEADERS,
                catch_response=True,
                name="POST /products",
            ) as resp:
                if resp.status_code == 201:
                    self.state.product_ids.append(resp.json()["id"])
                else:
                    resp.failure(f"Register product failed: {resp.status_code}: {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def browse(self):
        for product_id in self.state.product_ids:
            self.client.get(f"/products/{product_id}", name="GET /products/{id}")

    @task
    def fill_cart(self):
        for product_id in self.state.product_ids:
            with self.client.post(
                "/cart/items",
                json={"product_id": product_id, "quantity": random.randint(1, 3)},
                headers=self.headers,
                catch_response=True,
                name="POST /cart/items",
            ) as resp:
                if resp.status_code != 201:
                    resp.failure(f"Add to cart failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def place_order(self):
        with self.client.post(
            "/orders",
            json=checkout_data(),
            headers=self.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["id"]
            else:
                resp.failure(f"Place order failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def open_payment(self):
        with self.client.post(
            "/payments",
            json={"order_id": self.state.order_id, "payment_method": "bank_transfer"},
            headers=self.headers,
            catch_response=True,
            name="POST /payments",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.transaction_id = body["id"]
                self.state.reference = body["reference"]
            else:
                resp.failure(f"Create payment failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def verify_payment(self):
        # One in ten shoppers submits a wrong reference
        reference = self.state.reference if random.random() > 0.1 else "TXN_0_00000000"
        with self.client.post(
            f"/payments/{self.state.transaction_id}/verify",
            json={"reference": reference},
            headers=self.headers,
            catch_response=True,
            name="POST /payments/{id}/verify",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Verify payment failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def review_orders(self):
        self.client.get("/orders", headers=self.headers, name="GET /orders")
        self.interrupt()


class CancellationJourney(SequentialTaskSet):
    """Add to cart -> Place order -> Cancel. Stock goes back on the shelf."""

    def on_start(self):
        self.state = ShopperState(user_id=shopper_id())
        self.headers = shopper_headers(self.state.user_id)

    @task
    def stock_product(self):
        resp = self.client.post("/products", json=product_data(), headers=ADMIN_HEADERS, name="POST /products")
        if resp.status_code != 201:
            self.interrupt()
        self.state.product_ids.append(resp.json()["id"])

    @task
    def place_order(self):
        self.client.post(
            "/cart/items",
            json={"product_id": self.state.product_ids[0], "quantity": 2},
            headers=self.headers,
            name="POST /cart/items",
        )
        resp = self.client.post("/orders", json=checkout_data(), headers=self.headers, name="POST /orders")
        if resp.status_code != 201:
            self.interrupt()
        self.state.order_id = resp.json()["id"]

    @task
    def cancel(self):
        with self.client.put(
            f"/orders/{self.state.order_id}/cancel",
            headers=self.headers,
            catch_response=True,
            name="PUT /orders/{id}/cancel",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Cancel failed: {resp.status_code}: {extract_error_detail(resp)}")
        self.interrupt()


class ShopperUser(HttpUser):
    """Shoppers who mostly buy and pay, sometimes cancel."""

    wait_time = between(1, 3)
    tasks = {CheckoutJourney: 4, CancellationJourney: 1}
