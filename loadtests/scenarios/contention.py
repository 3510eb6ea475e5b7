"""Contention scenario: many buyers race for one scarce product.

Every user tries to buy a unit of the same product. When the run ends the
number of successful orders must not exceed the stock the product started
with, and the product's stock must not be negative.
"""

import requests
from locust import HttpUser, between, events, task

from loadtests.data_generators import ADMIN_HEADERS, checkout_data, product_data, shopper_headers, shopper_id
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ContentionState

SCARCE_STOCK = 25

_scarce = {"product_id": None}
_outcome = ContentionState()


@events.test_start.add_listener
def register_scarce_product(environment, **_kwargs):
    resp = requests.post(
        f"{environment.host}/products",
        json=product_data(stock=SCARCE_STOCK),
        headers=ADMIN_HEADERS,
        timeout=10,
    )
    resp.raise_for_status()
    _scarce["product_id"] = resp.json()["id"]


@events.test_stop.add_listener
def report_scarce_product(environment, **_kwargs):
    if not _scarce["product_id"]:
        return
    stock = requests.get(f"{environment.host}/products/{_scarce['product_id']}", timeout=10).json()["stock"]
    print(f"\n[CONTENTION] placed={_outcome.placed} sold_out={_outcome.sold_out} remaining_stock={stock}")
    if stock < 0 or _outcome.placed > SCARCE_STOCK:
        print("[CONTENTION] OVERSELL DETECTED")


class ScarceProductBuyer(HttpUser):
    wait_time = between(0.1, 0.5)

    def on_start(self):
        self.headers = shopper_headers(shopper_id())

    @task
    def buy_one(self):
        product_id = _scarce["product_id"]
        if product_id is None:
            return

        with self.client.post(
            "/cart/items",
            json={"product_id": product_id, "quantity": 1},
            headers=self.headers,
            catch_response=True,
            name="POST /cart/items (scarce)",
        ) as resp:
            if resp.status_code == 400:
                # Sold out is an expected outcome here
                resp.success()
                _outcome.sold_out += 1
                return
            if resp.status_code != 201:
                resp.failure(f"Add to cart failed: {resp.status_code}: {extract_error_detail(resp)}")
                return

        with self.client.post(
            "/orders",
            json=checkout_data(),
            headers=self.headers,
            catch_response=True,
            name="POST /orders (scarce)",
        ) as resp:
            if resp.status_code == 201:
                _outcome.placed += 1
            elif resp.status_code == 400:
                resp.success()
                _outcome.sold_out += 1
                self.client.delete("/cart", headers=self.headers, name="DELETE /cart")
            else:
                resp.failure(f"Place order failed: {resp.status_code}: {extract_error_detail(resp)}")
