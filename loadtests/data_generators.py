"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the Store API's request schemas
and the default StoreSettings validation.
"""

import random
import uuid

from faker import Faker

fake = Faker()

PAYMENT_METHODS = ["credit_card", "bank_transfer", "promptpay", "cash_on_delivery"]
SHIPPING_METHODS = ["standard", "express", "pickup"]

ADMIN_HEADERS = {"X-User-Id": "loadtest-admin", "X-User-Role": "admin"}


def shopper_id() -> str:
    return f"LT-{uuid.uuid4().hex[:10]}"


def shopper_headers(user_id: str) -> dict:
    return {"X-User-Id": user_id}


def product_data(stock: int | None = None) -> dict:
    return {
        "name": f"{fake.color_name()} {fake.word().title()}",
        "price": round(random.uniform(1, 250), 2),
        "stock": stock if stock is not None else random.randint(50, 500),
    }


def checkout_data() -> dict:
    return {
        "payment_method": random.choice(PAYMENT_METHODS),
        "shipping_method": random.choice(SHIPPING_METHODS),
        "shipping_address": fake.address().replace("\n", ", "),
        "notes": fake.sentence() if random.random() < 0.3 else None,
    }
