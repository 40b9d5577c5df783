"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that match the exact field names expected
by the API's Pydantic request schemas.
"""

import random

from faker import Faker

fake = Faker("en_IN")

PINCODES = ["560001", "400001", "110001", "600001"]


def mobile() -> str:
    return f"9{random.randint(100000000, 999999999)}"


def seller_data(pincode: str) -> dict:
    return {
        "role": "seller",
        "name": fake.name(),
        "mobile": mobile(),
        "shopName": fake.company()[:60],
        "address": f"{fake.street_address()}, {fake.city()} {pincode}",
    }


def partner_data(pincode: str) -> dict:
    return {"role": "delivery_partner", "name": fake.name(), "mobile": mobile(), "pincode": pincode}


def buyer_data() -> dict:
    return {"role": "buyer", "name": fake.name(), "mobile": mobile()}


def product_data() -> dict:
    return {
        "title": fake.catch_phrase()[:80],
        "price": float(random.choice([99, 249, 399, 799, 1499, 2599])),
        "stock": random.randint(500, 1000),
        "commissionPercent": float(random.choice([5, 8, 10, 12])),
        "categoryId": random.choice(["electronics", "fashion", "home"]),
    }


def address_data() -> dict:
    return {
        "fullAddress": fake.street_address(),
        "city": fake.city(),
        "state": fake.state(),
        "pincode": random.choice(PINCODES),
        "mobile": mobile(),
    }


def checkout_data(product_ids: list[str]) -> dict:
    chosen = random.sample(product_ids, k=min(len(product_ids), random.randint(1, 3)))
    return {
        "items": [{"product": product_id, "quantity": random.randint(1, 3)} for product_id in chosen],
        "address": address_data(),
        "paymentMode": random.choice(["COD", "ONLINE"]),
    }
