"""Checkout and fulfillment load test scenarios.

CheckoutUser registers two sellers with products, then repeatedly checks
out multi-seller carts. FulfillmentUser additionally assigns a delivery
partner from the seller's pincode and walks each order to DELIVERED.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    PINCODES,
    buyer_data,
    checkout_data,
    partner_data,
    product_data,
    seller_data,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import MarketplaceState

ADMIN_HEADERS = {"X-Actor-Id": "admin-loadtest", "X-Actor-Role": "admin"}


def _headers(actor_id, role):
    return {"X-Actor-Id": actor_id, "X-Actor-Role": role}


class MarketplaceSetup(SequentialTaskSet):
    """Shared setup: sellers with products, a buyer, and partners."""

    def on_start(self):
        self.state = MarketplaceState()
        self.pincode = random.choice(PINCODES)

    def _register(self, payload):
        with self.client.post("/accounts", json=payload, catch_response=True, name="POST /accounts") as resp:
            if resp.status_code != 201:
                resp.failure(f"Register failed: {resp.status_code} {extract_error_detail(resp)}")
                self.interrupt()
            return resp.json()["id"]

    @task
    def register_parties(self):
        self.state.buyer_id = self._register(buyer_data())
        self.state.seller_ids = [self._register(seller_data(self.pincode)) for _ in range(2)]
        self.state.partner_ids = [self._register(partner_data(self.pincode))]

    @task
    def list_products(self):
        for seller_id in self.state.seller_ids:
            for _ in range(3):
                with self.client.post(
                    "/products",
                    json=product_data(),
                    headers=_headers(seller_id, "seller"),
                    catch_response=True,
                    name="POST /products",
                ) as resp:
                    if resp.status_code == 201:
                        self.state.product_ids.append(resp.json()["id"])
                    else:
                        resp.failure(f"List product failed: {resp.status_code} {extract_error_detail(resp)}")


class CheckoutJourney(MarketplaceSetup):
    @task
    def checkout(self):
        with self.client.post(
            "/orders",
            json=checkout_data(self.state.product_ids),
            headers=_headers(self.state.buyer_id, "buyer"),
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.extend(order["order_id"] for order in resp.json())
            else:
                resp.failure(f"Checkout failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def list_orders(self):
        self.client.get("/orders", headers=_headers(self.state.buyer_id, "buyer"), name="GET /orders")

    @task
    def stats(self):
        self.client.get("/orders/stats", headers=_headers(self.state.buyer_id, "buyer"), name="GET /orders/stats")
        self.interrupt(reschedule=True)


class FulfillmentJourney(CheckoutJourney):
    @task
    def assign_and_deliver(self):
        for order_id in self.state.order_ids:
            with self.client.post(
                f"/admin/orders/{order_id}/assign",
                json={"partnerId": self.state.partner_ids[0]},
                headers=ADMIN_HEADERS,
                catch_response=True,
                name="POST /admin/orders/{id}/assign",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Assign failed: {resp.status_code} {extract_error_detail(resp)}")
                    continue

            for status in ("SHIPPED", "DELIVERED"):
                self.client.put(
                    f"/orders/{order_id}",
                    json={"status": status},
                    headers=ADMIN_HEADERS,
                    name="PUT /orders/{id}",
                )
        self.state.order_ids.clear()
        self.interrupt(reschedule=True)


class CheckoutUser(HttpUser):
    tasks = [CheckoutJourney]
    wait_time = between(0.5, 2)


class FulfillmentUser(HttpUser):
    tasks = [FulfillmentJourney]
    wait_time = between(1, 3)
