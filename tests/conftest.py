import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the Protean config overlay before the domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def marketplace_bed():
    from marketplace.domain import marketplace

    bed = DomainFixture(marketplace)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(marketplace_bed):
    """Run every test inside the marketplace domain context and clean up after it."""
    from marketplace.analytics.recorder import reset_analytics_recorder
    from marketplace.checkout.shipping import reset_shipping_policy
    from marketplace.notifications.channel import reset_channels

    with marketplace_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        for _, broker in current_domain.brokers.items():
            broker._data_reset()

        current_domain.event_store.store._data_reset()

    reset_channels()
    reset_shipping_policy()
    reset_analytics_recorder()


# ---------------------------------------------------------------------------
# Builders shared by application, integration and BDD tests
# ---------------------------------------------------------------------------
ADDRESS = {
    "full_address": "221 Residency Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "pincode": "560025",
    "mobile": "9800000001",
}


@pytest.fixture
def register_account():
    from protean import current_domain

    from marketplace.accounts.registration import RegisterAccount

    def _register(role="SELLER", name="Test Party", mobile="9876500000", **kwargs):
        command = RegisterAccount(role=role, name=name, mobile=mobile, **kwargs)
        return current_domain.process(command, asynchronous=False)

    return _register


@pytest.fixture
def seller(register_account):
    return register_account(role="SELLER", name="Asha Traders", mobile="9811111111", pincode="560001")


@pytest.fixture
def list_product():
    from protean import current_domain

    from marketplace.catalogue.management import ListProduct

    def _list(seller_id, price=300.0, stock=10, title="Steel Bottle", commission_percent=10.0, category_id=None):
        command = ListProduct(
            seller_id=seller_id,
            title=title,
            price=price,
            stock=stock,
            commission_percent=commission_percent,
            category_id=category_id,
        )
        return current_domain.process(command, asynchronous=False)

    return _list


@pytest.fixture
def place_order():
    """Check out ``[(product_id, quantity), ...]`` as a buyer and return the order ids."""
    import json

    from protean import current_domain

    from marketplace.checkout.placement import PlaceOrder

    def _place(lines, buyer_id="buyer-001", payment_mode="COD", coupon_code=None, discount=0.0, address=None):
        command = PlaceOrder(
            buyer_id=buyer_id,
            items=json.dumps([{"product_id": product_id, "quantity": quantity} for product_id, quantity in lines]),
            address=json.dumps(address or ADDRESS),
            payment_mode=payment_mode,
            coupon_code=coupon_code,
            discount=discount,
        )
        return current_domain.process(command, asynchronous=False)

    return _place


@pytest.fixture
def create_offer():
    import json

    from protean import current_domain

    from marketplace.offers.management import CreateOffer

    def _create(code="SAVE100", discount_value=100.0, discount_type="FLAT", categories=None, **kwargs):
        command = CreateOffer(
            code=code,
            tagline=kwargs.pop("tagline", "Festive savings"),
            discount_type=discount_type,
            discount_value=discount_value,
            applicable_categories=json.dumps(categories or []),
            **kwargs,
        )
        return current_domain.process(command, asynchronous=False)

    return _create
