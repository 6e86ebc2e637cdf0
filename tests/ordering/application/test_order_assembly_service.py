"""Application tests for OrderAssemblyService against in-memory stores.

The stores share one dict-backed database whose ``transaction()`` restores a
snapshot when the block raises, so rollback behaviour can be asserted directly.
"""

import copy
from contextlib import contextmanager
from decimal import Decimal

import pytest
from ordering.checkout.assembly import CheckoutDetails, OrderAssemblyService
from ordering.checkout.numbering import OrderNumberGenerator
from ordering.checkout.stores import CartLineView, ProductSnapshot
from ordering.checkout.verification import SimulatedPaymentVerifier
from ordering.config import CheckoutSettings
from ordering.errors import EmptyCartError, PersistenceError, ProductUnavailableError
from ordering.order.order import OrderStatus, PaymentStatus
from protean.exceptions import ObjectNotFoundError, ValidationError


class FakeDatabase:
    def __init__(self):
        self.products = {}
        self.carts = {}
        self.orders = {}
        self.fail_on = set()

    @contextmanager
    def transaction(self):
        carts, orders = copy.deepcopy(self.carts), dict(self.orders)
        try:
            yield
        except Exception:
            self.carts, self.orders = carts, orders
            raise

    def fail(self, operation):
        if operation in self.fail_on:
            raise ValidationError({"_store": [f"{operation} failed"]})


class FakeCatalogStore:
    def __init__(self, db):
        self.db = db

    def find_product(self, product_id):
        return self.db.products.get(product_id)


class FakeCartStore:
    def __init__(self, db):
        self.db = db

    def get_cart(self, user_id):
        return [
            CartLineView(product_id=product_id, quantity=quantity, product=self.db.products.get(product_id))
            for product_id, quantity in self.db.carts.get(user_id, {}).items()
        ]

    def clear_cart(self, user_id):
        self.db.fail("clear_cart")
        self.db.carts[user_id] = {}


class FakeOrderStore:
    def __init__(self, db):
        self.db = db

    def transaction(self):
        return self.db.transaction()

    def create_order_atomic(self, order):
        self.db.fail("create_order_atomic")
        if any(o.order_number == order.order_number for o in self.db.orders.values()):
            raise ValidationError({"order_number": ["Order number already exists"]})
        self.db.orders[str(order.id)] = order

    def get(self, order_id):
        try:
            return self.db.orders[str(order_id)]
        except KeyError:
            raise ObjectNotFoundError(f"Order {order_id} not found") from None

    def save(self, order):
        self.db.fail("save")
        self.db.orders[str(order.id)] = order


def _product(product_id, name, price, stock=10, is_active=True):
    return ProductSnapshot(product_id=product_id, name=name, price=Decimal(price), stock=stock, is_active=is_active)


@pytest.fixture()
def db():
    db = FakeDatabase()
    db.products = {
        "A": _product("A", "Product A", "30.00"),
        "B": _product("B", "Product B", "45.00"),
        "C": _product("C", "Product C", "20.00"),
    }
    return db


@pytest.fixture()
def verifier():
    return SimulatedPaymentVerifier()


@pytest.fixture()
def service(db, verifier):
    return OrderAssemblyService(
        catalog=FakeCatalogStore(db),
        carts=FakeCartStore(db),
        orders=FakeOrderStore(db),
        verifier=verifier,
        settings=CheckoutSettings(),
    )


@pytest.fixture()
def details(shipping_address):
    return CheckoutDetails(shipping_address=shipping_address, payment_method="credit_card")


class TestCreateOrder:
    def test_free_shipping_scenario(self, db, service, details):
        db.carts["u1"] = {"A": 2, "B": 1}
        order = service.create_order("u1", details)

        assert order.pricing.subtotal == "105.00"
        assert order.pricing.tax == "10.50"
        assert order.pricing.shipping == "0.00"
        assert order.pricing.total == "115.50"
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.PENDING.value

    def test_flat_shipping_scenario(self, db, service, details):
        db.carts["u1"] = {"C": 1}
        order = service.create_order("u1", details)

        assert order.pricing.subtotal == "20.00"
        assert order.pricing.tax == "2.00"
        assert order.pricing.shipping == "5.00"
        assert order.pricing.total == "27.00"

    def test_order_persisted_and_cart_cleared(self, db, service, details):
        db.carts["u1"] = {"A": 1}
        order = service.create_order("u1", details)

        assert db.orders[str(order.id)] is order
        assert db.carts["u1"] == {}

    def test_lines_and_addresses_populated(self, db, service, details):
        db.carts["u1"] = {"A": 2, "C": 1}
        order = service.create_order("u1", details)

        assert {(line.product_id, line.quantity, line.unit_price) for line in order.items} == {
            ("A", 2, "30.00"),
            ("C", 1, "20.00"),
        }
        assert order.shipping_address.last_name == "Lovelace"

    def test_order_number_format(self, db, service, details):
        db.carts["u1"] = {"A": 1}
        order = service.create_order("u1", details)
        assert order.order_number.startswith("ORD-")
        assert len(order.order_number) == len("ORD-YYYYMMDD-XXXXXX")

    def test_price_frozen_at_creation(self, db, service, details):
        db.carts["u1"] = {"A": 1}
        order = service.create_order("u1", details)

        db.products["A"] = _product("A", "Product A", "99.00")
        assert service.orders.get(order.id).items[0].unit_price == "30.00"


class TestCreateOrderFailures:
    def test_empty_cart(self, db, service, details):
        with pytest.raises(EmptyCartError):
            service.create_order("u1", details)
        assert db.orders == {}

    def test_missing_product(self, db, service, details):
        db.carts["u1"] = {"A": 1, "GONE": 1}
        with pytest.raises(ProductUnavailableError) as exc_info:
            service.create_order("u1", details)
        assert exc_info.value.product_id == "GONE"
        assert db.orders == {}
        assert db.carts["u1"] == {"A": 1, "GONE": 1}

    def test_deactivated_product(self, db, service, details):
        db.products["B"] = _product("B", "Product B", "45.00", is_active=False)
        db.carts["u1"] = {"B": 1}
        with pytest.raises(ProductUnavailableError):
            service.create_order("u1", details)

    def test_order_write_failure_leaves_cart(self, db, service, details):
        db.carts["u1"] = {"A": 2}
        db.fail_on.add("create_order_atomic")
        with pytest.raises(PersistenceError) as exc_info:
            service.create_order("u1", details)

        assert isinstance(exc_info.value.__cause__, ValidationError)
        assert db.orders == {}
        assert db.carts["u1"] == {"A": 2}

    def test_cart_clear_failure_rolls_back_order(self, db, service, details):
        db.carts["u1"] = {"A": 2}
        db.fail_on.add("clear_cart")
        with pytest.raises(PersistenceError):
            service.create_order("u1", details)

        assert db.orders == {}
        assert db.carts["u1"] == {"A": 2}

    def test_duplicate_order_number_rejected(self, db, details, verifier):
        service = OrderAssemblyService(
            catalog=FakeCatalogStore(db),
            carts=FakeCartStore(db),
            orders=FakeOrderStore(db),
            number_generator=lambda: "ORD-20240101-SAME00",
            verifier=verifier,
        )
        db.carts["u1"] = {"A": 1}
        db.carts["u2"] = {"C": 1}
        service.create_order("u1", details)

        with pytest.raises(PersistenceError):
            service.create_order("u2", details)
        assert db.carts["u2"] == {"C": 1}
        assert len(db.orders) == 1


class TestCheckoutDetails:
    def test_payment_method_required(self, shipping_address):
        with pytest.raises(ValidationError):
            CheckoutDetails(shipping_address=shipping_address, payment_method=" ")

    def test_shipping_address_required(self):
        with pytest.raises(ValidationError):
            CheckoutDetails(shipping_address=None, payment_method="credit_card")

    def test_closed_record(self, shipping_address):
        with pytest.raises(TypeError):
            CheckoutDetails(shipping_address=shipping_address, payment_method="card", coupon="FREE")


class TestSimulatePaymentSuccess:
    def test_marks_paid_and_confirmed(self, db, service, details, verifier):
        db.carts["u1"] = {"A": 1}
        order = service.create_order("u1", details)

        paid = service.simulate_payment_success(order.id)
        assert paid.payment_status == PaymentStatus.PAID.value
        assert paid.status == OrderStatus.CONFIRMED.value
        assert paid.payment_reference.startswith("sim_")
        assert verifier.verified_orders == [str(order.id)]

    def test_declining_verifier_marks_failed(self, db, service, details, verifier):
        db.carts["u1"] = {"A": 1}
        order = service.create_order("u1", details)
        verifier.configure(should_approve=False, failure_reason="Insufficient funds")

        failed = service.simulate_payment_success(order.id)
        assert failed.payment_status == PaymentStatus.FAILED.value
        assert failed.status == OrderStatus.PENDING.value

    def test_unknown_order(self, service):
        with pytest.raises(ObjectNotFoundError):
            service.simulate_payment_success("missing")


def test_custom_number_generator_prefix(db, details):
    service = OrderAssemblyService(
        catalog=FakeCatalogStore(db),
        carts=FakeCartStore(db),
        orders=FakeOrderStore(db),
        number_generator=OrderNumberGenerator(prefix="WEB"),
    )
    db.carts["u1"] = {"C": 1}
    assert service.create_order("u1", details).order_number.startswith("WEB-")
