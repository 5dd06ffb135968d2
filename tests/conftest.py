# tests/conftest.py
import os
import uuid

# Settings are read at import time; configure before importing the app.
os.environ.setdefault("JWT_SECRET", "storefront-test-secret")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_SAMPLE_DATA"] = "false"

from typing import Any  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from app.core.auth import create_access_token  # noqa: E402
from app.database import get_session  # noqa: E402
from app.main import app  # noqa: E402
from app.models.address import Address  # noqa: E402
from app.models.cart import CartItem  # noqa: E402
from app.models.order import Order  # noqa: E402
from app.models.product import Category, Product, ProductImage  # noqa: E402
from app.models.user import User  # noqa: E402
from app.services.payment_gateway import (  # noqa: E402
    ChargeResult,
    PaymentGateway,
    get_payment_gateway,
)

API = "/api/v1"


class FixedGateway(PaymentGateway):
    """Gateway with a test-controlled outcome."""

    def __init__(self, approve: bool = True):
        self.approve = approve
        self.charges: list[tuple[Any, str]] = []

    def charge(self, order, payment_method, payment_details=None) -> ChargeResult:
        self.charges.append((order.id, payment_method))
        if self.approve:
            return ChargeResult(approved=True, payment_id="pay_1700000000000_abc123xyz")
        return ChargeResult(approved=False, decline_reason="Card declined")


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="gateway")
def gateway_fixture():
    return FixedGateway(approve=True)


@pytest.fixture(name="client")
def client_fixture(session: Session, gateway: FixedGateway):
    def get_session_override():
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


# ----- Factories -----


@pytest.fixture(name="make_user")
def make_user_fixture(session: Session):
    counter = {"n": 0}

    def _make_user(role: str = "customer", **kwargs) -> User:
        counter["n"] += 1
        user = User(
            id=kwargs.pop("id", uuid.uuid4()),
            email=kwargs.pop("email", f"{role}{counter['n']}@storefront.dev"),
            first_name=kwargs.pop("first_name", role.capitalize()),
            last_name=kwargs.pop("last_name", f"No{counter['n']}"),
            role=role,
            **kwargs,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(user.id, user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(name="customer")
def customer_fixture(make_user) -> User:
    return make_user("customer")


@pytest.fixture(name="admin")
def admin_fixture(make_user) -> User:
    return make_user("admin")


@pytest.fixture(name="customer_headers")
def customer_headers_fixture(customer: User) -> dict[str, str]:
    return auth_headers(customer)


@pytest.fixture(name="admin_headers")
def admin_headers_fixture(admin: User) -> dict[str, str]:
    return auth_headers(admin)


@pytest.fixture(name="category")
def category_fixture(session: Session) -> Category:
    category = Category(name="Electronics", description="Devices and gadgets")
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


@pytest.fixture(name="make_product")
def make_product_fixture(session: Session):
    counter = {"n": 0}

    def _make_product(
        price: float = 10.0,
        stock_quantity: int = 5,
        image_url: str | None = None,
        **kwargs,
    ) -> Product:
        counter["n"] += 1
        product = Product(
            name=kwargs.pop("name", f"Product {counter['n']}"),
            sku=kwargs.pop("sku", f"SKU-{counter['n']:04d}"),
            price=price,
            stock_quantity=stock_quantity,
            **kwargs,
        )
        session.add(product)
        if image_url:
            session.add(
                ProductImage(product_id=product.id, image_url=image_url, is_primary=True)
            )
        session.commit()
        session.refresh(product)
        return product

    return _make_product


@pytest.fixture(name="add_to_cart")
def add_to_cart_fixture(session: Session):
    def _add(user: User, product: Product, quantity: int) -> CartItem:
        item = CartItem(user_id=user.id, product_id=product.id, quantity=quantity)
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    return _add


@pytest.fixture(name="make_address")
def make_address_fixture(session: Session):
    def _make(user: User, **kwargs) -> Address:
        address = Address(
            user_id=user.id,
            type=kwargs.pop("type", "shipping"),
            first_name=kwargs.pop("first_name", "Ada"),
            last_name=kwargs.pop("last_name", "Lovelace"),
            address_line_1=kwargs.pop("address_line_1", "12 Market Street"),
            city=kwargs.pop("city", "Springfield"),
            state=kwargs.pop("state", "IL"),
            postal_code=kwargs.pop("postal_code", "62701"),
            country=kwargs.pop("country", "US"),
            **kwargs,
        )
        session.add(address)
        session.commit()
        session.refresh(address)
        return address

    return _make


@pytest.fixture(name="make_order")
def make_order_fixture(session: Session):
    """Insert a pending order directly (bypasses checkout)."""

    def _make(user: User, total_amount: float = 42.40, **kwargs) -> Order:
        order = Order(
            user_id=user.id,
            order_number=kwargs.pop(
                "order_number", f"ORD-1700000000000-{uuid.uuid4().hex[:9].upper()}"
            ),
            subtotal=kwargs.pop("subtotal", 30.0),
            tax_amount=kwargs.pop("tax_amount", 2.4),
            shipping_amount=kwargs.pop("shipping_amount", 10.0),
            total_amount=total_amount,
            **kwargs,
        )
        session.add(order)
        session.commit()
        session.refresh(order)
        return order

    return _make
