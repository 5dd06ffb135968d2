# tests/test_cart.py
from sqlmodel import Session, select

from app.models.cart import CartItem

from tests.conftest import API


def test_add_to_cart_returns_priced_summary(client, customer_headers, make_product):
    product = make_product(price=12.5, stock_quantity=10, image_url="https://img.storefront.dev/p.jpg")

    response = client.post(
        f"{API}/cart",
        json={"product_id": str(product.id), "quantity": 2},
        headers=customer_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["item_count"] == 2
    assert body["total"] == 25.0
    assert body["items"][0]["line_total"] == 25.0
    assert body["items"][0]["image_url"] == "https://img.storefront.dev/p.jpg"


def test_re_adding_merges_quantities(client, session: Session, customer_headers, make_product):
    product = make_product(stock_quantity=5)
    payload = {"product_id": str(product.id), "quantity": 2}

    client.post(f"{API}/cart", json=payload, headers=customer_headers)
    body = client.post(f"{API}/cart", json=payload, headers=customer_headers).json()

    assert len(body["items"]) == 1
    assert body["items"][0]["quantity"] == 4
    assert len(session.exec(select(CartItem)).all()) == 1


def test_cannot_exceed_stock(client, customer_headers, make_product):
    product = make_product(stock_quantity=3)
    payload = {"product_id": str(product.id), "quantity": 2}

    assert client.post(f"{API}/cart", json=payload, headers=customer_headers).status_code == 200
    response = client.post(f"{API}/cart", json=payload, headers=customer_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Insufficient stock"


def test_inactive_product_cannot_be_added(client, customer_headers, make_product):
    product = make_product(is_active=False)

    response = client.post(
        f"{API}/cart",
        json={"product_id": str(product.id)},
        headers=customer_headers,
    )
    assert response.status_code == 404


def test_zero_quantity_is_invalid(client, customer_headers, make_product):
    product = make_product()
    response = client.post(
        f"{API}/cart",
        json={"product_id": str(product.id), "quantity": 0},
        headers=customer_headers,
    )
    assert response.status_code == 422


def test_update_and_remove_line(client, customer, customer_headers, make_product, add_to_cart):
    product = make_product(price=4.0, stock_quantity=9)
    item = add_to_cart(customer, product, 1)

    updated = client.patch(
        f"{API}/cart/{item.id}",
        json={"quantity": 3},
        headers=customer_headers,
    ).json()
    assert updated["total"] == 12.0

    too_many = client.patch(
        f"{API}/cart/{item.id}",
        json={"quantity": 10},
        headers=customer_headers,
    )
    assert too_many.status_code == 400

    removed = client.delete(f"{API}/cart/{item.id}", headers=customer_headers).json()
    assert removed["items"] == []


def test_cannot_touch_another_users_line(client, customer_headers, make_user, make_product, add_to_cart):
    item = add_to_cart(make_user("customer"), make_product(), 1)

    response = client.delete(f"{API}/cart/{item.id}", headers=customer_headers)
    assert response.status_code == 404


def test_clear_cart(client, session: Session, customer, customer_headers, make_product, add_to_cart):
    add_to_cart(customer, make_product(), 1)
    add_to_cart(customer, make_product(), 2)

    body = client.delete(f"{API}/cart", headers=customer_headers).json()

    assert body == {"items": [], "total": 0.0, "item_count": 0}
    assert session.exec(select(CartItem)).all() == []


def test_deactivated_product_is_flagged_and_not_totalled(
    client, session: Session, customer, customer_headers, make_product, add_to_cart
):
    kept = make_product(price=8.0)
    retired = make_product(price=50.0)
    add_to_cart(customer, kept, 2)
    retired_line = add_to_cart(customer, retired, 1)
    retired.is_active = False
    session.add(retired)
    session.commit()

    body = client.get(f"{API}/cart", headers=customer_headers).json()

    flags = {item["id"]: item["is_available"] for item in body["items"]}
    assert flags[str(retired_line.id)] is False
    assert list(flags.values()).count(True) == 1
    assert body["total"] == 16.0
    assert body["item_count"] == 2


def test_unavailable_line_can_be_removed_before_checkout(
    client, session: Session, customer, customer_headers, make_product, add_to_cart
):
    kept = make_product(price=10.0, stock_quantity=5)
    retired = make_product(name="Retired kettle")
    add_to_cart(customer, kept, 3)
    add_to_cart(customer, retired, 1)
    retired.is_active = False
    session.add(retired)
    session.commit()

    blocked = client.post(f"{API}/orders", json={}, headers=customer_headers)
    assert blocked.status_code == 400
    failed_line = blocked.json()["detail"]["items"][0]["item_id"]

    cart = client.get(f"{API}/cart", headers=customer_headers).json()
    assert failed_line in [item["id"] for item in cart["items"] if not item["is_available"]]

    removed = client.delete(f"{API}/cart/{failed_line}", headers=customer_headers)
    assert removed.status_code == 200

    created = client.post(f"{API}/orders", json={}, headers=customer_headers)
    assert created.status_code == 201
    assert created.json()["total_amount"] == 42.4


def test_admins_have_no_cart(client, admin_headers):
    assert client.get(f"{API}/cart", headers=admin_headers).status_code == 403
