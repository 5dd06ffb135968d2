# tests/test_users.py
import uuid

from sqlmodel import Session, select

from app.core.auth import create_access_token
from app.models.address import Address
from app.models.user import User

from tests.conftest import API, auth_headers


# ----- Auth -----


def test_first_request_provisions_customer(client, session: Session):
    user_id = uuid.uuid4()
    token = create_access_token(user_id, "new.shopper@storefront.dev", first_name="Nora")

    response = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["role"] == "customer"
    assert response.json()["first_name"] == "Nora"
    assert session.get(User, user_id) is not None


def test_name_defaults_to_email_prefix(client):
    token = create_access_token(uuid.uuid4(), "quiet.buyer@storefront.dev")
    body = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"}).json()
    assert body["first_name"] == "quiet.buyer"


def test_invalid_token(client):
    response = client.get(f"{API}/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_expired_token(client, customer):
    token = create_access_token(customer.id, customer.email, expires_minutes=-1)
    response = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_guest_needs_token(client):
    assert client.get(f"{API}/users/me").status_code == 401


def test_disabled_account(client, make_user):
    user = make_user("customer", is_active=False)
    assert client.get(f"{API}/users/me", headers=auth_headers(user)).status_code == 403


# ----- Profile -----


def test_update_me(client, customer_headers):
    response = client.patch(
        f"{API}/users/me",
        json={"first_name": "  Ada ", "phone": "+1 555 0100"},
        headers=customer_headers,
    )

    assert response.status_code == 200
    assert response.json()["first_name"] == "Ada"
    assert response.json()["phone"] == "+1 555 0100"


def test_role_is_not_self_editable(client, customer_headers):
    response = client.patch(f"{API}/users/me", json={"role": "admin"}, headers=customer_headers)
    assert response.status_code == 422


# ----- Addresses -----


ADDRESS = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "address_line_1": "12 Market Street",
    "city": "Springfield",
    "state": "IL",
    "postal_code": "62701",
    "country": "US",
}


def test_only_one_default_per_type(client, session: Session, customer, customer_headers):
    first = client.post(
        f"{API}/users/me/addresses",
        json={**ADDRESS, "is_default": True},
        headers=customer_headers,
    ).json()
    billing = client.post(
        f"{API}/users/me/addresses",
        json={**ADDRESS, "type": "billing", "is_default": True},
        headers=customer_headers,
    ).json()
    second = client.post(
        f"{API}/users/me/addresses",
        json={**ADDRESS, "city": "Capital City", "is_default": True},
        headers=customer_headers,
    ).json()

    listing = client.get(f"{API}/users/me/addresses", headers=customer_headers).json()
    defaults = {a["id"] for a in listing if a["is_default"]}
    assert defaults == {second["id"], billing["id"]}
    assert first["id"] not in defaults
    assert listing[-1]["id"] == first["id"]


def test_update_address(client, customer, customer_headers, make_address):
    address = make_address(customer)

    response = client.patch(
        f"{API}/users/me/addresses/{address.id}",
        json={"city": "Ogdenville"},
        headers=customer_headers,
    )

    assert response.status_code == 200
    assert response.json()["city"] == "Ogdenville"
    assert response.json()["postal_code"] == "62701"


def test_cannot_edit_foreign_address(client, customer_headers, make_user, make_address):
    address = make_address(make_user("customer"))
    response = client.patch(
        f"{API}/users/me/addresses/{address.id}",
        json={"city": "Elsewhere"},
        headers=customer_headers,
    )
    assert response.status_code == 404


def test_delete_address(client, session: Session, customer, customer_headers, make_address):
    address = make_address(customer)

    response = client.delete(f"{API}/users/me/addresses/{address.id}", headers=customer_headers)

    assert response.status_code == 200
    assert session.exec(select(Address)).all() == []


def test_address_used_by_order_is_kept(
    client, customer, customer_headers, make_address, make_order
):
    address = make_address(customer)
    make_order(customer, shipping_address_id=address.id)

    response = client.delete(f"{API}/users/me/addresses/{address.id}", headers=customer_headers)
    assert response.status_code == 409


# ----- Wishlist -----


def test_wishlist_add_list_remove(client, customer_headers, make_product):
    product = make_product(price=20.0, compare_price=25.0)

    added = client.post(
        f"{API}/users/me/wishlist",
        json={"product_id": str(product.id)},
        headers=customer_headers,
    )
    assert added.status_code == 201
    assert added.json()[0]["compare_price"] == 25.0

    duplicate = client.post(
        f"{API}/users/me/wishlist",
        json={"product_id": str(product.id)},
        headers=customer_headers,
    )
    assert duplicate.status_code == 409

    removed = client.delete(f"{API}/users/me/wishlist/{product.id}", headers=customer_headers)
    assert removed.status_code == 200
    assert client.get(f"{API}/users/me/wishlist", headers=customer_headers).json() == []

    missing = client.delete(f"{API}/users/me/wishlist/{product.id}", headers=customer_headers)
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Product not found in wishlist"


def test_wishlist_rejects_unknown_product(client, customer_headers):
    response = client.post(
        f"{API}/users/me/wishlist",
        json={"product_id": str(uuid.uuid4())},
        headers=customer_headers,
    )
    assert response.status_code == 404


# ----- Admin -----


def test_admin_lists_users(client, admin_headers, make_user):
    make_user("customer")
    make_user("customer")

    body = client.get(f"{API}/users?limit=2", headers=admin_headers).json()

    assert body["pagination"]["total"] == 3
    assert len(body["users"]) == 2


def test_admin_promotes_user(client, admin_headers, customer):
    response = client.patch(
        f"{API}/users/{customer.id}/role",
        json={"role": "admin"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["role"] == "admin"

    fetched = client.get(f"{API}/users/{customer.id}", headers=admin_headers).json()
    assert fetched["role"] == "admin"


def test_unknown_role_is_rejected(client, admin_headers, customer):
    response = client.patch(
        f"{API}/users/{customer.id}/role",
        json={"role": "owner"},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_customers_cannot_list_users(client, customer_headers):
    assert client.get(f"{API}/users", headers=customer_headers).status_code == 403


def test_unknown_user(client, admin_headers):
    response = client.get(f"{API}/users/{uuid.uuid4()}", headers=admin_headers)
    assert response.status_code == 404
