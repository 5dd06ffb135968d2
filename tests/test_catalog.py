# tests/test_catalog.py
from sqlmodel import Session, select

from app.models.order import OrderItem
from app.models.product import Category, Product, ProductImage, Review

from tests.conftest import API, auth_headers


# ----- Products -----


def test_listing_hides_inactive_and_paginates(client, make_product):
    for i in range(3):
        make_product(name=f"Visible {i}")
    make_product(name="Hidden", is_active=False)

    body = client.get(f"{API}/products?limit=2").json()

    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
    assert len(body["products"]) == 2
    assert all(p["name"] != "Hidden" for p in body["products"])


def test_listing_filters(client, category, make_product):
    make_product(name="Desk lamp", price=30.0, category_id=category.id, is_featured=True)
    make_product(name="Floor lamp", price=80.0, description="Tall lamp")
    make_product(name="Kettle", price=45.0)

    by_category = client.get(f"{API}/products?category_id={category.id}").json()
    assert [p["name"] for p in by_category["products"]] == ["Desk lamp"]
    assert by_category["products"][0]["category_name"] == "Electronics"

    search = client.get(f"{API}/products?search=LAMP&sort_by=price&sort_order=asc").json()
    assert [p["name"] for p in search["products"]] == ["Desk lamp", "Floor lamp"]

    priced = client.get(f"{API}/products?min_price=40&max_price=60").json()
    assert [p["name"] for p in priced["products"]] == ["Kettle"]

    featured = client.get(f"{API}/products?featured=true").json()
    assert [p["name"] for p in featured["products"]] == ["Desk lamp"]


def test_invalid_price_range(client):
    response = client.get(f"{API}/products?min_price=50&max_price=10")
    assert response.status_code == 400


def test_invalid_sort_field(client):
    assert client.get(f"{API}/products?sort_by=colour").status_code == 422


def test_sort_by_rating(client, session: Session, make_user, make_product):
    loved = make_product(name="Loved")
    meh = make_product(name="Meh")
    for product, rating in ((loved, 5), (meh, 2)):
        session.add(Review(product_id=product.id, user_id=make_user().id, rating=rating))
    session.commit()

    body = client.get(f"{API}/products?sort_by=rating&sort_order=desc").json()

    assert [p["name"] for p in body["products"]] == ["Loved", "Meh"]
    assert body["products"][0]["average_rating"] == 5.0
    assert body["products"][0]["review_count"] == 1


def test_product_detail_has_images_and_reviews(
    client, session: Session, make_user, make_product
):
    product = make_product(image_url="https://img.storefront.dev/front.jpg")
    reviewer = make_user(first_name="Grace", last_name="Hopper")
    session.add(Review(product_id=product.id, user_id=reviewer.id, rating=4, title="Solid"))
    session.add(
        Review(product_id=product.id, user_id=make_user().id, rating=1, is_approved=False)
    )
    session.commit()

    body = client.get(f"{API}/products/{product.id}").json()

    assert body["primary_image"] == "https://img.storefront.dev/front.jpg"
    assert len(body["images"]) == 1
    assert [r["title"] for r in body["reviews"]] == ["Solid"]
    assert body["reviews"][0]["first_name"] == "Grace"
    assert body["average_rating"] == 4.0


def test_inactive_product_detail_is_404(client, make_product):
    product = make_product(is_active=False)
    assert client.get(f"{API}/products/{product.id}").status_code == 404


def test_admin_creates_product_with_images(client, session: Session, admin_headers, category):
    response = client.post(
        f"{API}/products",
        json={
            "name": "Noise cancelling headphones",
            "price": 199.99,
            "sku": "NC-100",
            "stock_quantity": 7,
            "category_id": str(category.id),
            "images": [
                {"url": "https://img.storefront.dev/nc-1.jpg"},
                {"url": "https://img.storefront.dev/nc-2.jpg", "alt_text": "Side"},
            ],
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    product_id = response.json()["id"]
    images = session.exec(select(ProductImage).order_by(ProductImage.sort_order)).all()
    assert [i.is_primary for i in images] == [True, False]
    assert images[0].alt_text == "Noise cancelling headphones"
    assert str(images[0].product_id) == product_id


def test_duplicate_sku_conflicts(client, admin_headers, make_product):
    make_product(sku="DUP-1")
    response = client.post(
        f"{API}/products",
        json={"name": "Copy", "price": 5.0, "sku": "DUP-1"},
        headers=admin_headers,
    )
    assert response.status_code == 409


def test_unknown_category_is_rejected(client, admin_headers):
    response = client.post(
        f"{API}/products",
        json={
            "name": "Orphan",
            "price": 5.0,
            "category_id": "00000000-0000-0000-0000-000000000000",
        },
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_customers_cannot_manage_products(client, customer_headers):
    response = client.post(
        f"{API}/products",
        json={"name": "Sneaky", "price": 1.0},
        headers=customer_headers,
    )
    assert response.status_code == 403


def test_delete_product_is_soft(client, session: Session, admin_headers, make_product):
    product = make_product()

    response = client.delete(f"{API}/products/{product.id}", headers=admin_headers)

    assert response.status_code == 200
    session.refresh(product)
    assert product.is_active is False
    assert session.get(Product, product.id) is not None


# ----- Reviews -----


def test_review_once_per_product(client, customer_headers, make_product):
    product = make_product()
    payload = {"rating": 5, "title": "Great", "comment": "Works as advertised"}

    first = client.post(f"{API}/products/{product.id}/reviews", json=payload, headers=customer_headers)
    second = client.post(f"{API}/products/{product.id}/reviews", json=payload, headers=customer_headers)

    assert first.status_code == 201
    assert first.json()["is_verified"] is False
    assert second.status_code == 409


def test_review_is_verified_after_paid_order(
    client, session: Session, customer, customer_headers, make_product, make_order
):
    product = make_product()
    order = make_order(customer, payment_status="completed", status="confirmed")
    session.add(
        OrderItem(
            order_id=order.id,
            product_id=product.id,
            product_name=product.name,
            quantity=1,
            unit_price=product.price,
            total_price=product.price,
        )
    )
    session.commit()

    response = client.post(
        f"{API}/products/{product.id}/reviews",
        json={"rating": 4},
        headers=customer_headers,
    )
    assert response.json()["is_verified"] is True


def test_rating_out_of_range(client, customer_headers, make_product):
    product = make_product()
    response = client.post(
        f"{API}/products/{product.id}/reviews",
        json={"rating": 6},
        headers=customer_headers,
    )
    assert response.status_code == 422


# ----- Categories -----


def test_categories_with_product_counts(client, session: Session, category, make_product):
    make_product(category_id=category.id)
    make_product(category_id=category.id, is_active=False)
    session.add(Category(name="Archived", is_active=False))
    session.add(Category(name="Books"))
    session.commit()

    body = client.get(f"{API}/categories").json()

    assert [(c["name"], c["product_count"]) for c in body] == [
        ("Books", 0),
        ("Electronics", 1),
    ]


def test_admin_category_lifecycle(client, admin_headers):
    created = client.post(
        f"{API}/categories",
        json={"name": "Garden", "description": "Outdoor things"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    category_id = created.json()["id"]

    duplicate = client.post(f"{API}/categories", json={"name": "garden"}, headers=admin_headers)
    assert duplicate.status_code == 409

    renamed = client.patch(
        f"{API}/categories/{category_id}",
        json={"name": "Home & Garden"},
        headers=admin_headers,
    )
    assert renamed.json()["name"] == "Home & Garden"

    assert client.delete(f"{API}/categories/{category_id}", headers=admin_headers).status_code == 200
    assert client.get(f"{API}/categories/{category_id}").status_code == 404


def test_customers_cannot_create_categories(client, make_user):
    response = client.post(
        f"{API}/categories",
        json={"name": "Nope"},
        headers=auth_headers(make_user("customer")),
    )
    assert response.status_code == 403
