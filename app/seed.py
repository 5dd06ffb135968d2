# app/seed.py
import logging

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.product import Category, Product, ProductImage

logger = logging.getLogger(__name__)

_PEXELS = "https://images.pexels.com/photos"

# name, description, image_url
CATEGORIES = [
    ("Electronics", "Latest electronic devices and gadgets", f"{_PEXELS}/356056/pexels-photo-356056.jpeg"),
    ("Clothing", "Fashion and apparel for all occasions", f"{_PEXELS}/996329/pexels-photo-996329.jpeg"),
    ("Home & Garden", "Everything for your home and garden", f"{_PEXELS}/1571460/pexels-photo-1571460.jpeg"),
    ("Sports & Outdoors", "Sports equipment and outdoor gear", f"{_PEXELS}/863988/pexels-photo-863988.jpeg"),
    ("Books", "Books and educational materials", f"{_PEXELS}/159711/books-bookstore-book-reading-159711.jpeg"),
]

# name, description, price, compare_price, sku, stock, category, brand, featured, image, alt
PRODUCTS = [
    ("iPhone 15 Pro", "Latest iPhone with advanced camera system", 999.99, 1099.99, "IP15P-128", 50,
     "Electronics", "Apple", True, f"{_PEXELS}/788946/pexels-photo-788946.jpeg", "iPhone 15 Pro"),
    ("Samsung Galaxy S24", "Flagship Android smartphone", 899.99, 999.99, "SGS24-256", 30,
     "Electronics", "Samsung", True, f"{_PEXELS}/404280/pexels-photo-404280.jpeg", "Samsung Galaxy S24"),
    ("MacBook Air M3", "Lightweight laptop with M3 chip", 1299.99, 1399.99, "MBA-M3-256", 25,
     "Electronics", "Apple", True, f"{_PEXELS}/205421/pexels-photo-205421.jpeg", "MacBook Air M3"),
    ("Sony WH-1000XM5", "Premium noise-canceling headphones", 399.99, 449.99, "SONY-WH1000XM5", 40,
     "Electronics", "Sony", False, f"{_PEXELS}/3394650/pexels-photo-3394650.jpeg", "Sony Headphones"),
    ("Nike Air Max 270", "Comfortable running shoes", 149.99, 179.99, "NIKE-AM270-10", 100,
     "Clothing", "Nike", True, f"{_PEXELS}/2529148/pexels-photo-2529148.jpeg", "Nike Air Max 270"),
    ("Levi's 501 Jeans", "Classic straight-leg jeans", 79.99, 89.99, "LEVIS-501-32", 75,
     "Clothing", "Levi's", False, f"{_PEXELS}/1598507/pexels-photo-1598507.jpeg", "Levi's Jeans"),
    ("Adidas Ultraboost 22", "High-performance running shoes", 189.99, 219.99, "ADIDAS-UB22-9", 60,
     "Clothing", "Adidas", False, f"{_PEXELS}/2529148/pexels-photo-2529148.jpeg", "Adidas Ultraboost"),
    ("KitchenAid Stand Mixer", "Professional stand mixer", 379.99, 429.99, "KA-SM-RED", 20,
     "Home & Garden", "KitchenAid", True, f"{_PEXELS}/4226796/pexels-photo-4226796.jpeg", "KitchenAid Mixer"),
    ("Dyson V15 Detect", "Cordless vacuum cleaner", 749.99, 799.99, "DYSON-V15", 15,
     "Home & Garden", "Dyson", False, f"{_PEXELS}/4107120/pexels-photo-4107120.jpeg", "Dyson Vacuum"),
    ("Instant Pot Duo 7-in-1", "Multi-use pressure cooker", 99.99, 129.99, "IP-DUO-6QT", 35,
     "Home & Garden", "Instant Pot", False, f"{_PEXELS}/4226796/pexels-photo-4226796.jpeg", "Instant Pot"),
]


def seed_sample_data(session: Session) -> bool:
    """
    Insert the demo catalog when the catalog tables are empty.

    Returns True if rows were inserted.
    """
    has_categories = session.exec(select(func.count()).select_from(Category)).one()
    has_products = session.exec(select(func.count()).select_from(Product)).one()
    if has_categories or has_products:
        return False

    categories: dict[str, Category] = {}
    for name, description, image_url in CATEGORIES:
        category = Category(name=name, description=description, image_url=image_url)
        session.add(category)
        categories[name] = category
    session.flush()

    for (
        name,
        description,
        price,
        compare_price,
        sku,
        stock,
        category_name,
        brand,
        featured,
        image_url,
        alt_text,
    ) in PRODUCTS:
        product = Product(
            name=name,
            description=description,
            price=price,
            compare_price=compare_price,
            sku=sku,
            stock_quantity=stock,
            category_id=categories[category_name].id,
            brand=brand,
            is_featured=featured,
        )
        session.add(product)
        session.add(
            ProductImage(
                product_id=product.id,
                image_url=image_url,
                alt_text=alt_text,
                is_primary=True,
            )
        )

    session.commit()
    logger.info("Seeded %d categories and %d products", len(CATEGORIES), len(PRODUCTS))
    return True
