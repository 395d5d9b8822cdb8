from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.domain.orders.commands import place_order
from app.persistence.models import ProductModel, UserModel
from app.persistence.repositories import OrderRepository, ProductRepository, UserRepository


DEFAULT_SCENARIO_ID = "order_admin_demo_v1"

DEMO_PRODUCTS: list[dict[str, Any]] = [
    {
        "product_id": "prod-demo-tee",
        "name": "Classic Tee",
        "description": "Heavyweight cotton t-shirt",
        "price": 1999,
        "category": "tops",
        "image_url": "https://example.com/img/classic-tee.jpg",
        "sizes": ["S", "M", "L", "XL"],
        "stock": 120,
    },
    {
        "product_id": "prod-demo-hoodie",
        "name": "Zip Hoodie",
        "description": "Fleece-lined zip hoodie",
        "price": 4950,
        "category": "outerwear",
        "image_url": "https://example.com/img/zip-hoodie.jpg",
        "sizes": ["M", "L", "XL", "XXL"],
        "stock": 40,
    },
    {
        "product_id": "prod-demo-cap",
        "name": "Canvas Cap",
        "description": "Six-panel canvas cap",
        "price": 1500,
        "category": "accessories",
        "image_url": "https://example.com/img/canvas-cap.jpg",
        "sizes": ["M"],
        "stock": 75,
    },
]

# (status, payment_status, [(product index, size, quantity)])
DEMO_ORDERS: list[tuple[str, str, list[tuple[int, str, int]]]] = [
    ("pending", "pending", [(0, "M", 2)]),
    ("pending", "failed", [(1, "L", 1)]),
    ("pending", "paid", [(0, "S", 1), (2, "M", 1)]),
    ("confirmed", "paid", [(1, "XL", 1)]),
    ("shipping", "paid", [(0, "L", 3)]),
    ("delivered", "paid", [(2, "M", 2), (1, "M", 1)]),
    ("cancelled", "paid", [(0, "XL", 1)]),
    ("pending", "pending", [(1, "XXL", 2)]),
    ("confirmed", "paid", [(2, "M", 4)]),
    ("pending", "pending", [(0, "M", 1), (1, "L", 1)]),
    ("shipping", "paid", [(1, "M", 1)]),
    ("pending", "paid", [(0, "S", 5)]),
]

SHIPPING_ESTIMATE_CENTS = 599
TAX_RATE = 0.08


def _ensure_users(session: Session) -> tuple[UserModel, UserModel]:
    settings = get_settings()
    repo = UserRepository(session)
    admin = repo.find_by_id(settings.admin_user_id)
    if admin is None:
        admin = repo.add(
            UserModel(user_id=settings.admin_user_id, email="admin@example.com", name="Store Admin", role="admin")
        )
    customer = repo.find_by_id(settings.user_user_id)
    if customer is None:
        customer = repo.add(
            UserModel(user_id=settings.user_user_id, email="customer@example.com", name="Sam Customer", role="user")
        )
    return admin, customer


def _ensure_products(session: Session) -> list[ProductModel]:
    repo = ProductRepository(session)
    existing = repo.find_many({item["product_id"] for item in DEMO_PRODUCTS})
    products = []
    for item in DEMO_PRODUCTS:
        product = existing.get(item["product_id"])
        if product is None:
            product = repo.add(ProductModel(**item))
        products.append(product)
    return products


def seed_default_scenario(session: Session) -> dict[str, Any]:
    admin, customer = _ensure_users(session)
    products = _ensure_products(session)
    orders = OrderRepository(session)

    base = datetime.now(timezone.utc) - timedelta(days=len(DEMO_ORDERS))
    created: list[str] = []
    for idx, (status, payment_status, lines) in enumerate(DEMO_ORDERS):
        order_id = f"demo-order-{idx + 1:03d}"
        if orders.find_by_id(order_id) is not None:
            continue
        items = [
            {
                "product_id": products[product_idx].product_id,
                "size": size,
                "quantity": quantity,
                "unit_price": products[product_idx].price,
            }
            for product_idx, size, quantity in lines
        ]
        subtotal = sum(item["quantity"] * item["unit_price"] for item in items)
        place_order(
            orders,
            user_id=customer.user_id,
            items=items,
            shipping_address={
                "first_name": "Sam",
                "last_name": "Customer",
                "address_line1": f"{100 + idx} Market Street",
                "city": "Springfield",
                "country": "US",
            },
            payment_info={
                "payment_method": "credit_card",
                "card_last4": f"{4242 + idx}"[-4:],
                "name_on_card": "Sam Customer",
            },
            shipping_estimate=SHIPPING_ESTIMATE_CENTS,
            tax_estimate=round(subtotal * TAX_RATE),
            status=status,
            payment_status=payment_status,
            order_id=order_id,
            created_at=base + timedelta(days=idx),
        )
        created.append(order_id)

    return {
        "scenario_id": DEFAULT_SCENARIO_ID,
        "seeded_now": bool(created),
        "admin_user_id": admin.user_id,
        "customer_user_id": customer.user_id,
        "product_count": len(products),
        "order_count": len(DEMO_ORDERS),
        "created_order_ids": created,
    }
