from __future__ import annotations

BASE_URL = "https://api.example.com"


def cart_payload(*lines: tuple[int, int, str]) -> dict:
    """Build a server cart from ``(item_id, quantity, unit_price)`` lines."""
    items = [
        {
            "id": item_id,
            "productId": item_id * 10,
            "productName": f"Product {item_id}",
            "quantity": quantity,
            "unitPrice": price,
            "subtotal": str(quantity * float(price)),
        }
        for item_id, quantity, price in lines
    ]
    total = sum(quantity * float(price) for _, quantity, price in lines)
    return {"id": 1, "items": items, "totalAmount": str(total)}


def product_payload(product_id: int, name: str, price: str = "10.00", **extra) -> dict:
    return {"id": product_id, "name": name, "price": price, **extra}
