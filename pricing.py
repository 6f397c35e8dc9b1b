from typing import Dict, Iterable, Mapping

from config import FLAT_SHIPPING_FEE, FREE_SHIPPING_THRESHOLD


def format_price(amount) -> str:
    return f"৳{round(amount):,}"


def shipping_fee_for(subtotal: int) -> int:
    return 0 if subtotal >= FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_FEE


def compute_totals(items: Iterable[Mapping]) -> Dict[str, int]:
    """Subtotal, shipping fee and grand total for cart lines or order items."""
    subtotal = sum(int(item["price"]) * int(item.get("quantity", 1)) for item in items)
    shipping_fee = shipping_fee_for(subtotal)
    return {"subtotal": subtotal, "shippingFee": shipping_fee, "total": subtotal + shipping_fee}
