"""
Shopper-side cart and wishlist.

Both live in LocalStorage under the ``cart`` and ``wishlist`` keys and are
re-read before every change, so two CartState objects over the same
storage always agree. Cart lines are keyed by (product id, selected size).
"""

import logging
from typing import Callable, Dict, List, Optional

from local_storage import LocalStorage
from pricing import compute_totals

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]

_LEVELS = {"error": logging.ERROR, "warning": logging.WARNING}


def log_notifier(message: str, level: str = "success") -> None:
    """Default toast: write the message to the log."""
    logger.log(_LEVELS.get(level, logging.INFO), message)


def default_size(product: Dict) -> str:
    if product.get("hasSizes") and product.get("sizes"):
        return product["sizes"][0]
    return "Standard"


def _parse_quantity(value) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 1


class CartState:
    KEY = "cart"

    def __init__(self, storage: LocalStorage, notify: Notifier = log_notifier,
                 on_change: Optional[Callable[[int], None]] = None):
        self.storage = storage
        self.notify = notify
        self.on_change = on_change
        self.badge_count = self.item_count()

    @property
    def items(self) -> List[Dict]:
        return self.storage.get_item(self.KEY, []) or []

    def _find(self, cart: List[Dict], product_id: int, size: str) -> Optional[Dict]:
        return next((i for i in cart if i["id"] == product_id and i["selectedSize"] == size), None)

    def _save(self, cart: List[Dict]) -> None:
        self.storage.set_item(self.KEY, cart)
        self.refresh_badge()

    def refresh_badge(self) -> int:
        self.badge_count = self.item_count()
        if self.on_change:
            self.on_change(self.badge_count)
        return self.badge_count

    def add_item(self, product: Dict, selected_size: Optional[str] = None) -> bool:
        if product.get("stock", 0) <= 0:
            self.notify("This product is out of stock", "error")
            return False
        size = selected_size or default_size(product)
        cart = self.items
        existing = self._find(cart, product["id"], size)
        if existing:
            if existing["quantity"] >= product["stock"]:
                self.notify(f"Only {product['stock']} items available in stock", "warning")
                return False
            existing["quantity"] += 1
        else:
            cart.append({**product, "quantity": 1, "selectedSize": size})
        self._save(cart)
        self.notify(f"{product['name']} ({size}) added to cart!", "success")
        return True

    def update_quantity(self, product_id: int, size: str, new_quantity) -> Optional[int]:
        cart = self.items
        item = self._find(cart, product_id, size)
        if item is None:
            self.notify("Product not found in cart.", "warning")
            return None
        quantity = max(_parse_quantity(new_quantity), 1)
        if quantity > item["stock"]:
            self.notify(f"Only {item['stock']} items available in stock. Quantity limited.", "warning")
            quantity = max(item["stock"], 1)
        item["quantity"] = quantity
        self._save(cart)
        return quantity

    def remove_item(self, product_id: int, size: str) -> None:
        cart = self.items
        remaining = [i for i in cart if not (i["id"] == product_id and i["selectedSize"] == size)]
        if len(remaining) == len(cart):
            return
        self._save(remaining)
        self.notify("Item removed from cart.", "success")

    def clear(self) -> None:
        self.storage.remove_item(self.KEY)
        self.refresh_badge()

    def item_count(self) -> int:
        return sum(i.get("quantity", 1) for i in self.items)

    def totals(self) -> Dict[str, int]:
        return compute_totals(self.items)


class Wishlist:
    KEY = "wishlist"

    def __init__(self, storage: LocalStorage, notify: Notifier = log_notifier):
        self.storage = storage
        self.notify = notify

    @property
    def items(self) -> List[Dict]:
        return self.storage.get_item(self.KEY, []) or []

    def contains(self, product_id: int) -> bool:
        return any(p["id"] == product_id for p in self.items)

    def toggle(self, product: Dict) -> bool:
        """Add or remove ``product``; returns whether it is now wishlisted."""
        items = self.items
        remaining = [p for p in items if p["id"] != product["id"]]
        if len(remaining) != len(items):
            self.storage.set_item(self.KEY, remaining)
            self.notify("Removed from wishlist", "info")
            return False
        items.append(product)
        self.storage.set_item(self.KEY, items)
        self.notify("Added to wishlist", "success")
        return True
