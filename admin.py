import logging
from typing import Dict, List, Optional

from cart import Notifier, log_notifier
from client import StorefrontClient
from errors import ApiError, ForbiddenError, TransientNetworkError
from session import AuthSession

logger = logging.getLogger(__name__)


class AdminPanel:
    """Management screens over the admin endpoints.

    The role check here only decides whether to show the panel; the API
    enforces the admin role on every call.
    """

    def __init__(self, session: AuthSession, notify: Notifier = log_notifier):
        if not session.is_admin():
            raise ForbiddenError("Please log in as admin")
        self.session = session
        self.client: StorefrontClient = session.client
        self.notify = notify

    def _call(self, action: str, fn, *args, success: Optional[str] = None):
        try:
            result = fn(*args)
        except (ApiError, TransientNetworkError) as e:
            logger.warning("Admin %s failed: %s", action, e.message)
            self.notify(f"Error {action}: {e.message}", "error")
            raise
        if success:
            self.notify(success, "success")
        return result

    # Orders

    def load_orders(self) -> List[Dict]:
        return self._call("loading orders", self.client.list_orders)

    def update_order_status(self, order_id: str, status: str) -> Dict:
        return self._call("updating order status", self.client.update_order_status, order_id, status,
                          success="Order status updated successfully")

    # Products

    def load_products(self) -> List[Dict]:
        return self._call("loading products", self.client.list_products)

    def save_product(self, product: Dict, product_id: Optional[int] = None) -> Dict:
        if product_id is None:
            return self._call("saving product", self.client.create_product, product,
                              success="Product saved successfully!")
        return self._call("saving product", self.client.update_product, product_id, product,
                          success="Product saved successfully!")

    def delete_product(self, product_id: int) -> None:
        self._call("deleting product", self.client.delete_product, product_id, success="Product deleted!")

    # Categories

    def load_categories(self) -> List[Dict]:
        return self._call("loading categories", self.client.list_categories)

    def save_category(self, category: Dict, category_id: Optional[int] = None) -> Dict:
        if category_id is None:
            return self._call("saving category", self.client.create_category, category,
                              success="Category saved successfully!")
        return self._call("saving category", self.client.update_category, category_id, category,
                          success="Category saved successfully!")

    def delete_category(self, category_id: int) -> None:
        self._call("deleting category", self.client.delete_category, category_id, success="Category deleted!")

    # Users

    def load_users(self) -> List[Dict]:
        return self._call("loading users", self.client.list_users)

    def delete_user(self, user_id: str) -> None:
        self._call("deleting user", self.client.delete_user, user_id, success="User deleted!")
