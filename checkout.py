"""
Multi-step checkout: shipping -> payment -> review -> confirmation.

Each step validates before moving forward; only payment and review allow
going back. Confirmation is terminal: the cart has been cleared and the
placed order is kept for the confirmation screen and the receipt.
"""

import logging
import re
import time
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaError

from cart import CartState, Notifier, log_notifier
from client import StorefrontClient
from config import GUEST_EMAIL_DOMAIN
from errors import ApiError, TransientNetworkError, ValidationError
from pricing import format_price
from schemas import PaymentMethod
from session import AuthSession

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"^\d{10,15}$")

PAYMENT_LABELS = {
    PaymentMethod.COD: "Cash on Delivery",
    PaymentMethod.BKASH: "bKash (Simulated)",
    PaymentMethod.NAGAD: "Nagad (Simulated)",
    PaymentMethod.CREDIT_CARD: "Credit Card (Simulated)",
}


class CheckoutStep(str, Enum):
    SHIPPING = "shipping"
    PAYMENT = "payment"
    REVIEW = "review"
    CONFIRMATION = "confirmation"


class ShippingInfo(BaseModel):
    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)
    phone: str = Field(..., pattern=PHONE_PATTERN.pattern)
    address: str = Field(..., min_length=1)
    city: Optional[str] = None
    postcode: Optional[str] = None
    country: Optional[str] = None


class CheckoutFlow:
    def __init__(self, cart: CartState, client: StorefrontClient,
                 session: Optional[AuthSession] = None, notify: Notifier = log_notifier):
        if not cart.items:
            raise ValidationError("Your cart is empty")
        self.cart = cart
        self.client = client
        self.session = session
        self.notify = notify
        self.step = CheckoutStep.SHIPPING
        self.shipping: Optional[ShippingInfo] = None
        self.payment_method: Optional[PaymentMethod] = None
        self.submitting = False
        self.error: Optional[str] = None
        self.order: Optional[Dict] = None

    def _current_user(self) -> Optional[Dict]:
        return self.session.current_user if self.session else None

    def shipping_defaults(self) -> Dict[str, str]:
        """Pre-fill values for the shipping form from the signed-in user."""
        user = self._current_user() or {}
        return {
            "firstName": user.get("firstName", ""),
            "lastName": user.get("lastName", ""),
            "phone": user.get("phone", ""),
        }

    def _require(self, step: CheckoutStep) -> None:
        if self.step != step:
            raise ValidationError(f"Checkout is at the {self.step.value} step, not {step.value}")

    def submit_shipping(self, **fields) -> bool:
        self._require(CheckoutStep.SHIPPING)
        cleaned = {k: v.strip() if isinstance(v, str) else v for k, v in fields.items()}
        try:
            shipping = ShippingInfo(**cleaned)
        except SchemaError as e:
            fields_in_error = {str(err["loc"][0]) for err in e.errors() if err.get("loc")}
            if "phone" in fields_in_error:
                self.notify("Phone number must be 10-15 digits.", "warning")
            else:
                self.notify("Please fill out all required shipping fields correctly.", "warning")
            return False
        self.shipping = shipping
        self.step = CheckoutStep.PAYMENT
        return True

    def select_payment(self, method: Optional[str]) -> bool:
        self._require(CheckoutStep.PAYMENT)
        try:
            self.payment_method = PaymentMethod(method)
        except ValueError:
            self.notify("Please select a payment method.", "warning")
            return False
        self.step = CheckoutStep.REVIEW
        return True

    def back(self) -> CheckoutStep:
        if self.step == CheckoutStep.PAYMENT:
            self.step = CheckoutStep.SHIPPING
        elif self.step == CheckoutStep.REVIEW:
            self.step = CheckoutStep.PAYMENT
        return self.step

    def review(self) -> Dict:
        self._require(CheckoutStep.REVIEW)
        return {
            "shipping": self.shipping.model_dump(),
            "paymentMethod": self.payment_method.value,
            "paymentLabel": PAYMENT_LABELS[self.payment_method],
            "items": self.cart.items,
            "totals": self.cart.totals(),
        }

    def _customer(self) -> Dict:
        user = self._current_user()
        if user:
            return {k: user.get(k) for k in ("id", "firstName", "lastName", "email")}
        stamp = int(time.time() * 1000)
        return {
            "id": f"guest-{stamp}",
            "firstName": self.shipping.firstName,
            "lastName": self.shipping.lastName,
            "email": f"guest-{stamp}@{GUEST_EMAIL_DOMAIN}",
        }

    def build_order(self) -> Dict:
        totals = self.cart.totals()
        return {
            "customer": self._customer(),
            "shippingAddress": {
                "address": self.shipping.address,
                "phone": self.shipping.phone,
                "city": self.shipping.city,
                "postcode": self.shipping.postcode,
                "country": self.shipping.country,
            },
            "shippingPhone": self.shipping.phone,
            "items": [
                {
                    "id": item["id"],
                    "name": item["name"],
                    "size": item["selectedSize"],
                    "quantity": item["quantity"],
                    "price": item["price"],
                    "category": item.get("category", ""),
                }
                for item in self.cart.items
            ],
            "paymentMethod": self.payment_method.value,
            "subtotal": totals["subtotal"],
            "shippingFee": totals["shippingFee"],
            "totalAmount": totals["total"],
        }

    def place_order(self) -> Optional[Dict]:
        self._require(CheckoutStep.REVIEW)
        if self.submitting:
            self.notify("Your order is already being placed.", "warning")
            return None
        self.submitting = True
        self.error = None
        try:
            response = self.client.place_order(self.build_order())
        except (ApiError, TransientNetworkError) as e:
            logger.warning("Order submission failed: %s", e.message)
            self.error = e.message
            self.notify(f"Order failed: {e.message}", "error")
            return None
        finally:
            self.submitting = False
        self.order = response["order"]
        self.cart.clear()
        self.step = CheckoutStep.CONFIRMATION
        self.notify("Order Placed Successfully!", "success")
        return response

    def receipt(self) -> str:
        """Plain-text receipt for the confirmed order.

        Rendered as text rather than PDF, since no PDF library is part of the
        stack; ``save_receipt`` writes it out as the downloadable copy.
        """
        self._require(CheckoutStep.CONFIRMATION)
        order = self.order
        customer = order["customer"]
        address = order["shippingAddress"]
        where = ", ".join(filter(None, [address.get(k) for k in ("address", "city", "postcode", "country")]))
        lines = [
            "IR7 Football Shop Receipt",
            "",
            f"Order ID: {order['id']}",
            f"Date: {order['orderDate'][:10]}",
            f"Payment Method: {PAYMENT_LABELS[PaymentMethod(order['paymentMethod'])]}",
            "",
            f"Customer: {customer.get('firstName', '')} {customer.get('lastName', '')}".rstrip(),
            f"Email: {customer.get('email')}",
            f"Phone: {address.get('phone') or order.get('shippingPhone') or 'N/A'}",
            f"Address: {where or 'No Address Provided'}",
            "",
        ]
        for item in order["items"]:
            lines.append(
                f"{item['name']} ({item['size']}) x{item['quantity']}  {format_price(item['price'] * item['quantity'])}"
            )
        fee = order["shippingFee"]
        lines += [
            "",
            f"Subtotal: {format_price(order['subtotal'])}",
            f"Shipping: {'FREE' if fee == 0 else format_price(fee)}",
            f"Total: {format_price(order['totalAmount'])}",
            "",
            "Thank you for shopping with The IR7 Football Shop!",
        ]
        return "\n".join(lines)

    def save_receipt(self, path) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.receipt())
