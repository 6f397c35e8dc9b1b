import logging

logger = logging.getLogger(__name__)


def send_order_confirmation(order: dict) -> None:
    """Log the confirmation email for a placed order.

    Runs as a background task after the response is sent, so a failure here
    is logged and never reaches the customer.
    """
    try:
        customer = order.get("customer") or {}
        name = " ".join(filter(None, [customer.get("firstName"), customer.get("lastName")])) or "customer"
        lines = ", ".join(f"{i['name']} ({i['size']}) x{i['quantity']}" for i in order.get("items", []))
        logger.info(
            "Order confirmation email to %s <%s>: order %s, %s, total %s Taka via %s",
            name,
            customer.get("email"),
            order["id"],
            lines,
            order.get("totalAmount"),
            order.get("paymentMethod"),
        )
    except Exception:
        logger.exception("Could not send confirmation for order %s", order.get("id"))
