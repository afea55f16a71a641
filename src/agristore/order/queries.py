"""Read helpers for orders, shared by the API and the management CLI."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from agristore import config
from agristore.exceptions import OrderNotFound
from agristore.order.order import Order, OrderStatus
from agristore.order.status import load_order


def get_order(order_id) -> Order:
    return load_order(order_id)


def get_order_by_number(order_number: str) -> Order:
    order = current_domain.repository_for(Order).find_by_number(order_number)
    if order is None:
        raise OrderNotFound({"order_number": [f"Order {order_number} does not exist"]})
    return order


def list_orders(status: str | None = None, customer_id=None, search: str | None = None) -> list[Order]:
    """All orders newest first, optionally narrowed by status, customer and a search term."""
    if status and status not in {s.value for s in OrderStatus}:
        raise ValidationError({"status": [f"Unknown order status: {status}"]})

    repo = current_domain.repository_for(Order)
    if search:
        orders = repo.search(search)
    elif status:
        orders = repo.find_by_status(status)
    else:
        orders = repo.find_all()

    if status:
        orders = [order for order in orders if order.status == status]
    if customer_id:
        orders = [order for order in orders if str(order.customer_id) == str(customer_id)]
    return orders


def recent_orders(limit: int | None = None) -> list[Order]:
    return current_domain.repository_for(Order).find_recent(limit or config.RECENT_ORDERS_LIMIT)


def order_status_counts() -> dict[str, int]:
    return current_domain.repository_for(Order).status_counts()
