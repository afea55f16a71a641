"""Repository for the Order aggregate."""

from protean.utils.globals import current_domain

from agristore.domain import agristore
from agristore.order.order import Order, OrderLine, OrderStatus, StatusHistoryEntry


@agristore.repository(part_of=Order)
class OrderRepository:
    """Query methods used by the tracking screen and the admin dashboard.

    Results are sorted in memory, newest first.
    """

    def _newest_first(self, orders) -> list[Order]:
        return sorted(orders, key=lambda order: order.created_at, reverse=True)

    def find_by_number(self, order_number: str) -> Order | None:
        normalized = (order_number or "").strip().upper()
        if not normalized:
            return None
        results = self._dao.query.filter(order_number=normalized).all().items
        return results[0] if results else None

    def find_all(self) -> list[Order]:
        return self._newest_first(self._dao.query.all().items)

    def find_by_status(self, status: str) -> list[Order]:
        return self._newest_first(self._dao.query.filter(status=OrderStatus(status).value).all().items)

    def find_recent(self, limit: int) -> list[Order]:
        return self.find_all()[:limit]

    def search(self, term: str) -> list[Order]:
        """Orders whose number, customer name or phone contains ``term``, ignoring case."""
        needle = (term or "").strip().lower()
        if not needle:
            return self.find_all()

        def matches(order):
            haystack = (order.order_number, order.customer_name, order.customer_phone)
            return any(needle in (value or "").lower() for value in haystack)

        return [order for order in self.find_all() if matches(order)]

    def status_counts(self) -> dict[str, int]:
        counts = {status.value: 0 for status in OrderStatus}
        for order in self._dao.query.all().items:
            counts[order.status] += 1
        return counts

    def remove(self, order: Order) -> None:
        """Delete an order together with its lines and status history."""
        for child_cls, children in ((OrderLine, order.lines), (StatusHistoryEntry, order.status_history)):
            child_dao = current_domain.repository_for(child_cls)._dao
            for child in list(children):
                child_dao.delete(child)
        self._dao.delete(order)
