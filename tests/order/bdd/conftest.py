"""Step definitions for the order lifecycle scenarios."""

import pytest
from pytest_bdd import given, parsers, then, when

from agristore.exceptions import IllegalTransition
from agristore.order.order import OrderStatus

_PATH_TO = {
    "pending": [],
    "confirmed": ["confirmed"],
    "processing": ["confirmed", "processing"],
    "shipped": ["confirmed", "processing", "shipped"],
    "delivered": ["confirmed", "processing", "shipped", "delivered"],
    "cancelled": ["cancelled"],
}


@pytest.fixture()
def refusal():
    return {"exc": None}


@given("a newly placed order", target_fixture="order")
def newly_placed_order(new_order):
    return new_order()


@given(parsers.parse('the order has reached "{status}"'))
def order_has_reached(order, status):
    for step in _PATH_TO[status]:
        order.transition(step)


@when(parsers.parse('the order is moved to "{status}"'))
def order_moved_to(order, refusal, status):
    try:
        order.transition(status)
    except IllegalTransition as exc:
        refusal["exc"] = exc


@when("the customer cancels the order")
def customer_cancels(order, refusal):
    try:
        order.cancel()
    except IllegalTransition as exc:
        refusal["exc"] = exc


@then(parsers.parse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.status == OrderStatus(status).value


@then(parsers.parse('the status history reads "{statuses}"'))
def status_history_reads(order, statuses):
    assert [entry.status for entry in order.history] == [s.strip() for s in statuses.split(",")]


@then("the order change is refused")
def order_change_refused(refusal):
    assert isinstance(refusal["exc"], IllegalTransition)
