"""FastAPI routes for AgriStore: carts, checkouts, orders, saved payment methods and the catalogue."""

import json

from fastapi import APIRouter, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from agristore.api.schemas import (
    AddressSchema,
    AddToCartRequest,
    ApplyDiscountRequest,
    CancelOrderRequest,
    CartIdResponse,
    CartResponse,
    CheckoutIdResponse,
    CheckoutResponse,
    CreateCartRequest,
    CreateOrderRequest,
    LineIdResponse,
    OrderIdResponse,
    OrderListResponse,
    OrderResponse,
    PaymentMethodListResponse,
    PaymentWalletResponse,
    PlaceOrderRequest,
    ProductListResponse,
    ProductResponse,
    SavedMethodIdResponse,
    SavedPaymentMethodResponse,
    SavePaymentMethodRequest,
    SetCheckoutDiscountRequest,
    SetPaymentMethodRequest,
    SetPriorityRequest,
    SetShippingMethodRequest,
    ShippingMethodListResponse,
    StartCheckoutRequest,
    StatusCountsResponse,
    StatusResponse,
    StepResponse,
    TransitionOrderRequest,
    UpdateCartLineRequest,
    UpdateNotesRequest,
    UpdatePaymentMethodRequest,
    UpdateTrackingRequest,
)
from agristore.cart.cart import Cart
from agristore.cart.discounts import ApplyDiscountCode, RemoveDiscountCode
from agristore.cart.lines import AddToCart, RemoveFromCart, SetCartLineQuantity
from agristore.cart.management import ClearCart, CreateCart
from agristore.catalog.product import Product
from agristore.checkout.checkout import Checkout
from agristore.checkout.placement import PlaceOrder
from agristore.checkout.selection import (
    AdvanceCheckout,
    ResetCheckout,
    RetreatCheckout,
    SetCheckoutDiscountCode,
    SetPaymentMethod,
    SetShippingAddress,
    SetShippingMethod,
    StartCheckout,
)
from agristore.order.administration import DeleteOrder, SetOrderPriority, UpdateOrderNotes, UpdateTrackingNumber
from agristore.order.creation import CreateOrder
from agristore.order.queries import get_order, get_order_by_number, list_orders, order_status_counts, recent_orders
from agristore.order.status import CancelOrder, TransitionOrder
from agristore.shared.methods import PAYMENT_METHODS, SHIPPING_METHODS
from agristore.wallet.management import (
    DeletePaymentMethod,
    ResetPaymentWallet,
    SavePaymentMethod,
    SetDefaultPaymentMethod,
    UpdatePaymentMethod,
)
from agristore.wallet.repository import wallet_for


def _isoformat(value):
    return value.isoformat() if value else None


# ---------------------------------------------------------------------------
# Serializers
# ---------------------------------------------------------------------------
def cart_response(cart) -> CartResponse:
    return CartResponse(
        cart_id=str(cart.id),
        customer_id=str(cart.customer_id) if cart.customer_id else None,
        session_id=cart.session_id,
        lines=[line.snapshot() for line in sorted(cart.lines, key=lambda line: line.added_at)],
        discount_code=cart.discount_code,
        summary=cart.summary().to_dict(),
    )


def checkout_response(checkout) -> CheckoutResponse:
    return CheckoutResponse(
        checkout_id=str(checkout.id),
        cart_id=str(checkout.cart_id),
        customer_id=str(checkout.customer_id) if checkout.customer_id else None,
        step=checkout.step,
        shipping_address=checkout.shipping_address.to_dict() if checkout.shipping_address else None,
        payment_method=checkout.payment_method.to_dict() if checkout.payment_method else None,
        shipping_method=checkout.shipping_method.to_dict() if checkout.shipping_method else None,
        discount_code=checkout.discount_code,
        processing=bool(checkout.processing),
        errors=checkout.error_messages,
        order_id=str(checkout.order_id) if checkout.order_id else None,
    )


def order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        order_number=order.order_number,
        customer_id=str(order.customer_id) if order.customer_id else None,
        customer_name=order.customer_name,
        customer_phone=order.customer_phone,
        status=order.status,
        priority=order.priority,
        lines=[line.to_dict() for line in order.lines],
        subtotal=order.subtotal,
        tax=order.tax,
        shipping_cost=order.shipping_cost,
        discount_amount=order.discount_amount,
        total=order.total,
        shipping_address=order.shipping_address.to_dict() if order.shipping_address else None,
        payment_method=order.payment_method.to_dict() if order.payment_method else None,
        shipping_method=order.shipping_method.to_dict() if order.shipping_method else None,
        discount_code=order.discount_code,
        notes=order.notes,
        tracking_number=order.tracking_number,
        estimated_delivery=_isoformat(order.estimated_delivery),
        status_history=[
            {
                "status": entry.status,
                "note": entry.note,
                "created_by": entry.created_by,
                "changed_at": _isoformat(entry.changed_at),
            }
            for entry in order.history
        ],
        created_at=_isoformat(order.created_at),
        updated_at=_isoformat(order.updated_at),
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest) -> CartIdResponse:
    command = CreateCart(
        customer_id=body.customer_id,
        session_id=body.session_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str) -> CartResponse:
    return cart_response(current_domain.repository_for(Cart).get(cart_id))


@cart_router.post("/{cart_id}/lines", status_code=201, response_model=LineIdResponse)
async def add_cart_line(cart_id: str, body: AddToCartRequest) -> LineIdResponse:
    command = AddToCart(
        cart_id=cart_id,
        product_id=body.product_id,
        quantity=body.quantity,
        variants=json.dumps(body.variants) if body.variants else None,
        options=json.dumps(body.options) if body.options else None,
    )
    line_id = current_domain.process(command, asynchronous=False)
    return LineIdResponse(line_id=line_id)


@cart_router.put("/{cart_id}/lines/{line_id}", response_model=StatusResponse)
async def update_cart_line(cart_id: str, line_id: str, body: UpdateCartLineRequest) -> StatusResponse:
    command = SetCartLineQuantity(
        cart_id=cart_id,
        line_id=line_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/lines/{line_id}", response_model=StatusResponse)
async def remove_cart_line(cart_id: str, line_id: str) -> StatusResponse:
    command = RemoveFromCart(cart_id=cart_id, line_id=line_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/lines", response_model=StatusResponse)
async def clear_cart(cart_id: str) -> StatusResponse:
    current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
    return StatusResponse()


@cart_router.post("/{cart_id}/discount", response_model=CartResponse)
async def apply_discount(cart_id: str, body: ApplyDiscountRequest) -> CartResponse:
    """Apply a discount code and return the recalculated cart."""
    current_domain.process(ApplyDiscountCode(cart_id=cart_id, code=body.code), asynchronous=False)
    return cart_response(current_domain.repository_for(Cart).get(cart_id))


@cart_router.delete("/{cart_id}/discount", response_model=StatusResponse)
async def remove_discount(cart_id: str) -> StatusResponse:
    current_domain.process(RemoveDiscountCode(cart_id=cart_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkouts", tags=["checkouts"])


def _step_response(checkout_id: str, moved: bool) -> StepResponse:
    checkout = current_domain.repository_for(Checkout).get(checkout_id)
    return StepResponse(moved=bool(moved), step=checkout.step, errors=checkout.error_messages)


@checkout_router.post("", status_code=201, response_model=CheckoutIdResponse)
async def start_checkout(body: StartCheckoutRequest) -> CheckoutIdResponse:
    command = StartCheckout(cart_id=body.cart_id, customer_id=body.customer_id)
    checkout_id = current_domain.process(command, asynchronous=False)
    return CheckoutIdResponse(checkout_id=checkout_id)


@checkout_router.get("/{checkout_id}", response_model=CheckoutResponse)
async def get_checkout(checkout_id: str) -> CheckoutResponse:
    return checkout_response(current_domain.repository_for(Checkout).get(checkout_id))


@checkout_router.put("/{checkout_id}/shipping-address", response_model=StatusResponse)
async def set_shipping_address(checkout_id: str, body: AddressSchema) -> StatusResponse:
    command = SetShippingAddress(checkout_id=checkout_id, address=json.dumps(body.model_dump()))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@checkout_router.put("/{checkout_id}/payment-method", response_model=StatusResponse)
async def set_payment_method(checkout_id: str, body: SetPaymentMethodRequest) -> StatusResponse:
    command = SetPaymentMethod(
        checkout_id=checkout_id,
        method_id=body.method_id,
        account_number=body.account_number,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@checkout_router.put("/{checkout_id}/shipping-method", response_model=StatusResponse)
async def set_shipping_method(checkout_id: str, body: SetShippingMethodRequest) -> StatusResponse:
    command = SetShippingMethod(checkout_id=checkout_id, method_id=body.method_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@checkout_router.put("/{checkout_id}/discount", response_model=StatusResponse)
async def set_checkout_discount(checkout_id: str, body: SetCheckoutDiscountRequest) -> StatusResponse:
    command = SetCheckoutDiscountCode(checkout_id=checkout_id, code=body.code)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@checkout_router.post("/{checkout_id}/advance", response_model=StepResponse)
async def advance_checkout(checkout_id: str) -> StepResponse:
    """Validate the current step and move forward; field errors come back in ``errors``."""
    moved = current_domain.process(AdvanceCheckout(checkout_id=checkout_id), asynchronous=False)
    return _step_response(checkout_id, moved)


@checkout_router.post("/{checkout_id}/retreat", response_model=StepResponse)
async def retreat_checkout(checkout_id: str) -> StepResponse:
    moved = current_domain.process(RetreatCheckout(checkout_id=checkout_id), asynchronous=False)
    return _step_response(checkout_id, moved)


@checkout_router.post("/{checkout_id}/reset", response_model=StatusResponse)
async def reset_checkout(checkout_id: str) -> StatusResponse:
    current_domain.process(ResetCheckout(checkout_id=checkout_id), asynchronous=False)
    return StatusResponse()


@checkout_router.post("/{checkout_id}/place-order", status_code=201, response_model=OrderIdResponse)
async def place_order(checkout_id: str, body: PlaceOrderRequest) -> OrderIdResponse:
    command = PlaceOrder(checkout_id=checkout_id, notes=body.notes)
    order_id = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=order_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def create_order(body: CreateOrderRequest) -> OrderIdResponse:
    command = CreateOrder(
        customer_id=body.customer_id,
        lines=json.dumps([line.model_dump() for line in body.lines]),
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        payment_method=body.payment_method,
        account_number=body.account_number,
        shipping_method=body.shipping_method,
        subtotal=body.subtotal,
        tax=body.tax,
        shipping_cost=body.shipping_cost,
        discount_amount=body.discount_amount,
        total=body.total,
        discount_code=body.discount_code,
        notes=body.notes,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=order_id)


@order_router.get("", response_model=OrderListResponse)
async def get_orders(
    status: str | None = None,
    customer_id: str | None = None,
    search: str | None = None,
) -> OrderListResponse:
    """Admin order list, newest first. ``search`` matches order number, customer name or phone."""
    orders = list_orders(status=status, customer_id=customer_id, search=search)
    return OrderListResponse(orders=[order_response(order) for order in orders])


@order_router.get("/recent", response_model=OrderListResponse)
async def get_recent_orders(limit: int | None = None) -> OrderListResponse:
    return OrderListResponse(orders=[order_response(order) for order in recent_orders(limit)])


@order_router.get("/status-counts", response_model=StatusCountsResponse)
async def get_status_counts() -> StatusCountsResponse:
    counts = order_status_counts()
    return StatusCountsResponse(counts=counts, total=sum(counts.values()))


@order_router.get("/by-number/{order_number}", response_model=OrderResponse)
async def get_order_by_order_number(order_number: str) -> OrderResponse:
    return order_response(get_order_by_number(order_number))


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order_details(order_id: str) -> OrderResponse:
    return order_response(get_order(order_id))


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def transition_order(order_id: str, body: TransitionOrderRequest) -> StatusResponse:
    command = TransitionOrder(
        order_id=order_id,
        status=body.status,
        note=body.note,
        changed_by=body.changed_by,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> StatusResponse:
    current_domain.process(CancelOrder(order_id=order_id, note=body.note), asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/tracking", response_model=StatusResponse)
async def update_tracking(order_id: str, body: UpdateTrackingRequest) -> StatusResponse:
    command = UpdateTrackingNumber(order_id=order_id, tracking_number=body.tracking_number)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/notes", response_model=StatusResponse)
async def update_notes(order_id: str, body: UpdateNotesRequest) -> StatusResponse:
    current_domain.process(UpdateOrderNotes(order_id=order_id, notes=body.notes), asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/priority", response_model=StatusResponse)
async def set_priority(order_id: str, body: SetPriorityRequest) -> StatusResponse:
    current_domain.process(SetOrderPriority(order_id=order_id, priority=body.priority), asynchronous=False)
    return StatusResponse()


@order_router.delete("/{order_id}", response_model=StatusResponse)
async def delete_order(order_id: str) -> StatusResponse:
    current_domain.process(DeleteOrder(order_id=order_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Catalog Router
# ---------------------------------------------------------------------------
catalog_router = APIRouter(tags=["catalog"])


def _product_response(product) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        name=product.name,
        sku=product.sku,
        price=product.price,
        supplier=product.supplier,
        image_url=product.image_url,
        variants=[
            {"name": variant.name, "value": variant.value, "price_adjustment": variant.price_adjustment}
            for variant in product.variants
        ],
    )


@catalog_router.get("/products", response_model=ProductListResponse)
async def get_products() -> ProductListResponse:
    products = current_domain.repository_for(Product)._dao.query.all().items
    return ProductListResponse(products=[_product_response(product) for product in products])


@catalog_router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(current_domain.repository_for(Product).get(product_id))


@catalog_router.get("/shipping-methods", response_model=ShippingMethodListResponse)
async def get_shipping_methods() -> ShippingMethodListResponse:
    return ShippingMethodListResponse(
        methods=[{"method_id": method_id, **details} for method_id, details in SHIPPING_METHODS.items()]
    )


@catalog_router.get("/payment-methods", response_model=PaymentMethodListResponse)
async def get_payment_methods() -> PaymentMethodListResponse:
    return PaymentMethodListResponse(
        methods=[{"method_id": method_id, **details} for method_id, details in PAYMENT_METHODS.items()]
    )


# ---------------------------------------------------------------------------
# Payment Wallet Router
# ---------------------------------------------------------------------------
wallet_router = APIRouter(prefix="/customers/{customer_id}/payment-methods", tags=["payment-methods"])


@wallet_router.get("", response_model=PaymentWalletResponse)
async def get_saved_payment_methods(
    customer_id: str, method_type: str | None = Query(default=None, alias="type")
) -> PaymentWalletResponse:
    wallet = wallet_for(customer_id)
    methods = wallet.methods_of_type(method_type) if method_type else wallet.ordered_methods
    return PaymentWalletResponse(customer_id=customer_id, methods=[method.to_dict() for method in methods])


@wallet_router.get("/default", response_model=SavedPaymentMethodResponse)
async def get_default_payment_method(customer_id: str) -> SavedPaymentMethodResponse:
    default = wallet_for(customer_id).default_method
    if default is None:
        raise ObjectNotFoundError({"_entity": f"No default payment method for customer {customer_id}"})
    return SavedPaymentMethodResponse(**default.to_dict())


@wallet_router.post("", status_code=201, response_model=SavedMethodIdResponse)
async def save_payment_method(customer_id: str, request: SavePaymentMethodRequest) -> SavedMethodIdResponse:
    saved_method_id = current_domain.process(
        SavePaymentMethod(customer_id=customer_id, **request.model_dump(exclude_none=True)),
        asynchronous=False,
    )
    return SavedMethodIdResponse(saved_method_id=saved_method_id)


@wallet_router.put("/{saved_method_id}", response_model=StatusResponse)
async def update_payment_method(
    customer_id: str, saved_method_id: str, request: UpdatePaymentMethodRequest
) -> StatusResponse:
    current_domain.process(
        UpdatePaymentMethod(
            customer_id=customer_id,
            saved_method_id=saved_method_id,
            **request.model_dump(exclude_none=True),
        ),
        asynchronous=False,
    )
    return StatusResponse()


@wallet_router.delete("/{saved_method_id}", response_model=StatusResponse)
async def delete_payment_method(customer_id: str, saved_method_id: str) -> StatusResponse:
    current_domain.process(
        DeletePaymentMethod(customer_id=customer_id, saved_method_id=saved_method_id),
        asynchronous=False,
    )
    return StatusResponse()


@wallet_router.put("/{saved_method_id}/default", response_model=StatusResponse)
async def set_default_payment_method(customer_id: str, saved_method_id: str) -> StatusResponse:
    current_domain.process(
        SetDefaultPaymentMethod(customer_id=customer_id, saved_method_id=saved_method_id),
        asynchronous=False,
    )
    return StatusResponse()


@wallet_router.post("/reset", response_model=StatusResponse)
async def reset_payment_methods(customer_id: str) -> StatusResponse:
    current_domain.process(ResetPaymentWallet(customer_id=customer_id), asynchronous=False)
    return StatusResponse()
