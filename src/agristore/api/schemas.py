"""Pydantic request/response schemas for the AgriStore API.

These are the external contracts; they are kept separate from the Protean
commands they are translated into.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    """All fields optional: completeness is checked when the checkout advances."""

    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    address: str | None = None
    apartment: str | None = None
    city: str | None = None
    region: str | None = None
    postal_code: str | None = None
    country: str | None = "Tanzania"
    phone: str | None = None


class OrderLineSchema(BaseModel):
    line_id: str
    product_id: str
    product_name: str | None = None
    supplier: str | None = None
    image_url: str | None = None
    unit_price: int = Field(ge=0)
    quantity: int = Field(ge=1)
    subtotal: int = Field(ge=0)
    selected_variants: dict[str, str] = Field(default_factory=dict)
    selected_options: dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    customer_id: str | None = None
    session_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": None,
                    "session_id": "guest-5f1c",
                }
            ]
        }
    }


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)
    variants: dict[str, str] | None = None
    options: dict[str, str] | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-npk-001",
                    "quantity": 2,
                    "variants": {"bag": "50kg"},
                    "options": None,
                }
            ]
        }
    }


class UpdateCartLineRequest(BaseModel):
    quantity: int  # Zero or less removes the line


class ApplyDiscountRequest(BaseModel):
    code: str = Field(min_length=1, max_length=50)


# ---------------------------------------------------------------------------
# Checkout Request Schemas
# ---------------------------------------------------------------------------
class StartCheckoutRequest(BaseModel):
    cart_id: str
    customer_id: str | None = None


class SetPaymentMethodRequest(BaseModel):
    method_id: str
    account_number: str | None = None


class SetShippingMethodRequest(BaseModel):
    method_id: str


class SetCheckoutDiscountRequest(BaseModel):
    code: str | None = None


class PlaceOrderRequest(BaseModel):
    notes: str | None = None


# ---------------------------------------------------------------------------
# Payment Wallet Request Schemas
# ---------------------------------------------------------------------------
class SavePaymentMethodRequest(BaseModel):
    method_type: str
    provider: str | None = Field(default=None, max_length=100)
    account_number: str | None = Field(default=None, max_length=50)
    method_id: str | None = Field(default=None, max_length=50)
    is_default: bool = False


class UpdatePaymentMethodRequest(BaseModel):
    provider: str | None = Field(default=None, max_length=100)
    account_number: str | None = Field(default=None, max_length=50)
    is_default: bool | None = None


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    customer_id: str | None = None
    lines: list[OrderLineSchema]
    shipping_address: AddressSchema
    payment_method: str
    account_number: str | None = None
    shipping_method: str = "standard"
    subtotal: int = Field(ge=0)
    tax: int = Field(ge=0, default=0)
    shipping_cost: int = Field(ge=0, default=0)
    discount_amount: int = Field(ge=0, default=0)
    total: int = Field(ge=0)
    discount_code: str | None = None
    notes: str | None = None


class TransitionOrderRequest(BaseModel):
    status: str
    note: str | None = None
    changed_by: str = "admin"


class CancelOrderRequest(BaseModel):
    note: str | None = None


class UpdateTrackingRequest(BaseModel):
    tracking_number: str


class UpdateNotesRequest(BaseModel):
    notes: str | None = None


class SetPriorityRequest(BaseModel):
    priority: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartIdResponse(BaseModel):
    cart_id: str


class LineIdResponse(BaseModel):
    line_id: str


class CheckoutIdResponse(BaseModel):
    checkout_id: str


class OrderIdResponse(BaseModel):
    order_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class CartLineResponse(BaseModel):
    line_id: str
    product_id: str
    product_name: str | None = None
    supplier: str | None = None
    image_url: str | None = None
    unit_price: int
    quantity: int
    subtotal: int
    selected_variants: dict[str, str]
    selected_options: dict[str, str]


class CartSummaryResponse(BaseModel):
    item_count: int
    subtotal: int
    tax: int
    shipping_cost: int
    discount_amount: int
    total: int


class CartResponse(BaseModel):
    cart_id: str
    customer_id: str | None = None
    session_id: str | None = None
    lines: list[CartLineResponse]
    discount_code: str | None = None
    summary: CartSummaryResponse


class StepResponse(BaseModel):
    moved: bool
    step: str
    errors: dict[str, str]


class CheckoutResponse(BaseModel):
    checkout_id: str
    cart_id: str
    customer_id: str | None = None
    step: str
    shipping_address: dict | None = None
    payment_method: dict | None = None
    shipping_method: dict | None = None
    discount_code: str | None = None
    processing: bool
    errors: dict[str, str]
    order_id: str | None = None


class StatusHistoryResponse(BaseModel):
    status: str
    note: str | None = None
    created_by: str | None = None
    changed_at: str | None = None


class OrderResponse(BaseModel):
    order_id: str
    order_number: str
    customer_id: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    status: str
    priority: str
    lines: list[CartLineResponse]
    subtotal: int
    tax: int
    shipping_cost: int
    discount_amount: int
    total: int
    shipping_address: dict | None = None
    payment_method: dict | None = None
    shipping_method: dict | None = None
    discount_code: str | None = None
    notes: str | None = None
    tracking_number: str | None = None
    estimated_delivery: str | None = None
    status_history: list[StatusHistoryResponse]
    created_at: str | None = None
    updated_at: str | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]


class StatusCountsResponse(BaseModel):
    counts: dict[str, int]
    total: int


class ProductResponse(BaseModel):
    product_id: str
    name: str
    sku: str | None = None
    price: int
    supplier: str | None = None
    image_url: str | None = None
    variants: list[dict]


class ProductListResponse(BaseModel):
    products: list[ProductResponse]


class ShippingMethodListResponse(BaseModel):
    methods: list[dict]


class PaymentMethodListResponse(BaseModel):
    methods: list[dict]


class SavedMethodIdResponse(BaseModel):
    saved_method_id: str


class SavedPaymentMethodResponse(BaseModel):
    saved_method_id: str
    method_id: str | None = None
    method_type: str
    provider: str | None = None
    account_number: str | None = None
    is_default: bool


class PaymentWalletResponse(BaseModel):
    customer_id: str
    methods: list[SavedPaymentMethodResponse]
