"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands. Request bodies are closed: unknown fields are
rejected with 422.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ClosedModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(ClosedModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    address1: str = Field(min_length=1)
    address2: str | None = None
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip_code: str = Field(min_length=1)
    country: str = Field(min_length=1)
    phone: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(ClosedModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartQuantityRequest(ClosedModel):
    quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(ClosedModel):
    shipping_address: AddressSchema
    billing_address: AddressSchema | None = None
    payment_method: str = Field(min_length=1, max_length=50)
    notes: str | None = None

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "shipping_address": {
                        "first_name": "Ada",
                        "last_name": "Lovelace",
                        "address1": "12 Analytical Way",
                        "city": "London",
                        "state": "LDN",
                        "zip_code": "N1 9GU",
                        "country": "GB",
                        "phone": "+44 20 7946 0000",
                    },
                    "payment_method": "credit_card",
                }
            ]
        },
    )


class ShipOrderRequest(ClosedModel):
    tracking_number: str | None = Field(default=None, max_length=255)


class UpdatePaymentStatusRequest(ClosedModel):
    payment_status: str
    payment_reference: str | None = Field(default=None, max_length=255)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartLineResponse(BaseModel):
    product_id: str
    product_name: str | None = None
    quantity: int
    unit_price: Decimal | None = None
    line_total: Decimal | None = None
    stock: int | None = None
    available: bool


class CartResponse(BaseModel):
    user_id: str
    items: list[CartLineResponse]
    subtotal: Decimal


class OrderLineResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderResponse(BaseModel):
    order_id: str
    order_number: str
    user_id: str
    status: str
    payment_status: str
    items: list[OrderLineResponse]
    shipping_address: AddressSchema
    billing_address: AddressSchema | None = None
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal
    currency: str
    payment_method: str
    payment_reference: str | None = None
    tracking_number: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StatusResponse(BaseModel):
    status: str = "ok"
