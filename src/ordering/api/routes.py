"""FastAPI routes for the Ordering domain — carts and orders."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddressSchema,
    AddToCartRequest,
    CartLineResponse,
    CartResponse,
    CreateOrderRequest,
    OrderLineResponse,
    OrderResponse,
    ShipOrderRequest,
    StatusResponse,
    UpdateCartQuantityRequest,
    UpdatePaymentStatusRequest,
)
from ordering.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from ordering.cart.management import ClearCart
from ordering.checkout.placement import PlaceOrder, SimulatePaymentSuccess
from ordering.checkout.repositories import DomainCartStore
from ordering.order.administration import CancelOrder, ConfirmOrder, DeliverOrder, RefundOrder, ShipOrder
from ordering.order.order import Order
from ordering.order.payment import UpdatePaymentStatus
from ordering.shared.money import ZERO


def _address_response(address) -> AddressSchema | None:
    if address is None:
        return None
    return AddressSchema(
        first_name=address.first_name,
        last_name=address.last_name,
        address1=address.address1,
        address2=address.address2,
        city=address.city,
        state=address.state,
        zip_code=address.zip_code,
        country=address.country,
        phone=address.phone,
    )


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        order_number=order.order_number,
        user_id=str(order.user_id),
        status=order.status,
        payment_status=order.payment_status,
        items=[
            OrderLineResponse(
                product_id=str(line.product_id),
                product_name=line.product_name,
                quantity=line.quantity,
                unit_price=line.price,
                line_total=line.line_total,
            )
            for line in order.items
        ],
        shipping_address=_address_response(order.shipping_address),
        billing_address=_address_response(order.billing_address),
        subtotal=order.pricing.subtotal,
        tax=order.pricing.tax,
        shipping=order.pricing.shipping,
        total=order.pricing.total,
        currency=order.pricing.currency,
        payment_method=order.payment_method,
        payment_reference=order.payment_reference,
        tracking_number=order.tracking_number,
        notes=order.notes,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def _load_order(order_id: str) -> OrderResponse:
    return _order_response(current_domain.repository_for(Order).get(order_id))


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/users/{user_id}/cart", tags=["carts"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(user_id: str) -> CartResponse:
    """The user's cart, priced at current catalog prices."""
    items = []
    subtotal = ZERO
    for line in DomainCartStore().get_cart(user_id):
        product = line.product
        line_total = product.price * line.quantity if product else None
        if line.is_available:
            subtotal += line_total
        items.append(
            CartLineResponse(
                product_id=line.product_id,
                product_name=product.name if product else None,
                quantity=line.quantity,
                unit_price=product.price if product else None,
                line_total=line_total,
                stock=product.stock if product else None,
                available=line.is_available,
            )
        )
    return CartResponse(user_id=user_id, items=items, subtotal=subtotal)


@cart_router.delete("", response_model=StatusResponse)
async def clear_cart(user_id: str) -> StatusResponse:
    current_domain.process(ClearCart(user_id=user_id), asynchronous=False)
    return StatusResponse()


@cart_router.post("/items", response_model=StatusResponse)
async def add_cart_item(user_id: str, body: AddToCartRequest) -> StatusResponse:
    command = AddToCart(
        user_id=user_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.put("/items/{product_id}", response_model=StatusResponse)
async def update_cart_item_quantity(user_id: str, product_id: str, body: UpdateCartQuantityRequest) -> StatusResponse:
    command = UpdateCartQuantity(
        user_id=user_id,
        product_id=product_id,
        new_quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/items/{product_id}", response_model=StatusResponse)
async def remove_cart_item(user_id: str, product_id: str) -> StatusResponse:
    command = RemoveFromCart(
        user_id=user_id,
        product_id=product_id,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(tags=["orders"])


@order_router.post("/users/{user_id}/orders", status_code=201, response_model=OrderResponse)
async def create_order(user_id: str, body: CreateOrderRequest) -> OrderResponse:
    """Convert the user's cart into an order and empty the cart."""
    command = PlaceOrder(
        user_id=user_id,
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        billing_address=json.dumps(body.billing_address.model_dump()) if body.billing_address else None,
        payment_method=body.payment_method,
        notes=body.notes,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return _load_order(order_id)


@order_router.get("/users/{user_id}/orders", response_model=list[OrderResponse])
async def list_user_orders(user_id: str) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).for_user(user_id)
    return [_order_response(order) for order in orders]


@order_router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return _load_order(order_id)


@order_router.put("/orders/{order_id}/confirm", response_model=OrderResponse)
async def confirm_order(order_id: str) -> OrderResponse:
    current_domain.process(ConfirmOrder(order_id=order_id), asynchronous=False)
    return _load_order(order_id)


@order_router.put("/orders/{order_id}/ship", response_model=OrderResponse)
async def ship_order(order_id: str, body: ShipOrderRequest | None = None) -> OrderResponse:
    tracking_number = body.tracking_number if body else None
    current_domain.process(ShipOrder(order_id=order_id, tracking_number=tracking_number), asynchronous=False)
    return _load_order(order_id)


@order_router.put("/orders/{order_id}/deliver", response_model=OrderResponse)
async def deliver_order(order_id: str) -> OrderResponse:
    current_domain.process(DeliverOrder(order_id=order_id), asynchronous=False)
    return _load_order(order_id)


@order_router.put("/orders/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: str) -> OrderResponse:
    current_domain.process(CancelOrder(order_id=order_id), asynchronous=False)
    return _load_order(order_id)


@order_router.put("/orders/{order_id}/refund", response_model=OrderResponse)
async def refund_order(order_id: str) -> OrderResponse:
    current_domain.process(RefundOrder(order_id=order_id), asynchronous=False)
    return _load_order(order_id)


@order_router.put("/orders/{order_id}/payment-status", response_model=OrderResponse)
async def update_payment_status(order_id: str, body: UpdatePaymentStatusRequest) -> OrderResponse:
    command = UpdatePaymentStatus(
        order_id=order_id,
        payment_status=body.payment_status,
        payment_reference=body.payment_reference,
    )
    current_domain.process(command, asynchronous=False)
    return _load_order(order_id)


@order_router.post("/orders/{order_id}/pay-success", response_model=OrderResponse)
async def simulate_payment_success(order_id: str) -> OrderResponse:
    """Development stand-in for a payment gateway callback."""
    current_domain.process(SimulatePaymentSuccess(order_id=order_id), asynchronous=False)
    return _load_order(order_id)
