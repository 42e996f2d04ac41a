"""FastAPI routes for the Checkout domain — carts, order placement and orders."""

import json

from fastapi import APIRouter, HTTPException
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from checkout.api.responses import mutation_errors, place_order_payload
from checkout.api.schemas import (
    AddProductRequest,
    CartIdResponse,
    CreateCartRequest,
    OrderItemResponse,
    OrderResponse,
    PlaceOrderRequest,
    SetBillingAddressRequest,
    SetGuestEmailRequest,
    SetPaymentMethodRequest,
    SetShippingAddressRequest,
    SetShippingMethodRequest,
    StatusResponse,
)
from checkout.domain import logger
from checkout.order.order import Order
from checkout.order.placement import PlaceOrder
from checkout.quote.addresses import SetBillingAddress, SetShippingAddress
from checkout.quote.items import AddProductToCart
from checkout.quote.management import CreateEmptyCart, SetGuestEmail
from checkout.quote.methods import SetPaymentMethod, SetShippingMethod

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest) -> CartIdResponse:
    command = CreateEmptyCart(reserved_order_id=body.reserved_order_id)
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.post("/{cart_id}/items", response_model=StatusResponse)
async def add_product(cart_id: str, body: AddProductRequest) -> StatusResponse:
    command = AddProductToCart(cart_id=cart_id, sku=body.sku, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.put("/{cart_id}/email", response_model=StatusResponse)
async def set_guest_email(cart_id: str, body: SetGuestEmailRequest) -> StatusResponse:
    command = SetGuestEmail(cart_id=cart_id, email=body.email)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.put("/{cart_id}/shipping-address", response_model=StatusResponse)
async def set_shipping_address(cart_id: str, body: SetShippingAddressRequest) -> StatusResponse:
    command = SetShippingAddress(cart_id=cart_id, address=json.dumps(body.address.model_dump()))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.put("/{cart_id}/billing-address", response_model=StatusResponse)
async def set_billing_address(cart_id: str, body: SetBillingAddressRequest) -> StatusResponse:
    command = SetBillingAddress(
        cart_id=cart_id,
        address=json.dumps(body.address.model_dump()) if body.address else None,
        same_as_shipping=body.same_as_shipping,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.put("/{cart_id}/shipping-method", response_model=StatusResponse)
async def set_shipping_method(cart_id: str, body: SetShippingMethodRequest) -> StatusResponse:
    command = SetShippingMethod(cart_id=cart_id, carrier_code=body.carrier_code, method_code=body.method_code)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.put("/{cart_id}/payment-method", response_model=StatusResponse)
async def set_payment_method(cart_id: str, body: SetPaymentMethodRequest) -> StatusResponse:
    command = SetPaymentMethod(cart_id=cart_id, code=body.code)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Mutation Router
# ---------------------------------------------------------------------------
graphql_router = APIRouter(prefix="/graphql", tags=["mutations"])


@graphql_router.post("/placeOrder")
async def place_order(body: PlaceOrderRequest) -> dict:
    """Place a cart as an order.

    Domain errors are reported in an ``errors`` collection with status 200,
    the way a GraphQL mutation reports them.
    """
    try:
        order_number = current_domain.process(PlaceOrder(cart_id=body.input.cart_id), asynchronous=False)
    except (ValidationError, ObjectNotFoundError) as exc:
        logger.warning("place_order_failed", cart_id=body.input.cart_id, error=str(exc))
        return mutation_errors(exc)
    return place_order_payload(order_number)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("/{order_number}", response_model=OrderResponse)
async def get_order(order_number: str) -> OrderResponse:
    order = current_domain.repository_for(Order).find_by_order_number(order_number)
    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {order_number} not found")

    return OrderResponse(
        order_number=order.order_number,
        customer_email=order.customer_email,
        status=order.status,
        items=[
            OrderItemResponse(
                sku=item.sku,
                quantity=item.quantity,
                price=item.price,
                discount_amount=item.discount_amount,
                applied_rule_ids=item.applied_rule_ids,
            )
            for item in order.items
        ],
        subtotal=order.pricing.subtotal,
        shipping_amount=order.pricing.shipping_amount,
        discount_amount=order.pricing.discount_amount,
        grand_total=order.pricing.grand_total,
        currency=order.pricing.currency,
        applied_rule_ids=order.applied_rule_ids,
    )
