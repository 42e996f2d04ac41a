"""Pydantic request/response schemas for the Checkout API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    firstname: str
    lastname: str
    company: str | None = None
    street: str
    city: str
    region: str | None = None
    postcode: str
    country_code: str = Field(min_length=2, max_length=2)
    telephone: str | None = None


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    reserved_order_id: str | None = None


class AddProductRequest(BaseModel):
    sku: str
    quantity: int = Field(ge=1, default=1)


class SetGuestEmailRequest(BaseModel):
    email: str


class SetShippingAddressRequest(BaseModel):
    address: AddressSchema

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "address": {
                        "firstname": "John",
                        "lastname": "Smith",
                        "street": "test street 1",
                        "city": "Los Angeles",
                        "region": "CA",
                        "postcode": "887766",
                        "country_code": "US",
                        "telephone": "88776655",
                    }
                }
            ]
        }
    }


class SetBillingAddressRequest(BaseModel):
    address: AddressSchema | None = None
    same_as_shipping: bool = False


class SetShippingMethodRequest(BaseModel):
    carrier_code: str
    method_code: str


class SetPaymentMethodRequest(BaseModel):
    code: str


# ---------------------------------------------------------------------------
# Mutation Schemas
# ---------------------------------------------------------------------------
class PlaceOrderInput(BaseModel):
    cart_id: str


class PlaceOrderRequest(BaseModel):
    input: PlaceOrderInput


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartIdResponse(BaseModel):
    cart_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class OrderItemResponse(BaseModel):
    sku: str
    quantity: int
    price: float
    discount_amount: float
    applied_rule_ids: str | None = None


class OrderResponse(BaseModel):
    order_number: str
    customer_email: str
    status: str
    items: list[OrderItemResponse]
    subtotal: float
    shipping_amount: float
    discount_amount: float
    grand_total: float
    currency: str
    applied_rule_ids: str | None = None
