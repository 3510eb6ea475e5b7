"""Pydantic request/response schemas for the Store API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class RegisterProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    price: float = Field(ge=0)
    stock: int = Field(ge=0, default=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Ceramic Mug",
                    "price": 12.5,
                    "stock": 40,
                }
            ]
        }
    }


class SetStockRequest(BaseModel):
    stock: int = Field(ge=0)


class ProductResponse(BaseModel):
    id: str
    name: str
    price: float
    stock: int

    @classmethod
    def of(cls, product) -> "ProductResponse":
        return cls(id=str(product.id), name=product.name, price=product.price, stock=product.stock)


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddCartItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(ge=1)


class CartItemResponse(BaseModel):
    id: str
    product_id: str
    quantity: int
    price: float
    subtotal: float


class CartResponse(BaseModel):
    id: str
    user_id: str
    items: list[CartItemResponse]
    total: float

    @classmethod
    def of(cls, cart) -> "CartResponse":
        return cls(
            id=str(cart.id),
            user_id=str(cart.user_id),
            items=[
                CartItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    quantity=item.quantity,
                    price=item.price,
                    subtotal=item.subtotal,
                )
                for item in cart.items
            ],
            total=cart.total,
        )


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    payment_method: str
    shipping_method: str
    shipping_address: str = Field(min_length=1)
    notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "payment_method": "credit_card",
                    "shipping_method": "standard",
                    "shipping_address": "123 Main St, Springfield, IL 62701",
                    "notes": "Leave at the door",
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str


class UpdateShippingStatusRequest(BaseModel):
    shipping_status: str
    tracking_number: str | None = None


class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    quantity: int
    price: float
    subtotal: float


class OrderResponse(BaseModel):
    id: str
    user_id: str
    items: list[OrderItemResponse]
    total_price: float
    order_status: str
    payment_status: str
    shipping_status: str
    payment_method: str
    shipping_method: str
    shipping_address: str
    tracking_number: str | None = None
    notes: str | None = None
    created_at: datetime | None = None

    @classmethod
    def of(cls, order) -> "OrderResponse":
        return cls(
            id=str(order.id),
            user_id=str(order.user_id),
            items=[
                OrderItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    quantity=item.quantity,
                    price=item.price,
                    subtotal=item.subtotal,
                )
                for item in order.items
            ],
            total_price=order.total_price,
            order_status=order.order_status,
            payment_status=order.payment_status,
            shipping_status=order.shipping_status,
            payment_method=order.payment_method,
            shipping_method=order.shipping_method,
            shipping_address=order.shipping_address,
            tracking_number=order.tracking_number,
            notes=order.notes,
            created_at=order.created_at,
        )


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class CreateTransactionRequest(BaseModel):
    order_id: str
    payment_method: str
    payment_data: str | None = None


class VerifyTransactionRequest(BaseModel):
    reference: str
    payment_data: str | None = None


class TransactionResponse(BaseModel):
    id: str
    order_id: str
    amount: float
    payment_method: str
    reference: str
    status: str
    created_at: datetime | None = None

    @classmethod
    def of(cls, transaction) -> "TransactionResponse":
        return cls(
            id=str(transaction.id),
            order_id=str(transaction.order_id),
            amount=transaction.amount,
            payment_method=transaction.payment_method,
            reference=transaction.reference,
            status=transaction.status,
            created_at=transaction.created_at,
        )
