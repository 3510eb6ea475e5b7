"""FastAPI routes for the Store: products, cart, orders and payments.

The caller is identified by the ``X-User-Id`` header. Administrative routes
also need ``X-User-Role: admin``.
"""

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Request
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from store.api.schemas import (
    AddCartItemRequest,
    CartResponse,
    CreateTransactionRequest,
    OrderResponse,
    PlaceOrderRequest,
    ProductResponse,
    RegisterProductRequest,
    SetStockRequest,
    StatusResponse,
    TransactionResponse,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
    UpdateShippingStatusRequest,
    VerifyTransactionRequest,
)
from store.cart.cart import ShoppingCart
from store.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from store.errors import EntityKind, InfrastructureError, NotFound
from store.inventory.product import Product
from store.inventory.stocking import RegisterProduct, SetStock
from store.order.cancellation import CancelOrder
from store.order.order import Order
from store.order.placement import PlaceOrder
from store.order.status import UpdateOrderStatus, UpdateShippingStatus
from store.payment.processing import CancelTransaction, CreateTransaction, VerifyTransaction
from store.payment.transaction import Transaction
from store.settings import StoreSettings

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------
def current_user(x_user_id: str = Header(default="")) -> str:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id


def require_admin(
    user_id: str = Depends(current_user),
    x_user_role: str = Header(default=""),
) -> str:
    if x_user_role != "admin":
        raise HTTPException(status_code=403, detail="Administrator role required")
    return user_id


def get_settings(request: Request) -> StoreSettings:
    return request.app.state.settings


def _process(command):
    """Run a command synchronously; anything that is not a domain error becomes an InfrastructureError."""
    try:
        return current_domain.process(command, asynchronous=False)
    except (ValidationError, ObjectNotFoundError):
        raise
    except InfrastructureError:
        logger.exception("Command failed on infrastructure", command=command.__class__.__name__)
        raise
    except Exception as exc:
        logger.exception("Command failed unexpectedly", command=command.__class__.__name__)
        raise InfrastructureError(f"{command.__class__.__name__} failed") from exc


def _owned_transaction(transaction_id: str, user_id: str) -> Transaction:
    transaction = current_domain.repository_for(Transaction).find(transaction_id)
    try:
        current_domain.repository_for(Order).find_for_user(transaction.order_id, user_id)
    except NotFound:
        raise NotFound(EntityKind.TRANSACTION, transaction_id) from None
    return transaction


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductResponse)
async def register_product(body: RegisterProductRequest, _: str = Depends(require_admin)) -> ProductResponse:
    command = RegisterProduct(
        name=body.name,
        price=body.price,
        stock=body.stock,
    )
    product_id = _process(command)
    return ProductResponse.of(current_domain.repository_for(Product).find(product_id))


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return ProductResponse.of(current_domain.repository_for(Product).find(product_id))


@product_router.put("/{product_id}/stock", response_model=ProductResponse)
async def set_stock(product_id: str, body: SetStockRequest, _: str = Depends(require_admin)) -> ProductResponse:
    _process(SetStock(product_id=product_id, stock=body.stock))
    return ProductResponse.of(current_domain.repository_for(Product).find(product_id))


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


def _cart_for(user_id: str) -> CartResponse:
    return CartResponse.of(current_domain.repository_for(ShoppingCart).for_user(user_id))


@cart_router.get("", response_model=CartResponse)
async def get_cart(user_id: str = Depends(current_user)) -> CartResponse:
    return _cart_for(user_id)


@cart_router.post("/items", status_code=201, response_model=CartResponse)
async def add_cart_item(
    body: AddCartItemRequest,
    user_id: str = Depends(current_user),
    settings: StoreSettings = Depends(get_settings),
) -> CartResponse:
    cart = current_domain.repository_for(ShoppingCart).for_user(user_id)
    line = cart.line_for(body.product_id)
    settings.check_quantity(body.quantity + (line.quantity if line else 0))
    command = AddToCart(
        user_id=user_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    _process(command)
    return _cart_for(user_id)


@cart_router.put("/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: str,
    body: UpdateCartItemRequest,
    user_id: str = Depends(current_user),
    settings: StoreSettings = Depends(get_settings),
) -> CartResponse:
    settings.check_quantity(body.quantity)
    command = UpdateCartItem(
        user_id=user_id,
        item_id=item_id,
        quantity=body.quantity,
    )
    _process(command)
    return _cart_for(user_id)


@cart_router.delete("/items/{item_id}", response_model=CartResponse)
async def remove_cart_item(item_id: str, user_id: str = Depends(current_user)) -> CartResponse:
    _process(RemoveFromCart(user_id=user_id, item_id=item_id))
    return _cart_for(user_id)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(user_id: str = Depends(current_user)) -> CartResponse:
    _process(ClearCart(user_id=user_id))
    return _cart_for(user_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(
    body: PlaceOrderRequest,
    user_id: str = Depends(current_user),
    settings: StoreSettings = Depends(get_settings),
) -> OrderResponse:
    """Convert the caller's cart into an order.

    The order, its stock reservations and the emptied cart commit together.
    """
    settings.check_payment_method(body.payment_method)
    settings.check_shipping_method(body.shipping_method)

    command = PlaceOrder(
        user_id=user_id,
        payment_method=body.payment_method,
        shipping_method=body.shipping_method,
        shipping_address=body.shipping_address,
        notes=body.notes,
    )
    order_id = _process(command)
    return OrderResponse.of(current_domain.repository_for(Order).find(order_id))


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(user_id: str = Depends(current_user)) -> list[OrderResponse]:
    return [OrderResponse.of(order) for order in current_domain.repository_for(Order).for_user(user_id)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, user_id: str = Depends(current_user)) -> OrderResponse:
    return OrderResponse.of(current_domain.repository_for(Order).find_for_user(order_id, user_id))


@order_router.get("/{order_id}/payments", response_model=list[TransactionResponse])
async def list_order_payments(order_id: str, user_id: str = Depends(current_user)) -> list[TransactionResponse]:
    current_domain.repository_for(Order).find_for_user(order_id, user_id)
    transactions = current_domain.repository_for(Transaction).for_order(order_id)
    return [TransactionResponse.of(transaction) for transaction in transactions]


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: str, user_id: str = Depends(current_user)) -> OrderResponse:
    _process(CancelOrder(order_id=order_id, user_id=user_id))
    return OrderResponse.of(current_domain.repository_for(Order).find(order_id))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, _: str = Depends(require_admin)
) -> OrderResponse:
    _process(UpdateOrderStatus(order_id=order_id, status=body.status))
    return OrderResponse.of(current_domain.repository_for(Order).find(order_id))


@order_router.put("/{order_id}/shipping", response_model=OrderResponse)
async def update_shipping_status(
    order_id: str, body: UpdateShippingStatusRequest, _: str = Depends(require_admin)
) -> OrderResponse:
    command = UpdateShippingStatus(
        order_id=order_id,
        shipping_status=body.shipping_status,
        tracking_number=body.tracking_number,
    )
    _process(command)
    return OrderResponse.of(current_domain.repository_for(Order).find(order_id))


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("", status_code=201, response_model=TransactionResponse)
async def create_transaction(
    body: CreateTransactionRequest,
    user_id: str = Depends(current_user),
    settings: StoreSettings = Depends(get_settings),
) -> TransactionResponse:
    settings.check_payment_method(body.payment_method)
    command = CreateTransaction(
        order_id=body.order_id,
        payment_method=body.payment_method,
        payment_data=body.payment_data,
        user_id=user_id,
    )
    transaction_id = _process(command)
    return TransactionResponse.of(current_domain.repository_for(Transaction).find(transaction_id))


@payment_router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(transaction_id: str, user_id: str = Depends(current_user)) -> TransactionResponse:
    return TransactionResponse.of(_owned_transaction(transaction_id, user_id))


@payment_router.post("/{transaction_id}/verify", response_model=TransactionResponse)
async def verify_transaction(
    transaction_id: str, body: VerifyTransactionRequest, user_id: str = Depends(current_user)
) -> TransactionResponse:
    _owned_transaction(transaction_id, user_id)
    command = VerifyTransaction(
        transaction_id=transaction_id,
        reference=body.reference,
        payment_data=body.payment_data,
    )
    _process(command)
    return TransactionResponse.of(current_domain.repository_for(Transaction).find(transaction_id))


@payment_router.put("/{transaction_id}/cancel", response_model=TransactionResponse)
async def cancel_transaction(transaction_id: str, user_id: str = Depends(current_user)) -> TransactionResponse:
    _owned_transaction(transaction_id, user_id)
    _process(CancelTransaction(transaction_id=transaction_id))
    return TransactionResponse.of(current_domain.repository_for(Transaction).find(transaction_id))
