"""Cart package: models, pricing, reducer, persistence, and controller."""
from .identity import options_key
from .models import CartState, LineItem, initial_cart_state
from .persistence import CartPersistence
from .pricing import aggregate_totals, delivery_fee, delivery_time
from .reducer import CartAction, CartActionType, CartContext, reduce_cart
from .service import CartController

__all__ = [
    "options_key",
    "CartState",
    "LineItem",
    "initial_cart_state",
    "CartPersistence",
    "aggregate_totals",
    "delivery_fee",
    "delivery_time",
    "CartAction",
    "CartActionType",
    "CartContext",
    "reduce_cart",
    "CartController",
]
