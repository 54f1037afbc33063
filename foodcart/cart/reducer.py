"""
Cart reducer - the cart state machine.

reduce_cart(state, action, context) is pure: it never performs I/O, never
raises, and returns the input state object itself when an action does not
apply (unknown action, restaurant conflict, missing item).
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from foodcart.models import Coordinates, Restaurant

from .identity import line_identity
from .models import DEFAULT_BASE_MINUTES, EMPTY_CART, CartState, LineItem
from .pricing import aggregate_totals, delivery_fee, delivery_time


class CartActionType(str, Enum):
    """Actions understood by the cart reducer."""
    LOAD_CART = "LOAD_CART"
    SET_LOADING = "SET_LOADING"
    ADD_ITEM = "ADD_ITEM"
    UPDATE_QUANTITY = "UPDATE_QUANTITY"
    REMOVE_ITEM = "REMOVE_ITEM"
    CLEAR_CART = "CLEAR_CART"
    SET_RESTAURANT = "SET_RESTAURANT"
    UPDATE_DELIVERY_FEE = "UPDATE_DELIVERY_FEE"


@dataclass(frozen=True)
class CartAction:
    """An action plus its payload. Build with the classmethods."""
    type: str
    item: Optional[LineItem] = None
    restaurant: Optional[Restaurant] = None
    item_id: Optional[str] = None
    options: Optional[Dict[str, Any]] = None
    quantity: int = 0
    snapshot: Optional[CartState] = None
    loading: bool = False

    @classmethod
    def load_cart(cls, snapshot: CartState) -> "CartAction":
        return cls(CartActionType.LOAD_CART, snapshot=snapshot)

    @classmethod
    def set_loading(cls, loading: bool) -> "CartAction":
        return cls(CartActionType.SET_LOADING, loading=loading)

    @classmethod
    def add_item(cls, item: LineItem, restaurant: Restaurant) -> "CartAction":
        return cls(CartActionType.ADD_ITEM, item=item, restaurant=restaurant)

    @classmethod
    def update_quantity(cls, item_id: str, quantity: int, options: Optional[Dict[str, Any]] = None) -> "CartAction":
        return cls(CartActionType.UPDATE_QUANTITY, item_id=item_id, quantity=quantity, options=options)

    @classmethod
    def remove_item(cls, item_id: str, options: Optional[Dict[str, Any]] = None) -> "CartAction":
        return cls(CartActionType.REMOVE_ITEM, item_id=item_id, options=options)

    @classmethod
    def clear_cart(cls) -> "CartAction":
        return cls(CartActionType.CLEAR_CART)

    @classmethod
    def set_restaurant(cls, restaurant: Restaurant) -> "CartAction":
        return cls(CartActionType.SET_RESTAURANT, restaurant=restaurant)

    @classmethod
    def update_delivery_fee(cls) -> "CartAction":
        return cls(CartActionType.UPDATE_DELIVERY_FEE)


@dataclass(frozen=True)
class CartContext:
    """Ambient inputs read at dispatch time."""
    user_location: Optional[Coordinates] = None


def _base_minutes(restaurant: Restaurant) -> int:
    if restaurant.estimated_delivery_time is None:
        return DEFAULT_BASE_MINUTES
    return restaurant.estimated_delivery_time


def _with_items(state: CartState, items: Tuple[LineItem, ...]) -> CartState:
    """Replace items and recompute totals; no items means an empty cart."""
    if not items:
        return EMPTY_CART
    totals = aggregate_totals(items, state.delivery_fee)
    return replace(state, items=items, subtotal=totals.subtotal, tax=totals.tax, total=totals.total)


def _load_cart(state: CartState, action: CartAction, context: CartContext) -> CartState:
    if action.snapshot is None:
        return state
    return replace(action.snapshot, is_loading=False)


def _set_loading(state: CartState, action: CartAction, context: CartContext) -> CartState:
    return replace(state, is_loading=action.loading)


def _add_item(state: CartState, action: CartAction, context: CartContext) -> CartState:
    item, restaurant = action.item, action.restaurant
    if item is None or restaurant is None:
        return state

    # Conflicts are resolved by the caller before dispatching
    if state.restaurant_id is not None and state.restaurant_id != restaurant.id:
        return state

    quantity = max(item.quantity, 1)
    index = state.find_index(item.identity)
    if index >= 0:
        existing = state.items[index]
        merged = replace(existing, quantity=existing.quantity + quantity)
        items = state.items[:index] + (merged,) + state.items[index + 1:]
    else:
        items = state.items + (replace(item, quantity=quantity),)

    base = _base_minutes(restaurant)
    fee = delivery_fee(restaurant.location, context.user_location)
    totals = aggregate_totals(items, fee)

    return replace(
        state,
        restaurant_id=restaurant.id,
        restaurant_name=restaurant.name,
        restaurant_image=restaurant.image,
        restaurant_location=restaurant.location,
        items=items,
        delivery_fee=fee,
        estimated_time=delivery_time(restaurant.location, context.user_location, base),
        base_delivery_time=base,
        subtotal=totals.subtotal,
        tax=totals.tax,
        total=totals.total,
    )


def _update_quantity(state: CartState, action: CartAction, context: CartContext) -> CartState:
    if isinstance(action.quantity, bool) or not isinstance(action.quantity, int):
        return state
    if action.quantity <= 0:
        return _remove_item(state, action, context)

    index = state.find_index(line_identity(action.item_id, action.options))
    if index < 0:
        return state

    updated = replace(state.items[index], quantity=action.quantity)
    return _with_items(state, state.items[:index] + (updated,) + state.items[index + 1:])


def _remove_item(state: CartState, action: CartAction, context: CartContext) -> CartState:
    index = state.find_index(line_identity(action.item_id, action.options))
    if index < 0:
        return state
    return _with_items(state, state.items[:index] + state.items[index + 1:])


def _clear_cart(state: CartState, action: CartAction, context: CartContext) -> CartState:
    return EMPTY_CART


def _set_restaurant(state: CartState, action: CartAction, context: CartContext) -> CartState:
    restaurant = action.restaurant
    if restaurant is None:
        return state

    base = _base_minutes(restaurant)
    fee = delivery_fee(restaurant.location, context.user_location)
    totals = aggregate_totals((), fee)

    return replace(
        EMPTY_CART,
        restaurant_id=restaurant.id,
        restaurant_name=restaurant.name,
        restaurant_image=restaurant.image,
        restaurant_location=restaurant.location,
        delivery_fee=fee,
        estimated_time=delivery_time(restaurant.location, context.user_location, base),
        base_delivery_time=base,
        total=totals.total,
    )


def _update_delivery_fee(state: CartState, action: CartAction, context: CartContext) -> CartState:
    if not state.is_active:
        return state

    fee = delivery_fee(state.restaurant_location, context.user_location)
    totals = aggregate_totals(state.items, fee)

    return replace(
        state,
        delivery_fee=fee,
        estimated_time=delivery_time(state.restaurant_location, context.user_location, state.base_delivery_time),
        subtotal=totals.subtotal,
        tax=totals.tax,
        total=totals.total,
    )


_HANDLERS: Dict[str, Callable[[CartState, CartAction, CartContext], CartState]] = {
    CartActionType.LOAD_CART: _load_cart,
    CartActionType.SET_LOADING: _set_loading,
    CartActionType.ADD_ITEM: _add_item,
    CartActionType.UPDATE_QUANTITY: _update_quantity,
    CartActionType.REMOVE_ITEM: _remove_item,
    CartActionType.CLEAR_CART: _clear_cart,
    CartActionType.SET_RESTAURANT: _set_restaurant,
    CartActionType.UPDATE_DELIVERY_FEE: _update_delivery_fee,
}


def reduce_cart(state: CartState, action: CartAction, context: Optional[CartContext] = None) -> CartState:
    """Return the next cart state for an action."""
    handler = _HANDLERS.get(getattr(action, "type", None))
    if handler is None:
        return state
    return handler(state, action, context or CartContext())
