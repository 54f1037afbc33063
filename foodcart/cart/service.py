"""Cart controller - the imperative facade over the cart reducer."""
from typing import Any, Callable, Dict, List, Optional

from foodcart.location.service import LocationManager
from foodcart.logging import get_logger, sanitize_id_for_logging
from foodcart.models import Coordinates, Restaurant
from foodcart.services.money import format_money, to_float

from .models import CartState, LineItem, initial_cart_state
from .persistence import CartPersistence
from .reducer import CartAction, CartContext, reduce_cart

logger = get_logger(__name__)

CartListener = Callable[[CartState], None]


class CartController:
    """
    Owns the cart state for one app session.

    Features:
    - Injects the user's current location into every dispatch
    - Reprices delivery automatically when the user moves
    - Debounced persistence, gated until the stored cart has been loaded

    One controller is created per session and handed to whatever UI layer
    needs it. Outside a running event loop saves are skipped and logged.
    """

    def __init__(self, location: LocationManager, persistence: Optional[CartPersistence] = None):
        self._location = location
        self._persistence = persistence
        self._state = initial_cart_state()
        self._listeners: List[CartListener] = []
        self._unsubscribe_location = location.subscribe(self._on_location_change)

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def item_count(self) -> int:
        return self._state.item_count

    async def start(self) -> CartState:
        """Seed the cart from storage. Runs once, before user interaction."""
        snapshot = None
        if self._persistence is not None:
            snapshot = await self._persistence.load()

        if snapshot is not None:
            self.dispatch(CartAction.load_cart(snapshot))
            logger.info(f"Cart restored with {snapshot.item_count} item(s)")
        else:
            self.dispatch(CartAction.set_loading(False))
        return self._state

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a state listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: CartAction) -> CartState:
        """Run an action through the reducer with the current user location."""
        context = CartContext(user_location=self._location.location)
        next_state = reduce_cart(self._state, action, context)
        if next_state == self._state:
            return self._state

        self._state = next_state
        if self._persistence is not None:
            self._persistence.schedule_save(next_state)
        for listener in list(self._listeners):
            listener(next_state)
        return next_state

    def add_item(self, item: LineItem, restaurant: Restaurant) -> CartState:
        """
        Add an item, merging with an identical line if present.

        Call has_conflicting_restaurant() first; an item from a different
        restaurant than the cart's owner is ignored.
        """
        if self.has_conflicting_restaurant(restaurant.id):
            logger.warning(
                f"Ignoring item from restaurant {sanitize_id_for_logging(restaurant.id)}: "
                f"cart belongs to {sanitize_id_for_logging(self._state.restaurant_id)}"
            )
        return self.dispatch(CartAction.add_item(item, restaurant))

    def update_quantity(self, item_id: str, quantity: int, options: Optional[Dict[str, Any]] = None) -> CartState:
        return self.dispatch(CartAction.update_quantity(item_id, quantity, options))

    def remove_item(self, item_id: str, options: Optional[Dict[str, Any]] = None) -> CartState:
        return self.dispatch(CartAction.remove_item(item_id, options))

    def clear_cart(self) -> CartState:
        return self.dispatch(CartAction.clear_cart())

    def switch_restaurant(self, restaurant: Restaurant) -> CartState:
        """Empty the cart and bind it to another restaurant."""
        return self.dispatch(CartAction.set_restaurant(restaurant))

    def has_conflicting_restaurant(self, restaurant_id: str) -> bool:
        """True if the cart holds items from a restaurant other than ``restaurant_id``."""
        state = self._state
        return state.is_active and bool(state.items) and state.restaurant_id != restaurant_id

    def get_cart_summary(self) -> dict:
        """Float/str view of the cart for UI layers."""
        state = self._state
        if not state.items:
            return {
                "is_empty": True,
                "item_count": 0,
                "subtotal": 0,
                "total": 0,
            }

        return {
            "is_empty": False,
            "restaurant_id": state.restaurant_id,
            "restaurant_name": state.restaurant_name,
            "item_count": state.item_count,
            "items": [
                {
                    "id": item.id,
                    "name": item.name,
                    "quantity": item.quantity,
                    "options": dict(item.options),
                    "special_instructions": item.special_instructions,
                    "unit_price": to_float(item.price),
                    "total": to_float(item.price * item.quantity),
                }
                for item in state.items
            ],
            "subtotal": to_float(state.subtotal),
            "tax": to_float(state.tax),
            "delivery_fee": to_float(state.delivery_fee),
            "total": to_float(state.total),
            "total_display": format_money(state.total),
            "estimated_time": state.estimated_time,
        }

    async def close(self) -> None:
        """Stop reacting to location changes and write any pending save."""
        self._unsubscribe_location()
        if self._persistence is not None:
            await self._persistence.flush()

    def _on_location_change(self, location: Optional[Coordinates]) -> None:
        if self._state.is_active:
            self.dispatch(CartAction.update_delivery_fee())
