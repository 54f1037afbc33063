"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from foodcart.errors import (
    ERROR_INVALID_AMOUNT,
    ERROR_INVALID_PRICE,
    ERROR_INVALID_QUANTITY,
    ERROR_NEGATIVE_PRICE,
)
from foodcart.models import Coordinates
from foodcart.services.money import to_decimal

from .identity import line_identity

DEFAULT_BASE_MINUTES = 25

ZERO = Decimal("0.00")


def _stored_amount(value: Any) -> Decimal:
    amount = to_decimal(value)
    if not amount.is_finite() or amount < 0:
        raise ValueError(ERROR_INVALID_AMOUNT)
    return amount


@dataclass(frozen=True)
class LineItem:
    """One product with its chosen options and quantity."""
    id: str
    price: Decimal
    quantity: int = 1
    options: Dict[str, Any] = field(default_factory=dict)
    special_instructions: str = ""
    name: Optional[str] = None
    image: Optional[str] = None

    def __post_init__(self):
        price = to_decimal(self.price)
        if not price.is_finite():
            raise ValueError(ERROR_INVALID_PRICE)
        if price < 0:
            raise ValueError(ERROR_NEGATIVE_PRICE)
        # Below 1 is allowed here; ADD_ITEM normalizes it
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError(ERROR_INVALID_QUANTITY)
        object.__setattr__(self, "price", price)
        object.__setattr__(self, "options", dict(self.options or {}))
        object.__setattr__(self, "special_instructions", self.special_instructions or "")

    @property
    def identity(self) -> tuple:
        """(id, canonical options key) - the merge key inside a cart."""
        return line_identity(self.id, self.options)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "price": str(self.price),
            "quantity": self.quantity,
            "options": dict(self.options),
            "special_instructions": self.special_instructions,
            "name": self.name,
            "image": self.image,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        """Create from dictionary."""
        quantity = data["quantity"]
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError(ERROR_INVALID_QUANTITY)
        return cls(
            id=str(data["id"]),
            price=to_decimal(data["price"]),
            quantity=quantity,
            options=data.get("options") or {},
            special_instructions=data.get("special_instructions", ""),
            name=data.get("name"),
            image=data.get("image"),
        )


@dataclass(frozen=True)
class CartState:
    """
    The whole cart aggregate.

    Empty when restaurant_id is None. Monetary fields are derived and only
    ever written by the reducer.
    """
    restaurant_id: Optional[str] = None
    restaurant_name: Optional[str] = None
    restaurant_image: Optional[str] = None
    restaurant_location: Optional[Coordinates] = None
    items: Tuple[LineItem, ...] = ()
    subtotal: Decimal = ZERO
    tax: Decimal = ZERO
    delivery_fee: Decimal = ZERO
    total: Decimal = ZERO
    estimated_time: int = 0
    base_delivery_time: int = DEFAULT_BASE_MINUTES
    is_loading: bool = False

    @property
    def is_active(self) -> bool:
        return self.restaurant_id is not None

    @property
    def item_count(self) -> int:
        """Total number of units in the cart."""
        return sum(item.quantity for item in self.items)

    def find_index(self, identity: tuple) -> int:
        """Index of the line item with this identity, or -1."""
        for index, item in enumerate(self.items):
            if item.identity == identity:
                return index
        return -1

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "restaurant_id": self.restaurant_id,
            "restaurant_name": self.restaurant_name,
            "restaurant_image": self.restaurant_image,
            "restaurant_location": self.restaurant_location.to_dict() if self.restaurant_location else None,
            "items": [item.to_dict() for item in self.items],
            "subtotal": str(self.subtotal),
            "tax": str(self.tax),
            "delivery_fee": str(self.delivery_fee),
            "total": str(self.total),
            "estimated_time": self.estimated_time,
            "base_delivery_time": self.base_delivery_time,
            "is_loading": self.is_loading,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartState":
        """Create from dictionary."""
        location = data.get("restaurant_location")
        return cls(
            restaurant_id=data.get("restaurant_id"),
            restaurant_name=data.get("restaurant_name"),
            restaurant_image=data.get("restaurant_image"),
            restaurant_location=Coordinates.model_validate(location) if location else None,
            items=tuple(LineItem.from_dict(item) for item in data.get("items", [])),
            subtotal=_stored_amount(data.get("subtotal", ZERO)),
            tax=_stored_amount(data.get("tax", ZERO)),
            delivery_fee=_stored_amount(data.get("delivery_fee", ZERO)),
            total=_stored_amount(data.get("total", ZERO)),
            estimated_time=int(data.get("estimated_time", 0)),
            base_delivery_time=int(data.get("base_delivery_time", DEFAULT_BASE_MINUTES)),
            is_loading=bool(data.get("is_loading", False)),
        )


EMPTY_CART = CartState()


def initial_cart_state() -> CartState:
    """Empty cart waiting for the first load."""
    return replace(EMPTY_CART, is_loading=True)
