"""Canonical identity keys for cart line items."""
import json
from typing import Any, Mapping, Optional

OPTION_DELIMITER = "|"


def _option_value(value: Any) -> str:
    if isinstance(value, (list, tuple, dict)):
        # Tuples come back from JSON as lists; both must key the same
        return json.dumps(value, sort_keys=True, default=str)
    return str(value)


def options_key(options: Optional[Mapping[str, Any]]) -> str:
    """
    Build a canonical string for a customization mapping.

    Keys are sorted so insertion order never matters; an empty or missing
    mapping yields "". Two line items are the same purchase choice exactly
    when their product ids and options keys match.
    """
    if not options:
        return ""
    return OPTION_DELIMITER.join(f"{key}:{_option_value(options[key])}" for key in sorted(options))


def line_identity(item_id: str, options: Optional[Mapping[str, Any]]) -> tuple:
    return (item_id, options_key(options))
