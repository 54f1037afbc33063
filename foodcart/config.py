"""
Runtime configuration.

Every value is read from the environment once, on import, with a default
suitable for local development.
"""

import os


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

# Quiescence window before a cart snapshot is written
CART_SAVE_DEBOUNCE_MS = _env_int("CART_SAVE_DEBOUNCE_MS", 500)

# Abandoned carts expire after a week
CART_TTL_SECONDS = _env_int("CART_TTL_SECONDS", 7 * 86400)
