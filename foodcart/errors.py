"""
Common Error Constants

Centralized error messages to avoid string duplication.
"""

# Storage errors
ERROR_STORAGE_UNAVAILABLE = "Cart storage unavailable"
ERROR_STORAGE_NOT_CONFIGURED = "UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set"
ERROR_CART_LOAD_FAILED = "Failed to load cart"
ERROR_CART_SAVE_FAILED = "Failed to save cart"
ERROR_CART_CORRUPTED = "Corrupted cart snapshot"
ERROR_CART_SCHEMA_UNSUPPORTED = "Unsupported cart snapshot version"
ERROR_CART_SAVE_NO_LOOP = "No running event loop, cart save skipped"

# Location errors
ERROR_LOCATION_LOAD_FAILED = "Failed to load saved location"
ERROR_LOCATION_SAVE_FAILED = "Failed to save location"
ERROR_LOCATION_CLEAR_FAILED = "Failed to clear location"
ERROR_LOCATION_LISTENER_FAILED = "Location listener failed"

# Validation errors
ERROR_NEGATIVE_PRICE = "price must be a non-negative amount"
ERROR_INVALID_PRICE = "price must be a finite amount"
ERROR_INVALID_QUANTITY = "quantity must be a positive integer"
ERROR_INVALID_AMOUNT = "stored amounts must be finite and non-negative"
ERROR_INVALID_UNIT = "unit must be 'km' or 'miles'"
