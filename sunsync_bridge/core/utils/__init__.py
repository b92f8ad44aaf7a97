from .http_pool import get_client, close_all, POOL_LIMITS

__all__ = [
    "get_client",
    "close_all",
    "POOL_LIMITS",
]
