"""HTTP handler layer.

Handlers convert DTOs to service calls and service results back to DTOs.
"""

from .cache_handler import CacheHandler

__all__ = [
    "CacheHandler",
]
