"""Cache: Redis service and cache key utilities.

Used by the Realtime Database data source for configuration records (flow
definitions, position levels, function names). Key format is in keys.py.
"""

from hse_approvals.infrastructure.cache.keys import (
    flow_definition_key,
    function_name_key,
    org_level_key,
)
from hse_approvals.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CacheService",
    "flow_definition_key",
    "function_name_key",
    "org_level_key",
]
