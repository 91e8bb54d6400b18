"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure (DRY). Used by the cache
key builders and the Realtime Database data source.
"""

# Cache key prefixes (used with :company_id:process_type etc.)
CACHE_PREFIX_FLOW = "flow"
CACHE_PREFIX_ORG_LEVEL = "org_level"
CACHE_PREFIX_FUNCTION = "function"

# Scope segment for definitions that are not company-specific
CACHE_SCOPE_GLOBAL = "_global"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"
