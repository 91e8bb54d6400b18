"""Cache key builders for configuration records.

    flow:{company_id|_global}:{process_type}
    org_level:{position_name}
    function:{company_id}:{function_id}

Components must not contain the separator, otherwise two different records
could share a key; builders raise ValueError for such components.
"""

from hse_approvals.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_FLOW,
    CACHE_PREFIX_FUNCTION,
    CACHE_PREFIX_ORG_LEVEL,
    CACHE_SCOPE_GLOBAL,
)


def _join(prefix: str, **components: str) -> str:
    for name, value in components.items():
        if CACHE_KEY_SEP in value:
            raise ValueError(
                f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
            )
    return CACHE_KEY_SEP.join((prefix, *components.values()))


def _scope(company_id: str | None) -> str:
    return CACHE_SCOPE_GLOBAL if company_id is None else company_id


def flow_definition_key(company_id: str | None, process_type: str) -> str:
    """Key for a flow definition; company_id None means the global definition."""
    return _join(CACHE_PREFIX_FLOW, company_id=_scope(company_id), process_type=process_type)


def org_level_key(position_name: str) -> str:
    return _join(CACHE_PREFIX_ORG_LEVEL, position_name=position_name)


def function_name_key(company_id: str, function_id: str) -> str:
    return _join(CACHE_PREFIX_FUNCTION, company_id=company_id, function_id=function_id)
