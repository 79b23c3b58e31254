"""
Helper functions for the agent_dashboard_service.
"""
from typing import Any, Iterable, List, Optional
from uuid import UUID


def parse_uuid(value: Any) -> Optional[UUID]:
    """
    Convert a string (or UUID) to a UUID.

    Returns None instead of raising when the value is not a valid UUID.
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


def unique_in_order(values: Iterable[Any]) -> List[Any]:
    """Drop duplicates while keeping the first occurrence of each value."""
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result
