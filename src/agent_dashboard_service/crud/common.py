from typing import Iterable, List, Optional
from uuid import UUID

from fastapi import HTTPException, status

from ..constants import INVALID_REFERENCE, RESOURCE_NOT_FOUND
from ..utils.helpers import parse_uuid


def not_found(detail: str = RESOURCE_NOT_FOUND) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def invalid_reference(detail: str = INVALID_REFERENCE) -> HTTPException:
    return HTTPException(status_code=422, detail=detail)


def reference_id(value: Optional[str]) -> UUID:
    """Parse an id sent in a request body, raising 422 when it is malformed."""
    parsed = parse_uuid(value)
    if parsed is None:
        raise invalid_reference()
    return parsed


def reference_ids(values: Iterable[str]) -> List[UUID]:
    return [reference_id(value) for value in values]
