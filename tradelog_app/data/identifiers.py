"""
Identifier sanitization at the persistence boundary.

A malformed identifier is never passed through. Empty input means "no
value" and is distinct from "invalid", so an unselected optional reference
does not block a submission while a corrupted one does not reach storage.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import IdentityError

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$"
)


class IdStatus(str, Enum):
    """Result category of identifier sanitization."""
    VALUE = "value"
    EMPTY = "empty"
    INVALID = "invalid"


@dataclass(frozen=True)
class SanitizedId:
    """Sanitized identifier; `value` is set only when status is VALUE."""
    status: IdStatus
    value: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.status is IdStatus.EMPTY

    @property
    def is_invalid(self) -> bool:
        return self.status is IdStatus.INVALID


EMPTY_ID = SanitizedId(IdStatus.EMPTY)
INVALID_ID = SanitizedId(IdStatus.INVALID)


def sanitize_uuid(value: Optional[str]) -> SanitizedId:
    """
    Sanitize a caller-supplied UUID string.

    Args:
        value: Raw identifier text

    Returns:
        SanitizedId holding the canonical lowercase UUID, EMPTY or INVALID
    """
    if value is None:
        return EMPTY_ID

    text = str(value).strip()
    if not text:
        return EMPTY_ID

    canonical = text.lower()
    if not _UUID_RE.match(canonical):
        return INVALID_ID

    return SanitizedId(IdStatus.VALUE, canonical)


def validate_uuid(value: Optional[str], field: str = "id") -> str:
    """
    Require a well-formed UUID.

    Args:
        value: Raw identifier text
        field: Field name used in the error message

    Returns:
        Canonical lowercase UUID

    Raises:
        IdentityError: If the value is empty or malformed
    """
    result = sanitize_uuid(value)
    if result.is_empty:
        raise IdentityError(f"{field} is required", field=field)
    if result.is_invalid:
        raise IdentityError(f"Invalid UUID format for {field}", field=field)
    return result.value  # type: ignore[return-value]
