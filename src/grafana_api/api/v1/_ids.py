"""Path parameter parsing shared by the v1 routers."""

from __future__ import annotations

from grafana_api.errors.app_errors import ValidationError

# Largest value a BIGINT / SQLite INTEGER column holds.
MAX_ID = 2**63 - 1


def parse_id(raw: str, *, title: str, message: str, code: str) -> int:
    """Parse a non-negative integer path ID.

    Only ASCII digits are accepted, and the value must fit a signed 64-bit
    column.

    Raises:
        ValidationError: If *raw* is not such an integer.
    """
    if not (raw.isascii() and raw.isdigit()):
        raise ValidationError(message, code=code, title=title)
    value = int(raw)
    if value > MAX_ID:
        raise ValidationError(message, code=code, title=title)
    return value
