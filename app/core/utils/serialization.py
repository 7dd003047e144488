from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

_PLAIN = (str, int, float, bool, type(None))


def normalize(value: Any) -> Any:
    """Reduce a value to something ``json.dumps`` and problem responses accept."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (list, tuple, set)):
        return [normalize(v) for v in value]
    if isinstance(value, dict):
        return normalize_ctx(value)
    return value if isinstance(value, _PLAIN) else str(value)


def normalize_ctx(ctx: dict[str, Any]) -> dict[str, Any]:
    return {str(k): normalize(v) for k, v in ctx.items()}
