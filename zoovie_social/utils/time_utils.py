"""
Timezone helpers shared by models and API responses
"""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time as a naive UTC datetime (matches the DateTime columns)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_isoformat(value: Optional[datetime]) -> Optional[str]:
    """Render a datetime as ISO-8601 with an explicit Z suffix"""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat() + "Z"
