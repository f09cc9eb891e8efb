from typing import Optional
from uuid import UUID

from vidtube.core.exceptions import InvalidArgument


def parse_uuid(value: str, name: str = "id") -> UUID:
    try:
        return UUID(value)
    except (ValueError, TypeError, AttributeError):
        raise InvalidArgument(f"Invalid {name}")


def require_text(value: Optional[str], name: str) -> str:
    if value is None or not value.strip():
        raise InvalidArgument(f"{name} is required")
    return value.strip()


def optional_text(value: Optional[str], name: str) -> Optional[str]:
    """``None`` means "leave unchanged"; a provided value must not be blank."""
    if value is None:
        return None
    return require_text(value, name)
