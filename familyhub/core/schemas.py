"""
Field-name mapping between the HTTP boundary and storage.

Request and response models derive from CamelModel: attributes are the
snake_case column names, aliases are camelCase. Requests are accepted in
either form; responses are serialized by alias (FastAPI does this for
response_model by default).
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_row(self, exclude: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """snake_case dict of the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True, exclude=set(exclude or ()))

    def to_payload(self) -> Dict[str, Any]:
        """camelCase JSON-ready dict."""
        return self.model_dump(by_alias=True, mode="json")


def reject_null(value: Any) -> Any:
    """
    Validator body for PATCH models.

    Update fields default to None so they can be left out, but a column that
    is NOT NULL in storage may not be cleared with an explicit null.
    """
    if value is None:
        raise ValueError("may not be null")
    return value


def blank_to_none(value: Optional[str]) -> Optional[str]:
    """Trim strings; empty or whitespace-only becomes None."""
    if value is None or not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def normalize_group_id(group_id: Optional[str]) -> Optional[str]:
    """Blank group ids select the personal (self) scope."""
    return blank_to_none(group_id)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a PostgREST timestamp; naive values are taken as UTC."""
    if value is None or isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed is not None and parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
