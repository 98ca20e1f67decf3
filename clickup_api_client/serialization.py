"""JSON <-> model mapping for ClickUp payloads.

Wire keys are snake_case, but some endpoints (and older payloads) use
camelCase or odd casing, so ``ClickUpModel`` normalizes keys before
validation. Timestamps on the wire are Unix epoch milliseconds, sent either
as a JSON number or a numeric string.
"""

import re
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer, TypeAdapter, model_validator

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_snake_case(key: str) -> str:
    """``dateCreated`` -> ``date_created``; ``ECODE`` -> ``ecode``."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _from_millis(millis) -> datetime:
    try:
        return EPOCH + timedelta(milliseconds=int(millis))
    except (OverflowError, OSError) as exc:
        raise ValueError(f"epoch milliseconds out of range: {millis}") from exc


def to_epoch_millis(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - EPOCH) // _ONE_MS


def _parse_timestamp(value: Any, optional: bool) -> datetime | None:
    if value is None:
        if optional:
            return None
        raise ValueError("timestamp is required")
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, bool):
        raise ValueError("expected epoch milliseconds, got a boolean")
    if isinstance(value, (int, float)):
        if optional and value == 0:
            return None
        return _from_millis(value)
    if isinstance(value, str):
        text = value.strip()
        if optional and text in ("", "0"):
            return None
        digits = text.removeprefix("-")
        if digits.isascii() and digits.isdecimal():
            return _from_millis(text)
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    raise ValueError(f"expected epoch milliseconds, got {type(value).__name__}")


def _serialize_timestamp(value: datetime | None) -> str | None:
    return None if value is None else str(to_epoch_millis(value))


EpochMillis = Annotated[
    datetime,
    BeforeValidator(lambda v: _parse_timestamp(v, optional=False)),
    PlainSerializer(_serialize_timestamp, return_type=str),
]

# 0, "0" and "" mean "not set" for ClickUp's optional dates
OptionalEpochMillis = Annotated[
    datetime | None,
    BeforeValidator(lambda v: _parse_timestamp(v, optional=True)),
    PlainSerializer(_serialize_timestamp, return_type=str | None),
]


class ClickUpModel(BaseModel):
    """Base for ClickUp DTOs: case-insensitive keys, unknown fields ignored."""

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _normalize_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {to_snake_case(k) if isinstance(k, str) else k: v for k, v in data.items()}
        return data


@lru_cache(maxsize=None)
def _adapter(target) -> TypeAdapter:
    return TypeAdapter(target)


def decode(data: Any, target=None) -> Any:
    """Validate parsed JSON into ``target``; with no target, return it untouched."""
    if target is None:
        return data
    if isinstance(target, type) and issubclass(target, BaseModel):
        return target.model_validate(data)
    return _adapter(target).validate_python(data)


def encode(payload: Any) -> Any:
    """Turn models (and containers of them) into JSON-ready data."""
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", exclude_none=True)
    if isinstance(payload, dict):
        return {k: encode(v) for k, v in payload.items()}
    if isinstance(payload, (list, tuple)):
        return [encode(v) for v in payload]
    if isinstance(payload, datetime):
        return str(to_epoch_millis(payload))
    return payload
