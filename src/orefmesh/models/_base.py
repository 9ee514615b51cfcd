"""Base model for alert feed payloads.

Every feed model inherits from :class:`FeedModel` which provides:

* frozen instances, unknown keys ignored, population by field name
  or by the upstream alias;
* a ``model_validator(mode="before")`` that drops ``None`` values so
  the field default is used. Blank strings are kept: a present but empty
  category still classifies as ``unknown``.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, model_validator


def as_text(value: Any) -> Any:
    """Coerce numeric scalars to ``str``; the feed is not consistent about quoting."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return value


FeedText = Annotated[str | None, BeforeValidator(as_text)]
"""Optional string that also accepts numbers (``1`` and ``"1"`` are equal)."""


class FeedModel(BaseModel):
    """Base for upstream feed payload models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_null_values(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            cleaned[key] = value
        return cleaned
