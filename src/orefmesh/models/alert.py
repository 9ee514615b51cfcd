"""Feed payload variants and the canonical alert.

The live endpoint returns a single object; the historical endpoint
returns an array of timestamped entries. Both are parsed once into
:class:`LiveAlert` or :class:`HistoricalAlert` and then reduced to a
:class:`CanonicalAlert`.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, RootModel

from orefmesh._constants import NO_ALERT
from orefmesh.models._base import FeedModel, FeedText


class LiveAlert(FeedModel):
    """Currently active alert as reported by the live endpoint."""

    cities: list[str] | None = Field(default=None, alias="data")
    category: FeedText = Field(default=None, alias="cat")
    instructions: FeedText = Field(default=None, alias="desc")


class HistoricalEntry(FeedModel):
    """One locality/category/time row of the historical endpoint."""

    alert_date: FeedText = Field(default=None, alias="alertDate")
    locality: FeedText = Field(default=None, alias="data")
    category: FeedText = None


class HistoricalAlert(RootModel[list[HistoricalEntry]]):
    """Recent alerts as reported by the historical endpoint."""

    model_config = ConfigDict(frozen=True)

    @property
    def entries(self) -> list[HistoricalEntry]:
        return self.root


FeedAlert = LiveAlert | HistoricalAlert


class CanonicalAlert(BaseModel):
    """Schema-independent alert consumed by zone resolution and dispatch.

    Parameters
    ----------
    alert_type : str
        Category label, ``"unknown"`` for unmapped codes or ``"none"``.
    localities : tuple[str, ...]
        Affected localities in first-seen order, without duplicates.
    instructions : str or None
        Free-text guidance shown after the label.
    """

    model_config = ConfigDict(frozen=True)

    alert_type: str = NO_ALERT
    localities: tuple[str, ...] = ()
    instructions: str | None = None

    @property
    def is_none(self) -> bool:
        return self.alert_type == NO_ALERT
