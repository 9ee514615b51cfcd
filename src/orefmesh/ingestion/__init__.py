"""Ingestion layer.

Adapters that turn raw feed payloads into :class:`~orefmesh.models.CanonicalAlert`
objects.
"""

from orefmesh.ingestion.normalize import normalize, parse_payload

__all__ = ["normalize", "parse_payload"]
