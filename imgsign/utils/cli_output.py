"""CLI JSON output wrapper.

Wraps command results with schema metadata (schema_id, schema_version,
producer, produced_at) so scripted callers can detect format changes.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import Any

from imgsign import __version__


@dataclass(frozen=True, slots=True)
class SchemaStamp:
    """Schema metadata applied to CLI JSON output."""

    schema_id: str
    schema_version: int
    producer: str
    produced_at: str


def build_schema_stamp(
    *,
    schema_id: str,
    schema_version: int,
    producer: str | None = None,
    produced_at: str | None = None,
) -> SchemaStamp:
    """Construct a :class:`SchemaStamp`."""

    return SchemaStamp(
        schema_id=schema_id,
        schema_version=schema_version,
        producer=producer or f"imgsign-{__version__}",
        produced_at=produced_at or datetime.now(UTC).isoformat(),
    )


def _encode(value: Any) -> Any:
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def json_response(schema_id: str, schema_version: int, **fields: Any) -> str:
    """Render ``fields`` as indented JSON, preceded by the schema stamp keys.

    Read-only mappings (e.g. signature annotations) are emitted as objects.
    """
    stamp = build_schema_stamp(schema_id=schema_id, schema_version=schema_version)
    return json.dumps({**asdict(stamp), **fields}, indent=2, default=_encode)
