"""Locally persisted record of a managed remote object."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .enums import ResourceKind


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class TrackedResource:
    """Identifier plus the attributes last projected from a snapshot.

    ``status`` stays ``None`` until a create or update has converged, which marks
    records left behind by failed waits.
    """

    kind: ResourceKind
    identifier: str
    attributes: dict[str, object] = field(default_factory=dict[str, object])
    status: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def record(self, attributes: dict[str, object], *, status: str | None) -> None:
        self.attributes = attributes
        self.status = status
        self.updated_at = _utcnow()
