"""Ports for persisting tracked resources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from convergent.domain.model import ResourceKind, TrackedResource


class TrackedResourceNotFoundError(LookupError):
    """Raised when no local record exists for a kind/identifier pair."""


@runtime_checkable
class TrackedResourceRepository(Protocol):
    """Persistence contract for locally tracked resources."""

    def add(self, entity: TrackedResource) -> None: ...

    def get(self, kind: ResourceKind, identifier: str) -> TrackedResource | None: ...

    def query(self, *, kind: ResourceKind | None = None) -> Sequence[TrackedResource]: ...

    def remove(self, entity: TrackedResource) -> None: ...
