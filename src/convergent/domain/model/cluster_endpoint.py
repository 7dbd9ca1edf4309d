"""Typed snapshot and desired state of a Neptune cluster endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True, kw_only=True)
class ClusterEndpoint:
    """Control-plane view of a cluster endpoint as of the latest describe call."""

    cluster_identifier: str
    endpoint_identifier: str
    status: str | None
    endpoint_type: str | None = None
    endpoint: str | None = None
    arn: str | None = None
    static_members: frozenset[str] = frozenset()
    excluded_members: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True, kw_only=True)
class ClusterEndpointSpec:
    cluster_identifier: str
    endpoint_identifier: str
    endpoint_type: str
    static_members: frozenset[str] = frozenset()
    excluded_members: frozenset[str] = frozenset()
    tags: dict[str, str] = field(default_factory=dict[str, str])


@dataclass(frozen=True, slots=True, kw_only=True)
class ClusterEndpointChanges:
    """Mutable attributes to modify; ``None`` means unchanged."""

    endpoint_type: str | None = None
    static_members: frozenset[str] | None = None
    excluded_members: frozenset[str] | None = None

    @property
    def has_changes(self) -> bool:
        return any(
            value is not None
            for value in (self.endpoint_type, self.static_members, self.excluded_members)
        )
