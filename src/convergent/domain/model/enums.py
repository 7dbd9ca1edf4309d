"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ResourceKind(StrEnum):
    CLUSTER_ENDPOINT = "cluster-endpoint"
    ANOMALY_MONITOR = "anomaly-monitor"


class Operation(StrEnum):
    """Lifecycle operations as reported to operators."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class RemoteCall(StrEnum):
    """Logical control-plane calls; keys of the per-kind absence table."""

    CREATE = "create"
    MODIFY = "modify"
    DELETE = "delete"
    DESCRIBE = "describe"


class OutcomeStatus(StrEnum):
    PRESENT = "present"
    ABSENT = "absent"
