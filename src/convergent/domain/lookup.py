"""Lookup collaborator and status extraction for convergence waits."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from convergent.domain.convergence import UNKNOWN_STATUS, RefreshResult
from convergent.domain.errors import ResourceNotFoundError
from convergent.domain.model import RemoteCall
from convergent.domain.ports.control_plane import ControlPlaneError

if TYPE_CHECKING:
    from convergent.domain.convergence import Refreshable
    from convergent.domain.resources import ManagedResource, ResourceDefinition

log = getLogger(__name__)


def find_resource[S](resource: ManagedResource[S, Any, Any], identifier: str) -> S:
    """Describe the object addressed by ``identifier``.

    Raises ``ResourceNotFoundError`` when the control plane reports one of the
    kind's absence codes or returns no record. Other control-plane errors and
    ``MalformedIdentifierError`` propagate unchanged.
    """

    definition = resource.definition
    parts = definition.identifier.decode(identifier)
    try:
        snapshot = resource.describe(parts)
    except ControlPlaneError as exc:
        if definition.is_absence(RemoteCall.DESCRIBE, exc):
            raise ResourceNotFoundError(
                f"{definition.kind} ({identifier}) not found: {exc.code}",
                identifier=identifier,
            ) from exc
        raise

    if snapshot is None:
        raise ResourceNotFoundError(
            f"{definition.kind} ({identifier}) not found: empty result",
            identifier=identifier,
        )
    return snapshot


def extract_status[S](definition: ResourceDefinition[S], snapshot: S) -> str:
    status = definition.status_of(snapshot)
    if status is None or not status.strip():
        return UNKNOWN_STATUS
    return status


def status_refresh[S](
    resource: ManagedResource[S, Any, Any], identifier: str
) -> Refreshable[S]:
    """Build the engine's refresh function for one tracked object."""

    def refresh() -> RefreshResult[S]:
        try:
            snapshot = find_resource(resource, identifier)
        except ResourceNotFoundError:
            log.debug("%s (%s) not found", resource.definition.kind, identifier)
            return RefreshResult.absent()
        return RefreshResult(
            label=extract_status(resource.definition, snapshot), snapshot=snapshot
        )

    return refresh
