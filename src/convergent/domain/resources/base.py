"""Per-kind resource definitions and the handler contract used by the orchestrator."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from convergent.domain.identifiers import IdentifierFormat
    from convergent.domain.model import RemoteCall, ResourceKind
    from convergent.domain.ports.control_plane import ControlPlaneError

type Parts = tuple[str, ...]


@dataclass(frozen=True, slots=True, kw_only=True)
class WaitVocabulary:
    """Pending/target labels and timeout of one kind of wait."""

    pending: frozenset[str]
    target: frozenset[str]
    timeout: float


@dataclass(frozen=True, slots=True, kw_only=True)
class ResourceDefinition[S]:
    """Everything the convergence core needs to know about a resource kind.

    ``absent_codes`` lists, per remote call, the control-plane error codes that mean
    "the object is not there". Codes are per call: a missing parent
    container may be tolerable when deleting but not when creating.
    """

    kind: ResourceKind
    identifier: IdentifierFormat
    status_of: Callable[[S], str | None]
    available: WaitVocabulary
    deleted: WaitVocabulary
    absent_codes: Mapping[RemoteCall, frozenset[str]] = field(default_factory=dict)

    def is_absence(self, call: RemoteCall, error: ControlPlaneError) -> bool:
        if error.code is None:
            return False
        return error.code in self.absent_codes.get(call, frozenset())


class Changes(Protocol):
    @property
    def has_changes(self) -> bool: ...


class ManagedResource[S, D, C: Changes](Protocol):
    """Maps identifier parts and descriptors onto control-plane calls for one kind.

    Implementations raise ``ControlPlaneError`` unchanged; classification happens
    in the lookup collaborator and the orchestrator.
    """

    @property
    def definition(self) -> ResourceDefinition[S]: ...

    def create(self, desired: D) -> Parts: ...

    def modify(self, parts: Parts, changes: C) -> None: ...

    def delete(self, parts: Parts) -> None: ...

    def describe(self, parts: Parts) -> S | None: ...
