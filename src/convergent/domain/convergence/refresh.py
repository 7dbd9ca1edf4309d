"""The refresh capability consumed by the convergence engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Protocol

UNKNOWN_STATUS: Final[str] = "unknown"


@dataclass(frozen=True, slots=True)
class RefreshResult[S]:
    """One observation of the remote object.

    ``label`` is ``None`` when the object could not be found.
    """

    label: str | None
    snapshot: S | None = None

    @classmethod
    def absent(cls) -> RefreshResult[S]:
        return cls(label=None)

    @property
    def found(self) -> bool:
        return self.label is not None


class Refreshable[S](Protocol):
    """Pure query returning the current status of a remote object.

    Raising means a fatal error: the engine stops polling and propagates it.
    """

    def __call__(self) -> RefreshResult[S]: ...
