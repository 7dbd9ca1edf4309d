"""Error taxonomy for identifier handling, convergence waits and lifecycle operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from convergent.domain.model.enums import Operation, ResourceKind


@dataclass(frozen=True, slots=True)
class OperationContext:
    """Which resource and operation a failure belongs to."""

    kind: ResourceKind
    operation: Operation
    identifier: str | None = None

    def describe(self) -> str:
        target = self.identifier if self.identifier is not None else "<unassigned>"
        return f"{self.operation} {self.kind} ({target})"


class ConvergentError(RuntimeError):
    """Base class for errors raised by the convergence core.

    The lifecycle orchestrator binds an :class:`OperationContext` before the error
    leaves it, so operators always learn the identifier and attempted operation.
    """

    context: OperationContext | None = None

    def bind(self, context: OperationContext) -> None:
        if self.context is None:
            self.context = context

    def __str__(self) -> str:
        message = super().__str__()
        if self.context is None:
            return message
        return f"{self.context.describe()}: {message}"


class MalformedIdentifierError(ConvergentError):
    """Raised when an external identifier does not decode to the expected parts."""

    def __init__(self, message: str, *, identifier: str) -> None:
        super().__init__(message)
        self.identifier = identifier


class ResourceNotFoundError(ConvergentError):
    """The remote object does not currently exist.

    Whether this is a failure depends on the caller: deletion waits and reads of
    tracked resources treat it as a terminal, successful outcome.
    """

    def __init__(self, message: str, *, identifier: str | None = None) -> None:
        super().__init__(message)
        self.identifier = identifier


class RemoteOperationError(ConvergentError):
    """A control-plane call failed for a reason other than absence."""


class UnexpectedStateError(ConvergentError):
    """The remote object reported a status outside the pending/target vocabulary."""

    def __init__(
        self,
        label: str,
        *,
        snapshot: object | None,
        pending: frozenset[str],
        target: frozenset[str],
    ) -> None:
        expected = ", ".join(sorted(pending | target)) or "<absent>"
        super().__init__(f"unexpected state {label!r}, wanted one of: {expected}")
        self.label = label
        self.snapshot = snapshot
        self.pending = pending
        self.target = target


class WaitTimeoutError(ConvergentError):
    """The deadline elapsed while the remote object was still pending."""

    def __init__(
        self,
        *,
        timeout: float,
        attempts: int,
        last_label: str | None,
        last_snapshot: object | None,
    ) -> None:
        observed = repr(last_label) if last_label is not None else "not found"
        super().__init__(
            f"timeout after {timeout:g}s ({attempts} polls), last state: {observed}"
        )
        self.timeout = timeout
        self.attempts = attempts
        self.last_label = last_label
        self.last_snapshot = last_snapshot


class WaitCancelledError(ConvergentError):
    """The caller cancelled the wait before the remote object converged."""

    def __init__(self, *, attempts: int) -> None:
        super().__init__(f"wait cancelled after {attempts} polls")
        self.attempts = attempts


class CreationHookError(ConvergentError):
    """The object was created remotely but the ``on_created`` hook failed.

    The remote object exists; only the caller's bookkeeping is missing.
    """
