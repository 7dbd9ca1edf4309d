"""Lifecycle orchestration: remote mutations followed by convergence waits."""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from convergent.config.convergence import WaitConfig
from convergent.domain.convergence import StateWait, wait_for_state
from convergent.domain.errors import (
    CreationHookError,
    ConvergentError,
    OperationContext,
    RemoteOperationError,
    ResourceNotFoundError,
)
from convergent.domain.lookup import find_resource, status_refresh
from convergent.domain.model import Operation, OutcomeStatus, RemoteCall
from convergent.domain.ports.control_plane import ControlPlaneError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from threading import Event

    from convergent.domain.convergence import Clock, Sleep, WaitResult
    from convergent.domain.resources import Changes, ManagedResource, WaitVocabulary

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LifecycleOutcome[S]:
    """Terminal result of a successful lifecycle operation.

    ``ABSENT`` tells the caller to drop its local record; failures are raised.
    """

    status: OutcomeStatus
    identifier: str
    snapshot: S | None = None

    @classmethod
    def present(cls, identifier: str, snapshot: S) -> LifecycleOutcome[S]:
        return cls(status=OutcomeStatus.PRESENT, identifier=identifier, snapshot=snapshot)

    @classmethod
    def absent(cls, identifier: str) -> LifecycleOutcome[S]:
        return cls(status=OutcomeStatus.ABSENT, identifier=identifier)

    @property
    def is_absent(self) -> bool:
        return self.status is OutcomeStatus.ABSENT


@contextmanager
def _bound(context: OperationContext) -> Iterator[None]:
    try:
        yield
    except ConvergentError as exc:
        exc.bind(context)
        raise


def _run_hook(hook: Callable[[str], None], identifier: str) -> None:
    try:
        hook(identifier)
    except ConvergentError:
        raise
    except Exception as exc:
        raise CreationHookError(f"created but not recorded: {exc}") from exc


class LifecycleOrchestrator[S, D, C: Changes]:
    """Create, read, update and delete one resource kind, waiting for convergence.

    Runs entirely on the calling thread. Independent orchestrators share no mutable
    state and may run concurrently.
    """

    def __init__(
        self,
        resource: ManagedResource[S, D, C],
        *,
        waits: WaitConfig | None = None,
        cancel: Event | None = None,
        clock: Clock = time.monotonic,
        sleep: Sleep | None = None,
    ) -> None:
        self._resource = resource
        self._definition = resource.definition
        self._waits = waits or WaitConfig()
        self._cancel = cancel
        self._clock = clock
        self._sleep = sleep

    @property
    def kind(self) -> str:
        return self._definition.kind

    def create(
        self,
        desired: D,
        *,
        on_created: Callable[[str], None] | None = None,
    ) -> LifecycleOutcome[S]:
        """Create the object and wait until it is available.

        ``on_created`` receives the identifier as soon as the control plane accepted
        the request, before waiting, so a failed wait never loses it.
        """

        with _bound(self._context(Operation.CREATE)):
            try:
                parts = self._resource.create(desired)
            except ControlPlaneError as exc:
                raise self._remote_failure(RemoteCall.CREATE, exc) from exc

        identifier = self._definition.identifier.encode(parts)
        log.info("Created %s (%s), waiting for it to become available", self.kind, identifier)
        with _bound(self._context(Operation.CREATE, identifier)):
            if on_created is not None:
                _run_hook(on_created, identifier)
            self._wait(self._definition.available, identifier)
            try:
                snapshot = find_resource(self._resource, identifier)
            except ControlPlaneError as exc:
                raise self._remote_failure(RemoteCall.DESCRIBE, exc) from exc
            return LifecycleOutcome.present(identifier, snapshot)

    def read(self, identifier: str) -> LifecycleOutcome[S]:
        with _bound(self._context(Operation.READ, identifier)):
            return self._read(identifier)

    def update(self, identifier: str, changes: C) -> LifecycleOutcome[S]:
        with _bound(self._context(Operation.UPDATE, identifier)):
            parts = self._definition.identifier.decode(identifier)
            if changes.has_changes:
                try:
                    self._resource.modify(parts, changes)
                except ControlPlaneError as exc:
                    raise self._remote_failure(RemoteCall.MODIFY, exc) from exc
                log.info("Modified %s (%s), waiting for it to settle", self.kind, identifier)
                self._wait(self._definition.available, identifier)
            else:
                log.debug("No mutable changes for %s (%s)", self.kind, identifier)
            return self._read(identifier)

    def delete(self, identifier: str) -> LifecycleOutcome[S]:
        with _bound(self._context(Operation.DELETE, identifier)):
            parts = self._definition.identifier.decode(identifier)
            try:
                self._resource.delete(parts)
            except ControlPlaneError as exc:
                if self._definition.is_absence(RemoteCall.DELETE, exc):
                    log.info("%s (%s) already gone: %s", self.kind, identifier, exc.code)
                    return LifecycleOutcome.absent(identifier)
                raise self._remote_failure(RemoteCall.DELETE, exc) from exc

            try:
                self._wait(self._definition.deleted, identifier)
            except ResourceNotFoundError:
                log.debug("%s (%s) vanished during deletion wait", self.kind, identifier)
            log.info("Deleted %s (%s)", self.kind, identifier)
            return LifecycleOutcome.absent(identifier)

    def _read(self, identifier: str) -> LifecycleOutcome[S]:
        try:
            snapshot = find_resource(self._resource, identifier)
        except ResourceNotFoundError:
            log.info("%s (%s) not found, removing from state", self.kind, identifier)
            return LifecycleOutcome.absent(identifier)
        except ControlPlaneError as exc:
            raise self._remote_failure(RemoteCall.DESCRIBE, exc) from exc
        return LifecycleOutcome.present(identifier, snapshot)

    def _wait(self, vocabulary: WaitVocabulary, identifier: str) -> WaitResult[S]:
        wait = StateWait(
            refresh=status_refresh(self._resource, identifier),
            pending=vocabulary.pending,
            target=vocabulary.target,
            timeout=self._waits.timeout_seconds or vocabulary.timeout,
            poll_interval=self._waits.poll_interval,
            max_poll_interval=self._waits.max_poll_interval,
            backoff=self._waits.backoff,
            description=f"{self.kind} ({identifier})",
        )
        try:
            return wait_for_state(wait, cancel=self._cancel, clock=self._clock, sleep=self._sleep)
        except ControlPlaneError as exc:
            raise self._remote_failure(RemoteCall.DESCRIBE, exc) from exc

    def _context(self, operation: Operation, identifier: str | None = None) -> OperationContext:
        return OperationContext(
            kind=self._definition.kind, operation=operation, identifier=identifier
        )

    def _remote_failure(self, call: RemoteCall, exc: ControlPlaneError) -> RemoteOperationError:
        detail = f"{exc} (code {exc.code})" if exc.code else str(exc)
        return RemoteOperationError(f"{call} call failed: {detail}")


type AnyOrchestrator = LifecycleOrchestrator[Any, Any, Any]
