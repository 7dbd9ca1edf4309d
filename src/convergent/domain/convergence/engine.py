"""Polling state machine that waits for a remote object to converge."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from convergent.domain.errors import (
    ResourceNotFoundError,
    UnexpectedStateError,
    WaitCancelledError,
    WaitTimeoutError,
)

if TYPE_CHECKING:
    from threading import Event

    from .refresh import Refreshable, RefreshResult

log = getLogger(__name__)

type Clock = Callable[[], float]
type Sleep = Callable[[float], None]


@dataclass(frozen=True, slots=True, kw_only=True)
class StateWait[S]:
    """Parameters of one convergence wait.

    An empty ``target`` means the object must disappear. When ``target`` is not
    empty, absence counts as pending (the object may not have propagated yet)
    unless ``not_found_checks`` bounds how many consecutive absences are tolerated.
    """

    refresh: Refreshable[S]
    pending: frozenset[str]
    target: frozenset[str]
    timeout: float
    poll_interval: float = 5.0
    max_poll_interval: float = 30.0
    backoff: float = 1.5
    not_found_checks: int | None = None
    target_occurrences: int = 1
    description: str = "resource"

    def __post_init__(self) -> None:
        overlap = self.pending & self.target
        if overlap:
            raise ValueError(f"pending and target states overlap: {sorted(overlap)}")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.poll_interval <= 0 or self.max_poll_interval < self.poll_interval:
            raise ValueError("poll interval must be positive and not exceed its cap")
        if self.backoff < 1.0:
            raise ValueError("backoff must be at least 1.0")
        if self.target_occurrences < 1:
            raise ValueError("target_occurrences must be at least 1")

    @property
    def awaits_absence(self) -> bool:
        return not self.target


@dataclass(frozen=True, slots=True)
class WaitResult[S]:
    """Terminal observation of a successful wait; ``label`` is ``None`` when absent."""

    label: str | None
    snapshot: S | None
    attempts: int

    @property
    def absent(self) -> bool:
        return self.label is None


def wait_for_state[S](
    wait: StateWait[S],
    *,
    cancel: Event | None = None,
    clock: Clock = time.monotonic,
    sleep: Sleep | None = None,
) -> WaitResult[S]:
    """Poll ``wait.refresh`` until the object converges, vanishes or the deadline passes.

    Blocks the calling thread. ``cancel`` is checked before every poll and wakes the
    sleep between polls; ``sleep`` replaces the wait primitive (tests use a fake
    clock).
    """

    deadline = clock() + wait.timeout
    interval = wait.poll_interval
    attempts = 0
    misses = 0
    target_hits = 0

    while True:
        if cancel is not None and cancel.is_set():
            raise WaitCancelledError(attempts=attempts)

        result: RefreshResult[S] = wait.refresh()
        attempts += 1
        label = result.label

        if label is None:
            if wait.awaits_absence:
                log.info("%s is gone after %d polls", wait.description, attempts)
                return WaitResult(label=None, snapshot=None, attempts=attempts)
            misses += 1
            target_hits = 0
            if wait.not_found_checks is not None and misses > wait.not_found_checks:
                raise ResourceNotFoundError(
                    f"{wait.description} not found after {misses} consecutive checks"
                )
            log.debug("%s not found yet (poll %d)", wait.description, attempts)
        else:
            misses = 0
            if label in wait.target:
                target_hits += 1
                if target_hits >= wait.target_occurrences:
                    log.info("%s reached %r after %d polls", wait.description, label, attempts)
                    return WaitResult(label=label, snapshot=result.snapshot, attempts=attempts)
            elif label in wait.pending:
                target_hits = 0
            else:
                raise UnexpectedStateError(
                    label,
                    snapshot=result.snapshot,
                    pending=wait.pending,
                    target=wait.target,
                )
            log.debug("%s is %r (poll %d)", wait.description, label, attempts)

        remaining = deadline - clock()
        if remaining <= 0:
            raise WaitTimeoutError(
                timeout=wait.timeout,
                attempts=attempts,
                last_label=label,
                last_snapshot=result.snapshot,
            )
        _pause(min(interval, remaining), cancel=cancel, sleep=sleep)
        interval = min(interval * wait.backoff, wait.max_poll_interval)


def _pause(seconds: float, *, cancel: Event | None, sleep: Sleep | None) -> None:
    if sleep is not None:
        sleep(seconds)
    elif cancel is not None:
        cancel.wait(seconds)
    else:
        time.sleep(seconds)
