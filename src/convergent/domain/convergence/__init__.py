"""Convergence engine: wait for remote objects to reach a status or disappear."""

from __future__ import annotations

from .engine import Clock, Sleep, StateWait, WaitResult, wait_for_state
from .refresh import UNKNOWN_STATUS, Refreshable, RefreshResult

__all__ = [
    "UNKNOWN_STATUS",
    "Clock",
    "RefreshResult",
    "Refreshable",
    "Sleep",
    "StateWait",
    "WaitResult",
    "wait_for_state",
]
