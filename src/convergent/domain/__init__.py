"""Convergence core: identifiers, lookups, waits and lifecycle orchestration."""
