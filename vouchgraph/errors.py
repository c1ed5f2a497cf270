"""
vouchgraph/errors.py - Exception taxonomy for vouch network operations.

Every error is raised synchronously and before the first write, so a failed
call never leaves a partially updated graph behind. The engine performs no
retries; retry policy belongs to the caller.

Hierarchy:
    VouchGraphError
    ├── ValidationError          (also a ValueError)
    │   ├── InvalidIdentityError null / unhashable endpoint
    │   └── SelfLoopError        from == to
    ├── StateConflictError
    │   ├── DuplicateEdgeError   vouch already exists
    │   └── EdgeNotFoundError    vouch to remove does not exist
    ├── PolicyDeniedError        stake below the configured minimum
    ├── IntegrityViolationError  adjacency / counter mismatch (fatal)
    └── ReentrantCallError       mutation started inside another mutation
"""

from typing import Any


class VouchGraphError(Exception):
    """Base exception for vouch network operations."""


# ── Validation ────────────────────────────────────────────────────────────────

class ValidationError(VouchGraphError, ValueError):
    """Raised when an edge operation names an unusable endpoint pair."""


class InvalidIdentityError(ValidationError):
    """Raised when an endpoint is the null identity or cannot be hashed."""

    def __init__(self, identity: Any):
        self.identity = identity
        super().__init__(f"Invalid identity: {identity!r}")


class SelfLoopError(ValidationError):
    """Raised when an identity tries to vouch for (or unvouch) itself."""

    def __init__(self, identity: Any):
        self.identity = identity
        super().__init__(f"Self-vouch is not allowed: {identity!r}")


# ── State conflicts ───────────────────────────────────────────────────────────

class StateConflictError(VouchGraphError):
    """Raised when an operation contradicts the current edge set."""

    def __init__(self, source: Any, target: Any, message: str):
        self.source = source
        self.target = target
        super().__init__(message)


class DuplicateEdgeError(StateConflictError):
    """Raised when the vouch being created already exists."""

    def __init__(self, source: Any, target: Any):
        super().__init__(source, target, f"Vouch already exists: {source!r} -> {target!r}")


class EdgeNotFoundError(StateConflictError):
    """Raised when the vouch being removed does not exist."""

    def __init__(self, source: Any, target: Any):
        super().__init__(source, target, f"Vouch not found: {source!r} -> {target!r}")


# ── Policy ────────────────────────────────────────────────────────────────────

class PolicyDeniedError(VouchGraphError):
    """Raised when the voucher's stake is below the configured minimum."""

    def __init__(self, identity: Any, stake: Any, minimum: Any):
        self.identity = identity
        self.stake = stake
        self.minimum = minimum
        super().__init__(
            f"Insufficient stake for {identity!r}: {stake} < required {minimum}"
        )


# ── Fatal / concurrency ───────────────────────────────────────────────────────

class IntegrityViolationError(VouchGraphError):
    """
    Raised when the adjacency sets and the out-degree counters disagree.

    Unreachable through the public API. Treated as a fatal assertion: the
    store is never repaired silently.
    """


class ReentrantCallError(VouchGraphError):
    """
    Raised when add_edge / remove_edge is called from inside a running
    mutation (from a stake query or a notification handler).
    """

    def __init__(self, operation: str, active_operation: str):
        self.operation = operation
        self.active_operation = active_operation
        super().__init__(
            f"Reentrant call to {operation} rejected while {active_operation} is in progress"
        )
