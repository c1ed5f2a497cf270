"""
vouchgraph/graph/store.py - Graph Store: adjacency, edge existence, counters.

The store owns every structural mutation of the vouch graph. It is backed by
a NetworkX DiGraph, whose successor / predecessor dicts serve as the
order-independent out- and in-neighbor sets and as the edge-existence index.
Per-node metrics live in node attributes:

    rank        stored rank (0 = unset, read as config.default_rank)
    score       last computed score
    out_degree  explicit out-vouch counter, checked against the adjacency

Nodes are created on first edge touch and never deleted. Removing all of a
node's edges returns it to default metrics but keeps the record.

The store validates before it writes: insert_edge / delete_edge either apply
completely or raise without touching anything. It does not lock; the
VouchNetwork facade wraps it in a store-wide guard.
"""

import logging
import re
from typing import Hashable

import networkx as nx

from vouchgraph.errors import (
    DuplicateEdgeError,
    EdgeNotFoundError,
    IntegrityViolationError,
    InvalidIdentityError,
    SelfLoopError,
)

logger = logging.getLogger(__name__)

_ZERO_ADDRESS = re.compile(r"0[xX]0+")


def is_null_identity(identity: object) -> bool:
    """
    True for identities that can never be an edge endpoint.

    Null identities: None, the integer 0, empty / whitespace-only strings,
    and all-zero hex addresses such as "0x0000000000000000000000000000000000000000".
    Booleans and unhashable values are also rejected.
    """
    if identity is None or isinstance(identity, bool):
        return True
    if isinstance(identity, int):
        return identity == 0
    if isinstance(identity, str):
        stripped = identity.strip()
        return not stripped or _ZERO_ADDRESS.fullmatch(stripped) is not None
    try:
        hash(identity)
    except TypeError:
        return True
    return False


def validate_endpoints(source: Hashable, target: Hashable) -> None:
    """Raise InvalidIdentityError / SelfLoopError for an unusable pair."""
    if is_null_identity(source):
        raise InvalidIdentityError(source)
    if is_null_identity(target):
        raise InvalidIdentityError(target)
    if source == target:
        raise SelfLoopError(source)


class GraphStore:
    """
    Directed vouch graph with explicit out-degree counters.

    Usage:
        store = GraphStore()
        store.insert_edge("alice", "bob")
        store.in_neighbors("bob")      # frozenset({'alice'})
        store.delete_edge("alice", "bob")

    Thread Safety:
        NOT thread-safe. VouchNetwork serializes all access.
    """

    def __init__(self) -> None:
        self._G = nx.DiGraph()

    # ── Node reads ────────────────────────────────────────────────────────────

    def has_node(self, identity: Hashable) -> bool:
        return identity in self._G

    def nodes(self) -> list[Hashable]:
        return list(self._G.nodes)

    def number_of_nodes(self) -> int:
        return self._G.number_of_nodes()

    def stored_rank(self, identity: Hashable) -> int:
        """Stored rank, 0 if unset or the identity was never touched."""
        if identity not in self._G:
            return 0
        return self._G.nodes[identity]["rank"]

    def score(self, identity: Hashable) -> int:
        if identity not in self._G:
            return 0
        return self._G.nodes[identity]["score"]

    def out_degree(self, identity: Hashable) -> int:
        if identity not in self._G:
            return 0
        return self._G.nodes[identity]["out_degree"]

    def in_degree(self, identity: Hashable) -> int:
        if identity not in self._G:
            return 0
        return self._G.in_degree(identity)

    def in_neighbors(self, identity: Hashable) -> frozenset:
        """Identities vouching for identity. No ordering guarantee."""
        if identity not in self._G:
            return frozenset()
        return frozenset(self._G.predecessors(identity))

    def out_neighbors(self, identity: Hashable) -> frozenset:
        """Identities vouched for by identity. No ordering guarantee."""
        if identity not in self._G:
            return frozenset()
        return frozenset(self._G.successors(identity))

    # ── Edge reads ────────────────────────────────────────────────────────────

    def has_edge(self, source: Hashable, target: Hashable) -> bool:
        if source not in self._G or target not in self._G:
            return False
        return self._G.has_edge(source, target)

    def edges(self) -> list[tuple[Hashable, Hashable]]:
        return list(self._G.edges())

    def number_of_edges(self) -> int:
        return self._G.number_of_edges()

    def as_digraph(self) -> nx.DiGraph:
        """Detached copy of the graph (node attributes included)."""
        return self._G.copy()

    # ── Metric writes ─────────────────────────────────────────────────────────

    def set_rank(self, identity: Hashable, rank: int) -> None:
        if rank < 0:
            raise ValueError(f"rank must be non-negative, got {rank}")
        self._G.nodes[identity]["rank"] = rank

    def set_score(self, identity: Hashable, score: int) -> None:
        if score < 0:
            raise ValueError(f"score must be non-negative, got {score}")
        self._G.nodes[identity]["score"] = score

    # ── Structural mutation ───────────────────────────────────────────────────

    def validate_insert(self, source: Hashable, target: Hashable) -> None:
        """Raise the error insert_edge would raise, without mutating."""
        validate_endpoints(source, target)
        if self.has_edge(source, target):
            raise DuplicateEdgeError(source, target)
        self._check_counter(source)

    def validate_remove(self, source: Hashable, target: Hashable) -> None:
        """Raise the error delete_edge would raise, without mutating."""
        validate_endpoints(source, target)
        if not self.has_edge(source, target):
            raise EdgeNotFoundError(source, target)
        self._check_counter(source)

    def insert_edge(self, source: Hashable, target: Hashable) -> list[Hashable]:
        """
        Add the vouch source -> target.

        Returns:
            The identities whose node records were created by this call
            (first-ever edge touch), in (source, target) order.

        Raises:
            InvalidIdentityError, SelfLoopError, DuplicateEdgeError,
            IntegrityViolationError. Nothing is written when any is raised.
        """
        self.validate_insert(source, target)

        created: list[Hashable] = []
        for identity in (source, target):
            if identity not in self._G:
                self._G.add_node(identity, rank=0, score=0, out_degree=0)
                created.append(identity)

        self._G.add_edge(source, target)
        self._G.nodes[source]["out_degree"] += 1

        logger.debug(
            "Edge inserted: %r -> %r (out_degree=%d, in_degree=%d).",
            source,
            target,
            self._G.nodes[source]["out_degree"],
            self._G.in_degree(target),
        )
        return created

    def delete_edge(self, source: Hashable, target: Hashable) -> None:
        """
        Remove the vouch source -> target. Node records are kept.

        Raises:
            InvalidIdentityError, SelfLoopError, EdgeNotFoundError,
            IntegrityViolationError. Nothing is written when any is raised.
        """
        self.validate_remove(source, target)

        self._G.remove_edge(source, target)
        self._G.nodes[source]["out_degree"] -= 1

        logger.debug(
            "Edge removed: %r -> %r (out_degree=%d, in_degree=%d).",
            source,
            target,
            self._G.nodes[source]["out_degree"],
            self._G.in_degree(target),
        )

    def _check_counter(self, identity: Hashable) -> None:
        """The out_degree counter must always equal the adjacency size."""
        if identity not in self._G:
            return
        counter = self._G.nodes[identity]["out_degree"]
        actual = self._G.out_degree(identity)
        if counter != actual:
            raise IntegrityViolationError(
                f"out_degree counter for {identity!r} is {counter} but "
                f"{actual} out-neighbors are stored"
            )
