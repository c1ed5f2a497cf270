"""
vouchgraph/network.py - The vouch network: edge operations + queries.

VouchNetwork wires the collaborators together and is the only public
mutation surface:

    add_edge(source, target)
        1. Validate endpoints and edge absence          (GraphStore)
        2. Check source's stake against the minimum     (StakeAdministrator.policy)
        3. Insert the edge                              (GraphStore)
        4. Seeded path while the bootstrap window is open, otherwise
           recompute rank(target)                       (Bootstrap / Rank Engine)
        5. Recompute score(source) and score(target)    (Score Engine)
        6. Publish events                               (ChangeNotifier)

    remove_edge(source, target)
        1. Validate endpoints and edge presence
        2. Delete the edge
        3. Recompute rank(target), score(source), score(target)
        4. Publish events
       The bootstrap controller is never consulted on removal.

Every check happens before the first write, so a failed call leaves the
graph exactly as it was. A single store-wide lock serializes callers across
threads; a mutation started from inside a running one (from a stake query
or a notification handler) is rejected with ReentrantCallError.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Hashable, Iterator, Optional

import networkx as nx

from vouchgraph.config import DEFAULT_CONFIG, VouchGraphConfig
from vouchgraph.engine.bootstrap import BootstrapController
from vouchgraph.engine.notifier import (
    BootstrapCompleted,
    BootstrapVouchCreated,
    ChangeNotifier,
    NodeActivated,
    RankChanged,
    VouchCreated,
    VouchRemoved,
)
from vouchgraph.errors import PolicyDeniedError, ReentrantCallError
from vouchgraph.graph.store import GraphStore
from vouchgraph.metrics.rank import effective_rank, recompute_rank
from vouchgraph.metrics.score import recompute_score
from vouchgraph.stake.gate import StakeAdministrator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeInfo:
    """
    Aggregate view of one identity.

    Fields:
        identity:  The identity queried.
        rank:      Effective rank (default_rank when unset or unknown).
        score:     Current score (0 when unknown).
        in_count:  Number of identities vouching for it.
        out_count: Number of identities it vouches for.
        is_seed:   True if it was an endpoint of a bootstrap vouch.
    """

    identity: Hashable
    rank: int
    score: int
    in_count: int
    out_count: int
    is_seed: bool


@dataclass(frozen=True)
class Connections:
    """In- and out-neighbors of one identity. Sets carry no ordering."""

    in_neighbors: frozenset
    out_neighbors: frozenset


class VouchNetwork:
    """
    Directed trust graph with incrementally maintained rank and score.

    Usage:
        admin = StakeAdministrator(InMemoryStakeGate({"alice": 100}), minimum_stake=10)
        network = VouchNetwork(administrator=admin)
        network.add_edge("alice", "bob")
        network.get_node_info("bob")

    Args:
        config:        Engine constants (ranks, weights, bootstrap size).
        administrator: Holder of the stake gate and minimum. Defaults to
                       no gate and a zero minimum, which admits every vouch.
        notifier:      Event fan-out. A fresh ChangeNotifier by default.
        bootstrap:     Seeding state. A fresh BootstrapController by default.
    """

    def __init__(
        self,
        config: VouchGraphConfig = DEFAULT_CONFIG,
        administrator: Optional[StakeAdministrator] = None,
        notifier: Optional[ChangeNotifier] = None,
        bootstrap: Optional[BootstrapController] = None,
    ):
        self._config = config
        self._administrator = administrator or StakeAdministrator()
        self._notifier = notifier or ChangeNotifier()
        self._bootstrap = bootstrap or BootstrapController(config)
        self._store = GraphStore()

        self._lock = threading.RLock()
        self._active_operation: Optional[str] = None

    # ── Collaborators ─────────────────────────────────────────────────────────

    @property
    def config(self) -> VouchGraphConfig:
        return self._config

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    @property
    def administrator(self) -> StakeAdministrator:
        return self._administrator

    # ── Guard ─────────────────────────────────────────────────────────────────

    @contextmanager
    def _mutation(self, operation: str) -> Iterator[None]:
        with self._lock:
            if self._active_operation is not None:
                raise ReentrantCallError(operation, self._active_operation)
            self._active_operation = operation
            try:
                yield
            finally:
                self._active_operation = None

    # ── Mutations ─────────────────────────────────────────────────────────────

    def add_edge(self, source: Hashable, target: Hashable) -> object:
        """
        Create the vouch source -> target.

        Returns:
            The summary event: BootstrapVouchCreated inside the bootstrap
            window, VouchCreated afterwards.

        Raises:
            InvalidIdentityError, SelfLoopError, DuplicateEdgeError,
            PolicyDeniedError, ReentrantCallError. No state changes on error.
        """
        with self._mutation("add_edge"):
            store = self._store
            store.validate_insert(source, target)
            self._require_stake(source)

            old_rank = self._effective_rank(target)
            activated = store.insert_edge(source, target)

            seed = None
            if self._bootstrap.is_active:
                seed = self._bootstrap.seed(store, source, target)
            else:
                recompute_rank(store, target, self._config)

            source_score = recompute_score(store, source, self._config)
            target_score = recompute_score(store, target, self._config)
            new_rank = self._effective_rank(target)

            events: list[object] = [NodeActivated(identity) for identity in activated]
            if new_rank != old_rank:
                events.append(RankChanged(target, old_rank, new_rank))

            if seed is not None:
                summary: object = BootstrapVouchCreated(
                    source, target, seed.seed_index, new_rank, source_score, target_score
                )
            else:
                summary = VouchCreated(source, target, new_rank, source_score, target_score)
            events.append(summary)
            if seed is not None and seed.completed:
                events.append(BootstrapCompleted(self._bootstrap.seed_count))

            logger.debug(
                "Vouch %r -> %r created: rank(to)=%d score(from)=%d score(to)=%d.",
                source,
                target,
                new_rank,
                source_score,
                target_score,
            )
            self._notifier.publish(events)
            return summary

    def remove_edge(self, source: Hashable, target: Hashable) -> VouchRemoved:
        """
        Remove the vouch source -> target through the normal Rank / Score path.

        Raises:
            InvalidIdentityError, SelfLoopError, EdgeNotFoundError,
            ReentrantCallError. No state changes on error.
        """
        with self._mutation("remove_edge"):
            store = self._store
            store.validate_remove(source, target)

            old_rank = self._effective_rank(target)
            store.delete_edge(source, target)

            recompute_rank(store, target, self._config)
            source_score = recompute_score(store, source, self._config)
            target_score = recompute_score(store, target, self._config)
            new_rank = self._effective_rank(target)

            events: list[object] = []
            if new_rank != old_rank:
                events.append(RankChanged(target, old_rank, new_rank))
            summary = VouchRemoved(source, target, new_rank, source_score, target_score)
            events.append(summary)

            logger.debug(
                "Vouch %r -> %r removed: rank(to)=%d score(from)=%d score(to)=%d.",
                source,
                target,
                new_rank,
                source_score,
                target_score,
            )
            self._notifier.publish(events)
            return summary

    # Contract-style names.
    vouch = add_edge
    unvouch = remove_edge

    def _require_stake(self, identity: Hashable) -> None:
        policy = self._administrator.policy
        stake = policy.stake_of(identity)
        if not policy.permits(stake):
            logger.warning(
                "Vouch denied for %r: stake %s below minimum %s.",
                identity,
                stake,
                policy.minimum_stake,
            )
            raise PolicyDeniedError(identity, stake, policy.minimum_stake)

    def _effective_rank(self, identity: Hashable) -> int:
        return effective_rank(self._store.stored_rank(identity), self._config)

    # ── Queries ───────────────────────────────────────────────────────────────

    def get_rank(self, identity: Hashable) -> int:
        """Effective rank; default_rank for unknown identities."""
        with self._lock:
            return self._effective_rank(identity)

    def get_score(self, identity: Hashable) -> int:
        with self._lock:
            return self._store.score(identity)

    def get_out_degree(self, identity: Hashable) -> int:
        with self._lock:
            return self._store.out_degree(identity)

    def get_in_neighbors(self, identity: Hashable) -> frozenset:
        with self._lock:
            return self._store.in_neighbors(identity)

    def get_out_neighbors(self, identity: Hashable) -> frozenset:
        with self._lock:
            return self._store.out_neighbors(identity)

    def get_connections(self, identity: Hashable) -> Connections:
        with self._lock:
            return Connections(
                in_neighbors=self._store.in_neighbors(identity),
                out_neighbors=self._store.out_neighbors(identity),
            )

    def has_edge(self, source: Hashable, target: Hashable) -> bool:
        with self._lock:
            return self._store.has_edge(source, target)

    def get_node_info(self, identity: Hashable) -> NodeInfo:
        with self._lock:
            return NodeInfo(
                identity=identity,
                rank=self._effective_rank(identity),
                score=self._store.score(identity),
                in_count=self._store.in_degree(identity),
                out_count=self._store.out_degree(identity),
                is_seed=self._bootstrap.is_seed(identity),
            )

    def is_seed(self, identity: Hashable) -> bool:
        with self._lock:
            return self._bootstrap.is_seed(identity)

    @property
    def seed_count(self) -> int:
        with self._lock:
            return self._bootstrap.seed_count

    @property
    def seed_identities(self) -> frozenset:
        with self._lock:
            return self._bootstrap.seed_identities

    @property
    def bootstrap_complete(self) -> bool:
        with self._lock:
            return self._bootstrap.is_complete

    def identities(self) -> list[Hashable]:
        """Every identity ever touched by an edge. No ordering guarantee."""
        with self._lock:
            return self._store.nodes()

    def number_of_edges(self) -> int:
        with self._lock:
            return self._store.number_of_edges()

    def as_digraph(self) -> nx.DiGraph:
        """Detached NetworkX copy with rank / score / out_degree node attributes."""
        with self._lock:
            return self._store.as_digraph()
