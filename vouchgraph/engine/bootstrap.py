"""
vouchgraph/engine/bootstrap.py - Bootstrap Controller.

A one-way state machine over seed_count in [0, config.max_seed_vouches]:

    ACTIVE    (seed_count < max)  → every add_edge takes the seeded path:
                                    rank(source) = rank(target) = seed_rank,
                                    Rank Engine bypassed for both endpoints.
    COMPLETE  (seed_count == max) → permanent. Every later add_edge takes
                                    the normal Rank / Score path.

Removals never consult or mutate the controller, even while the window is
still open: seed_count counts seeded vouches ever created and never goes
down. A network configured with max_seed_vouches = 0 starts COMPLETE.
"""

import logging
from dataclasses import dataclass
from typing import Hashable

from vouchgraph.config import DEFAULT_CONFIG, VouchGraphConfig
from vouchgraph.graph.store import GraphStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeedOutcome:
    """
    Result of one seeded vouch.

    Fields:
        seed_index: seed_count before this vouch (0-based).
        completed:  True if this vouch closed the bootstrap window.
    """

    seed_index: int
    completed: bool


class BootstrapController:
    """Gate that routes the first max_seed_vouches insertions to seeding."""

    def __init__(self, config: VouchGraphConfig = DEFAULT_CONFIG):
        self._config = config
        self._seed_count = 0
        self._seed_identities: set = set()

    @property
    def seed_count(self) -> int:
        return self._seed_count

    @property
    def max_seed_vouches(self) -> int:
        return self._config.max_seed_vouches

    @property
    def is_active(self) -> bool:
        """True while insertions still take the seeded path."""
        return self._seed_count < self._config.max_seed_vouches

    @property
    def is_complete(self) -> bool:
        return not self.is_active

    @property
    def seed_identities(self) -> frozenset:
        """Every identity that was an endpoint of a seeded vouch."""
        return frozenset(self._seed_identities)

    def is_seed(self, identity: Hashable) -> bool:
        try:
            return identity in self._seed_identities
        except TypeError:
            # unhashable identities can never have been seeded
            return False

    def seed(self, store: GraphStore, source: Hashable, target: Hashable) -> SeedOutcome:
        """
        Apply the seeded path to a freshly inserted edge and advance the state.

        Forces the stored rank of both endpoints to config.seed_rank. The
        caller is responsible for recomputing both scores afterwards.

        Raises:
            RuntimeError: If called after the window has closed.
        """
        if not self.is_active:
            raise RuntimeError("Bootstrap window is closed; seeded path is unavailable.")

        seed_rank = self._config.seed_rank
        store.set_rank(source, seed_rank)
        store.set_rank(target, seed_rank)
        self._seed_identities.update((source, target))

        seed_index = self._seed_count
        self._seed_count += 1
        completed = self._seed_count == self._config.max_seed_vouches

        logger.info(
            "Seed vouch %d/%d: %r -> %r (both ranked %d).",
            self._seed_count,
            self._config.max_seed_vouches,
            source,
            target,
            seed_rank,
        )
        if completed:
            logger.info(
                "Bootstrap complete after %d seed vouches; normal ranking from now on.",
                self._seed_count,
            )
        return SeedOutcome(seed_index=seed_index, completed=completed)
