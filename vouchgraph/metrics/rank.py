"""
vouchgraph/metrics/rank.py - Rank Engine.

Rank is an inverse-quality metric: 1 is best (bootstrap seeds), and
config.default_rank (6) means "no reputation". A node's rank is derived only
from the effective ranks of the identities vouching for it:

    k = min effective rank among in-neighbors
    m = number of in-neighbors with effective rank exactly k, capped at
        config.max_tied_voucher_count (3)
    rank = 3k + 1 - m

A node with no in-neighbors falls back to the stored sentinel 0 (read as
default_rank).

Propagation is local by construction. recompute_rank() is evaluated only for
the destination of an edge operation and never cascades to that node's own
followers, so the cost of an operation is proportional to the local
in-degree rather than to the graph size. A follower's rank is brought up to
date the next time one of its own in-edges changes.
"""

import logging
from typing import Hashable, Iterable

from vouchgraph.config import DEFAULT_CONFIG, VouchGraphConfig
from vouchgraph.graph.store import GraphStore

logger = logging.getLogger(__name__)


def effective_rank(stored_rank: int, config: VouchGraphConfig = DEFAULT_CONFIG) -> int:
    """Stored rank if set, otherwise config.default_rank."""
    return stored_rank if stored_rank else config.default_rank


def compute_rank(
    in_neighbor_ranks: Iterable[int],
    config: VouchGraphConfig = DEFAULT_CONFIG,
) -> int:
    """
    Rank implied by the effective ranks of a node's in-neighbors.

    Args:
        in_neighbor_ranks: Effective rank of every in-neighbor (any order).
        config:            VouchGraphConfig with max_tied_voucher_count.

    Returns:
        The rank to store: 0 (unset) when there are no in-neighbors,
        otherwise 3k + 1 - m.

    Example:
        >>> compute_rank([2, 2, 2, 5])
        4
    """
    best: int | None = None
    tied = 0
    for rank in in_neighbor_ranks:
        if best is None or rank < best:
            best = rank
            tied = 1
        elif rank == best:
            tied += 1

    if best is None:
        return 0

    tied = min(tied, config.max_tied_voucher_count)
    return 3 * best + 1 - tied


def recompute_rank(
    store: GraphStore,
    identity: Hashable,
    config: VouchGraphConfig = DEFAULT_CONFIG,
) -> int:
    """
    Recompute and store the rank of one node from its current in-neighbors.

    O(in_degree(identity)). Reads the present graph only; does not touch
    any other node's rank.

    Returns:
        The newly stored rank (0 means unset).
    """
    in_ranks = [
        effective_rank(store.stored_rank(voucher), config)
        for voucher in store.in_neighbors(identity)
    ]
    rank = compute_rank(in_ranks, config)
    store.set_rank(identity, rank)

    logger.debug(
        "Rank recomputed for %r: %d (from %d in-neighbors).",
        identity,
        rank,
        len(in_ranks),
    )
    return rank
