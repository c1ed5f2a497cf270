"""
vouchgraph/metrics/score.py - Score Engine.

A node's score is the sum of the weights of the vouches it receives plus a
capped bonus for the vouches it gives:

    weight(r) = 2 ** (R - r)   if 1 <= r <= R and r < default_rank
              = 0              otherwise
    score     = sum(weight(effective_rank(u)) for u in in_neighbors)
              + bonus_out * min(out_degree, bonus_cap)

Weights are never stored on edges. They are read from each voucher's
*current* rank at recompute time, so a score is always a function of the
present graph rather than of edge history.

Python integers are unbounded, so no width is chosen here; a single vouch
weighs at most config.max_vouch_weight (16).
"""

import logging
from typing import Hashable, Iterable

from vouchgraph.config import DEFAULT_CONFIG, VouchGraphConfig
from vouchgraph.graph.store import GraphStore
from vouchgraph.metrics.rank import effective_rank

logger = logging.getLogger(__name__)


def vouch_weight(rank: int, config: VouchGraphConfig = DEFAULT_CONFIG) -> int:
    """Weight contributed by a voucher whose effective rank is rank."""
    if 1 <= rank <= config.weight_window and rank < config.default_rank:
        return 2 ** (config.weight_window - rank)
    return 0


def compute_score(
    in_neighbor_ranks: Iterable[int],
    out_degree: int,
    config: VouchGraphConfig = DEFAULT_CONFIG,
) -> int:
    """
    Score implied by in-neighbor ranks and the node's out-degree.

    Args:
        in_neighbor_ranks: Effective rank of every in-neighbor (any order).
        out_degree:        Number of vouches the node has given.
        config:            VouchGraphConfig with weight_window, bonus_out, bonus_cap.

    Example:
        >>> compute_score([1, 1, 6], out_degree=20)
        47
    """
    incoming = sum(vouch_weight(rank, config) for rank in in_neighbor_ranks)
    bonus = config.bonus_out * min(out_degree, config.bonus_cap)
    return incoming + bonus


def recompute_score(
    store: GraphStore,
    identity: Hashable,
    config: VouchGraphConfig = DEFAULT_CONFIG,
) -> int:
    """
    Recompute and store the score of one node. O(in_degree(identity)).

    Returns:
        The newly stored score.
    """
    in_ranks = [
        effective_rank(store.stored_rank(voucher), config)
        for voucher in store.in_neighbors(identity)
    ]
    score = compute_score(in_ranks, store.out_degree(identity), config)
    store.set_score(identity, score)

    logger.debug("Score recomputed for %r: %d.", identity, score)
    return score
