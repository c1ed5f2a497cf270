"""
vouchgraph/reports/summary.py - Read-only network overview tables.

Zoom-out view of a VouchNetwork: one row per identity, plus leaderboards by
score and by rank. Nothing here mutates the network or writes files; callers
that want JSON, CSV or a plot build it from the DataFrame.
"""

import logging

import pandas as pd

from vouchgraph.network import VouchNetwork

logger = logging.getLogger(__name__)

NODE_TABLE_COLUMNS = ["identity", "rank", "score", "in_count", "out_count", "is_seed"]


def node_table(network: VouchNetwork) -> pd.DataFrame:
    """
    Tabulate every identity known to the network.

    Returns:
        DataFrame with columns identity, rank, score, in_count, out_count,
        is_seed. One row per identity ever touched by an edge, including
        identities whose edges have all been removed. Row order is not
        meaningful.
    """
    records = []
    for identity in network.identities():
        info = network.get_node_info(identity)
        records.append(
            {
                "identity": info.identity,
                "rank": info.rank,
                "score": info.score,
                "in_count": info.in_count,
                "out_count": info.out_count,
                "is_seed": info.is_seed,
            }
        )

    if not records:
        return pd.DataFrame(columns=NODE_TABLE_COLUMNS)
    return pd.DataFrame(records, columns=NODE_TABLE_COLUMNS)


def top_by_score(network: VouchNetwork, n: int = 10) -> pd.DataFrame:
    """Highest scores first; ties broken by better (lower) rank."""
    df = node_table(network)
    if df.empty:
        return df
    df = df.sort_values(["score", "rank"], ascending=[False, True], kind="mergesort")
    return df.head(n).reset_index(drop=True)


def top_by_rank(network: VouchNetwork, n: int = 10) -> pd.DataFrame:
    """Best (lowest) ranks first; ties broken by higher score."""
    df = node_table(network)
    if df.empty:
        return df
    df = df.sort_values(["rank", "score"], ascending=[True, False], kind="mergesort")
    return df.head(n).reset_index(drop=True)


def network_summary(network: VouchNetwork, top_n: int = 10) -> dict:
    """
    Compute a zoom-out summary of the network.

    Returns:
        {
          'total_nodes': int,
          'total_edges': int,
          'seed_count': int,          # seeded vouches created so far
          'seed_identities': list,    # endpoints of seeded vouches
          'bootstrap_complete': bool,
          'top_by_score': [ {identity, rank, score, in_count, out_count, is_seed}, ... ],
          'top_by_rank':  [ ... same shape ... ],
        }
    """
    df = node_table(network)
    summary = {
        "total_nodes": int(len(df)),
        "total_edges": network.number_of_edges(),
        "seed_count": network.seed_count,
        "seed_identities": list(network.seed_identities),
        "bootstrap_complete": network.bootstrap_complete,
        "top_by_score": top_by_score(network, top_n).to_dict("records"),
        "top_by_rank": top_by_rank(network, top_n).to_dict("records"),
    }

    logger.debug(
        "Network summary: %d nodes, %d edges, %d seed vouches.",
        summary["total_nodes"],
        summary["total_edges"],
        summary["seed_count"],
    )
    return summary
