"""
vouchgraph - Directed trust graph with incremental rank and score.

Identities vouch for one another. Every vouch creation or removal recomputes
the rank of the vouchee and the scores of both endpoints, using only their
immediate neighborhoods. The first few vouches ever created seed the network
with top-ranked identities.

Packages:
    graph    - GraphStore (NetworkX-backed adjacency and counters)
    metrics  - Rank Engine, Score Engine
    engine   - Bootstrap Controller, Change Notifier
    stake    - Stake Gate protocol and administrator
    reports  - Read-only summary tables (pandas)

Entry point: vouchgraph.network.VouchNetwork.
"""

__version__ = "0.1.0"
