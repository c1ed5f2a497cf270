"""
vouchgraph.reports - Read-only overviews of a vouch network.

Modules:
    summary - node_table, top_by_score, top_by_rank, network_summary (pandas).
"""
