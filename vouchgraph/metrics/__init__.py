"""
vouchgraph.metrics - Per-node metric engines.

Modules:
    rank   - Rank Engine: 3k + 1 - m over in-neighbor effective ranks.
    score  - Score Engine: rank-weighted incoming vouches + capped out-bonus.

Both engines are O(in_degree) reads of the current graph and are evaluated
only for the endpoints touched by an edge operation.

All constants live in vouchgraph.config.VouchGraphConfig.
"""
