"""
vouchgraph.graph - NetworkX-backed structural layer.

Modules:
    store  - GraphStore: adjacency sets, edge existence, out-degree counters,
             identity validation.

The graph is a NetworkX DiGraph. Node attributes: rank, score, out_degree.
Edges carry no payload; vouch weight is derived at recompute time.
"""
