"""
vouchgraph/tests/conftest.py - Shared pytest fixtures for the vouchgraph suite.

Fixtures:
    stake_gate          - InMemoryStakeGate with no deposits.
    administrator       - StakeAdministrator over stake_gate, minimum 0.
    recorder            - EventRecorder (subscribed by the network fixtures).
    network             - Empty VouchNetwork, bootstrap window open.
    seeded_network      - VouchNetwork after the 5 seed vouches (window closed).

Helpers:
    graph_state(network) - comparable snapshot of every node attribute and edge
                           (also available as the graph_snapshot fixture).
    SEED_VOUCHES          - the five seed vouches used by seeded_network.
"""

import pytest

from vouchgraph.engine.notifier import EventRecorder
from vouchgraph.network import VouchNetwork
from vouchgraph.stake.gate import InMemoryStakeGate, StakeAdministrator

SEED_VOUCHES = [
    ("seed-a", "seed-b"),
    ("seed-b", "seed-c"),
    ("seed-c", "seed-d"),
    ("seed-d", "seed-e"),
    ("seed-e", "seed-a"),
]


def graph_state(network: VouchNetwork) -> tuple:
    """
    Snapshot the full observable state of a network.

    Two snapshots compare equal iff the edge set, every node attribute
    (rank, score, out_degree) and the bootstrap seed count are identical.
    """
    G = network.as_digraph()
    nodes = {n: dict(d) for n, d in G.nodes(data=True)}
    edges = frozenset(G.edges())
    return nodes, edges, network.seed_count


@pytest.fixture
def stake_gate() -> InMemoryStakeGate:
    return InMemoryStakeGate()


@pytest.fixture
def administrator(stake_gate) -> StakeAdministrator:
    return StakeAdministrator(stake_gate=stake_gate, minimum_stake=0)


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def network(administrator, recorder) -> VouchNetwork:
    net = VouchNetwork(administrator=administrator)
    net.notifier.subscribe(recorder)
    return net


@pytest.fixture
def seeded_network(administrator, recorder) -> VouchNetwork:
    """Network whose bootstrap window has been used up by SEED_VOUCHES."""
    net = VouchNetwork(administrator=administrator)
    for source, target in SEED_VOUCHES:
        net.add_edge(source, target)
    assert net.bootstrap_complete
    net.notifier.subscribe(recorder)
    return net


@pytest.fixture
def graph_snapshot():
    """graph_state as a fixture, for test modules that compare before / after."""
    return graph_state
