"""
vouchgraph/tests/test_stake_gate.py - Tests for the Stake Gate and its policy.

Tests verify:
- InMemoryStakeGate deposit / withdraw bookkeeping and validation.
- StakeAdministrator validates the gate and the minimum.
- add_edge is denied (PolicyDeniedError, no mutation, no events) when the
  voucher's stake is below the minimum, and admitted at exactly the minimum.
- Administrative changes take effect on the next call.
- remove_edge never consults the stake gate.
"""

import logging

import pytest

from vouchgraph.errors import PolicyDeniedError
from vouchgraph.network import VouchNetwork
from vouchgraph.stake.gate import (
    InMemoryStakeGate,
    StakeAdministrator,
    StakeGate,
    StakePolicy,
)


class CountingStakeGate:
    """Gate that reports a fixed stake and counts how often it is asked."""

    def __init__(self, stake: int = 0):
        self.stake = stake
        self.calls: list = []

    def current_stake(self, identity):
        self.calls.append(identity)
        return self.stake


# ── InMemoryStakeGate ────────────────────────────────────────────────────────

def test_unknown_identity_has_zero_stake(stake_gate):
    assert stake_gate.current_stake("nobody") == 0


def test_deposit_and_withdraw():
    gate = InMemoryStakeGate({"alice": 10})
    assert gate.deposit("alice", 5) == 15
    assert gate.withdraw("alice", 12) == 3
    assert gate.current_stake("alice") == 3


@pytest.mark.parametrize("amount", [-1, 4])
def test_invalid_withdrawal_rejected(amount):
    gate = InMemoryStakeGate({"alice": 3})
    with pytest.raises(ValueError):
        gate.withdraw("alice", amount)
    assert gate.current_stake("alice") == 3


def test_negative_deposit_rejected(stake_gate):
    with pytest.raises(ValueError):
        stake_gate.deposit("alice", -1)


def test_in_memory_gate_satisfies_protocol(stake_gate):
    assert isinstance(stake_gate, StakeGate)
    assert isinstance(CountingStakeGate(), StakeGate)


# ── StakePolicy / StakeAdministrator ─────────────────────────────────────────

@pytest.mark.parametrize(
    "stake, minimum, permitted",
    [(0, 0, True), (9, 10, False), (10, 10, True), (11, 10, True), (-1, 0, False)],
)
def test_policy_permits(stake, minimum, permitted):
    policy = StakePolicy(stake_gate=None, minimum_stake=minimum)
    assert policy.permits(stake) is permitted


def test_policy_without_gate_reports_zero():
    assert StakePolicy(stake_gate=None, minimum_stake=0).stake_of("alice") == 0


def test_administrator_rejects_negative_minimum():
    with pytest.raises(ValueError):
        StakeAdministrator(minimum_stake=-1)


def test_administrator_rejects_non_gate(administrator):
    with pytest.raises(TypeError):
        administrator.set_stake_gate(object())
    assert administrator.stake_gate is not None


def test_administrator_changes_are_logged(administrator, caplog):
    with caplog.at_level(logging.INFO, logger="vouchgraph.stake.gate"):
        administrator.set_minimum_stake(25)
    assert administrator.minimum_stake == 25
    assert "0 -> 25" in caplog.text


def test_policy_is_a_snapshot(administrator):
    policy = administrator.policy
    administrator.set_minimum_stake(100)
    assert policy.minimum_stake == 0
    assert administrator.policy.minimum_stake == 100


# ── Enforcement through the network ──────────────────────────────────────────

def test_insufficient_stake_denied_without_mutation(network, administrator, recorder, graph_snapshot):
    network.add_edge("a", "b")
    administrator.set_minimum_stake(10)
    before = graph_snapshot(network)
    recorder.clear()

    with pytest.raises(PolicyDeniedError) as exc_info:
        network.add_edge("a", "c")

    assert exc_info.value.identity == "a"
    assert exc_info.value.stake == 0
    assert exc_info.value.minimum == 10
    assert graph_snapshot(network) == before
    assert recorder.events == []


def test_denial_is_logged_as_warning(network, administrator, caplog):
    administrator.set_minimum_stake(1)
    with caplog.at_level(logging.WARNING, logger="vouchgraph.network"):
        with pytest.raises(PolicyDeniedError):
            network.add_edge("a", "b")
    assert any(r.levelno == logging.WARNING for r in caplog.records)


def test_stake_at_minimum_is_admitted(network, administrator, stake_gate):
    administrator.set_minimum_stake(10)
    stake_gate.deposit("a", 10)
    network.add_edge("a", "b")
    assert network.has_edge("a", "b")


def test_only_the_voucher_stake_is_checked(network, administrator, stake_gate):
    administrator.set_minimum_stake(10)
    stake_gate.deposit("a", 10)
    # Target has no stake at all.
    network.add_edge("a", "b")
    with pytest.raises(PolicyDeniedError):
        network.add_edge("b", "a")


def test_withdrawal_takes_effect_on_next_call(network, administrator, stake_gate):
    administrator.set_minimum_stake(5)
    stake_gate.deposit("a", 5)
    network.add_edge("a", "b")
    stake_gate.withdraw("a", 1)
    with pytest.raises(PolicyDeniedError):
        network.add_edge("a", "c")


def test_swapping_gate_takes_effect_on_next_call(network, administrator):
    administrator.set_minimum_stake(5)
    with pytest.raises(PolicyDeniedError):
        network.add_edge("a", "b")
    administrator.set_stake_gate(CountingStakeGate(stake=5))
    network.add_edge("a", "b")
    assert network.has_edge("a", "b")


def test_no_gate_with_positive_minimum_denies_everything():
    net = VouchNetwork(administrator=StakeAdministrator(stake_gate=None, minimum_stake=1))
    with pytest.raises(PolicyDeniedError):
        net.add_edge("a", "b")
    assert net.identities() == []


def test_default_network_admits_every_vouch():
    net = VouchNetwork()
    net.add_edge("a", "b")
    assert net.has_edge("a", "b")


def test_negative_reported_stake_is_denied():
    net = VouchNetwork(administrator=StakeAdministrator(CountingStakeGate(stake=-3)))
    with pytest.raises(PolicyDeniedError):
        net.add_edge("a", "b")


def test_gate_consulted_after_validation():
    gate = CountingStakeGate(stake=100)
    net = VouchNetwork(administrator=StakeAdministrator(gate))
    with pytest.raises(ValueError):
        net.add_edge("a", "a")
    assert gate.calls == []
    net.add_edge("a", "b")
    assert gate.calls == ["a"]


def test_removal_does_not_consult_gate():
    gate = CountingStakeGate(stake=100)
    admin = StakeAdministrator(gate)
    net = VouchNetwork(administrator=admin)
    net.add_edge("a", "b")
    gate.calls.clear()

    admin.set_minimum_stake(1000)
    net.remove_edge("a", "b")
    assert gate.calls == []
    assert not net.has_edge("a", "b")


def test_gate_failure_propagates_without_mutation():
    class BrokenGate:
        def current_stake(self, identity):
            raise ConnectionError("ledger unavailable")

    net = VouchNetwork(administrator=StakeAdministrator(BrokenGate()))
    with pytest.raises(ConnectionError):
        net.add_edge("a", "b")
    assert net.identities() == []
    net.administrator.set_stake_gate(None)
    net.add_edge("a", "b")
