"""
vouchgraph/stake/gate.py - Stake Gate capability and its administrator.

The vouch network never owns stake data. Before a vouch is created it asks
an injected StakeGate how much the voucher has committed and compares that
against a minimum. Both the gate reference and the minimum are held by a
StakeAdministrator; the engine only reads a StakePolicy snapshot from it.

    StakeGate           - protocol with one read: current_stake(identity).
    InMemoryStakeGate   - mapping-backed gate for local runs and tests.
    StakeAdministrator  - holds the mutable gate + minimum configuration.
    StakePolicy         - frozen view of that configuration at call time.
"""

import logging
from dataclasses import dataclass
from typing import Any, Hashable, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class StakeGate(Protocol):
    """External collaborator that reports an identity's committed stake."""

    def current_stake(self, identity: Hashable) -> int:
        """Return the non-negative stake currently committed by identity."""
        ...


class InMemoryStakeGate:
    """
    Stake gate backed by a plain dict.

    Identities that never deposited report a stake of 0.
    """

    def __init__(self, stakes: Optional[dict] = None):
        self._stakes: dict = {}
        for identity, amount in (stakes or {}).items():
            self.deposit(identity, amount)

    def current_stake(self, identity: Hashable) -> int:
        return self._stakes.get(identity, 0)

    def deposit(self, identity: Hashable, amount: int) -> int:
        """Add amount to identity's stake and return the new balance."""
        if amount < 0:
            raise ValueError(f"Deposit amount must be non-negative, got {amount}")
        self._stakes[identity] = self._stakes.get(identity, 0) + amount
        return self._stakes[identity]

    def withdraw(self, identity: Hashable, amount: int) -> int:
        """Remove amount from identity's stake and return the new balance."""
        balance = self._stakes.get(identity, 0)
        if amount < 0 or amount > balance:
            raise ValueError(
                f"Cannot withdraw {amount} from {identity!r} (balance {balance})"
            )
        self._stakes[identity] = balance - amount
        return self._stakes[identity]


@dataclass(frozen=True)
class StakePolicy:
    """
    Read-only snapshot of the stake requirement.

    Fields:
        stake_gate:    Gate to consult, or None when no gate is configured.
        minimum_stake: Minimum committed stake needed to create a vouch.
    """

    stake_gate: Optional[StakeGate]
    minimum_stake: int

    def stake_of(self, identity: Hashable) -> Any:
        """Stake reported for identity (0 when no gate is configured)."""
        if self.stake_gate is None:
            return 0
        return self.stake_gate.current_stake(identity)

    def permits(self, stake: Any) -> bool:
        """True if stake satisfies the minimum. Negative stakes never do."""
        return stake >= 0 and stake >= self.minimum_stake


class StakeAdministrator:
    """
    Owner of the stake configuration.

    Holding a StakeAdministrator is the capability to change which gate is
    consulted and the minimum required. The vouch network receives the same
    object but only ever reads StakeAdministrator.policy.
    """

    def __init__(self, stake_gate: Optional[StakeGate] = None, minimum_stake: int = 0):
        self._stake_gate: Optional[StakeGate] = None
        self._minimum_stake: int = 0
        if stake_gate is not None:
            self.set_stake_gate(stake_gate)
        self.set_minimum_stake(minimum_stake)

    @property
    def stake_gate(self) -> Optional[StakeGate]:
        return self._stake_gate

    @property
    def minimum_stake(self) -> int:
        return self._minimum_stake

    @property
    def policy(self) -> StakePolicy:
        return StakePolicy(stake_gate=self._stake_gate, minimum_stake=self._minimum_stake)

    def set_stake_gate(self, stake_gate: Optional[StakeGate]) -> None:
        """Point the network at a different stake gate (None disables it)."""
        if stake_gate is not None and not isinstance(stake_gate, StakeGate):
            raise TypeError(
                f"stake_gate must provide current_stake(identity), got {type(stake_gate).__name__}"
            )
        self._stake_gate = stake_gate
        logger.info("Stake gate set to %r.", stake_gate)

    def set_minimum_stake(self, minimum_stake: int) -> None:
        """Change the minimum stake required to vouch."""
        if minimum_stake < 0:
            raise ValueError(f"minimum_stake must be non-negative, got {minimum_stake}")
        previous = self._minimum_stake
        self._minimum_stake = minimum_stake
        logger.info("Minimum stake changed: %s -> %s.", previous, minimum_stake)
