"""
vouchgraph.stake - Stake Gate collaborator interface.

Modules:
    gate  - StakeGate protocol, InMemoryStakeGate, StakeAdministrator, StakePolicy.

The engine consults the gate before every new vouch and never writes to it.
"""

from vouchgraph.stake.gate import (
    InMemoryStakeGate,
    StakeAdministrator,
    StakeGate,
    StakePolicy,
)

__all__ = ["InMemoryStakeGate", "StakeAdministrator", "StakeGate", "StakePolicy"]
