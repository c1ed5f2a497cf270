"""
vouchgraph/config.py - All tunable constants for the vouch network.

No constant should ever be hardcoded in an engine module. Every rank bound,
weight window, bonus and bootstrap limit lives here so that calibration
changes are a single-file diff.

Mutable runtime policy (which stake gate to ask, the minimum stake) is NOT
configuration in this sense: it belongs to the StakeAdministrator in
vouchgraph.stake.gate, which the engine only reads.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class VouchGraphConfig:
    """
    Immutable configuration for the rank / score engines and the bootstrap
    controller.

    All fields have documented defaults matching the deployed network.
    Override by constructing a new VouchGraphConfig with the desired values.
    """

    # ── Rank Engine ───────────────────────────────────────────────────────────
    default_rank: int = 6
    # Effective rank of an identity whose stored rank is 0 (unset).
    # Means "no reputation": contributes nothing to downstream scores.

    max_tied_voucher_count: int = 3
    # Cap on m, the number of in-neighbors sharing the best rank k.
    # rank = 3k + 1 - m, so each extra tied voucher improves rank by one step
    # until the cap, and never crosses into the next k band.

    # ── Score Engine ──────────────────────────────────────────────────────────
    weight_window: int = 5
    # R. A voucher of rank r (1 <= r <= R, r < default_rank) contributes
    # 2 ** (R - r) to the score of everyone it vouches for.
    # With R = 5 the weights are 16, 8, 4, 2, 1 for ranks 1..5.

    bonus_out: int = 1
    # Score bonus per outgoing vouch.

    bonus_cap: int = 15
    # Outgoing vouches beyond this count earn no further bonus.

    # ── Bootstrap Controller ──────────────────────────────────────────────────
    max_seed_vouches: int = 5
    # The first N vouches ever created seed the network: both endpoints are
    # forced to seed_rank instead of going through the Rank Engine.

    seed_rank: int = 1
    # Rank assigned to both endpoints of a seeded vouch.

    def __post_init__(self) -> None:
        if self.default_rank < 2:
            raise ValueError(f"default_rank must be >= 2, got {self.default_rank}")
        if not 1 <= self.weight_window < self.default_rank:
            raise ValueError(
                f"weight_window must be in [1, default_rank), got {self.weight_window}"
            )
        if self.max_tied_voucher_count < 1:
            raise ValueError("max_tied_voucher_count must be >= 1")
        if self.bonus_out < 0 or self.bonus_cap < 0:
            raise ValueError("bonus_out and bonus_cap must be non-negative")
        if self.max_seed_vouches < 0:
            raise ValueError("max_seed_vouches must be non-negative")
        if not 1 <= self.seed_rank < self.default_rank:
            raise ValueError(
                f"seed_rank must be in [1, default_rank), got {self.seed_rank}"
            )

    @property
    def max_vouch_weight(self) -> int:
        """Largest weight a single incoming vouch can carry (16 by default)."""
        return 2 ** (self.weight_window - 1)


# Singleton default: import this everywhere instead of constructing anew.
DEFAULT_CONFIG = VouchGraphConfig()
