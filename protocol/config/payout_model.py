# MIT License
# Copyright (c) 2025 Hashborn

"""
Delegation Pool Payout Model
Single source of truth for the economic constants used by the payout calculator.

Commission policy:
- NPS delegators (foundation delegation program) pay a fixed 5%
- Common delegators pay the operator-set rate passed to each run
"""

from dataclasses import dataclass
from decimal import Decimal

@dataclass(frozen=True)
class PayoutConfig:
    """Economic parameters for a payout run."""

    # ═══════════════════════════════════════════════════════
    # COMMISSION
    # ═══════════════════════════════════════════════════════
    nps_commission_rate: Decimal        # Fixed rate for NPS delegators, excluding fees and supercharge
    max_commission_rate: Decimal        # Upper bound (exclusive) for the operator-set rate

    # ═══════════════════════════════════════════════════════
    # SUPERCHARGED COINBASE WEIGHTING
    # ═══════════════════════════════════════════════════════
    min_supercharge_multiplier: Decimal  # Pool effective stake must be at least this × raw stake
    max_supercharge_multiplier: Decimal  # Unlocked stake weight before the fee discount

    # ═══════════════════════════════════════════════════════
    # PAYOUT TRANSACTIONS
    # ═══════════════════════════════════════════════════════
    payout_fee: Decimal                 # Fee stamped on payout instructions (set downstream)

    # ═══════════════════════════════════════════════════════
    # ARITHMETIC
    # ═══════════════════════════════════════════════════════
    decimal_precision: int              # Significant digits for the local decimal context

    def commission_in_range(self, rate: Decimal) -> bool:
        return Decimal(0) <= rate < self.max_commission_rate


# ═══════════════════════════════════════════════════════════════════════════
# DEFAULT CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════
# per foundation rules, the maximum NPS fee is 5%, excluding fees and supercharged coinbase
DEFAULT = PayoutConfig(
    nps_commission_rate=Decimal("0.05"),        # 5%
    max_commission_rate=Decimal(1),             # 100% (exclusive)

    min_supercharge_multiplier=Decimal(1),      # fully locked pool
    max_supercharge_multiplier=Decimal(2),      # fully unlocked, fee-free blocks

    payout_fee=Decimal(0),

    decimal_precision=28,
)


# ═══════════════════════════════════════════════════════════════════════════
# CURRENT CONFIGURATION (selected at import time)
# ═══════════════════════════════════════════════════════════════════════════
PAYOUT_CONFIG = DEFAULT
