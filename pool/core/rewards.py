from decimal import Decimal
from typing import Optional, Union
from protocol.config.payout_model import PAYOUT_CONFIG, PayoutConfig
from protocol.types.block import Block
from protocol.types.stake import Stake

Amount = Union[Decimal, int, float, str]


def to_decimal(value: Amount) -> Decimal:
    """Convert through str so floats keep their printed value (0.05, not 0.0500000000000000027...)."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def amount_or_zero(value: Optional[Decimal]) -> Decimal:
    """Normalize an absent monetary field to zero."""
    return Decimal(0) if value is None else value


def block_transaction_fees(block: Block) -> Decimal:
    return amount_or_zero(block.user_command_transaction_fees)


def block_total_rewards(block: Block) -> Decimal:
    """
    Total rewards earned by a block.

    total = coinbase + fee_transfer_to_receiver - fee_transfer_from_coinbase
    """
    return (
        amount_or_zero(block.coinbase)
        + amount_or_zero(block.fee_transfer_to_receiver)
        - amount_or_zero(block.fee_transfer_from_coinbase)
    )


def supercharged_discount(block: Block) -> Decimal:
    """
    Ratio of transaction fees to coinbase.

    Unlocked stake generates the extra (supercharged) coinbase, but fees carry no
    supercharge, so the more a block earned from fees the less the double weight counts.
    Only defined for blocks with a nonzero coinbase.
    """
    return block_transaction_fees(block) / block.coinbase


def effective_stake(
    stake: Stake,
    locked: bool,
    discount: Decimal,
    config: PayoutConfig = PAYOUT_CONFIG,
) -> Decimal:
    """
    Stake weight used to share a block's rewards.

    Locked and NPS stake count once; unlocked stake counts
    (max_supercharge_multiplier - discount) times.
    """
    if locked or stake.is_nps:
        return stake.staking_balance
    return stake.staking_balance * (config.max_supercharge_multiplier - discount)


def commission_rate_for(
    stake: Stake,
    commission_rate: Decimal,
    config: PayoutConfig = PAYOUT_CONFIG,
) -> Decimal:
    if stake.is_nps:
        return config.nps_commission_rate
    return commission_rate
