# MIT License
# Copyright (c) 2025 Hashborn

"""
Delegation Pool Payout Calculation

Shares each block's rewards among the pool's delegators by effective stake.

Economic Model:
- Locked stake and NPS stake count once
- Unlocked stake counts (2 - discount) times, discount = transaction fees / coinbase
- Delegator portion = effective / sum_effective * commission * total_rewards
- Commission: 5% for NPS delegators, operator-set rate for everyone else

Flow:
1. Record every block height as processed
2. Skip blocks without coinbase
3. Check the block winner is exactly one known delegator
4. Weight every stake, check the pool weighting stays within [1x, 2x] of raw stake
5. Fold each delegator's portion into its running total and log a PayoutDetail
6. Emit a PayoutTransaction for every delegator owed a positive amount

Any failure aborts the whole run; totals are only returned for a complete run.
"""

import logging
from decimal import Decimal, localcontext
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from protocol.config.payout_model import PAYOUT_CONFIG, PayoutConfig
from protocol.types.block import Block
from protocol.types.common import (
    AllocationCancelled,
    DataIntegrityError,
    PayoutError,
    ValidationError,
    WeightingInvariantError,
)
from protocol.types.payout import AllocationOutcome, PayoutDetail, PayoutResult, PayoutTransaction
from protocol.types.stake import Stake
from pool.core.rewards import (
    Amount,
    block_total_rewards,
    commission_rate_for,
    effective_stake,
    supercharged_discount,
    to_decimal,
)
from pool.core.stakes import LockPredicate, stake_is_locked
from pool.core.winner import get_winner
from pool.observability.metrics import record_run_failure, record_run_success

logger = logging.getLogger(__name__)


class PayoutCalculator:
    """
    Computes delegator payouts for a batch of blocks.

    The calculator holds no per-run state: stakes are never mutated and each
    run starts from the totals carried on the Stake records.
    """

    def __init__(
        self,
        config: Optional[PayoutConfig] = None,
        lock_predicate: LockPredicate = stake_is_locked,
    ):
        """
        Initialize payout calculator.

        Args:
            config: Payout configuration (defaults to PAYOUT_CONFIG)
            lock_predicate: Decides whether a stake was locked at a block
        """
        self.config = config or PAYOUT_CONFIG
        self.lock_predicate = lock_predicate

    def calculate(
        self,
        blocks: Sequence[Block],
        stakers: Sequence[Stake],
        total_stake: Amount,
        commission_rate: Amount,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> PayoutResult:
        """
        Allocate the rewards of every block among the stakers.

        Args:
            blocks: Blocks produced by the pool, in processing order
            stakers: Delegators of the pool, with baseline totals
            total_stake: Total pool stake (accepted for interface compatibility, not used)
            commission_rate: Commission fraction in [0, 1) for Common delegators
            should_cancel: Optional callable checked once per block

        Returns:
            PayoutResult

        Raises:
            ValidationError: commission_rate out of range
            DataIntegrityError: duplicate delegators, winner mismatch, negative rewards
            WeightingInvariantError: pool weighting outside [1x, 2x] of raw stake
            AllocationCancelled: should_cancel returned True
        """
        commission_rate = to_decimal(commission_rate)
        if not self.config.commission_in_range(commission_rate):
            raise ValidationError(
                f"Commission rate {commission_rate} outside [0, {self.config.max_commission_rate})"
            )
        self._check_unique_keys(stakers)

        logger.info(
            f"Calculating payouts for {len(blocks)} blocks, {len(stakers)} delegators "
            f"(total stake: {total_stake}, commission: {commission_rate:.2%})"
        )

        totals: Dict[str, Decimal] = {s.public_key: s.total for s in stakers}
        details: List[PayoutDetail] = []
        blocks_included: List[int] = []

        with localcontext() as ctx:
            ctx.prec = self.config.decimal_precision

            for block in blocks:
                if should_cancel is not None and should_cancel():
                    raise AllocationCancelled(
                        f"Payout run cancelled before block {block.height}",
                        block_height=block.height,
                        blocks_processed=len(blocks_included),
                    )

                # Keep a log of all blocks we processed
                blocks_included.append(block.height)

                if not block.has_coinbase():
                    logger.debug(f"Block {block.height} has no coinbase, skipping")
                    continue

                details.extend(self._allocate_block(block, stakers, commission_rate, totals))

            payouts: List[PayoutTransaction] = []
            total_payout = Decimal(0)
            for staker in stakers:
                amount = totals[staker.public_key]
                if amount > 0:
                    payouts.append(PayoutTransaction(
                        public_key=staker.public_key,
                        amount=amount,
                        fee=self.config.payout_fee,
                    ))
                    total_payout += amount

        logger.info(
            f"Payout run complete: {len(blocks_included)} blocks, "
            f"{len(payouts)} payouts, total {total_payout}"
        )

        return PayoutResult(
            payouts=payouts,
            details=details,
            blocks_included=blocks_included,
            total_payout=total_payout,
            totals=totals,
        )

    def allocate(
        self,
        blocks: Sequence[Block],
        stakers: Sequence[Stake],
        total_stake: Amount,
        commission_rate: Amount,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> AllocationOutcome:
        """
        Same as calculate(), but payout failures come back as a failed outcome.

        ValidationError still propagates: it signals a caller bug, not bad chain data.
        """
        try:
            result = self.calculate(blocks, stakers, total_stake, commission_rate, should_cancel)
        except PayoutError as e:
            logger.warning(f"Payout run aborted ({e.kind}): {e.message}")
            record_run_failure(e)
            return AllocationOutcome.failure(e)

        record_run_success(result)
        return AllocationOutcome.success(result)

    def _allocate_block(
        self,
        block: Block,
        stakers: Sequence[Stake],
        commission_rate: Decimal,
        totals: Dict[str, Decimal],
    ) -> List[PayoutDetail]:
        """
        Shares one reward-bearing block and folds the portions into totals.

        Nothing is written to totals until every check for the block has passed.
        """
        # Winner is only validated; rewards are shared by every staker
        get_winner(stakers, block)

        total_rewards = block_total_rewards(block)
        if total_rewards < 0:
            raise DataIntegrityError(
                f"Block {block.height} has negative total rewards {total_rewards}",
                block_height=block.height,
                total_rewards=str(total_rewards),
            )

        discount = supercharged_discount(block)

        effective_stakes: Dict[str, Decimal] = {}
        sum_unweighted_stakes = Decimal(0)
        sum_effective_stakes = Decimal(0)
        for staker in stakers:
            locked = self.lock_predicate(staker, block)
            stake = effective_stake(staker, locked, discount, self.config)
            effective_stakes[staker.public_key] = stake
            sum_unweighted_stakes += staker.staking_balance
            sum_effective_stakes += stake

        self._check_weighting(block, sum_unweighted_stakes, sum_effective_stakes)

        portions: Dict[str, Decimal] = {}
        for staker in stakers:
            commission = commission_rate_for(staker, commission_rate, self.config)
            portions[staker.public_key] = (
                effective_stakes[staker.public_key] / sum_effective_stakes * commission * total_rewards
            )

        details = []
        for staker in stakers:
            totals[staker.public_key] += portions[staker.public_key]
            details.append(PayoutDetail(
                public_key=staker.public_key,
                block_height=block.height,
                global_slot=block.global_slot,
                public_key_untimed_after=staker.untimed_after_slot,
                share_class=staker.share_class,
                state_hash=block.state_hash,
                staking_balance=staker.staking_balance,
                effective_stakes=effective_stakes[staker.public_key],
                sum_effective_stakes=sum_effective_stakes,
                supercharged_weighting_discount=discount,
                date_time=block.block_datetime,
                coinbase=block.coinbase,
                total_rewards=total_rewards,
                payout=portions[staker.public_key],
            ))

        logger.debug(
            f"Block {block.height}: rewards {total_rewards}, discount {discount}, "
            f"effective stake {sum_effective_stakes} / raw {sum_unweighted_stakes}"
        )
        return details

    def _check_weighting(self, block: Block, sum_unweighted: Decimal, sum_effective: Decimal) -> None:
        """Effective pool stake must be at least the raw stake and at most 2x."""
        context = {
            "block_height": block.height,
            "sum_unweighted_stakes": str(sum_unweighted),
            "sum_effective_stakes": str(sum_effective),
        }
        if sum_effective < sum_unweighted * self.config.min_supercharge_multiplier:
            raise WeightingInvariantError(
                f"Block {block.height}: effective stake {sum_effective} is less than total stake {sum_unweighted}",
                **context,
            )
        if sum_effective > sum_unweighted * self.config.max_supercharge_multiplier:
            raise WeightingInvariantError(
                f"Block {block.height}: effective stake {sum_effective} is greater than "
                f"{self.config.max_supercharge_multiplier}x total stake {sum_unweighted}",
                **context,
            )
        if sum_effective == 0:
            raise WeightingInvariantError(
                f"Block {block.height}: pool has no effective stake to share rewards by",
                **context,
            )

    @staticmethod
    def _check_unique_keys(stakers: Sequence[Stake]) -> None:
        seen = set()
        for staker in stakers:
            if staker.public_key in seen:
                raise DataIntegrityError(
                    f"Duplicate delegator {staker.public_key}",
                    public_key=staker.public_key,
                )
            seen.add(staker.public_key)


def apply_totals(stakers: Sequence[Stake], totals: Dict[str, Decimal]) -> List[Stake]:
    """Returns copies of the stakers carrying the totals of a finished run."""
    return [
        s.model_copy(update={"total": totals.get(s.public_key, s.total)})
        for s in stakers
    ]


# Global calculator instance
payout_calculator = PayoutCalculator()


def get_payouts(
    blocks: Sequence[Block],
    stakers: Sequence[Stake],
    total_stake: Amount,
    commission_rate: Amount,
) -> Tuple[List[PayoutTransaction], List[PayoutDetail], List[int], Decimal]:
    """
    Returns (payouts, details, blocks_included, total_payout) using the default calculator.
    """
    return payout_calculator.calculate(blocks, stakers, total_stake, commission_rate).as_tuple()
