"""
Tests for AllocationOutcome and PayoutCalculator.allocate():
- success wraps the full result
- payout errors become failed outcomes with kind and context
- unwrap() re-raises the recorded error kind
"""
import pytest
from decimal import Decimal

from protocol.types.block import Block
from protocol.types.common import (
    AllocationCancelled,
    DataIntegrityError,
    ValidationError,
    WeightingInvariantError,
)
from protocol.types.payout import AllocationOutcome
from protocol.types.stake import Stake
from pool.core.payouts import PayoutCalculator


@pytest.fixture
def stakers():
    return [
        Stake(public_key="B62qalice", staking_balance=Decimal(100)),
        Stake(public_key="B62qbob", staking_balance=Decimal(100)),
    ]


def reward_block(height=1, winner="B62qalice", **kwargs):
    return Block(height=height, global_slot=height, winner_public_key=winner, coinbase=Decimal(1000), **kwargs)


def test_allocate_success(stakers):
    outcome = PayoutCalculator().allocate([reward_block()], stakers, Decimal(200), Decimal("0.05"))

    assert outcome.ok is True
    assert outcome.error_kind is None
    assert outcome.unwrap().total_payout == Decimal(50)


def test_allocate_winner_mismatch(stakers):
    blocks = [reward_block(height=1), reward_block(height=2, winner="B62qcarol")]

    outcome = PayoutCalculator().allocate(blocks, stakers, Decimal(200), Decimal("0.05"))

    assert outcome.ok is False
    assert outcome.result is None
    assert outcome.error_kind == "data_integrity"
    assert outcome.context["block_height"] == 2

    with pytest.raises(DataIntegrityError) as exc:
        outcome.unwrap()
    assert exc.value.context["winner_public_key"] == "B62qcarol"


def test_allocate_weighting_violation(stakers):
    block = reward_block(user_command_transaction_fees=Decimal(5000))

    outcome = PayoutCalculator().allocate([block], stakers, Decimal(200), Decimal("0.05"))

    assert outcome.error_kind == "weighting_invariant"
    with pytest.raises(WeightingInvariantError):
        outcome.unwrap()


def test_allocate_cancelled(stakers):
    outcome = PayoutCalculator().allocate(
        [reward_block()], stakers, Decimal(200), Decimal("0.05"), should_cancel=lambda: True
    )

    assert outcome.error_kind == "cancelled"
    with pytest.raises(AllocationCancelled):
        outcome.unwrap()


def test_allocate_validation_error_propagates(stakers):
    with pytest.raises(ValidationError):
        PayoutCalculator().allocate([reward_block()], stakers, Decimal(200), Decimal(2))


def test_failure_outcome_roundtrip():
    error = DataIntegrityError("bad data", block_height=9)
    outcome = AllocationOutcome.failure(error)

    assert outcome.error_message == "bad data"
    assert outcome.context == {"block_height": 9}
