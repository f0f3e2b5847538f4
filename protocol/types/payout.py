# MIT License
# Copyright (c) 2025 Hashborn

"""
Payout Data Structures

PayoutDetail is the audit record (one per delegator per reward-bearing block),
PayoutTransaction is the disbursement instruction (one per delegator owed
a positive amount).
"""

from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional
from .common import PAYOUT_ERRORS, PayoutError, ShareClass


class PayoutDetail(BaseModel):
    """
    Every quantity used to compute one delegator's payout for one block.
    """
    model_config = ConfigDict(frozen=True)

    public_key: str = Field(..., description="Delegator public key")
    block_height: int = Field(..., description="Height of the reward-bearing block")
    global_slot: int = Field(..., description="Global slot since genesis")
    public_key_untimed_after: int = Field(..., description="Slot after which the stake is untimed")
    share_class: ShareClass = Field(..., description="NPS or Common")
    state_hash: str = Field(..., description="Block state hash")
    staking_balance: Decimal = Field(..., description="Raw staking balance")
    effective_stakes: Decimal = Field(..., description="Supercharge-weighted stake")
    sum_effective_stakes: Decimal = Field(..., description="Pool-wide sum of effective stakes")
    supercharged_weighting_discount: Decimal = Field(..., description="Transaction fees / coinbase")
    date_time: int = Field(..., description="Block timestamp (ms)")
    coinbase: Decimal = Field(..., description="Block coinbase")
    total_rewards: Decimal = Field(..., description="Coinbase adjusted by fee transfers")
    payout: Decimal = Field(..., description="This delegator's share of the block")


class PayoutTransaction(BaseModel):
    """Disbursement instruction for the payment stage."""
    model_config = ConfigDict(frozen=True)

    public_key: str
    amount: Decimal
    fee: Decimal = Decimal(0)


class PayoutResult(BaseModel):
    """
    Output of a complete payout run.

    totals maps each delegator key to its running total after every block,
    including delegators whose total is not positive.
    """
    payouts: List[PayoutTransaction] = Field(default_factory=list)
    details: List[PayoutDetail] = Field(default_factory=list)
    blocks_included: List[int] = Field(default_factory=list)
    total_payout: Decimal = Decimal(0)
    totals: Dict[str, Decimal] = Field(default_factory=dict)

    def payout_json(self) -> List[Dict[str, Any]]:
        return [tx.model_dump(mode="json") for tx in self.payouts]

    def as_tuple(self):
        return self.payouts, self.details, self.blocks_included, self.total_payout


class AllocationOutcome(BaseModel):
    """
    All-or-nothing result of a payout run: either a full PayoutResult or
    the kind and context of the error that aborted the batch.
    """
    ok: bool
    result: Optional[PayoutResult] = None
    error_kind: Optional[str] = None
    error_message: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def success(cls, result: PayoutResult) -> 'AllocationOutcome':
        return cls(ok=True, result=result)

    @classmethod
    def failure(cls, error: PayoutError) -> 'AllocationOutcome':
        return cls(
            ok=False,
            error_kind=error.kind,
            error_message=error.message,
            context=dict(error.context),
        )

    def unwrap(self) -> PayoutResult:
        """Return the result, or re-raise the recorded error."""
        if self.ok:
            return self.result
        error_cls = PAYOUT_ERRORS.get(self.error_kind, PayoutError)
        raise error_cls(self.error_message or "payout run failed", **self.context)
