from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict

class Block(BaseModel):
    """
    A block produced by the pool's validator, as delivered by the block source.

    Monetary fields are optional: an absent value is normalized to zero by
    the reward math, an absent or zero coinbase means the block paid nothing.
    """
    model_config = ConfigDict(frozen=True)

    height: int                                         # block number, unique in the audit trail
    global_slot: int                                    # global slot since genesis
    winner_public_key: str                              # delegator whose stake won the slot
    state_hash: str = ""                                # opaque, carried through for audit
    block_datetime: int = 0                             # unix time in ms, carried through for audit

    coinbase: Optional[Decimal] = None
    fee_transfer_to_receiver: Optional[Decimal] = None
    fee_transfer_from_coinbase: Optional[Decimal] = None
    user_command_transaction_fees: Optional[Decimal] = None

    # Pass-through metadata from the indexer
    creator_public_key: Optional[str] = None
    receiver_public_key: Optional[str] = None
    staking_ledger_hash: Optional[str] = None

    def has_coinbase(self) -> bool:
        return self.coinbase is not None and self.coinbase != 0
