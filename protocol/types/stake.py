from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from .common import ShareClass

class Stake(BaseModel):
    """Represents one delegator's stake in the pool's staking ledger."""
    model_config = ConfigDict(frozen=True)

    public_key: str                                     # Delegator's public key
    staking_balance: Decimal = Field(ge=0)              # Amount delegated to the pool
    share_class: ShareClass = ShareClass.COMMON
    untimed_after_slot: int = 0                         # Timed balance unlocks at this slot (0 = untimed)
    total: Decimal = Decimal(0)                         # Baseline running total before this run

    @property
    def is_nps(self) -> bool:
        return self.share_class == ShareClass.NPS
