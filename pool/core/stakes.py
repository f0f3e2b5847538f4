from typing import Callable
from protocol.types.block import Block
from protocol.types.stake import Stake

LockPredicate = Callable[[Stake, Block], bool]


def stake_is_locked(stake: Stake, block: Block) -> bool:
    """
    Whether a timed balance was still locked when the block was produced.

    A stake with untimed_after_slot == 0 was never timed.
    """
    return block.global_slot < stake.untimed_after_slot
