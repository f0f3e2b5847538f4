from typing import Sequence
from protocol.types.block import Block
from protocol.types.common import DataIntegrityError
from protocol.types.stake import Stake


def get_winner(stakers: Sequence[Stake], block: Block) -> Stake:
    """
    Returns the delegator whose stake won the block.

    Raises DataIntegrityError unless exactly one delegator matches.
    """
    winners = [s for s in stakers if s.public_key == block.winner_public_key]
    if len(winners) != 1:
        raise DataIntegrityError(
            f"Expected exactly one winner for block {block.height}, found {len(winners)}",
            block_height=block.height,
            winner_public_key=block.winner_public_key,
            matches=len(winners),
        )
    return winners[0]
