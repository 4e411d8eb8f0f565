from datetime import datetime, timedelta
from typing import Mapping, Sequence

from models import RawTransfer
from temporal import BlockKey, earliest_timestamp, transfer_timestamps


def is_launch_participant(
    transfers: Sequence[RawTransfer],
    block_times: Mapping[BlockKey, datetime],
    launch: datetime,
    grace: timedelta,
) -> bool:
    """True when the first resolvable transfer falls in [launch, launch + grace).

    No transfers, or none with a known timestamp, means not a participant.
    """
    if not transfers:
        return False
    first = earliest_timestamp(transfer_timestamps(transfers, block_times))
    if first is None:
        return False
    return launch <= first < launch + grace
