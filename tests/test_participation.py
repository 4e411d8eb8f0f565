from datetime import datetime, timedelta, timezone

import pytest

from models import NetworkId
from participation import is_launch_participant
from tests.fakes import transfer

LAUNCH = datetime(2023, 8, 9, tzinfo=timezone.utc)
GRACE = timedelta(days=30)


def base_transfer(block):
    return transfer(block, network=NetworkId.BASE)


def times(**blocks):
    return {(NetworkId.BASE, block): ts for block, ts in blocks.items()}


def test_no_transfers_is_never_a_participant():
    assert is_launch_participant([], times(), LAUNCH, GRACE) is False


@pytest.mark.parametrize(
    "first, expected",
    [
        (LAUNCH, True),
        (LAUNCH + timedelta(days=29, hours=23), True),
        (LAUNCH + GRACE, False),
        (LAUNCH - timedelta(seconds=1), False),
        (LAUNCH + timedelta(days=365), False),
    ],
)
def test_window_is_half_open(first, expected):
    later = first + timedelta(days=400)
    transfers = [base_transfer("b2"), base_transfer("b1")]
    assert is_launch_participant(transfers, times(b1=first, b2=later), LAUNCH, GRACE) is expected


def test_earliest_is_computed_not_assumed_from_order():
    # newest-first ordering is not trusted: the in-window transfer is listed first
    transfers = [base_transfer("b1"), base_transfer("b2")]
    block_times = times(b1=LAUNCH + timedelta(days=2), b2=LAUNCH + timedelta(days=200))
    assert is_launch_participant(transfers, block_times, LAUNCH, GRACE) is True


def test_unresolved_timestamps_mean_false():
    transfers = [base_transfer("b1")]
    assert is_launch_participant(transfers, times(), LAUNCH, GRACE) is False
