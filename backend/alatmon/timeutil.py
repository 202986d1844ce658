"""Fixed-offset time helpers.

History timestamps are shown to users in Western Indonesia Time (WIB). The
offset is a constant +7 hours on purpose: existing history rows were written
that way, so this is not a timezone database lookup and ignores the server's
own zone.
"""
from datetime import datetime, timedelta, timezone

WIB_OFFSET = timedelta(hours=7)
WIB = timezone(WIB_OFFSET, "WIB")

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def to_wib(ts: datetime) -> datetime:
    """Return the naive WIB wall clock for ``ts``, which is exactly ``ts`` + 7h.

    Naive inputs are taken to be UTC (what the database clock stores).
    """
    if ts.tzinfo is not None:
        return ts.astimezone(WIB).replace(tzinfo=None)
    return ts + WIB_OFFSET


def format_timestamp(ts: datetime) -> str:
    return ts.strftime(TIMESTAMP_FORMAT)
