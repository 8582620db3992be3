import datetime
import secrets
import string
import time
from typing import Optional

_BASE36_DIGITS = string.digits + string.ascii_lowercase


def to_base36(value: int) -> str:
    """
    Non-negative int to lowercase base 36.
    """
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def epoch_millis() -> int:
    return int(time.time() * 1000)


def generate_unique_id(now_millis: Optional[int] = None) -> str:
    """
    Time-based id with a random suffix, e.g. "m1x2abc3k9f0q2z8".
    """
    millis = epoch_millis() if now_millis is None else now_millis
    return to_base36(millis) + to_base36(secrets.randbits(52))


def dashed_timestamp(now: Optional[datetime.datetime] = None) -> str:
    """
    ISO8601 UTC timestamp with ":" and "." replaced by "-", safe for filenames.
    """
    now = now or datetime.datetime.now(datetime.timezone.utc)
    iso = now.astimezone(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")
    # millisecond precision plus "Z", like a browser's toISOString()
    iso = iso[:-3] + "Z"
    return iso.replace(":", "-").replace(".", "-")


def today_iso_date(now: Optional[datetime.datetime] = None) -> str:
    now = now or datetime.datetime.now(datetime.timezone.utc)
    return now.date().isoformat()
