"""Helper signatures: now_utc, add_years, b64url_nopad."""

import base64
import datetime


def now_utc() -> datetime.datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


def add_years(moment: datetime.datetime, years: int) -> datetime.datetime:
    """Shift by calendar years; Feb 29 falls back to Feb 28."""
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, day=28)


def b64url_nopad(b: bytes) -> str:
    """URL-safe base64 of bytes, padding stripped."""
    return base64.urlsafe_b64encode(b).decode().rstrip("=")
