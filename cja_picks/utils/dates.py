"""Timestamp parsing for deadlines and race dates."""

from datetime import UTC, date, datetime


def to_utc_datetime(value: str | date | datetime | None) -> datetime | None:
    """
    Parse an ISO-8601 string, date or datetime into an aware UTC datetime.

    Naive values are treated as UTC. Plain dates map to midnight UTC.
    Returns None for None or an empty string.
    """
    if value is None or value == "":
        return None

    if isinstance(value, str):
        # fromisoformat handles "Z" from Python 3.11 on
        value = datetime.fromisoformat(value)
    elif not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
