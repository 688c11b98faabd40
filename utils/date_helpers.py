from datetime import datetime, timezone

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def now_str() -> str:
    """UTC timestamp stored on records: '2024-05-01T13:45:12.123456Z'."""
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime | None:
    """Parse a stored timestamp, returning None on failure."""
    if not value:
        return None
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def format_display_timestamp(value: str) -> str:
    """'2024-05-01T13:45:12.123456Z' → '2024-05-01 13:45' in local time."""
    ts = parse_timestamp(value)
    if ts is None:
        return value or ""
    return ts.astimezone().strftime("%Y-%m-%d %H:%M")
