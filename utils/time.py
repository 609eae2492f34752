from datetime import datetime, timezone # Time management


def utc_now() -> datetime:
    """Current time, timezone aware (UTC)."""
    return datetime.now(timezone.utc)
