"""Time/date related helpers."""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Timezone-naive UTC now, matching what the credential table stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
