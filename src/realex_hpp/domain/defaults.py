"""Default value generation for HPP requests."""

import uuid
from datetime import datetime
from zoneinfo import ZoneInfo

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
DEFAULT_TIMEZONE = "UTC"


def generate_timestamp(tz: str = DEFAULT_TIMEZONE, now: datetime | None = None) -> str:
    """Generate a gateway timestamp (yyyyMMddHHmmss) in the given IANA timezone.

    Args:
        tz: IANA timezone name, e.g. "Europe/Dublin"
        now: Optional instant to format instead of the current time

    Returns:
        14 digit timestamp string
    """
    zone = ZoneInfo(tz)
    moment = now.astimezone(zone) if now is not None else datetime.now(zone)
    return moment.strftime(TIMESTAMP_FORMAT)


def generate_order_id() -> str:
    """Generate a unique order ID.

    Returns:
        32 lowercase hex characters (UUID4 without separators)
    """
    return uuid.uuid4().hex
