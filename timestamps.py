import re
from datetime import datetime, timezone

from errors import MalformedTimestamp

# sorts lexically in time order, safe in URLs and file names
DATE_FORMAT = "%Y%m%dT%H%M%S"
_PATTERN = re.compile(r"^\d{8}T\d{6}$")


def normalize(dt: datetime) -> datetime:
    """Naive UTC, whole seconds. Anything finer than a second is dropped."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.replace(microsecond=0)


def parse_timestamp(text: str) -> datetime:
    # strptime alone accepts unpadded fields, which would break format(parse(s)) == s
    if not isinstance(text, str) or not _PATTERN.match(text):
        raise MalformedTimestamp(text)
    try:
        return datetime.strptime(text, DATE_FORMAT)
    except ValueError:
        raise MalformedTimestamp(text)


def format_timestamp(dt: datetime) -> str:
    dt = normalize(dt)
    # %Y is not zero-padded below year 1000 on every platform
    return f"{dt.year:04d}{dt:%m%dT%H%M%S}"
