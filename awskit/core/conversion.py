"""
Conversion helpers used by the generated value objects, inputs and results to translate between Python values and
their representation on the wire.
"""
import base64
import datetime
import enum
from email.utils import formatdate, parsedate_to_datetime
from typing import Any, List, Optional, Type, Union

import dateutil.parser

from awskit.core.exceptions import InvalidArgument
from awskit.utils.strings import to_bytes, to_str

ISO8601 = "%Y-%m-%dT%H:%M:%SZ"
ISO8601_MICRO = "%Y-%m-%dT%H:%M:%S.%fZ"

# default timestamp formats per location of a value
BODY_TIMESTAMP_FORMAT = "unixtimestamp"
HEADER_TIMESTAMP_FORMAT = "rfc822"
QUERY_TIMESTAMP_FORMAT = "iso8601"

TimestampValue = Union[datetime.datetime, int, float, str]


def _to_aware_datetime(value: TimestampValue) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=datetime.timezone.utc)
        return value
    if isinstance(value, (int, float)):
        return datetime.datetime.fromtimestamp(value, tz=datetime.timezone.utc)
    if isinstance(value, str):
        return _to_aware_datetime(dateutil.parser.isoparse(value))
    raise InvalidArgument(f'Invalid timestamp value "{value!r}".')


def _timestamp_iso8601(value: datetime.datetime) -> str:
    value = value.astimezone(datetime.timezone.utc)
    if value.microsecond > 0:
        return value.strftime(ISO8601_MICRO)
    return value.strftime(ISO8601)


def _timestamp_unixtimestamp(value: datetime.datetime) -> Union[int, float]:
    result = value.timestamp()
    return int(result) if result.is_integer() else result


def _timestamp_rfc822(value: datetime.datetime) -> str:
    return formatdate(value.timestamp(), usegmt=True)


_TIMESTAMP_SERIALIZERS = {
    "iso8601": _timestamp_iso8601,
    "unixtimestamp": _timestamp_unixtimestamp,
    "rfc822": _timestamp_rfc822,
}


def serialize_timestamp(
    value: TimestampValue, timestamp_format: Optional[str] = None
) -> Union[int, float, str]:
    """
    Renders a timestamp in the given format (``unixTimestamp``, ``iso8601`` or ``rfc822``, case-insensitive).

    :param value: a datetime (naive datetimes are treated as UTC), an epoch number, or an ISO 8601 string
    :param timestamp_format: the format, defaults to the body default ``unixTimestamp``
    :return: the serialized value
    """
    timestamp_format = (timestamp_format or BODY_TIMESTAMP_FORMAT).lower()
    converter = _TIMESTAMP_SERIALIZERS.get(timestamp_format)
    if converter is None:
        raise InvalidArgument(f'Unknown timestamp format "{timestamp_format}".')
    return converter(_to_aware_datetime(value))


def parse_timestamp(value: Any, timestamp_format: Optional[str] = None) -> datetime.datetime:
    """
    Parses a timestamp as it is returned by a service. Numbers are always treated as epoch seconds, strings are
    parsed according to the format (``rfc822`` for HTTP dates, ISO 8601 otherwise).

    :param value: the raw value from the response
    :param timestamp_format: the modeled timestamp format (if any)
    :return: a timezone-aware datetime
    """
    if isinstance(value, datetime.datetime):
        return _to_aware_datetime(value)
    if isinstance(value, (int, float)):
        return datetime.datetime.fromtimestamp(value, tz=datetime.timezone.utc)

    value = to_str(value).strip()
    if (timestamp_format or "").lower() == "rfc822":
        return _to_aware_datetime(parsedate_to_datetime(value))
    try:
        return datetime.datetime.fromtimestamp(float(value), tz=datetime.timezone.utc)
    except ValueError:
        pass
    return _to_aware_datetime(dateutil.parser.isoparse(value))


def serialize_blob(value: Union[str, bytes]) -> str:
    """Blobs are base64 encoded in JSON documents."""
    return to_str(base64.b64encode(to_bytes(value)))


def parse_blob(value: Union[str, bytes]) -> bytes:
    return base64.b64decode(to_bytes(value))


def ensure_enum(enum_type: Type, value: Any, parameter: str, owner: str) -> Any:
    """
    Makes sure the value is a member of the given generated enum, and returns it unchanged.

    :raises InvalidArgument: if the value is not a valid member of the enum
    """
    if not enum_type.exists(value):
        raise InvalidArgument(
            f'Invalid parameter "{parameter}" for "{owner}". '
            f'The value "{scalar_to_str(value)}" is not a valid "{enum_type.__name__}".'
        )
    return value


def ensure_required(value: Any, parameter: str, owner: str) -> Any:
    """
    Makes sure a required member is set, and returns it unchanged.

    :raises InvalidArgument: if the value is None
    """
    if value is None:
        raise InvalidArgument(
            f'Missing parameter "{parameter}" for "{owner}". The value cannot be null.'
        )
    return value


def scalar_to_str(value: Any, timestamp_format: Optional[str] = None) -> str:
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime.datetime):
        return str(serialize_timestamp(value, timestamp_format or QUERY_TIMESTAMP_FORMAT))
    if isinstance(value, bytes):
        return serialize_blob(value)
    return str(value)


def to_query_value(value: Any, timestamp_format: Optional[str] = None) -> Union[str, List[str]]:
    """
    Renders a querystring member. Lists are rendered as repeated parameters.
    """
    if isinstance(value, (list, tuple)):
        return [scalar_to_str(item, timestamp_format or QUERY_TIMESTAMP_FORMAT) for item in value]
    return scalar_to_str(value, timestamp_format or QUERY_TIMESTAMP_FORMAT)


def to_header_value(value: Any, timestamp_format: Optional[str] = None) -> str:
    """
    Renders a header member. Lists are rendered as comma separated values.
    """
    if isinstance(value, (list, tuple)):
        return ",".join(
            scalar_to_str(item, timestamp_format or HEADER_TIMESTAMP_FORMAT) for item in value
        )
    return scalar_to_str(value, timestamp_format or HEADER_TIMESTAMP_FORMAT)


def parse_boolean(value: Any) -> bool:
    """Booleans in headers are rendered as ``true`` / ``false``."""
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)
