"""
Request payload helpers shared by the API blueprints.
"""

from datetime import datetime, timezone

from flask import request


class PayloadError(ValueError):
    """A request field failed validation; the message is returned to the client."""
    pass


def json_body():
    """The request's JSON body if it is an object, else None."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def parse_datetime(value, field_name):
    """
    Parse an ISO 8601 string into an aware UTC datetime.

    Accepts a trailing 'Z'. Naive values are taken as UTC. None and empty
    strings parse to None.

    Raises:
        PayloadError: If the value is not a valid ISO datetime string
    """
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        raise PayloadError(f'{field_name} must be an ISO 8601 datetime string')

    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        raise PayloadError(f'{field_name} must be an ISO 8601 datetime string')

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_enum(value, enum_cls, field_name):
    """
    Validate that a value is one of an enum's values.

    Returns:
        The (string) value

    Raises:
        PayloadError: If the value is not a member value
    """
    valid = [member.value for member in enum_cls]
    if value not in valid:
        raise PayloadError(f"Invalid {field_name}: {value}. Valid values: {', '.join(valid)}")
    return value


def parse_int(value, field_name, minimum=None):
    """
    Validate an integer field (booleans are rejected).

    Raises:
        PayloadError: If the value is not an int or is below ``minimum``
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise PayloadError(f'{field_name} must be an integer')
    if minimum is not None and value < minimum:
        raise PayloadError(f'{field_name} must be at least {minimum}')
    return value


def parse_bool(value, field_name):
    """
    Validate a boolean field.

    Raises:
        PayloadError: If the value is not a bool
    """
    if not isinstance(value, bool):
        raise PayloadError(f'{field_name} must be a boolean')
    return value


def parse_string(value, field_name, max_length, required=False):
    """
    Validate a string field.

    Raises:
        PayloadError: If missing when required, not a string, or too long
    """
    if value is None or value == '':
        if required:
            raise PayloadError(f'{field_name} is required')
        return None
    if not isinstance(value, str) or len(value) > max_length:
        raise PayloadError(f'{field_name} must be a string with max {max_length} characters')
    return value


def check_window(start, end, start_name, end_name):
    """
    Ensure a start/end pair is ordered.

    Raises:
        PayloadError: If both are set and start is after end
    """
    if start and end and start > end:
        raise PayloadError(f'{start_name} must be before {end_name}')
