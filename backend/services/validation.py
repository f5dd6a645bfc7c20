"""
validation.py — Field checks shared by the services.
Every check raises errors.ValidationError naming the offending field; nothing
here touches the database.
"""

from datetime import date, datetime

from errors import ValidationError


def require_choice(data: dict, field: str, choices, required: bool = False):
    value = data.get(field)
    if value is None:
        if required:
            raise ValidationError(f"{field} is required", field=field)
        return
    if value not in choices:
        raise ValidationError(f"Invalid {field} value: {value!r}", field=field)


def require_int(data: dict, field: str, minimum: int | None = None, maximum: int | None = None,
                required: bool = False):
    value = data.get(field)
    if value is None:
        if required:
            raise ValidationError(f"{field} is required", field=field)
        return
    # bool is an int subclass; True is not a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer", field=field)
    if minimum is not None and value < minimum:
        raise ValidationError(f"{field} must be at least {minimum}", field=field)
    if maximum is not None and value > maximum:
        raise ValidationError(f"{field} must be at most {maximum}", field=field)


def require_number(data: dict, field: str, minimum: float | None = None, maximum: float | None = None):
    value = data.get(field)
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field} must be a number", field=field)
    if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
        raise ValidationError(f"{field} must be between {minimum} and {maximum}", field=field)


def require_text(data: dict, field: str, max_length: int, min_length: int = 0, required: bool = False):
    value = data.get(field)
    if value is None:
        if required:
            raise ValidationError(f"{field} is required", field=field)
        return
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string", field=field)
    length = len(value.strip())
    if length < min_length:
        raise ValidationError(f"{field} is required", field=field)
    if length > max_length:
        raise ValidationError(f"{field} cannot be more than {max_length} characters", field=field)


def require_bool(data: dict, field: str, required: bool = False):
    value = data.get(field)
    if value is None:
        if required:
            raise ValidationError(f"{field} is required", field=field)
        return
    if not isinstance(value, bool):
        raise ValidationError(f"{field} must be a boolean", field=field)


def require_datetime(data: dict, field: str, required: bool = False) -> datetime | None:
    """Accepts a datetime, a date, or an ISO-8601 string; returns a datetime."""
    value = data.get(field)
    if value is None:
        if required:
            raise ValidationError(f"Please provide a valid {field}", field=field)
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            pass
    raise ValidationError(f"Please provide a valid {field}", field=field)


def reject_unknown(data: dict, allowed) -> None:
    unknown = sorted(set(data) - set(allowed))
    if unknown:
        raise ValidationError(f"Unknown field(s): {', '.join(unknown)}", field=unknown[0])
