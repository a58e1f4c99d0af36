"""
Value types accepted by parameters, their zero values and text converters.

Supported types
- str       → text as written (quotes already stripped by the parser)
- bool      → case-insensitive "true" / "false"
- int       → locale-aware integer (locale.atoi)
- float     → locale-aware decimal (locale.atof)
- datetime  → ISO 8601, the locale's own date/time formats, or a common textual format

Zero values (used when a parameter declares no default)
- "", False, 0, 0.0, datetime.min
"""
import locale
from datetime import date, datetime, time

TYPES = (str, bool, int, float, datetime)

_ZEROS = {
    str: "",
    bool: False,
    int: 0,
    float: 0.0,
    datetime: datetime.min,
}

# Tried in order after ISO 8601 and the locale formats.
_DATETIME_FORMATS = (
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d",
    "%d.%m.%Y %H:%M:%S",
    "%d.%m.%Y",
    "%d %B %Y %H:%M",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y %H:%M",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
)

# Time-only forms resolve to today's date.
_TIME_FORMATS = (
    "%H:%M:%S",
    "%H:%M",
    "%I:%M %p",
)


def zero(type, /):
    """
    return the zero value of a supported type.
    """
    try:
        return _ZEROS[type]
    except KeyError:
        raise TypeError(f"unsupported value type {type!r}") from None


def _to_bool(text):
    match text.strip().lower():
        case "true":
            return True
        case "false":
            return False
    raise ValueError(f"{text!r} is not a valid boolean")


def _to_datetime(text):
    text = text.strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    for format in ("%c", "%x %X", "%x", *_DATETIME_FORMATS):
        try:
            return datetime.strptime(text, format)
        except ValueError:
            continue

    for format in _TIME_FORMATS:
        try:
            return datetime.combine(date.today(), datetime.strptime(text, format).time())
        except ValueError:
            continue

    raise ValueError(f"{text!r} is not a recognized date/time")


def convert(text, type, /):
    """
    convert a raw text value to the given supported type.

    raises
    - ValueError when the text does not represent a value of that type.
    - TypeError when the type is not supported.
    """
    if type is str:
        return text
    elif type is bool:
        return _to_bool(text)
    elif type is int:
        return locale.atoi(text)
    elif type is float:
        return locale.atof(text)
    elif type is datetime:
        return _to_datetime(text)
    raise TypeError(f"unsupported value type {type!r}")


def coerce(object, type, /):
    """
    coerce a declared default value to the given supported type.

    rules
    - strings go through convert() like input text does.
    - numbers convert between int/float/bool (floats round to the nearest int).
    - dates become midnight datetimes; any other datetime mismatch is a TypeError.
    """
    if isinstance(object, str):
        return convert(object, type)
    if type is datetime:
        if isinstance(object, datetime):
            return object
        if isinstance(object, date):
            return datetime.combine(object, time())
        raise TypeError(f"cannot use {object!r} as a date/time")
    if type is str:
        return str(object)
    if isinstance(object, date):
        raise TypeError(f"cannot use {object!r} as a {type.__name__}")
    if type is int and isinstance(object, float):
        return int(round(object))
    return type(object)


__all__ = (
    "TYPES",
    "zero",
    "convert",
    "coerce",
)
