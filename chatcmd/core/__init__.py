from .errors import ConfigurationError, DirectoryLookupError
from .time import format_date, format_digit, format_duration, format_time, parse_duration

__all__ = [
    "ConfigurationError",
    "DirectoryLookupError",
    "format_date",
    "format_digit",
    "format_duration",
    "format_time",
    "parse_duration",
]
