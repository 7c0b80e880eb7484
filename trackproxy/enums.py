"""Enums module for TrackProxy.

Contains all enumeration classes used throughout the application.
"""

from enum import StrEnum


class ErrorCategory(StrEnum):
    """Categories an upstream error signal is classified into."""
    Busy = "BUSY"
    Unavailable = "UNAVAILABLE"
    Down = "DOWN"
    Empty = "EMPTY"
    Parser = "PARSER"
    NoData = "NO_DATA"


class MessageLocale(StrEnum):
    """Languages available for user-facing error messages."""
    English = "en"
    Portuguese = "pt"


class CacheStatus(StrEnum):
    """Values of the ``X-Cache`` response header."""
    Hit = "HIT"
    Miss = "MISS"
