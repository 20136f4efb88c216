"""Exceptions raised by the scoring package."""


class ReverseSingingError(Exception):
    """Base class for errors raised by :mod:`reversesinging`."""


class DecodeError(ReverseSingingError):
    """Raised when an audio source cannot be decoded or contains no frames."""


class ConfigError(ReverseSingingError, ValueError):
    """Raised when scoring configuration is malformed or out of range."""
