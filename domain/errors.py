"""
Exception hierarchy.

Losing a hand or a body for a frame is *not* an error; those are ordinary
state transitions handled by the session.
"""


class TryOnError(Exception):
    """Base class for every error raised by this project."""


class ConfigError(TryOnError):
    """Invalid configuration file or value."""


class PerceptionInitError(TryOnError):
    """
    The camera or a landmark detector could not be started.

    Fatal for the manipulation pipeline: no frames will ever arrive.
    Raised once, never retried internally.
    """
