"""Exceptions raised by the lazykv engine."""


class LazyKVError(Exception):
    """Base class for every error raised by lazykv."""


class ItemNotFound(LazyKVError, LookupError):
    """Raised when a key or position is not present in a sequence."""


class NoMoreItems(LazyKVError):
    """Raised by an iterate() step function to end the generated sequence.

    This is a control signal, not an error: iterate() catches it and stops.
    """


class InvalidInputKind(LazyKVError, TypeError):
    """Raised when a value cannot be adapted into a sequence."""

    def __init__(self, value, reason=None):
        self.value = value
        message = f"Cannot build a sequence from {type(value).__name__!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
