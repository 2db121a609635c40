from __future__ import annotations


class RefbindError(Exception):
    """Base class for every error raised by refbind."""


class ConfigurationError(RefbindError, TypeError):
    """A class was registered without a list/tuple ``DEPS`` attribute."""


class ResolutionError(RefbindError, RuntimeError):
    pass


class RedirectionError(RefbindError, RuntimeError):
    """A ``@ref`` binding could not reach a callable target method."""
