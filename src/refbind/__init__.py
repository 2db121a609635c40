"""Minimal dependency injection with deferred method redirection.

This package provides a small dependency injection container for Python.
Classes declare their constructor dependencies in a ``DEPS`` class attribute
and are built recursively; tokens map to pre-built values. Method stubs
decorated with ``@ref`` are served, at call time, by a method of another
class resolved through the same container (optionally imported lazily).

Exports:
- `Container`: registry and recursive resolver, with mock overlays for tests.
- `Token`: opaque key for values the container does not build.
- `ref` / `bind`: declare a method redirection on a class.
- `BindingStore`, `Binding`: the per-class table of redirections.
- `unwrap`: get the plain instance behind a redirecting wrapper.
- `Command`, `CommandFacade`, `CONTAINER`: run unit-of-work commands resolved
  from the container.
- `ConfigurationError`, `ResolutionError`, `RedirectionError`: error types,
  all subclasses of `RefbindError`.
"""

from ._command import CONTAINER, Command, CommandFacade
from ._container import DEPS_ATTR, Container, Token
from ._errors import ConfigurationError, RedirectionError, RefbindError, ResolutionError
from ._redirect import Redirector, unwrap
from ._ref import Binding, BindingStore, bind, bindings, ref


__all__ = [
    "CONTAINER",
    "DEPS_ATTR",
    "Binding",
    "BindingStore",
    "Command",
    "CommandFacade",
    "ConfigurationError",
    "Container",
    "RedirectionError",
    "Redirector",
    "RefbindError",
    "ResolutionError",
    "Token",
    "bind",
    "bindings",
    "ref",
    "unwrap",
]
