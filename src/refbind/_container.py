from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any, TypeVar, overload

from ._errors import ConfigurationError, ResolutionError
from ._redirect import Redirector
from ._ref import bindings as default_bindings


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Hashable

    from ._ref import BindingStore

    T = TypeVar("T")

    Identifier = type[T] | Hashable

DEPS_ATTR = "DEPS"


class Token:
    """Opaque registry key for a value the container does not build.

    Tokens compare and hash by identity, so two tokens with the same name
    are still distinct keys.
    """

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"Token({self.name!r})"


def is_constructible(identifier: object) -> bool:
    """Classes are built by the container; everything else is a token."""
    return inspect.isclass(identifier)


def _validate_deps(identifier: type) -> None:
    deps = getattr(identifier, DEPS_ATTR, None)
    if not isinstance(deps, (list, tuple)):
        msg = f"Class {identifier.__name__} has no list/tuple class attribute {DEPS_ATTR}"
        raise ConfigurationError(msg)


class Container:
    """Minimal DI container.

    - register tokens (pre-built values) or classes declaring ``DEPS``
    - resolve with positional constructor injection, recursively
    - register mocks for test isolation
    - ``@ref`` method redirection on resolved instances.
    """

    def __init__(self, *, bindings: BindingStore | None = None) -> None:
        self._registrations: dict[Any, Any] = {}
        self._bindings = bindings if bindings is not None else default_bindings

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._registrations

    def __len__(self) -> int:
        return len(self._registrations)

    def register(self, identifier: Identifier[T], value: object = None) -> None:
        """Register a token value or a class.

        Example:
          container.register(ENV, {"env": "dev"})
          container.register(Service)

        Classes are stored as their own descriptor and `value` is ignored.
        """
        if not is_constructible(identifier):
            self._registrations[identifier] = value
            return

        _validate_deps(identifier)
        self._registrations[identifier] = identifier

    def register_mock(self, identifier: Identifier[T], value: object = None) -> None:
        """Register `value` in place of `identifier` (always stored as-is).

        Nested resolutions made with ``use_overlay=True`` return the mock
        instead of constructing the class.
        """
        if is_constructible(identifier):
            _validate_deps(identifier)

        self._registrations[identifier] = value

    def clear(self) -> None:
        self._registrations.clear()

    @overload
    def resolve(
        self,
        identifier: type[T],
        use_overlay: bool = ...,  # noqa: FBT001
        is_root: bool = ...,  # noqa: FBT001
    ) -> T | None: ...

    @overload
    def resolve(
        self,
        identifier: object,
        use_overlay: bool = ...,  # noqa: FBT001
        is_root: bool = ...,  # noqa: FBT001
    ) -> Any: ...

    def resolve(
        self,
        identifier: Any,
        use_overlay: bool = False,  # noqa: FBT001, FBT002
        is_root: bool = True,  # noqa: FBT001, FBT002
    ) -> Any:
        """Resolve the identifier to a value or a fresh instance.

        - Registered tokens return their stored value.
        - Unregistered root lookups return None; unregistered nested classes
          are registered on the fly, unregistered nested tokens raise.
        - With `use_overlay`, nested dependencies registered through
          `register_mock` are returned as-is.
        """
        if not is_constructible(identifier) and identifier in self._registrations:
            return self._registrations[identifier]

        if identifier not in self._registrations:
            if is_root:
                return None
            if not is_constructible(identifier):
                logger.error(
                    "Unable to resolve unregistered token %r",
                    identifier,
                    extra={"context": {"identifier": identifier}},
                )
                msg = f"Unable to resolve service: no value registered for {identifier!r}"
                raise ResolutionError(msg)
            logger.debug("Auto-registering nested dependency %r", identifier)
            self._registrations[identifier] = identifier

        descriptor = self._registrations[identifier]
        if descriptor is None:
            return None

        if not is_root and use_overlay and descriptor is not identifier:
            return descriptor

        params = [
            self.resolve(dep, use_overlay, is_root=False) for dep in getattr(descriptor, DEPS_ATTR, None) or ()
        ]

        try:
            instance = descriptor(*params)
        except Exception as exc:
            logger.error(  # noqa: TRY400
                "Unable to resolve %r: %s",
                descriptor,
                exc,
                extra={"context": {"descriptor": descriptor, "params": params, "cause": exc}},
            )
            msg = f"Unable to resolve service: {descriptor!r}"
            raise ResolutionError(msg) from exc

        owner_bindings = self._bindings.lookup(type(instance))
        if owner_bindings:
            return Redirector(instance, owner_bindings, self)

        return instance
