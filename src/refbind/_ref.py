from __future__ import annotations

import weakref
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    TargetThunk = Callable[[], type | Awaitable[type] | None]


@dataclass(frozen=True)
class Binding:
    """Redirect calls to `owner.source` to `target_method` on the class returned by `target`."""

    owner: type
    source: str
    target: TargetThunk
    target_method: str | None = None

    @property
    def method_name(self) -> str:
        return self.target_method or self.source


class BindingStore:
    """Per-class table of method redirections.

    Keys are classes (held weakly); every instance of a class shares its bindings.
    """

    def __init__(self) -> None:
        self._bindings: weakref.WeakKeyDictionary[type, list[Binding]] = weakref.WeakKeyDictionary()

    def attach(self, owner: type, binding: Binding) -> None:
        self._bindings.setdefault(owner, []).append(binding)

    def lookup(self, owner: type) -> list[Binding]:
        """Bindings for `owner`, base classes first, in attach order."""
        found: list[Binding] = []
        for cls in reversed(owner.__mro__):
            found.extend(self._bindings.get(cls, ()))
        return found

    def clear(self) -> None:
        self._bindings.clear()


bindings = BindingStore()


def bind(
    owner: type,
    source: str,
    target: TargetThunk,
    target_method: str | None = None,
    *,
    store: BindingStore | None = None,
) -> Binding:
    """Attach a redirection for `owner.source` without using the decorator.

    Example:
      bind(UserFacade, "read_one", lambda: ReadOneUserCommand, "execute")

    """
    binding = Binding(owner=owner, source=source, target=target, target_method=target_method)
    (store if store is not None else bindings).attach(owner, binding)
    return binding


class _RefMarker:
    def __init__(self, func: Callable[..., Any], target: TargetThunk, target_method: str | None) -> None:
        self._func = func
        self._target = target
        self._target_method = target_method

    def __set_name__(self, owner: type, name: str) -> None:
        bind(owner, name, self._target, self._target_method)
        # the stub stays on the class so the owner keeps its shape
        setattr(owner, name, self._func)


def ref(target: TargetThunk, target_method: str | None = None) -> Callable[[Callable[..., Any]], Any]:
    """Mark a method stub to be served by a method of another, lazily resolved class.

    `target` is a zero-argument callable returning the class, or an awaitable
    of it (e.g. an async function doing a deferred import). It is only called
    when the decorated method is invoked on a container-resolved instance.
    `target_method` defaults to the decorated method's name.

    Must be applied inside a class body:

      class UserFacade:
          DEPS = []

          @ref(lambda: ReadOneUserCommand, "execute")
          async def read_one(self, user_id: str) -> User:
              raise NotImplementedError

    """

    def decorator(func: Callable[..., Any]) -> Any:
        return _RefMarker(func, target, target_method)

    return decorator
