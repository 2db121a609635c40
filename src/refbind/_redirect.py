from __future__ import annotations

import inspect
import logging
import types
from typing import TYPE_CHECKING, Any

from ._errors import RedirectionError


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine, Iterable, Iterator

    from ._container import Container
    from ._ref import Binding


class Redirector:
    """Stand-in for a resolved instance whose class declares ``@ref`` bindings.

    Bound method names are served by coroutine functions that resolve the
    binding's target class and call its method. Every other attribute is read
    from, written to and deleted on the wrapped instance. Plain methods of the
    wrapped class are bound to the wrapper, so `self.read()` inside them is
    redirected too. Common special methods are forwarded explicitly since
    Python looks them up on the type.
    """

    __slots__ = ("_redirector_instance", "_redirector_methods")

    def __init__(self, instance: object, bindings: Iterable[Binding], container: Container) -> None:
        # later bindings for the same source name win
        table = {binding.source: binding for binding in bindings}
        object.__setattr__(self, "_redirector_instance", instance)
        object.__setattr__(
            self,
            "_redirector_methods",
            {name: _redirected_call(binding, container) for name, binding in table.items()},
        )

    @property  # type: ignore[misc]
    def __class__(self) -> type:
        return type(self._redirector_instance)

    def __getattr__(self, name: str) -> Any:
        methods = object.__getattribute__(self, "_redirector_methods")
        if name in methods:
            return methods[name]

        instance = object.__getattribute__(self, "_redirector_instance")
        if name not in getattr(instance, "__dict__", ()):
            try:
                attr = inspect.getattr_static(type(instance), name)
            except AttributeError:
                attr = None
            if inspect.isfunction(attr):
                return types.MethodType(attr, self)
        return getattr(instance, name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self._redirector_instance, name, value)

    def __delattr__(self, name: str) -> None:
        delattr(self._redirector_instance, name)

    def __dir__(self) -> list[str]:
        return sorted(set(dir(self._redirector_instance)) | set(self._redirector_methods))

    def __repr__(self) -> str:
        return repr(self._redirector_instance)

    def __str__(self) -> str:
        return str(self._redirector_instance)

    def __bool__(self) -> bool:
        return bool(self._redirector_instance)

    def __eq__(self, other: object) -> bool:
        return self._redirector_instance == unwrap(other)

    def __hash__(self) -> int:
        return hash(self._redirector_instance)

    def __len__(self) -> int:
        return len(self._redirector_instance)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._redirector_instance)  # type: ignore[call-overload]

    def __contains__(self, item: object) -> bool:
        return item in self._redirector_instance  # type: ignore[operator]

    def __getitem__(self, key: Any) -> Any:
        return self._redirector_instance[key]  # type: ignore[index]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._redirector_instance[key] = value  # type: ignore[index]

    def __delitem__(self, key: Any) -> None:
        del self._redirector_instance[key]  # type: ignore[attr-defined]

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self._redirector_instance(*args, **kwargs)  # type: ignore[operator]

    def __enter__(self) -> Any:
        entered = self._redirector_instance.__enter__()  # type: ignore[attr-defined]
        return self if entered is self._redirector_instance else entered

    def __exit__(self, *exc_info: object) -> Any:
        return self._redirector_instance.__exit__(*exc_info)  # type: ignore[attr-defined]

    async def __aenter__(self) -> Any:
        entered = await self._redirector_instance.__aenter__()  # type: ignore[attr-defined]
        return self if entered is self._redirector_instance else entered

    async def __aexit__(self, *exc_info: object) -> Any:
        return await self._redirector_instance.__aexit__(*exc_info)  # type: ignore[attr-defined]


def unwrap(obj: object) -> object:
    """Return the instance behind a `Redirector`, or `obj` unchanged."""
    if type(obj) is Redirector:
        return obj._redirector_instance  # noqa: SLF001
    return obj


def _redirected_call(binding: Binding, container: Container) -> Callable[..., Coroutine[Any, Any, Any]]:
    async def call(*args: Any, **kwargs: Any) -> Any:
        target = binding.target()
        if inspect.isawaitable(target):
            target = await target

        if not inspect.isclass(target):
            logger.error(
                "Reference for %s.%s did not provide a class: %r",
                binding.owner.__name__,
                binding.source,
                target,
                extra={"context": {"binding": binding, "target": target}},
            )
            msg = f"Reference for {binding.owner.__name__}.{binding.source} did not provide a class (got {target!r})"
            raise RedirectionError(msg)

        instance = container.resolve(target, use_overlay=False, is_root=False)

        method_name = binding.method_name
        method = getattr(instance, method_name, None)
        if not callable(method):
            logger.error(
                "Method %s not found on %s",
                method_name,
                target.__name__,
                extra={"context": {"binding": binding, "target": target, "instance": instance}},
            )
            msg = (
                f"Method {method_name} not found on {target.__name__} "
                f"(referenced by {binding.owner.__name__}.{binding.source})"
            )
            raise RedirectionError(msg)

        logger.debug("Redirecting %s.%s to %s.%s", binding.owner.__name__, binding.source, target.__name__, method_name)
        result = method(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    call.__name__ = binding.source
    call.__qualname__ = f"{binding.owner.__qualname__}.{binding.source}"
    return call
