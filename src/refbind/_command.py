from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypeVar

from ._container import Token
from ._errors import ResolutionError


if TYPE_CHECKING:
    from ._container import Container

TI = TypeVar("TI", contravariant=True)
TO = TypeVar("TO", covariant=True)

CONTAINER = Token("refbind.container")


class Command(Protocol[TI, TO]):
    """A unit of work: one async operation, one input, one output."""

    async def execute(self, input: TI) -> TO: ...  # noqa: A002


class CommandFacade:
    """Resolve command classes from the container and run them.

    The container must be registered under `CONTAINER`:

      container.register(CONTAINER, container)
      facade = container.resolve(CommandFacade)
      user = await facade.execute(ReadOneUserCommand, "42")

    """

    DEPS = [CONTAINER]

    def __init__(self, container: Container) -> None:
        self._container = container

    async def execute(self, command_type: type[Command[Any, Any]], input: Any) -> Any:  # noqa: A002
        command = self._container.resolve(command_type)
        if command is None:
            msg = f"No registration found for command: {command_type.__name__}"
            raise ResolutionError(msg)
        return await command.execute(input)
