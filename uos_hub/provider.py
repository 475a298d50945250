"""A running provider: a handle that serialises requests to its worker."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Iterable, Optional

from .errors import ProviderCrashedError
from .model import Variable, VariableState, VariableWriteCommand
from .provider_builder import ProviderBuilder
from .worker import ProviderWorker, Publisher, VariablesChanged

_CLOSE = object()


class Provider:
    """Handle of a registered provider.

    Requests are queued and carried out one after another by a background
    task that owns the worker. Once that task is gone, every request raises
    ProviderCrashedError. Create it with start_provider().
    """

    def __init__(self, worker: ProviderWorker) -> None:
        self._worker = worker
        self._commands: asyncio.Queue = asyncio.Queue()
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def __aenter__(self) -> "Provider":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _run(self) -> None:
        while True:
            action, future = await self._commands.get()
            if action is _CLOSE:
                try:
                    self._worker.unregister()
                except Exception as error:
                    if not future.done():
                        future.set_exception(error)
                else:
                    if not future.done():
                        future.set_result(None)
                return
            try:
                result = action()
            except Exception as error:
                if not future.done():
                    future.set_exception(error)
            else:
                if not future.done():
                    future.set_result(result)

    async def _call(self, action: Any) -> Any:
        if self._task.done():
            raise ProviderCrashedError()
        future = asyncio.get_running_loop().create_future()
        await self._commands.put((action, future))
        await asyncio.wait({future, self._task}, return_when=asyncio.FIRST_COMPLETED)
        if not future.done():
            future.cancel()
            raise ProviderCrashedError()
        return future.result()

    async def add_variables(self, variables: Iterable[Variable]) -> None:
        """Add variables, replacing those with the same id, and re-register."""
        new_variables = list(variables)
        await self._call(lambda: self._worker.add_variables(new_variables))

    async def remove_variables(self, variables: Iterable[Variable]) -> None:
        """Remove variables (unknown ids are ignored) and re-register."""
        old_variables = list(variables)
        await self._call(lambda: self._worker.remove_variables(old_variables))

    async def update_variable_states(self, states: Iterable[VariableState]) -> None:
        """Replace the states of existing variables and publish them."""
        new_states = list(states)
        await self._call(lambda: self._worker.update_variable_states(new_states))

    async def subscribe_to_write_command(
        self, variables: Iterable[Variable]
    ) -> asyncio.Queue:
        """Return a queue receiving lists of write commands for the variables.

        Only one subscription per variable may be alive at a time.
        """
        wanted = list(variables)
        return await self._call(lambda: self._worker.subscribe(wanted))

    async def write(
        self, fingerprint: int, commands: Optional[Iterable[VariableWriteCommand]]
    ) -> list:
        """Deliver a consumer's write request; return the accepted commands."""
        items = None if commands is None else list(commands)
        return await self._call(lambda: self._worker.handle_write(fingerprint, items))

    async def read_variables(self, ids: Optional[Iterable[int]] = None) -> VariablesChanged:
        """Answer a read query with the cached variables, all of them if ids is None."""
        wanted = None if ids is None else list(ids)
        return await self._call(lambda: self._worker.read_variables(wanted))

    async def close(self) -> None:
        """Unregister the provider and stop its background task."""
        if self._task.done():
            return
        future = asyncio.get_running_loop().create_future()
        await self._commands.put((_CLOSE, future))
        await asyncio.wait({future, self._task}, return_when=asyncio.ALL_COMPLETED)
        future.result()


async def start_provider(builder: ProviderBuilder, publish: Publisher) -> Provider:
    """Register the builder's variables and return a running Provider.

    publish receives every DefinitionChanged and VariablesChanged event.
    """
    worker = ProviderWorker(builder.variables, publish)
    worker.register()
    return Provider(worker)


PublishCallable = Callable[[object], None]