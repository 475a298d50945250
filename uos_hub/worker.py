"""The state a provider keeps between requests and the events it publishes."""

from __future__ import annotations

import asyncio
import copy
import weakref
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Optional

from .definition_validation import InvalidProviderDefinitionError
from .errors import (
    AddVariablesError,
    AlreadySubscribedError,
    RemoveVariablesError,
    TypeMismatchError,
    UnknownSubscriptionVariableError,
    UpdateVariableValuesError,
    VariableNotFoundError,
)
from .model import (
    ProviderDefinition,
    ProviderDefinitionState,
    Timestamp,
    Variable,
    VariableAccessType,
    VariableState,
    VariableWriteCommand,
    calc_variables_hash,
    infer_data_type,
)
from .provider_builder import validate_var_list


@dataclass(frozen=True)
class VariablesChanged:
    """A list of variables with the fingerprint it is based on."""

    fingerprint: int
    variables: tuple
    base_timestamp: Timestamp = field(default_factory=Timestamp.now)


@dataclass(frozen=True)
class DefinitionChanged:
    """A new provider definition; None unregisters the provider."""

    definition: Optional[ProviderDefinition]


Publisher = Callable[[object], None]


def _same_kind(old: object, new: object) -> bool:
    try:
        return infer_data_type(old) is infer_data_type(new)
    except TypeError:
        return False


class ProviderWorker:
    """Holds the variables of a provider and publishes changes to them.

    Every event goes to the publish callable, which receives
    DefinitionChanged and VariablesChanged objects.
    """

    def __init__(self, variables: Mapping[int, Variable], publish: Publisher) -> None:
        self._variables: dict[int, Variable] = {
            variable_id: copy.deepcopy(variable)
            for variable_id, variable in variables.items()
        }
        self._publish = publish
        self._fingerprint = calc_variables_hash(self._variables)
        self._notifiers: list[tuple[frozenset, weakref.ReferenceType]] = []

    @property
    def fingerprint(self) -> int:
        """The fingerprint of the current provider definition."""
        return self._fingerprint

    def _sorted(self, ids: Optional[Iterable[int]] = None) -> tuple:
        if ids is None:
            chosen = sorted(self._variables)
        else:
            chosen = sorted({i for i in ids if i in self._variables})
        return tuple(copy.deepcopy(self._variables[i]) for i in chosen)

    def definition(self) -> ProviderDefinition:
        """Return the provider definition announced to the registry."""
        return ProviderDefinition(
            fingerprint=self._fingerprint,
            variable_definitions=[
                self._variables[i].to_definition() for i in sorted(self._variables)
            ],
            state=ProviderDefinitionState.UNSPECIFIED,
        )

    def register(self) -> None:
        """Recompute the fingerprint and publish the current definition."""
        self._fingerprint = calc_variables_hash(self._variables)
        self._publish(DefinitionChanged(self.definition()))

    def unregister(self) -> None:
        """Publish an empty definition, which unregisters the provider."""
        self._publish(DefinitionChanged(None))

    def _publish_updates(self, ids: Optional[Iterable[int]]) -> None:
        self._publish(VariablesChanged(self._fingerprint, self._sorted(ids)))

    def add_variables(self, variables: Iterable[Variable]) -> None:
        """Add or replace variables, republish the definition and their values."""
        new_variables = list(variables)
        try:
            validate_var_list(self._variables, new_variables)
        except InvalidProviderDefinitionError as error:
            raise AddVariablesError(f"Invalid merged variable list: `{error}`") from error

        for variable in new_variables:
            self._variables[variable.id] = copy.deepcopy(variable)

        try:
            self.register()
        except Exception as error:
            raise AddVariablesError(
                f"Error while sending the provider definition: `{error}`"
            ) from error
        try:
            self._publish_updates(variable.id for variable in new_variables)
        except Exception as error:
            raise AddVariablesError(f"Nats error: `{error}`") from error

    def remove_variables(self, variables: Iterable[Variable]) -> None:
        """Remove variables, ignoring unknown ids, and republish the definition."""
        for variable in variables:
            self._variables.pop(variable.id, None)
        try:
            self.register()
        except Exception as error:
            raise RemoveVariablesError(
                f"Error while sending the provider definition: `{error}`"
            ) from error

    def update_variable_states(self, states: Iterable[VariableState]) -> None:
        """Replace variable states and publish them.

        Nothing changes if any state names an unknown variable or a value of
        another type.
        """
        new_states = list(states)
        for state in new_states:
            current = self._variables.get(state.id)
            if current is None:
                raise VariableNotFoundError(f"Variable with ID {state.id}")
            if not _same_kind(current.state.value, state.value):
                raise TypeMismatchError(current.key)

        for state in new_states:
            self._variables[state.id].state = copy.deepcopy(state)

        try:
            self._publish_updates(state.id for state in new_states)
        except Exception as error:
            raise UpdateVariableValuesError(f"Nats error: `{error}`") from error

    def _live_notifiers(self) -> list:
        self._notifiers = [(ids, ref) for ids, ref in self._notifiers if ref() is not None]
        return self._notifiers

    def subscribe(self, variables: Iterable[Variable]) -> asyncio.Queue:
        """Return a queue that receives write commands for the given variables.

        A variable can be held by one live subscription only; a subscription
        ends when its queue is no longer referenced.
        """
        wanted = list(variables)
        notifiers = self._live_notifiers()
        for variable in wanted:
            if variable.id not in self._variables:
                raise UnknownSubscriptionVariableError(variable.key)
            if any(variable.id in ids for ids, _ in notifiers):
                raise AlreadySubscribedError(variable.key)

        queue: asyncio.Queue = asyncio.Queue()
        self._notifiers.append(
            (frozenset(variable.id for variable in wanted), weakref.ref(queue))
        )
        return queue

    def handle_write(
        self, fingerprint: int, commands: Optional[Iterable[VariableWriteCommand]]
    ) -> list:
        """Forward a consumer's write request to the subscribers.

        Requests based on another fingerprint are ignored, as are commands
        for unknown or read-only variables and commands without a value.
        Returns the commands that were accepted.
        """
        if fingerprint != self._fingerprint or commands is None:
            return []

        accepted = []
        for command in commands:
            current = self._variables.get(command.id)
            if current is None:
                continue
            if current.definition.access_type is VariableAccessType.READ_ONLY:
                continue
            if command.value is None:
                continue
            accepted.append(VariableWriteCommand(current.id, command.value))

        for ids, ref in self._live_notifiers():
            queue = ref()
            if queue is None:
                continue
            items = [command for command in accepted if command.id in ids]
            if items:
                queue.put_nowait(items)
        return accepted

    def read_variables(self, ids: Optional[Iterable[int]] = None) -> VariablesChanged:
        """Return the requested variables (all if ids is None), ordered by id."""
        return VariablesChanged(self._fingerprint, self._sorted(ids))