"""Validation of complete provider definitions."""

from __future__ import annotations

import dataclasses

from .key_validation import InvalidVariableDefinitionError, validate_variable_definition
from .model import ProviderDefinition, ProviderDefinitionState


class InvalidProviderDefinitionError(ValueError):
    """A provider definition is invalid."""

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class DuplicatePathError(InvalidProviderDefinitionError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"The path `{key}` exists several times")


class AddToLeafNodeError(InvalidProviderDefinitionError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"The path `{key}` is added to a leaf node and not a folder")


class InvalidVariableInDefinitionError(InvalidProviderDefinitionError):
    def __init__(self, error: InvalidVariableDefinitionError) -> None:
        self.error = error
        super().__init__(f"Invalid variable definition: `{error}`")


class DuplicateIdError(InvalidProviderDefinitionError):
    def __init__(self, variable_id: int) -> None:
        self.id = variable_id
        super().__init__(f"The id `{variable_id}` is duplicated")


def parent_paths(key: str) -> list[str]:
    """Return every parent path of a dotted key, outermost first.

    "a.b.c" gives ["a", "a.b"]; a key without dots gives [].
    """
    parts = key.split(".")
    return [".".join(parts[:end]) for end in range(1, len(parts))]


def validate_provider_definition(definition: ProviderDefinition) -> None:
    """Raise an InvalidProviderDefinitionError if the definition is not valid.

    Checks that every variable definition is valid, that ids and keys are
    unique and that no variable is placed below another variable.
    """
    variable_definitions = definition.variable_definitions
    if variable_definitions is None:
        return

    seen_ids: set[int] = set()
    seen_paths: set[str] = set()

    for variable in variable_definitions:
        try:
            validate_variable_definition(variable)
        except InvalidVariableDefinitionError as error:
            raise InvalidVariableInDefinitionError(error) from error

        if variable.id in seen_ids:
            raise DuplicateIdError(variable.id)
        seen_ids.add(variable.id)

        if variable.key in seen_paths:
            raise DuplicatePathError(variable.key)
        seen_paths.add(variable.key)

    # Run after all other checks so collisions are found regardless of order.
    for variable in variable_definitions:
        if any(parent in seen_paths for parent in parent_paths(variable.key)):
            raise AddToLeafNodeError(variable.key)


class ValidProviderDefinition:
    """A provider definition that has passed validation, with its state set to OK."""

    __slots__ = ("definition",)

    def __init__(self, definition: ProviderDefinition) -> None:
        validate_provider_definition(definition)
        self.definition = dataclasses.replace(
            definition, state=ProviderDefinitionState.OK
        )

    def __repr__(self) -> str:
        return f"ValidProviderDefinition({self.definition!r})"