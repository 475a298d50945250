"""Validation of variable keys and variable definitions."""

from __future__ import annotations

import re

from .model import VariableAccessType, VariableDataType, VariableDefinition

VALID_VARIABLE_KEY_PATTERN = re.compile(
    r"[a-zA-Z_]([a-zA-Z0-9_]{0,62})?(\.[a-zA-Z_]([a-zA-Z0-9_]{0,62})?)*"
)

MAX_KEY_LENGTH = 1023


class InvalidVariableDefinitionError(ValueError):
    """A variable definition or key is invalid."""

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class UnnamedVariableError(InvalidVariableDefinitionError):
    def __init__(self) -> None:
        super().__init__("Unnamed variable")


class InvalidCharactersError(InvalidVariableDefinitionError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"The variable key of `{key}` contains invalid characters")


class TrailingDotError(InvalidVariableDefinitionError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"The variable key of `{key}` contains a trailing '.'")


class UnspecifiedPropertyError(InvalidVariableDefinitionError):
    def __init__(self, property_name: str) -> None:
        self.property_name = property_name
        super().__init__(f"Unspecified property `{property_name}`")


class InvalidLengthError(InvalidVariableDefinitionError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"The the variable key length of `{key}` is invalid")


def validate_variable_key(key: str) -> None:
    """Raise an InvalidVariableDefinitionError if the key is not valid."""
    if not key:
        raise UnnamedVariableError()
    if key.endswith("."):
        raise TrailingDotError(key)
    if len(key) > MAX_KEY_LENGTH:
        raise InvalidLengthError(key)
    if VALID_VARIABLE_KEY_PATTERN.fullmatch(key) is None:
        raise InvalidCharactersError(key)


def validate_variable_definition(definition: VariableDefinition) -> None:
    """Check that access type and data type are set and the key is valid."""
    if definition.access_type is VariableAccessType.UNSPECIFIED:
        raise UnspecifiedPropertyError("access_type")
    if definition.data_type is VariableDataType.UNSPECIFIED:
        raise UnspecifiedPropertyError("data_type")
    validate_variable_key(definition.key)