"""Builder that creates validated variables."""

from __future__ import annotations

from typing import Any, Optional

from .key_validation import InvalidVariableDefinitionError, validate_variable_key
from .model import (
    Timestamp,
    Variable,
    VariableAccessType,
    VariableDefinition,
    VariableQuality,
    VariableState,
    infer_data_type,
)

_UNSET = object()


class VariableBuildError(ValueError):
    """Building a variable failed; holds the first problem found."""

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class InvalidVariableNameError(VariableBuildError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Invalid variable name `{key}`")


class MissingValueError(VariableBuildError):
    def __init__(self) -> None:
        super().__init__("Missing value")


class InvalidValueError(VariableBuildError):
    def __init__(self) -> None:
        super().__init__("Invalid value")


class InvalidAccessTypeError(VariableBuildError):
    def __init__(self) -> None:
        super().__init__("Invalid access type")


class VariableBuilder:
    """Fluent builder for a Variable with validation of key, access type and value."""

    def __init__(self, id: int, key: str) -> None:
        self._id = id
        self._key = key
        self._access_type: Any = VariableAccessType.READ_ONLY
        self._experimental = False
        self._value: Any = _UNSET
        self._quality = VariableQuality.GOOD
        self._timestamp: Any = _UNSET

    def access_type(self, access_type: VariableAccessType) -> "VariableBuilder":
        """Set how consumers may access the variable (read-only by default)."""
        self._access_type = access_type
        return self

    def experimental(self) -> "VariableBuilder":
        """Mark the variable as experimental (hidden in user interfaces)."""
        self._experimental = True
        return self

    def initial_value(self, value: Any) -> "VariableBuilder":
        """Set the initial value; the data type is inferred from it."""
        self._value = value
        return self

    def initial_quality(self, quality: VariableQuality) -> "VariableBuilder":
        """Set the initial quality (GOOD by default)."""
        self._quality = quality
        return self

    def initial_timestamp(self, timestamp: Optional[Timestamp]) -> "VariableBuilder":
        """Set the initial timestamp; None makes it inherit the list timestamp."""
        self._timestamp = timestamp
        return self

    def build(self) -> Variable:
        """Create the variable or raise a VariableBuildError."""
        try:
            validate_variable_key(self._key)
        except InvalidVariableDefinitionError as error:
            raise InvalidVariableNameError(self._key) from error

        if (
            not isinstance(self._access_type, VariableAccessType)
            or self._access_type is VariableAccessType.UNSPECIFIED
        ):
            raise InvalidAccessTypeError()

        if self._value is _UNSET:
            raise MissingValueError()

        try:
            data_type = infer_data_type(self._value)
        except TypeError as error:
            raise InvalidValueError() from error

        timestamp = Timestamp.now() if self._timestamp is _UNSET else self._timestamp

        return Variable(
            definition=VariableDefinition(
                key=self._key,
                id=self._id,
                data_type=data_type,
                access_type=self._access_type,
                experimental=self._experimental,
            ),
            state=VariableState(
                id=self._id,
                value=self._value,
                quality=self._quality,
                timestamp=timestamp,
            ),
        )