"""Core data types shared by providers: enums, values, definitions and variables."""

from __future__ import annotations

import dataclasses
import hashlib
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union

_NANOS_PER_SECOND = 1_000_000_000


class VariableDataType(str, Enum):
    """Data type of a variable value."""

    UNSPECIFIED = "UNSPECIFIED"
    BOOLEAN = "BOOLEAN"
    DURATION = "DURATION"
    FLOAT64 = "FLOAT64"
    INT64 = "INT64"
    STRING = "STRING"
    TIMESTAMP = "TIMESTAMP"


class VariableAccessType(str, Enum):
    """How consumers may access a variable."""

    UNSPECIFIED = "UNSPECIFIED"
    READ_ONLY = "READ_ONLY"
    READ_WRITE = "READ_WRITE"


class VariableQuality(str, Enum):
    """Quality of a variable value."""

    BAD = "BAD"
    UNCERTAIN = "UNCERTAIN"
    UNCERTAIN_INITIAL_VALUE = "UNCERTAIN_INITIAL_VALUE"
    GOOD = "GOOD"


class ProviderDefinitionState(str, Enum):
    """Validation state of a provider definition as reported by the registry."""

    UNSPECIFIED = "UNSPECIFIED"
    OK = "OK"
    INVALID = "INVALID"


@dataclass(frozen=True, order=True)
class Timestamp:
    """A point in time as seconds and nanoseconds since the Unix epoch."""

    seconds: int = 0
    nanos: int = 0

    @classmethod
    def now(cls) -> "Timestamp":
        """Return the current wall-clock time."""
        seconds, nanos = divmod(time.time_ns(), _NANOS_PER_SECOND)
        return cls(seconds, nanos)


@dataclass(frozen=True, order=True)
class Duration:
    """A span of time as seconds and nanoseconds."""

    seconds: int = 0
    nanos: int = 0


VariableValue = Union[bool, int, float, str, Timestamp, Duration]


def infer_data_type(value: Any) -> VariableDataType:
    """Return the data type that matches a variable value.

    Raises TypeError for values that cannot be held by a variable.
    """
    if isinstance(value, bool):
        return VariableDataType.BOOLEAN
    if isinstance(value, int):
        return VariableDataType.INT64
    if isinstance(value, float):
        return VariableDataType.FLOAT64
    if isinstance(value, str):
        return VariableDataType.STRING
    if isinstance(value, Timestamp):
        return VariableDataType.TIMESTAMP
    if isinstance(value, Duration):
        return VariableDataType.DURATION
    raise TypeError(f"unsupported variable value: {value!r}")


def value_to_json(value: Any) -> Any:
    """Convert a variable value into a JSON-compatible object."""
    kind = infer_data_type(value)
    if kind in (VariableDataType.TIMESTAMP, VariableDataType.DURATION):
        return {"seconds": value.seconds, "nanos": value.nanos}
    return value


@dataclass(frozen=True)
class VariableDefinition:
    """The static description of a variable."""

    key: str
    id: int
    data_type: VariableDataType = VariableDataType.UNSPECIFIED
    access_type: VariableAccessType = VariableAccessType.UNSPECIFIED
    experimental: bool = False

    def to_dict(self) -> dict:
        """Serialise the type information of the definition."""
        return {
            "data_type": self.data_type.value,
            "access_type": self.access_type.value,
        }


@dataclass
class ProviderDefinition:
    """The full set of variable definitions a provider announces."""

    fingerprint: int = 0
    variable_definitions: Optional[list] = None
    state: ProviderDefinitionState = ProviderDefinitionState.UNSPECIFIED


@dataclass
class VariableState:
    """The mutable state (value, quality, timestamp) of a provider variable."""

    id: int
    value: Any
    quality: VariableQuality = VariableQuality.GOOD
    timestamp: Optional[Timestamp] = field(default_factory=Timestamp.now)

    def set_value(self, value: Any) -> None:
        """Set the value and refresh the timestamp."""
        self.value = value
        self.timestamp = Timestamp.now()

    def set_quality(self, quality: VariableQuality) -> None:
        """Set the quality and refresh the timestamp."""
        self.quality = quality
        self.timestamp = Timestamp.now()

    def set_all(
        self, value: Any, quality: VariableQuality, timestamp: Optional[Timestamp]
    ) -> None:
        """Set every property explicitly.

        A timestamp of None makes the variable inherit the timestamp of the
        variable list it is delivered in.
        """
        self.value = value
        self.quality = quality
        self.timestamp = timestamp


@dataclass
class Variable:
    """A variable: its definition together with its current state."""

    state: VariableState
    definition: VariableDefinition

    @property
    def id(self) -> int:
        return self.definition.id

    @property
    def key(self) -> str:
        return self.definition.key

    def to_definition(self) -> VariableDefinition:
        """Return the definition of this variable as announced to the registry."""
        return dataclasses.replace(self.definition)


@dataclass(frozen=True)
class VariableWriteCommand:
    """A consumer's request to change the value of a variable."""

    id: int
    value: Any


def calc_variables_hash(variables: Mapping[int, Variable]) -> int:
    """Compute a 64-bit fingerprint over the variable definitions.

    Values do not contribute, only their type, so the fingerprint changes
    only when the provider definition changes.
    """
    hasher = hashlib.blake2b(digest_size=8)
    for _, variable in sorted(variables.items(), key=lambda item: item[0]):
        definition = variable.definition
        kind = infer_data_type(variable.state.value)
        record = (
            definition.key,
            definition.access_type.value,
            definition.id,
            definition.experimental,
            kind.value,
        )
        hasher.update(repr(record).encode("utf-8"))
    return int.from_bytes(hasher.digest(), "little")