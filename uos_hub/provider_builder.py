"""Builder collecting the initial variables of a provider."""

from __future__ import annotations

from typing import Iterable, Mapping

from .definition_validation import (
    InvalidProviderDefinitionError,
    validate_provider_definition,
)
from .model import ProviderDefinition, Variable


class InvalidMergedVariableListError(ValueError):
    """Merging new variables into existing ones gives an invalid definition."""

    def __init__(self, error: InvalidProviderDefinitionError) -> None:
        self.error = error
        super().__init__(f"Invalid merged variable list: `{error}`")

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.error == other.error

    def __hash__(self) -> int:
        return hash((type(self), self.error))


def validate_var_list(
    existing: Mapping[int, Variable], new_variables: Iterable[Variable]
) -> None:
    """Check that merging new variables into existing ones stays valid.

    Raises InvalidProviderDefinitionError when it would not.
    """
    merged = [variable.to_definition() for variable in new_variables]
    merged.extend(
        existing[variable_id].to_definition() for variable_id in sorted(existing)
    )
    validate_provider_definition(ProviderDefinition(variable_definitions=merged))


class ProviderBuilder:
    """Collects the variables a provider starts with."""

    def __init__(self) -> None:
        self._variables: dict[int, Variable] = {}

    @property
    def variables(self) -> dict[int, Variable]:
        """The collected variables, ordered by id."""
        return {variable_id: self._variables[variable_id] for variable_id in sorted(self._variables)}

    def add_variables(self, variables: Iterable[Variable]) -> "ProviderBuilder":
        """Add variables, raising InvalidMergedVariableListError if the result is invalid."""
        new_variables = list(variables)
        try:
            validate_var_list(self._variables, new_variables)
        except InvalidProviderDefinitionError as error:
            raise InvalidMergedVariableListError(error) from error
        self._variables.update((variable.id, variable) for variable in new_variables)
        return self