"""Errors raised by a running provider."""

from __future__ import annotations


class ProviderError(Exception):
    """Base class of all errors raised by a running provider."""

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class AddVariablesError(ProviderError):
    """Adding variables to a running provider failed."""


class RemoveVariablesError(ProviderError):
    """Removing variables from a running provider failed."""


class UpdateVariableValuesError(ProviderError):
    """Updating variable states failed."""


class SubscribeToWriteCommandError(ProviderError):
    """Subscribing to write commands failed."""


class ProviderCrashedError(
    AddVariablesError,
    RemoveVariablesError,
    UpdateVariableValuesError,
    SubscribeToWriteCommandError,
):
    """The background worker is gone; the provider has to be recreated."""

    MESSAGE = "The background thread crashed. You need to recreate the provider."

    def __init__(self) -> None:
        super().__init__(self.MESSAGE)


class TypeMismatchError(UpdateVariableValuesError):
    """A new value does not have the type of the variable."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Wrong value type on `{key}`")


class VariableNotFoundError(UpdateVariableValuesError):
    """A state refers to a variable the provider does not have."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Can't find variable `{name}`")


class AlreadySubscribedError(SubscribeToWriteCommandError):
    """Another subscription already receives write commands for the variable."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(
            f"There is already an active write subscription of the variable `{key}`"
        )


class UnknownSubscriptionVariableError(SubscribeToWriteCommandError):
    """A subscription names a variable the provider does not have."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Can't find variable `{key}`")