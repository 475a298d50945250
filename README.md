# uos_hub

Provider-side building blocks for a u-OS Data Hub client:

- `uos_hub.model` – enums (`VariableDataType`, `VariableAccessType`,
  `VariableQuality`, `ProviderDefinitionState`), the `Timestamp` and
  `Duration` value types, `VariableDefinition`, `ProviderDefinition`,
  `VariableState`, `Variable`, `VariableWriteCommand`, plus
  `infer_data_type`, `value_to_json` and `calc_variables_hash`.
- `uos_hub.key_validation` – `validate_variable_key` and
  `validate_variable_definition`.
- `uos_hub.definition_validation` – `validate_provider_definition`,
  `parent_paths` and `ValidProviderDefinition`.
- `uos_hub.variable_builder` – `VariableBuilder`.
- `uos_hub.provider_builder` – `ProviderBuilder` and `validate_var_list`.
- `uos_hub.worker` – `ProviderWorker` and the `DefinitionChanged` /
  `VariablesChanged` events.
- `uos_hub.provider` – the asyncio `Provider` handle and `start_provider`.
- `uos_hub.errors` – the errors a running provider raises.

There are no third-party dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Building variables

```python
from uos_hub.model import VariableAccessType
from uos_hub.variable_builder import VariableBuilder

ro_int = VariableBuilder(300, "my_folder.ro_int").initial_value(1000).build()

rw_string = (
    VariableBuilder(200, "my_folder.rw_string")
    .initial_value("write me!")
    .access_type(VariableAccessType.READ_WRITE)
    .build()
)
```

The data type is inferred from the initial value: `bool`, `int`, `float`,
`str`, `Timestamp` or `Duration`. By default a variable is read-only, of
`GOOD` quality and stamped with `Timestamp.now()`. `experimental()`,
`initial_quality()` and `initial_timestamp()` change those defaults;
`initial_timestamp(None)` leaves the variable without its own timestamp.

`build()` raises a `VariableBuildError` subclass:
`InvalidVariableNameError`, `InvalidAccessTypeError` (also for
`UNSPECIFIED`), `MissingValueError` or `InvalidValueError`.

### Variable keys

Keys are dot-separated paths. Each segment starts with a letter or an
underscore and holds at most 63 characters from `a-z`, `A-Z`, `0-9` and `_`;
the whole key is at most 1023 characters long. `validate_variable_key`
raises `UnnamedVariableError`, `TrailingDotError`, `InvalidLengthError` or
`InvalidCharactersError`, all subclasses of `InvalidVariableDefinitionError`.
`validate_variable_definition` additionally raises
`UnspecifiedPropertyError` when the access type or data type is
`UNSPECIFIED`.

## Assembling a provider

```python
from uos_hub.provider_builder import ProviderBuilder

builder = ProviderBuilder().add_variables([ro_int, rw_string])
```

`add_variables` validates the merged list and raises
`InvalidMergedVariableListError` (its `error` attribute holds the cause) on
duplicate ids (`DuplicateIdError`), duplicate keys (`DuplicatePathError`), an
invalid variable (`InvalidVariableInDefinitionError`) or a variable placed
below another variable instead of a folder (`AddToLeafNodeError`).

## Running a provider

`start_provider` must be awaited inside a running event loop. It takes the
builder and a plain (non-async) `publish` callable, publishes the initial
`DefinitionChanged` event and returns a `Provider`. `publish` is then called
with every `DefinitionChanged` and `VariablesChanged` event.

```python
import asyncio

from uos_hub.provider import start_provider


def publish(event):
    print(event)


async def main():
    async with await start_provider(builder, publish) as provider:
        writes = await provider.subscribe_to_write_command([rw_string])

        state = ro_int.state
        state.set_value(1001)
        await provider.update_variable_states([state])

        fingerprint = (await provider.read_variables()).fingerprint
        await provider.write(fingerprint, [VariableWriteCommand(200, "hello")])
        print(await writes.get())


asyncio.run(main())
```

(`VariableWriteCommand` comes from `uos_hub.model`.)

- `add_variables` / `remove_variables` change the definition, recompute the
  fingerprint and publish a new `DefinitionChanged`; `add_variables` also
  publishes the new variables' values.
- `update_variable_states` replaces states and publishes them. It raises
  `VariableNotFoundError` for an unknown id and `TypeMismatchError` when the
  value type differs; in either case nothing is changed.
- `subscribe_to_write_command` returns an `asyncio.Queue` that receives lists
  of `VariableWriteCommand`. A variable can belong to one live subscription
  only (`AlreadySubscribedError`); unknown variables raise
  `UnknownSubscriptionVariableError`. A subscription ends once its queue is no
  longer referenced.
- `write` forwards a consumer request and returns the accepted commands. It
  is ignored when the fingerprint is stale; commands for unknown or read-only
  variables, or without a value, are dropped.
- `read_variables` returns a `VariablesChanged` with the requested variables
  (all when `ids` is `None`), ordered by id.
- `close` (or leaving the `async with` block) publishes
  `DefinitionChanged(None)` and stops the background task. Afterwards every
  request raises `ProviderCrashedError`.

`ProviderWorker` can also be used directly, without asyncio tasks, when you
want to drive it synchronously.

## What this package does not do

The package does not connect to a message server, authenticate, or encode
events into a wire format. It hands `DefinitionChanged` and `VariablesChanged`
objects to your `publish` callable and expects incoming write and read
requests to be passed in through `Provider.write` and
`Provider.read_variables`. It also does not wait for a registry to confirm a
definition. Connecting those calls to a transport is up to you.