import dataclasses
import time

import pytest

from uos_hub.definition_validation import (
    AddToLeafNodeError,
    DuplicateIdError,
    DuplicatePathError,
    InvalidProviderDefinitionError,
    InvalidVariableInDefinitionError,
    ValidProviderDefinition,
    parent_paths,
    validate_provider_definition,
)
from uos_hub.key_validation import InvalidCharactersError, UnnamedVariableError
from uos_hub.model import (
    ProviderDefinition,
    ProviderDefinitionState,
    VariableAccessType,
    VariableDataType,
    VariableDefinition,
)

RO = VariableAccessType.READ_ONLY
RW = VariableAccessType.READ_WRITE


def _def(key, var_id, data_type=VariableDataType.BOOLEAN, access=RO):
    return VariableDefinition(key=key, id=var_id, data_type=data_type, access_type=access)


def valid_provider_definition_with_variables():
    return ProviderDefinition(
        fingerprint=1,
        variable_definitions=[
            _def("var_boolean", 1, VariableDataType.BOOLEAN, RO),
            _def("var_string", 2, VariableDataType.STRING, RO),
            _def("var_int64", 3, VariableDataType.INT64, RW),
            _def("folder1.var_int64", 4, VariableDataType.INT64, RW),
            _def("folder1.var_int64_2", 5, VariableDataType.INT64, RW),
            _def("var_timestamp", 6, VariableDataType.TIMESTAMP, RW),
            _def("var_duration", 7, VariableDataType.DURATION, RW),
        ],
        state=ProviderDefinitionState.OK,
    )


def invalid_with_unnamed_variable():
    return ProviderDefinition(
        fingerprint=2,
        variable_definitions=[_def("var_string", 1), _def("", 2)],
    )


def invalid_with_duplicate_id():
    return ProviderDefinition(
        fingerprint=3,
        variable_definitions=[_def("var_string", 1), _def("var_int64", 1)],
    )


def invalid_with_invalid_characters():
    return ProviderDefinition(
        fingerprint=4,
        variable_definitions=[_def("var_string", 1), _def("My🐞variable2", 2)],
    )


def invalid_with_subnode_of_node():
    return ProviderDefinition(
        fingerprint=5,
        variable_definitions=[
            _def("var_string", 1),
            _def("var_string.my_variable2", 2),
        ],
    )


def invalid_with_subsubnode_of_node():
    return ProviderDefinition(
        fingerprint=5,
        variable_definitions=[
            _def("var_string", 1),
            _def("var_string.var_int64.var_int64", 2),
        ],
    )


def reverse_nodes(definition):
    return dataclasses.replace(
        definition,
        variable_definitions=list(reversed(definition.variable_definitions)),
    )


@pytest.mark.parametrize(
    "definition",
    [ProviderDefinition(), valid_provider_definition_with_variables()],
)
def test_validate_valid(definition):
    assert validate_provider_definition(definition) is None
    assert ValidProviderDefinition(definition).definition.state is ProviderDefinitionState.OK


@pytest.mark.parametrize(
    "definition, expected",
    [
        (
            invalid_with_unnamed_variable(),
            InvalidVariableInDefinitionError(UnnamedVariableError()),
        ),
        (invalid_with_duplicate_id(), DuplicateIdError(1)),
        (
            invalid_with_invalid_characters(),
            InvalidVariableInDefinitionError(InvalidCharactersError("My🐞variable2")),
        ),
        (invalid_with_subnode_of_node(), AddToLeafNodeError("var_string.my_variable2")),
        (
            reverse_nodes(invalid_with_subnode_of_node()),
            AddToLeafNodeError("var_string.my_variable2"),
        ),
        (
            invalid_with_subsubnode_of_node(),
            AddToLeafNodeError("var_string.var_int64.var_int64"),
        ),
        (
            reverse_nodes(invalid_with_subsubnode_of_node()),
            AddToLeafNodeError("var_string.var_int64.var_int64"),
        ),
    ],
)
def test_validate_invalid(definition, expected):
    with pytest.raises(InvalidProviderDefinitionError) as info:
        validate_provider_definition(definition)
    assert info.value == expected


def test_duplicate_path():
    definition = ProviderDefinition(
        variable_definitions=[_def("same", 1), _def("same", 2)]
    )
    with pytest.raises(DuplicatePathError) as info:
        validate_provider_definition(definition)
    assert info.value.key == "same"


def test_wrapped_error_is_kept():
    with pytest.raises(InvalidVariableInDefinitionError) as info:
        validate_provider_definition(invalid_with_unnamed_variable())
    assert info.value.error == UnnamedVariableError()


@pytest.mark.parametrize(
    "key, expected",
    [
        ("var1.var2.var3", ["var1", "var1.var2"]),
        ("var1", []),
        ("", []),
    ],
)
def test_parent_paths(key, expected):
    assert parent_paths(key) == expected


def test_valid_provider_definition_sets_ok_without_touching_input():
    original = ProviderDefinition(
        fingerprint=9, variable_definitions=[_def("a", 1)]
    )
    valid = ValidProviderDefinition(original)
    assert valid.definition.state is ProviderDefinitionState.OK
    assert valid.definition.fingerprint == 9
    assert original.state is ProviderDefinitionState.UNSPECIFIED


def test_valid_provider_definition_rejects_invalid():
    with pytest.raises(DuplicateIdError):
        ValidProviderDefinition(invalid_with_duplicate_id())


def test_performance():
    definitions = [
        VariableDefinition(
            key=f"var_string.my_variable{i}",
            id=i,
            data_type=VariableDataType.STRING,
            access_type=RW,
        )
        for i in range(50_000)
    ]
    definition = ProviderDefinition(variable_definitions=definitions)
    start = time.perf_counter()
    result = validate_provider_definition(definition)
    elapsed = time.perf_counter() - start
    assert result is None
    assert elapsed < 2, "Validation took too long"