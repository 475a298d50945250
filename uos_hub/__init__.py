"""Provider-side variable model, validation, builders and in-process provider worker."""

__version__ = "0.2.2"
__all__ = [
    "model",
    "key_validation",
    "definition_validation",
    "variable_builder",
    "provider_builder",
    "errors",
    "worker",
    "provider",
]