"""Exceptions related to kustomize-secrets."""

__all__ = [
    "SecretsException",
    "InputException",
    "DecodeError",
    "EncodeError",
    "MutationError",
    "FlushError",
    "ResolveError",
]


class SecretsException(Exception):
    """Generic base exception used for this library."""


class InputException(SecretsException):
    """Raised when the input files or values are not formatted as expected."""


class DecodeError(InputException):
    """Raised when a resource does not conform to its known typed shape."""


class EncodeError(SecretsException):
    """Raised when a typed resource can't be written back to a document."""


class MutationError(SecretsException):
    """Raised when mutating a pod template has failed."""


class FlushError(SecretsException):
    """Raised when generated secrets can't be merged into the resources."""

    def __init__(self, resource_id: str, message: str) -> None:
        super().__init__(f"Unable to add {resource_id}: {message}")
        self.resource_id = resource_id


class ResolveError(SecretsException):
    """Raised when a secret reference can't be resolved to a value."""

    def __init__(self, reference: str, message: str | None = None) -> None:
        super().__init__(
            f"Unable to resolve {reference}: {message or 'Unknown reference'}"
        )
        self.reference = reference
