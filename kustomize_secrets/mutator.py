"""Mutators that rewrite secret references in pod templates.

A secret reference is an environment variable value such as
`berglas://my-bucket/db-password`. The `SecretReferenceMutator` resolves each
reference with a `SecretResolver` and either inlines the value or moves it into
a generated Secret referenced by the environment variable.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from itertools import chain
import logging
from typing import Any, Protocol

from slugify import slugify
import yaml

from .api import EnvVarSource, PodTemplateSpec, SecretKeySelector
from .config import GeneratorOptions
from .exceptions import InputException, ResolveError
from .generator import generate_secret
from .resource import Resource

__all__ = [
    "MutationResult",
    "Mutator",
    "SecretResolver",
    "StaticResolver",
    "SecretReferenceMutator",
    "is_secret_reference",
]

_LOGGER = logging.getLogger(__name__)

REFERENCE_PREFIX = "berglas://"


@dataclass
class MutationResult:
    """The outcome of mutating a single pod template."""

    changed: bool = False
    """True if the pod template was modified."""

    secrets: list[Resource] = field(default_factory=list)
    """Secrets generated by the mutation, in the order they were created."""


class Mutator(Protocol):
    """A policy that modifies a pod template in place."""

    def mutate(self, template: PodTemplateSpec) -> MutationResult:
        """Mutate the template and report the changes."""


class SecretResolver(Protocol):
    """A backend that returns the plaintext value of a secret reference."""

    def resolve(self, reference: str) -> str:
        """Return the value, or raise ResolveError."""


class StaticResolver:
    """A SecretResolver backed by a fixed mapping of references to values."""

    def __init__(self, values: Mapping[str, str]) -> None:
        """Initialize StaticResolver."""
        self._values = dict(values)

    @classmethod
    def parse_yaml(cls, content: str) -> "StaticResolver":
        """Load the mapping of references to values from a YAML document."""
        try:
            doc: Any = yaml.safe_load(content)
        except yaml.YAMLError as err:
            raise InputException(f"Invalid secret values YAML: {err}") from err
        if doc is None:
            return cls({})
        if not isinstance(doc, dict):
            raise InputException(f"Invalid secret values is not a mapping: {doc}")
        for key, value in doc.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise InputException(
                    f"Invalid secret value for {key!r}, expected strings"
                )
        return cls(doc)

    def resolve(self, reference: str) -> str:
        if (value := self._values.get(reference)) is None:
            raise ResolveError(reference)
        return value


def is_secret_reference(value: str | None) -> bool:
    """Return True if the value is a secret reference."""
    return (
        value is not None
        and value.startswith(REFERENCE_PREFIX)
        and len(value) > len(REFERENCE_PREFIX)
    )


class SecretReferenceMutator:
    """Rewrites container environment variables that hold secret references.

    Without generator options the resolved value replaces the reference. With
    generator options each value is stored in a new Secret, named after the
    container and variable, and the variable is changed to a `secretKeyRef`.
    """

    def __init__(
        self,
        resolver: SecretResolver,
        generator_options: GeneratorOptions | None = None,
    ) -> None:
        """Initialize SecretReferenceMutator."""
        self._resolver = resolver
        self._generator_options = generator_options

    def mutate(self, template: PodTemplateSpec) -> MutationResult:
        result = MutationResult()
        if template.spec is None:
            return result
        containers = chain(
            template.spec.init_containers or (), template.spec.containers or ()
        )
        for container in containers:
            for env in container.env or ():
                if not is_secret_reference(env.value):
                    continue
                value = self._resolver.resolve(env.value)  # type: ignore[arg-type]
                if self._generator_options is None:
                    _LOGGER.debug(
                        "Inlining %s for %s/%s", env.value, container.name, env.name
                    )
                    env.value = value
                else:
                    secret = generate_secret(
                        slugify(f"{container.name}-{env.name}", separator="-"),
                        {env.name or "": value},
                        self._generator_options,
                    )
                    env.value = None
                    env.value_from = EnvVarSource(
                        secret_key_ref=SecretKeySelector(name=secret.name, key=env.name)
                    )
                    result.secrets.append(secret)
                result.changed = True
        return result
