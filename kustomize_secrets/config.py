"""Configuration of the secret transformer.

The configuration is the kustomize plugin config document for the transformer,
for example:

```yaml
apiVersion: kustomize.carbonrelay.com/v1
kind: SecretTransformer
metadata:
  name: secrets
generateSecrets: true
generatorOptions:
  disableNameSuffixHash: true
```
"""

from dataclasses import dataclass, field
import logging
from typing import Any

from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig
from mashumaro.exceptions import InvalidFieldValue, MissingField
import yaml

from .exceptions import InputException

__all__ = [
    "GeneratorOptions",
    "TransformerConfig",
]

_LOGGER = logging.getLogger(__name__)


@dataclass
class GeneratorOptions(DataClassDictMixin):
    """Options controlling how generated Secrets are materialized."""

    labels: dict[str, str] | None = None
    """Labels added to every generated Secret."""

    annotations: dict[str, str] | None = None
    """Annotations added to every generated Secret."""

    disable_name_suffix_hash: bool = field(
        default=False, metadata=field_options(alias="disableNameSuffixHash")
    )
    """Do not append a content hash to the name of generated Secrets."""

    immutable: bool = False
    """Mark generated Secrets as immutable."""

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True


@dataclass
class TransformerConfig(DataClassDictMixin):
    """Kustomize plugin configuration for the secret transformer."""

    generator_options: GeneratorOptions | None = field(
        default=None, metadata=field_options(alias="generatorOptions")
    )
    """Options for generated Secrets, None when not configured."""

    generate_secrets: bool = field(
        default=False, metadata=field_options(alias="generateSecrets")
    )
    """Move secret values into generated Secrets instead of inlining them."""

    @classmethod
    def parse_doc(cls, doc: Any) -> "TransformerConfig":
        """Parse the configuration from a plugin config document."""
        if doc is None:
            return cls()
        if not isinstance(doc, dict):
            raise InputException(f"Invalid transformer config is not a mapping: {doc}")
        try:
            return cls.from_dict(doc)
        except (
            MissingField,
            InvalidFieldValue,
            AttributeError,
            TypeError,
            ValueError,
        ) as err:
            raise InputException(f"Invalid transformer config: {err}") from err

    @classmethod
    def parse_yaml(cls, content: str) -> "TransformerConfig":
        """Parse the configuration from a YAML plugin config file."""
        try:
            doc = yaml.safe_load(content)
        except yaml.YAMLError as err:
            raise InputException(f"Invalid transformer config YAML: {err}") from err
        return cls.parse_doc(doc)

    def yaml(self) -> str:
        """Return a YAML string representation of the configuration."""
        return yaml.dump(self.to_dict(), sort_keys=False)

    def effective_generator_options(self) -> GeneratorOptions | None:
        """Return the options for generated Secrets.

        Returns None when Secrets should not be generated, in which case any
        configured options are ignored.
        """
        if not self.generate_secrets:
            if self.generator_options is not None:
                _LOGGER.debug("Ignoring generatorOptions, generateSecrets is disabled")
            return None
        if self.generator_options is None:
            return GeneratorOptions()
        return self.generator_options

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True
