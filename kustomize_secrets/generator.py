"""Library for generating Secret objects the way kustomize secret generators do."""

import base64
import hashlib
import json
import logging
from typing import Any

from .config import GeneratorOptions
from .resource import Resource

__all__ = [
    "generate_secret",
    "secret_hash",
]

_LOGGER = logging.getLogger(__name__)

SECRET_TYPE_OPAQUE = "Opaque"

# Swap characters so the hash suffix can't be read as a number or a word.
_HASH_TRANSLATION = str.maketrans({"0": "g", "1": "h", "3": "k", "a": "m", "e": "t"})
_HASH_LENGTH = 10


def secret_hash(doc: dict[str, Any]) -> str:
    """Return the name suffix hash for the contents of a Secret."""
    content = json.dumps(
        {
            "kind": doc["kind"],
            "name": doc["metadata"]["name"],
            "type": doc.get("type", ""),
            "data": doc.get("data", {}),
        },
        sort_keys=True,
        separators=(",", ":"),
    )
    digest = hashlib.sha256(content.encode()).hexdigest()
    return digest[:_HASH_LENGTH].translate(_HASH_TRANSLATION)


def generate_secret(
    name: str, values: dict[str, str], options: GeneratorOptions
) -> Resource:
    """Create an Opaque Secret holding the plaintext values."""
    metadata: dict[str, Any] = {"name": name}
    if options.labels:
        metadata["labels"] = dict(options.labels)
    if options.annotations:
        metadata["annotations"] = dict(options.annotations)
    doc: dict[str, Any] = {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": metadata,
        "type": SECRET_TYPE_OPAQUE,
        "data": {
            key: base64.b64encode(value.encode()).decode()
            for key, value in values.items()
        },
    }
    if options.immutable:
        doc["immutable"] = True
    if not options.disable_name_suffix_hash:
        metadata["name"] = f"{name}-{secret_hash(doc)}"
    _LOGGER.debug("Generated Secret %s", metadata["name"])
    return Resource.parse_doc(doc)
