"""Representation of untyped kubernetes resources in a kustomize resource stream.

A `Resource` wraps a raw document and exposes its identity. A `ResourceList`
is the ordered collection of all resources being transformed in a single pass.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
import json
import logging
from typing import Any

import yaml

from .exceptions import InputException

__all__ = [
    "Gvk",
    "ResourceId",
    "Resource",
    "ResourceList",
    "parse_resources",
    "dump_resources",
]

_LOGGER = logging.getLogger(__name__)

LIST_KIND = "List"


@dataclass(frozen=True, order=True)
class Gvk:
    """Group, version and kind identifying the schema of a resource."""

    group: str
    version: str
    kind: str

    @classmethod
    def parse(cls, api_version: str, kind: str) -> "Gvk":
        """Parse an apiVersion such as `apps/v1` or `v1` and a kind."""
        group, _, version = api_version.rpartition("/")
        return cls(group=group, version=version, kind=kind)

    @property
    def api_version(self) -> str:
        """Return the apiVersion string for the group and version."""
        if self.group:
            return f"{self.group}/{self.version}"
        return self.version

    def __str__(self) -> str:
        return f"{self.api_version}/{self.kind}"


@dataclass(frozen=True, order=True)
class ResourceId:
    """Identifier for a resource within a resource stream."""

    kind: str
    namespace: str | None
    name: str

    @property
    def namespaced_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name

    def __str__(self) -> str:
        """Return the kind and namespaced name concatenated as an id."""
        return f"{self.kind}/{self.namespaced_name}"


@dataclass
class Resource:
    """A raw kubernetes object.

    The document is the only state of the resource: the identity and the
    serialized forms are all derived from it.
    """

    doc: dict[str, Any]
    """The untyped contents of the object."""

    @classmethod
    def parse_doc(cls, doc: Any) -> "Resource":
        """Parse a Resource from a raw kubernetes object."""
        if not isinstance(doc, dict):
            raise InputException(f"Invalid object is not a mapping: {doc}")
        if not doc.get("apiVersion"):
            raise InputException(f"Invalid object missing apiVersion: {doc}")
        if not doc.get("kind"):
            raise InputException(f"Invalid object missing kind: {doc}")
        if not isinstance(metadata := doc.get("metadata"), dict):
            raise InputException(f"Invalid object missing metadata: {doc}")
        if not metadata.get("name"):
            raise InputException(f"Invalid object missing metadata.name: {doc}")
        return cls(doc=doc)

    @property
    def gvk(self) -> Gvk:
        """The group, version and kind of the object."""
        return Gvk.parse(self.doc["apiVersion"], self.doc["kind"])

    @property
    def name(self) -> str:
        return str(self.doc["metadata"]["name"])

    @property
    def namespace(self) -> str | None:
        return self.doc["metadata"].get("namespace")

    @namespace.setter
    def namespace(self, namespace: str) -> None:
        self.doc["metadata"]["namespace"] = namespace

    @property
    def resource_id(self) -> ResourceId:
        return ResourceId(
            kind=self.doc["kind"], namespace=self.namespace, name=self.name
        )

    def update(self, doc: dict[str, Any]) -> None:
        """Replace the contents of the object, keeping its identity."""
        updated = Resource.parse_doc(doc)
        if updated.resource_id != self.resource_id:
            raise InputException(
                f"Update of {self.resource_id} would change its identity to {updated.resource_id}"
            )
        self.doc = doc

    def to_json(self) -> str:
        """Return the raw JSON form of the object."""
        return json.dumps(self.doc)

    @classmethod
    def from_json(cls, content: str) -> "Resource":
        """Parse an object from its raw JSON form."""
        try:
            doc = json.loads(content)
        except json.JSONDecodeError as err:
            raise InputException(f"Invalid JSON object: {err}") from err
        return cls.parse_doc(doc)


class ResourceList:
    """An ordered collection of resources transformed in a single pass."""

    def __init__(self, resources: Iterable[Resource] = ()) -> None:
        """Initialize ResourceList."""
        self._resources: list[Resource] = []
        for resource in resources:
            self.append(resource)

    def append(self, resource: Resource) -> None:
        """Add a resource to the end of the collection."""
        self._resources.append(resource)

    def get(self, resource_id: ResourceId) -> Resource | None:
        """Return the resource with the specified identifier if present."""
        for resource in self._resources:
            if resource.resource_id == resource_id:
                return resource
        return None

    def docs(self) -> list[dict[str, Any]]:
        """Return the raw documents of all resources."""
        return [resource.doc for resource in self._resources]

    def __len__(self) -> int:
        return len(self._resources)

    def __iter__(self) -> Iterator[Resource]:
        return iter(self._resources)

    def list(self) -> list[Resource]:
        """Return a snapshot of the resources in the collection."""
        return list(self._resources)


def parse_resources(content: str) -> ResourceList:
    """Parse a YAML stream of kubernetes objects.

    Objects of kind `List` are expanded into their items.
    """
    try:
        docs = list(yaml.safe_load_all(content))
    except yaml.YAMLError as err:
        raise InputException(f"Invalid YAML resource stream: {err}") from err
    resources = ResourceList()
    for doc in docs:
        if doc is None:
            continue
        if isinstance(doc, dict) and doc.get("kind") == LIST_KIND:
            items = doc.get("items") or []
            _LOGGER.debug("Expanding List with %d items", len(items))
            for item in items:
                resources.append(Resource.parse_doc(item))
            continue
        resources.append(Resource.parse_doc(doc))
    return resources


def dump_resources(resources: ResourceList) -> str:
    """Return the YAML stream for all resources."""
    return yaml.dump_all(resources.docs(), sort_keys=False, explicit_start=True)
