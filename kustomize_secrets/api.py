"""Typed representations of the kubernetes objects the transformer understands.

Each model only declares the fields the transformer reads or writes. Every
other key of the source document, along with any explicitly null value, is
kept in `unknown_fields` and emitted again when the model is serialized so
that a decode and encode of an unmodified object reproduces the document.
Declared scalar fields must already hold their declared type, a value that
would need converting is rejected rather than rewritten.

Workload objects expose their pod template through `pod_template()`. Objects
that keep the template at `spec.template` share the `Workload` implementation;
every other object reports that it has no pod template.
"""

from dataclasses import dataclass, field, fields
import functools
import types
from typing import Any, ClassVar, Union, get_args, get_origin, get_type_hints

from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig

__all__ = [
    "KubeModel",
    "KubeObject",
    "Workload",
    "ObjectMeta",
    "SecretKeySelector",
    "EnvVarSource",
    "EnvVar",
    "Container",
    "Volume",
    "PodSpec",
    "PodTemplateSpec",
    "Deployment",
    "StatefulSet",
    "DaemonSet",
    "ReplicaSet",
    "ReplicationController",
    "Job",
    "CronJob",
    "Pod",
    "PodTemplate",
    "ConfigMap",
    "Secret",
    "Service",
]

UNKNOWN_FIELDS_KEY = "__unknown_fields__"

CORE_GROUP_VERSION = "v1"
APPS_GROUP_VERSION = "apps/v1"
BATCH_GROUP_VERSION = "batch/v1"


@functools.cache
def _declared_scalars(cls: type) -> dict[str, tuple[type, bool]]:
    """Return the declared scalar type of each field and if it is a mapping."""
    hints = get_type_hints(cls)
    scalars: dict[str, tuple[type, bool]] = {}
    for f in fields(cls):
        hint = hints[f.name]
        if get_origin(hint) in (Union, types.UnionType):
            args = [arg for arg in get_args(hint) if arg is not type(None)]
            if len(args) != 1:
                continue
            hint = args[0]
        key = f.metadata.get("alias") or f.name
        if hint in (str, bool, int):
            scalars[key] = (hint, False)
        elif get_origin(hint) is dict and get_args(hint) == (str, str):
            scalars[key] = (str, True)
    return scalars


def _is_scalar(value: Any, expected: type) -> bool:
    # bool is a subclass of int
    if isinstance(value, bool):
        return expected is bool
    return isinstance(value, expected)


@dataclass
class KubeModel(DataClassDictMixin):
    """Base class for all typed kubernetes structures."""

    unknown_fields: dict[str, Any] = field(
        default_factory=dict,
        metadata={"serialize": "omit", "alias": UNKNOWN_FIELDS_KEY},
    )
    """Keys of the document not declared by the model, or explicitly null."""

    @classmethod
    def known_keys(cls) -> set[str]:
        """Return the document keys declared by the model."""
        return {
            f.metadata.get("alias") or f.name
            for f in fields(cls)
            if f.name != "unknown_fields"
        }

    @classmethod
    def __pre_deserialize__(cls, d: dict[Any, Any]) -> dict[Any, Any]:
        if not isinstance(d, dict):
            raise TypeError(
                f"{cls.__name__} expected a mapping, got {type(d).__name__}"
            )
        known = cls.known_keys()
        values = {k: v for k, v in d.items() if k in known and v is not None}
        for key, (expected, mapping) in _declared_scalars(cls).items():
            if (value := values.get(key)) is None:
                continue
            if mapping:
                if not isinstance(value, dict):
                    raise TypeError(
                        f"{cls.__name__}.{key} expected a mapping, "
                        f"got {type(value).__name__}"
                    )
                items = list(value.values())
            else:
                items = [value]
            for item in items:
                if not _is_scalar(item, expected):
                    raise TypeError(
                        f"{cls.__name__}.{key} expected {expected.__name__}, "
                        f"got {type(item).__name__}"
                    )
        values[UNKNOWN_FIELDS_KEY] = {
            k: v for k, v in d.items() if k not in known or v is None
        }
        return values

    def __post_serialize__(self, d: dict[Any, Any]) -> dict[Any, Any]:
        for key, value in self.unknown_fields.items():
            d.setdefault(key, value)
        return d

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True


@dataclass
class ObjectMeta(KubeModel):
    """Metadata of an object or a pod template."""

    name: str | None = None
    namespace: str | None = None
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None


@dataclass
class SecretKeySelector(KubeModel):
    """Selects a key of a Secret in the pod's namespace."""

    name: str | None = None
    key: str | None = None
    optional: bool | None = None


@dataclass
class EnvVarSource(KubeModel):
    """A source for the value of an environment variable."""

    secret_key_ref: SecretKeySelector | None = field(
        default=None, metadata=field_options(alias="secretKeyRef")
    )


@dataclass
class EnvVar(KubeModel):
    """An environment variable present in a container."""

    name: str | None = None
    value: str | None = None
    value_from: EnvVarSource | None = field(
        default=None, metadata=field_options(alias="valueFrom")
    )


@dataclass
class Container(KubeModel):
    """A single application container run within a pod."""

    name: str | None = None
    image: str | None = None
    env: list[EnvVar] | None = None


@dataclass
class Volume(KubeModel):
    """A named volume in a pod."""

    name: str | None = None


@dataclass
class PodSpec(KubeModel):
    """A description of a pod."""

    containers: list[Container] | None = None
    init_containers: list[Container] | None = field(
        default=None, metadata=field_options(alias="initContainers")
    )
    volumes: list[Volume] | None = None


@dataclass
class PodTemplateSpec(KubeModel):
    """Describes the data a pod should have when created from a template."""

    metadata: ObjectMeta | None = None
    spec: PodSpec | None = None


@dataclass
class KubeObject(KubeModel):
    """A top level kubernetes object.

    `apiVersion` and `kind` are not declared as fields, they are carried in
    `unknown_fields` and the model type identifies them instead.
    """

    group_version: ClassVar[str]
    """The apiVersion of the object."""

    kind: ClassVar[str]
    """The kind of the object."""

    metadata: ObjectMeta | None = None

    def pod_template(self) -> PodTemplateSpec | None:
        """Return the pod template of the object, or None if it has none."""
        return None


@dataclass
class WorkloadSpec(KubeModel):
    """Common spec of objects that create pods from a template."""

    template: PodTemplateSpec | None = None


@dataclass
class Workload(KubeObject):
    """An object that creates pods from the template at `spec.template`."""

    spec: WorkloadSpec | None = None

    def pod_template(self) -> PodTemplateSpec | None:
        """Return the pod template held by the spec."""
        if self.spec is None:
            return None
        return self.spec.template


@dataclass
class Deployment(Workload):
    """Declarative updates for pods and replica sets."""

    group_version: ClassVar[str] = APPS_GROUP_VERSION
    kind: ClassVar[str] = "Deployment"


@dataclass
class StatefulSet(Workload):
    """A set of pods with consistent identities."""

    group_version: ClassVar[str] = APPS_GROUP_VERSION
    kind: ClassVar[str] = "StatefulSet"


@dataclass
class DaemonSet(Workload):
    """Runs a copy of a pod on every node."""

    group_version: ClassVar[str] = APPS_GROUP_VERSION
    kind: ClassVar[str] = "DaemonSet"


@dataclass
class ReplicaSet(Workload):
    group_version: ClassVar[str] = APPS_GROUP_VERSION
    kind: ClassVar[str] = "ReplicaSet"


@dataclass
class ReplicationController(Workload):
    group_version: ClassVar[str] = CORE_GROUP_VERSION
    kind: ClassVar[str] = "ReplicationController"


@dataclass
class Job(Workload):
    """A job runs pods until a number of them complete successfully."""

    group_version: ClassVar[str] = BATCH_GROUP_VERSION
    kind: ClassVar[str] = "Job"


@dataclass
class CronJob(KubeObject):
    """A job run on a schedule.

    The pod template is nested in `spec.jobTemplate` so it is not exposed.
    """

    group_version: ClassVar[str] = BATCH_GROUP_VERSION
    kind: ClassVar[str] = "CronJob"


@dataclass
class Pod(KubeObject):
    group_version: ClassVar[str] = CORE_GROUP_VERSION
    kind: ClassVar[str] = "Pod"

    spec: PodSpec | None = None


@dataclass
class PodTemplate(KubeObject):
    """A standalone pod template, stored at `template` rather than in a spec."""

    group_version: ClassVar[str] = CORE_GROUP_VERSION
    kind: ClassVar[str] = "PodTemplate"

    template: PodTemplateSpec | None = None


@dataclass
class ConfigMap(KubeObject):
    group_version: ClassVar[str] = CORE_GROUP_VERSION
    kind: ClassVar[str] = "ConfigMap"


@dataclass
class Secret(KubeObject):
    group_version: ClassVar[str] = CORE_GROUP_VERSION
    kind: ClassVar[str] = "Secret"


@dataclass
class Service(KubeObject):
    group_version: ClassVar[str] = CORE_GROUP_VERSION
    kind: ClassVar[str] = "Service"
