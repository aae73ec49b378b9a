"""Registry mapping a group, version and kind to a typed model.

Resource streams are heterogeneous and most objects in them have no typed
model, so an unknown identity resolves to None rather than an error.
"""

import logging

from . import api
from .resource import Gvk

__all__ = [
    "Scheme",
    "SCHEME",
    "resolve",
]

_LOGGER = logging.getLogger(__name__)


class Scheme:
    """A set of typed models keyed by their group, version and kind."""

    def __init__(self) -> None:
        """Initialize Scheme."""
        self._types: dict[Gvk, type[api.KubeObject]] = {}

    def add_known_types(self, *obj_types: type[api.KubeObject]) -> None:
        """Register models using their declared apiVersion and kind."""
        for obj_type in obj_types:
            gvk = Gvk.parse(obj_type.group_version, obj_type.kind)
            _LOGGER.debug("Registering %s as %s", gvk, obj_type.__name__)
            self._types[gvk] = obj_type

    def resolve(self, gvk: Gvk) -> type[api.KubeObject] | None:
        """Return the model for the identity, or None if it is not known."""
        return self._types.get(gvk)


SCHEME = Scheme()
SCHEME.add_known_types(
    api.Deployment,
    api.StatefulSet,
    api.DaemonSet,
    api.ReplicaSet,
    api.ReplicationController,
    api.Job,
    api.CronJob,
    api.Pod,
    api.PodTemplate,
    api.ConfigMap,
    api.Secret,
    api.Service,
)


def resolve(gvk: Gvk) -> type[api.KubeObject] | None:
    """Return the built-in model for the identity, or None if it is not known."""
    return SCHEME.resolve(gvk)
