"""Transformer that runs a mutator over the pod templates of a resource stream.

Each resource is processed on its own:
  - its identity is resolved to a typed model, resources without one are skipped
  - the resource is decoded and its pod template located, resources without a
    pod template are skipped
  - the mutator modifies the pod template in place
  - if the template changed, the model is encoded back into the resource
  - Secrets generated by the mutator are added to the resource stream

Any error stops the pass. Resources written back before the error keep their
changes.
"""

import logging

from .api import KubeObject, PodTemplateSpec
from .codec import decode, encode
from .config import TransformerConfig
from .exceptions import FlushError, MutationError
from .mutator import MutationResult, Mutator, SecretReferenceMutator, SecretResolver
from .resource import Resource, ResourceList
from .scheme import SCHEME, Scheme

__all__ = [
    "locate",
    "mutate",
    "flush_secrets",
    "mutate_resource",
    "transform",
    "SecretTransformer",
]

_LOGGER = logging.getLogger(__name__)


def locate(obj: KubeObject) -> PodTemplateSpec | None:
    """Return the pod template owned by the object, or None if it has none."""
    return obj.pod_template()


def mutate(mutator: Mutator, template: PodTemplateSpec) -> MutationResult:
    """Invoke the mutator on the pod template and validate its result.

    Any error raised by the mutator is reported as a MutationError.
    """
    try:
        result = mutator.mutate(template)
    except MutationError:
        raise
    except Exception as err:
        raise MutationError(f"Unable to mutate pod template: {err}") from err
    if not result.changed and result.secrets:
        raise MutationError(
            f"Mutator reported no changes but produced {len(result.secrets)} secrets"
        )
    return result


def flush_secrets(
    result: MutationResult, resources: ResourceList, namespace: str | None = None
) -> None:
    """Add the Secrets produced by a mutation to the resource stream.

    Secrets without a namespace are placed in the namespace of the resource
    that produced them. A Secret already present with identical contents is
    not added again.
    """
    for secret in result.secrets:
        if secret.namespace is None and namespace is not None:
            secret.namespace = namespace
        if (existing := resources.get(secret.resource_id)) is not None:
            if existing.doc == secret.doc:
                _LOGGER.debug("Secret %s already present", secret.resource_id)
                continue
            raise FlushError(
                str(secret.resource_id),
                "a different object with the same name already exists",
            )
        _LOGGER.debug("Adding generated %s", secret.resource_id)
        resources.append(secret)


def mutate_resource(
    mutator: Mutator, resource: Resource, scheme: Scheme = SCHEME
) -> MutationResult | None:
    """Mutate the pod template of a single resource.

    Returns None when the resource has no known type or no pod template,
    otherwise the result of the mutation. The resource is only updated when
    the mutation changed the template.
    """
    if (obj_type := scheme.resolve(resource.gvk)) is None:
        _LOGGER.debug("No known type for %s, skipping", resource.gvk)
        return None
    obj = decode(resource, obj_type)
    if (template := locate(obj)) is None:
        _LOGGER.debug("No pod template in %s, skipping", resource.resource_id)
        return None
    result = mutate(mutator, template)
    if result.changed:
        _LOGGER.info("Updating %s", resource.resource_id)
        resource.update(encode(obj, resource.doc))
    return result


def transform(
    mutator: Mutator, resources: ResourceList, scheme: Scheme = SCHEME
) -> None:
    """Mutate every resource in the stream and add the generated Secrets."""
    # Generated Secrets are appended during the pass and are not visited.
    for resource in resources.list():
        if (result := mutate_resource(mutator, resource, scheme)) is None:
            continue
        flush_secrets(result, resources, resource.namespace)


class SecretTransformer:
    """Kustomize transformer that injects secret values into workloads."""

    def __init__(
        self,
        config: TransformerConfig,
        resolver: SecretResolver,
        scheme: Scheme = SCHEME,
    ) -> None:
        """Initialize SecretTransformer."""
        self._config = config
        self._resolver = resolver
        self._scheme = scheme

    def mutator(self) -> SecretReferenceMutator:
        """Return a mutator configured for a single transform pass."""
        return SecretReferenceMutator(
            self._resolver, self._config.effective_generator_options()
        )

    def transform(self, resources: ResourceList) -> None:
        """Transform the resource stream in place."""
        _LOGGER.debug("Transforming %d resources", len(resources))
        transform(self.mutator(), resources, self._scheme)
