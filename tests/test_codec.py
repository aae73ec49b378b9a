"""Tests for the codec library."""

import copy
from typing import Any

import pytest
import yaml

from kustomize_secrets import api
from kustomize_secrets.codec import decode, encode
from kustomize_secrets.exceptions import DecodeError, EncodeError
from kustomize_secrets.resource import Resource

from .common import CRON_JOB, DEPLOYMENT


def test_decode(deployment: Resource) -> None:
    """Test decoding a resource as a typed object."""
    obj = decode(deployment, api.Deployment)
    assert isinstance(obj, api.Deployment)
    assert obj.metadata
    assert obj.metadata.name == "podinfo"
    assert obj.spec
    assert obj.spec.unknown_fields["replicas"] == 2
    template = obj.pod_template()
    assert template
    assert template.spec
    assert template.spec.containers
    container = template.spec.containers[0]
    assert container.name == "podinfo"
    assert container.env
    assert [env.name for env in container.env] == ["DB_PASSWORD", "LOG_LEVEL"]


def test_decode_does_not_share_document(deployment: Resource) -> None:
    """Test that mutating a decoded object leaves the resource untouched."""
    original = copy.deepcopy(deployment.doc)
    obj = decode(deployment, api.Deployment)
    template = obj.pod_template()
    assert template and template.spec and template.spec.containers
    template.spec.containers[0].image = "busybox"
    template.spec.containers[0].unknown_fields["ports"].append({"containerPort": 1})
    assert deployment.doc == original


@pytest.mark.parametrize(
    ("obj_type", "content"),
    [
        (api.Deployment, DEPLOYMENT),
        (api.CronJob, CRON_JOB),
    ],
)
def test_round_trip(obj_type: type[api.KubeObject], content: str) -> None:
    """Test that encoding an unmodified object reproduces the document."""
    resource = Resource.parse_doc(yaml.safe_load(content))
    doc = encode(decode(resource, obj_type), resource.doc)
    assert doc == resource.doc
    assert yaml.dump(doc, sort_keys=False) == yaml.dump(resource.doc, sort_keys=False)


def test_encode_restores_key_order(deployment: Resource) -> None:
    """Test that keys follow the original document and new keys come last."""
    obj = decode(deployment, api.Deployment)
    template = obj.pod_template()
    assert template and template.spec and template.spec.containers
    env = template.spec.containers[0].env
    assert env
    env[0].value = None
    env[0].value_from = api.EnvVarSource(
        secret_key_ref=api.SecretKeySelector(name="db", key="password")
    )
    doc = encode(obj, deployment.doc)
    assert list(doc) == ["apiVersion", "kind", "metadata", "spec"]
    assert list(doc["spec"]) == ["replicas", "selector", "strategy", "template"]
    container = doc["spec"]["template"]["spec"]["containers"][0]
    assert list(container) == ["name", "image", "ports", "env"]
    assert container["env"][0] == {
        "name": "DB_PASSWORD",
        "valueFrom": {"secretKeyRef": {"name": "db", "key": "password"}},
    }


def test_encode_without_original(deployment: Resource) -> None:
    """Test encoding without an original document."""
    doc = encode(decode(deployment, api.Deployment))
    assert doc == deployment.doc


@pytest.mark.parametrize(
    "spec",
    [
        "not-a-mapping",
        {"template": ["not", "a", "mapping"]},
        {"template": {"spec": {"containers": ["podinfo"]}}},
        {"template": {"spec": {"containers": [{"name": "podinfo", "env": "A=b"}]}}},
    ],
)
def test_decode_malformed(deployment: Resource, spec: Any) -> None:
    """Test decoding a document that doesn't match the typed object."""
    deployment.doc["spec"] = spec
    original = copy.deepcopy(deployment.doc)
    with pytest.raises(
        DecodeError, match="Invalid Deployment Deployment/podinfo/podinfo"
    ):
        decode(deployment, api.Deployment)
    assert deployment.doc == original


def test_encode_unrepresentable_value(deployment: Resource) -> None:
    """Test encoding a value that has no document representation."""
    obj = decode(deployment, api.Deployment)
    assert obj.metadata
    obj.metadata.unknown_fields["owner"] = object()
    with pytest.raises(EncodeError, match="at 'metadata.owner'"):
        encode(obj, deployment.doc)


def test_encode_cyclic_value(deployment: Resource) -> None:
    """Test encoding a value that refers to itself."""
    obj = decode(deployment, api.Deployment)
    assert obj.metadata
    cyclic: dict[str, Any] = {}
    cyclic["self"] = cyclic
    obj.metadata.unknown_fields["cyclic"] = cyclic
    with pytest.raises(EncodeError, match="cyclic"):
        encode(obj, deployment.doc)


@pytest.mark.parametrize("replicas", ["2", 2.5, True])
def test_round_trip_keeps_unread_values(deployment: Resource, replicas: Any) -> None:
    """Test that values outside the pod template are never converted."""
    deployment.doc["spec"]["replicas"] = replicas
    doc = encode(decode(deployment, api.Deployment), deployment.doc)
    assert doc == deployment.doc
    assert doc["spec"]["replicas"] == replicas
    assert type(doc["spec"]["replicas"]) is type(replicas)


@pytest.mark.parametrize(
    ("path", "value", "message"),
    [
        (("spec", "containers", 0, "env", 1, "value"), 5, "EnvVar.value expected str"),
        (("spec", "containers", 0, "image"), 1.5, "Container.image expected str"),
        (("metadata", "labels"), {"version": 1}, "ObjectMeta.labels expected str"),
        (("metadata", "labels"), ["app"], "ObjectMeta.labels expected a mapping"),
    ],
)
def test_decode_malformed_scalar(
    deployment: Resource, path: tuple[Any, ...], value: Any, message: str
) -> None:
    """Test declared fields holding a value of another type are not converted."""
    parent = deployment.doc["spec"]["template"]
    for key in path[:-1]:
        parent = parent[key]
    parent[path[-1]] = value
    original = copy.deepcopy(deployment.doc)
    with pytest.raises(DecodeError, match=message):
        decode(deployment, api.Deployment)
    assert deployment.doc == original
