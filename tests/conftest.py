"""Fixtures for kustomize-secrets tests."""

from typing import Any

import pytest
import yaml

from kustomize_secrets.mutator import StaticResolver
from kustomize_secrets.resource import Resource

from .common import DB_PASSWORD, DB_PASSWORD_REF, DEPLOYMENT


@pytest.fixture(name="deployment_doc")
def deployment_doc_fixture() -> dict[str, Any]:
    """Fixture for a raw Deployment with a secret reference."""
    return yaml.safe_load(DEPLOYMENT)


@pytest.fixture(name="deployment")
def deployment_fixture(deployment_doc: dict[str, Any]) -> Resource:
    """Fixture for a Deployment resource with a secret reference."""
    return Resource.parse_doc(deployment_doc)


@pytest.fixture(name="resolver")
def resolver_fixture() -> StaticResolver:
    """Fixture for a resolver that knows the database password."""
    return StaticResolver({DB_PASSWORD_REF: DB_PASSWORD})
