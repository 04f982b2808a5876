"""
Shared pytest fixtures for unit tests.

Everything here is in-memory: a declarative configuration snapshot whose
entities carry Kubernetes ownership tags, a resolver over it, and admin-API
error bodies modelled on what the gateway actually returns.
"""

import json
import logging
from typing import Any, Dict, List

import pytest

from gateway_sync.schemas.declarative import DeclarativeConfig
from gateway_sync.services.owner_resolver import SnapshotOwnerResolver

# ────────────────────────────────────────────────────────────────────────────
# Owners
# ────────────────────────────────────────────────────────────────────────────

INGRESS_UID = "d7300db1-14eb-5a09-b594-2db904ed8eca"
HTTPROUTE_UID = "0c6b8ee1-39f1-4f5e-8a43-1d7a3cfd6c25"
SERVICE_UID = "b8aa692c-6d8d-580e-a767-a7dbc1f58344"
UNRELATED_UID = "6f1f2d0e-7c9b-4a55-9d3e-0e2b8c4b1a77"


def owner_tags(
    *,
    kind: str,
    name: str,
    uid: str,
    namespace: str = "default",
    group: str = "",
    version: str = "v1",
) -> List[str]:
    """Build the ownership tags an entity generated from one object carries."""
    tags = [
        f"k8s-name:{name}",
        f"k8s-kind:{kind}",
        f"k8s-uid:{uid}",
        f"k8s-version:{version}",
    ]
    if namespace:
        tags.append(f"k8s-namespace:{namespace}")
    if group:
        tags.append(f"k8s-group:{group}")
    return tags


INGRESS_TAGS = owner_tags(
    kind="Ingress", name="scallion", uid=INGRESS_UID, group="networking.k8s.io"
)
HTTPROUTE_TAGS = owner_tags(
    kind="HTTPRoute", name="turnip", uid=HTTPROUTE_UID, group="gateway.networking.k8s.io"
)
SERVICE_TAGS = owner_tags(kind="Service", name="radish", uid=SERVICE_UID)


def make_snapshot() -> Dict[str, Any]:
    """
    The configuration last submitted to the admin API.

    Route #0 belongs to an unrelated Ingress; routes #1 and #2 are the ones
    the error fixtures reject.
    """
    return {
        "_format_version": "3.0",
        "services": [
            {
                "name": "default.echo.pnum-80",
                "host": "echo.default.80.svc",
                "port": 80,
                "tags": SERVICE_TAGS,
            }
        ],
        "routes": [
            {
                "name": "default.other.00",
                "paths": ["/other"],
                "tags": owner_tags(kind="Ingress", name="other", uid=UNRELATED_UID),
            },
            {
                "name": "default.demo.00",
                "paths": ["/foo"],
                "protocols": ["grpc"],
                "methods": ["GET"],
                "tags": INGRESS_TAGS,
            },
            {
                "name": "default.demo.01",
                "paths": ["/foo"],
                "protocols": ["grpc"],
                "strip_path": True,
                "tags": HTTPROUTE_TAGS,
            },
        ],
    }


# ────────────────────────────────────────────────────────────────────────────
# Admin-API error bodies
# ────────────────────────────────────────────────────────────────────────────

METHODS_MSG = "cannot set 'methods' when 'protocols' is 'grpc' or 'grpcs'"
STRIP_PATH_MSG = "cannot set 'strip_path' when 'protocols' is 'grpc' or 'grpcs'"
READ_TIMEOUT_MSG = "expected an integer"

LEGACY_FIELDS = {
    "routes": [
        None,
        {"methods": METHODS_MSG},
        {"strip_path": STRIP_PATH_MSG},
    ],
    "services": [{"read_timeout": READ_TIMEOUT_MSG}],
}

FLATTENED_ERRORS = [
    {
        "entity": {"name": "default.echo.pnum-80", "read_timeout": True},
        "entity_name": "default.echo.pnum-80",
        "entity_type": "service",
        "errors": [{"field": "read_timeout", "message": READ_TIMEOUT_MSG, "type": "field"}],
    },
    {
        "entity": {"name": "default.demo.00", "methods": ["GET"], "protocols": ["grpc"]},
        "entity_name": "default.demo.00",
        "entity_type": "route",
        "errors": [{"field": "methods", "message": METHODS_MSG, "type": "field"}],
    },
    {
        "entity": {"name": "default.demo.01", "strip_path": True, "protocols": ["grpc"]},
        "entity_name": "default.demo.01",
        "entity_type": "route",
        "errors": [{"field": "strip_path", "message": STRIP_PATH_MSG, "type": "field"}],
    },
]


def make_body(**containers: Any) -> bytes:
    """Encode an admin-API error body with the standard envelope."""
    body = {
        "code": 14,
        "name": "invalid declarative configuration",
        "message": "declarative config is invalid",
    }
    body.update(containers)
    return json.dumps(body).encode("utf-8")


# ────────────────────────────────────────────────────────────────────────────
# Pytest fixtures
# ────────────────────────────────────────────────────────────────────────────


@pytest.fixture()
def snapshot() -> DeclarativeConfig:
    """The submitted configuration, validated."""
    return DeclarativeConfig.model_validate(make_snapshot())


@pytest.fixture()
def resolver(snapshot) -> SnapshotOwnerResolver:
    """A resolver over the submitted configuration."""
    return SnapshotOwnerResolver(snapshot)


@pytest.fixture()
def push_logger() -> logging.Logger:
    """The logger handed to the parser, as the push orchestrator would."""
    return logging.getLogger("gateway_sync.push")
