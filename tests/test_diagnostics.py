"""
Unit tests for diagnostics derived from ResourceErrors.

Tests cover:
- resource_errors_to_failures: one failure per problem, message format, order
- summarize_resource_errors: pluralisation, empty input
- End to end from an admin-API body
"""

from gateway_sync.models.resource_error import OwnerRef
from gateway_sync.services.diagnostics import (
    ResourceFailure,
    resource_errors_to_failures,
    summarize_resource_errors,
)
from gateway_sync.services.entity_errors import parse_flat_entity_errors
from tests.conftest import FLATTENED_ERRORS, METHODS_MSG, make_body

INGRESS = OwnerRef(kind="Ingress", namespace="default", name="echo", api_version="networking.k8s.io/v1", uid="i-1")
SERVICE = OwnerRef(kind="Service", namespace="default", name="echo", api_version="v1", uid="s-1")


class TestResourceErrorsToFailures:
    """Tests for resource_errors_to_failures."""

    def test_one_failure_per_problem(self):
        errors = [
            INGRESS.to_resource_error({"methods": "bad", "methods[0]": "worse"}),
            SERVICE.to_resource_error({"read_timeout": "expected an integer"}),
        ]
        failures = resource_errors_to_failures(errors)
        assert failures == [
            ResourceFailure(owner=INGRESS, message="invalid methods: bad"),
            ResourceFailure(owner=INGRESS, message="invalid methods[0]: worse"),
            ResourceFailure(owner=SERVICE, message="invalid read_timeout: expected an integer"),
        ]

    def test_empty(self):
        assert resource_errors_to_failures([]) == []

    def test_from_admin_api_body(self, resolver, push_logger):
        errors = parse_flat_entity_errors(
            make_body(flattened_errors=FLATTENED_ERRORS), push_logger, resolver
        )
        failures = resource_errors_to_failures(errors)
        assert len(failures) == 3
        assert failures[1].owner.kind == "Ingress"
        assert failures[1].message == f"invalid methods: {METHODS_MSG}"


class TestSummarizeResourceErrors:
    """Tests for summarize_resource_errors."""

    def test_summary(self):
        errors = [
            INGRESS.to_resource_error({"methods": "bad", "paths": "bad"}),
            SERVICE.to_resource_error({"read_timeout": "expected an integer"}),
        ]
        assert summarize_resource_errors(errors) == (
            "2 object(s) rejected: Ingress default/echo (2 fields), Service default/echo (1 field)"
        )

    def test_empty(self):
        assert summarize_resource_errors([]) == "no objects rejected"

    def test_accepts_generator(self):
        gen = (e for e in [SERVICE.to_resource_error({"a": "b"})])
        assert summarize_resource_errors(gen).startswith("1 object(s) rejected")
