"""
Diagnostics — the shape status-update code consumes.

Status conditions and Kubernetes events are written per object and per
message, so each problem in a :class:`ResourceError` becomes one
:class:`ResourceFailure`.
"""

from typing import Iterable, List

from pydantic import BaseModel, ConfigDict

from gateway_sync.models.resource_error import OwnerRef, ResourceError


class ResourceFailure(BaseModel):
    """A single message to surface on one Kubernetes object."""

    model_config = ConfigDict(frozen=True)

    owner: OwnerRef
    message: str


def resource_errors_to_failures(errors: Iterable[ResourceError]) -> List[ResourceFailure]:
    """One failure per problem, ``invalid <field>: <message>``, in problem order."""
    failures: List[ResourceFailure] = []
    for error in errors:
        owner = error.owner
        for field, problem in error.problems.items():
            failures.append(ResourceFailure(owner=owner, message=f"invalid {field}: {problem}"))
    return failures


def summarize_resource_errors(errors: Iterable[ResourceError]) -> str:
    """
    One-line summary for logs and for the non-itemized fallback report.

    Example: ``2 object(s) rejected: Ingress default/echo (2 fields), Service default/echo (1 field)``
    """
    errors = list(errors)
    if not errors:
        return "no objects rejected"

    parts = []
    for error in errors:
        count = len(error.problems)
        noun = "field" if count == 1 else "fields"
        parts.append(f"{error.owner} ({count} {noun})")
    return f"{len(errors)} object(s) rejected: " + ", ".join(parts)
