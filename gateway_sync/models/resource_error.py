"""
ResourceError domain model.

A ResourceError is the uniform record produced from a failed configuration
push: which Kubernetes object, which fields, what went wrong.
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, model_validator


class OwnerRef(BaseModel):
    """
    Identity of the Kubernetes object that caused a gateway entity to exist.

    ``namespace`` is empty for cluster-scoped owners. ``api_version`` is
    ``group/version``, or just ``version`` for the core API group.
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    namespace: str = ""
    name: str
    api_version: str = ""
    uid: str

    def to_resource_error(self, problems: Dict[str, str]) -> "ResourceError":
        """Build the ResourceError reporting ``problems`` against this owner."""
        return ResourceError(
            name=self.name,
            namespace=self.namespace,
            kind=self.kind,
            api_version=self.api_version,
            uid=self.uid,
            problems=problems,
        )

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.kind} {self.namespace}/{self.name}"
        return f"{self.kind} {self.name}"


class ResourceError(BaseModel):
    """
    One validation problem report, scoped to exactly one owning object.

    ``problems`` maps a field path (``read_timeout``, ``methods[0]``) to the
    admin API's message. When several gateway entities generated from the same
    object report the same field, later occurrences carry a bracketed ordinal
    (``field``, ``field[0]``, ``field[1]``, ...).
    """

    name: str
    namespace: str = ""
    kind: str
    api_version: str = ""
    uid: str
    problems: Dict[str, str] = Field(..., description="Field path → message")

    @model_validator(mode="after")
    def _require_problems(self) -> "ResourceError":
        """A ResourceError without problems has nothing to report."""
        if not self.problems:
            raise ValueError(
                f"ResourceError for {self.kind} {self.namespace}/{self.name} has no problems"
            )
        return self

    @property
    def owner(self) -> OwnerRef:
        """The owning object's identity, without the problems."""
        return OwnerRef(
            kind=self.kind,
            namespace=self.namespace,
            name=self.name,
            api_version=self.api_version,
            uid=self.uid,
        )
