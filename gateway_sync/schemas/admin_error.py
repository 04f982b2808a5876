"""
Pydantic schemas for the admin API's configuration-push error body.

The admin API reports a rejected declarative configuration in one of two
shapes, and newer gateways send both in the same body::

    {
        "code": 14,
        "name": "invalid declarative configuration",
        "message": "declarative config is invalid: ...",
        "fields": {                           # legacy shape
            "routes": [null, {"methods": "..."}],
            "services": [{"read_timeout": "expected an integer"}]
        },
        "flattened_errors": [                 # flattened shape
            {
                "entity_type": "route",
                "entity_name": "default.demo.00",
                "errors": [{"field": "methods", "message": "...", "type": "field"}]
            }
        ]
    }

Only the containers are validated at body level. Individual flattened
elements are validated one at a time by the parser so a single malformed
element is skipped instead of discarding the whole body.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FlattenedFieldError(BaseModel):
    """
    One problem reported against a flattened entity.

    ``type`` is ``"field"`` for field-level problems and ``"entity"`` for
    problems with the entity as a whole (no ``field``). Array-valued fields
    report one message per offending element in ``messages``.
    """

    model_config = ConfigDict(extra="allow")

    field: str = ""
    message: Optional[str] = None
    messages: List[str] = Field(default_factory=list)
    type: str = "field"


class FlattenedEntityError(BaseModel):
    """All problems reported for one submitted entity."""

    model_config = ConfigDict(extra="allow")

    entity_type: str
    entity_name: Optional[str] = None
    entity_id: Optional[str] = None
    entity_tags: Optional[List[str]] = None
    entity: Optional[Dict[str, Any]] = None
    errors: List[FlattenedFieldError] = Field(default_factory=list)

    @property
    def key(self) -> Optional[str]:
        """Correlation key for owner lookup: the entity name, else its ID."""
        return self.entity_name or self.entity_id


class AdminErrorBody(BaseModel):
    """Envelope of a failed ``POST /config`` response."""

    model_config = ConfigDict(extra="allow")

    code: Optional[int] = None
    name: Optional[str] = None
    message: Optional[str] = None
    fields: Optional[Dict[str, Any]] = None
    flattened_errors: Optional[List[Any]] = None
