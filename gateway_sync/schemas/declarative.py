"""
Pydantic model of the declarative configuration snapshot submitted to the
gateway.

Only what owner resolution needs is modelled: the per-type entity lists, each
entity kept as a raw dict (``name``, ``id``, ``tags`` and nested children).
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

# Plural snapshot keys, in the order the admin API reports them.
ENTITY_TYPES = (
    "services",
    "routes",
    "upstreams",
    "targets",
    "consumers",
    "plugins",
    "certificates",
    "ca_certificates",
    "snis",
    "vaults",
)


class DeclarativeConfig(BaseModel):
    """A declarative configuration as last submitted to the admin API."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    format_version: str = Field(default="3.0", alias="_format_version")

    services: List[Dict[str, Any]] = Field(default_factory=list)
    routes: List[Dict[str, Any]] = Field(default_factory=list)
    upstreams: List[Dict[str, Any]] = Field(default_factory=list)
    targets: List[Dict[str, Any]] = Field(default_factory=list)
    consumers: List[Dict[str, Any]] = Field(default_factory=list)
    plugins: List[Dict[str, Any]] = Field(default_factory=list)
    certificates: List[Dict[str, Any]] = Field(default_factory=list)
    ca_certificates: List[Dict[str, Any]] = Field(default_factory=list)
    snis: List[Dict[str, Any]] = Field(default_factory=list)
    vaults: List[Dict[str, Any]] = Field(default_factory=list)
