"""
Application configuration module.

Loads settings from environment variables (or .env file) using pydantic-settings.
Nothing here is required at runtime: every value has a usable default so the
interpreter can be embedded in any controller process without extra setup.
"""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the gateway push-result interpreter.

    Environment variables are loaded automatically from .env if present.
    In a cluster deployment these are injected through the controller's
    Deployment manifest (env / envFrom).
    """

    PROJECT_NAME: str = "Gateway Sync"

    # ── Logging ──
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    # Empty string disables the rotating file handlers (console only).
    LOG_DIR: str = ""
    LOG_FILE_MAX_BYTES: int = 10 * 1024 * 1024
    LOG_FILE_BACKUP_COUNT: int = 5

    # ── Kubernetes ownership tags ──
    # Every gateway entity generated from a Kubernetes object carries tags
    # with these prefixes; the snapshot resolver reads them back to find
    # which object a rejected entity came from.
    K8S_NAME_TAG_PREFIX: str = "k8s-name:"
    K8S_NAMESPACE_TAG_PREFIX: str = "k8s-namespace:"
    K8S_KIND_TAG_PREFIX: str = "k8s-kind:"
    K8S_UID_TAG_PREFIX: str = "k8s-uid:"
    K8S_GROUP_TAG_PREFIX: str = "k8s-group:"
    K8S_VERSION_TAG_PREFIX: str = "k8s-version:"

    @field_validator("LOG_LEVEL")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        """Reject level names the logging module does not know."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(
                f"LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL (got '{v}')"
            )
        return level

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
