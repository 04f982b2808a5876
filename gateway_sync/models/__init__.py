"""Domain models — re-exported for ``from gateway_sync.models import ...``."""

from gateway_sync.models.failure_reason import FailureReason  # noqa: F401
from gateway_sync.models.resource_error import OwnerRef, ResourceError  # noqa: F401
