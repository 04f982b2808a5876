"""
Failure reason for a whole push attempt.

A coarse summary signal, independent of any per-entity detail. The values are
used verbatim as the ``failure_reason`` metrics label.
"""

from enum import Enum


class FailureReason(str, Enum):
    """Retry-relevant classification of a failed push."""

    CONFLICT = "conflict"
    NETWORK = "network"
    OTHER = "other"
