"""
Failure classifier — reduces a failed push attempt's exception to a
:class:`FailureReason`.

The exception handed over by the push orchestrator is rarely a single
object. It can be wrapped (``raise PushError(...) from exc``), wrapped by a
:class:`ConfigConflictError`, or be an aggregate (:class:`ErrorArray`,
``ExceptionGroup``) of independent failures that may themselves be wrapped.
The classifier treats all of that as a graph and visits every reachable
node once.

Precedence, first match anywhere in the graph wins:

1. ``NETWORK``: any transport-level error. Unconditional: a conflict
   wrapper around a connection failure is still a network failure.
2. ``CONFLICT``: an admin-API 409, or any ``ConfigConflictError`` (even one
   wrapping nothing).
3. ``OTHER``: everything else.

The classifier is total: it never raises and never returns anything outside
the enum.
"""

import socket
from typing import Iterator, List, Optional

import httpx

from gateway_sync.core.exceptions import (
    AdminAPIError,
    ConfigConflictError,
    ErrorArray,
    PushNetworkError,
)
from gateway_sync.models.failure_reason import FailureReason

# Connectivity failures: DNS, refused/reset/aborted connections, transport timeouts.
NETWORK_ERRORS = (
    httpx.NetworkError,
    httpx.TimeoutException,
    httpx.ProxyError,
    ConnectionError,
    TimeoutError,
    socket.gaierror,
    socket.herror,
    PushNetworkError,
)

HTTP_CONFLICT = 409


def classify_push_failure(err: Optional[BaseException]) -> FailureReason:
    """Return the retry-relevant reason a push attempt failed."""
    if err is None:
        return FailureReason.OTHER

    nodes = list(walk_error_graph(err))
    if any(is_network_error(node) for node in nodes):
        return FailureReason.NETWORK
    if any(is_conflict_error(node) for node in nodes):
        return FailureReason.CONFLICT
    return FailureReason.OTHER


def walk_error_graph(err: BaseException) -> Iterator[BaseException]:
    """
    Depth-first walk over every exception reachable from ``err``.

    Each node is yielded once; implicit ``__context__`` chains can loop back
    on themselves, so nodes are tracked by identity.
    """
    seen = set()
    stack = [err]
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        yield node
        stack.extend(reversed(_causes(node)))


def _causes(node: BaseException) -> List[BaseException]:
    causes: List[BaseException] = []

    if isinstance(node, ConfigConflictError) and node.err is not None:
        causes.append(node.err)
    if isinstance(node, ErrorArray):
        causes.extend(node.errors)
    if isinstance(node, BaseExceptionGroup):
        causes.extend(node.exceptions)

    if node.__cause__ is not None:
        causes.append(node.__cause__)
    if node.__context__ is not None and not node.__suppress_context__:
        causes.append(node.__context__)

    return [cause for cause in causes if isinstance(cause, BaseException)]


def is_network_error(node: BaseException) -> bool:
    """True for transport/connectivity-level failures."""
    return isinstance(node, NETWORK_ERRORS)


def is_conflict_error(node: BaseException) -> bool:
    """True for a 409 from the admin API or a configuration-conflict wrapper."""
    if isinstance(node, ConfigConflictError):
        return True
    if isinstance(node, AdminAPIError):
        return node.is_conflict
    if isinstance(node, httpx.HTTPStatusError):
        response = getattr(node, "response", None)
        return getattr(response, "status_code", None) == HTTP_CONFLICT
    return False
