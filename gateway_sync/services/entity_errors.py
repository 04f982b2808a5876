"""
Entity-error normalizer — turns the admin API's rejection body into
per-object :class:`ResourceError` records.

The body can carry two independent error containers (see
``gateway_sync.schemas.admin_error``):

- ``fields`` (legacy): entity type → list of per-entity field errors, where
  the *position* in the list is the only link back to the submitted entity;
- ``flattened_errors``: one element per failing entity, identified by type
  and name.

Both are walked as separate extraction passes that feed one collector keyed
by the owning object's UID. The collector merges problems from every gateway
entity generated by the same Kubernetes object, suffixing repeated field
names with a bracketed ordinal so nothing is overwritten.

Anything wrong with an individual element is logged and skipped; only a body
that cannot be interpreted at all raises :class:`ResponseParseError`.
"""

import json
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import ValidationError

from gateway_sync.core.exceptions import ResponseParseError
from gateway_sync.models.resource_error import OwnerRef, ResourceError
from gateway_sync.schemas.admin_error import AdminErrorBody, FlattenedEntityError
from gateway_sync.services.owner_resolver import CorrelationKey, OwnerResolver

FieldError = Tuple[str, str]


def parse_flat_entity_errors(
    body: bytes, logger: logging.Logger, resolver: OwnerResolver
) -> List[ResourceError]:
    """
    Parse a failed push's response body into ResourceErrors, one per owner.

    Legacy-shape owners come first, then flattened-shape owners, each in the
    order they were first encountered.

    Raises :class:`ResponseParseError` if the body is not JSON, is not a JSON
    object, carries neither error container, or a container has the wrong
    JSON type.
    """
    payload = _decode_body(body)
    if payload.message:
        logger.debug("admin API rejected configuration: %s", payload.message)

    collector = _ProblemCollector()

    for entity_type, entries in (payload.fields or {}).items():
        _collect_legacy(collector, entity_type, entries, logger, resolver)

    for position, element in enumerate(payload.flattened_errors or []):
        _collect_flattened(collector, position, element, logger, resolver)

    resource_errors = collector.resource_errors()
    logger.debug("parsed %d resource errors from admin API response", len(resource_errors))
    return resource_errors


def _decode_body(body: bytes) -> AdminErrorBody:
    try:
        raw = json.loads(body)
    except (ValueError, RecursionError) as exc:
        raise ResponseParseError(
            "admin API error body is not valid JSON", details=str(exc)
        ) from exc

    if not isinstance(raw, dict):
        raise ResponseParseError(
            f"admin API error body must be a JSON object, got {type(raw).__name__}"
        )
    if "fields" not in raw and "flattened_errors" not in raw:
        raise ResponseParseError(
            "admin API error body carries neither 'fields' nor 'flattened_errors'"
        )

    try:
        return AdminErrorBody.model_validate(raw)
    except ValidationError as exc:
        raise ResponseParseError(
            "admin API error body has malformed error containers",
            details=exc.errors(),
        ) from exc


# ────────────────────────────────────────────────────────────────────────────
# Legacy shape:  {"fields": {"routes": [null, {"methods": "..."}]}}
# ────────────────────────────────────────────────────────────────────────────


def _collect_legacy(
    collector: "_ProblemCollector",
    entity_type: str,
    entries: Any,
    logger: logging.Logger,
    resolver: OwnerResolver,
) -> None:
    if entries is None:
        return
    if not isinstance(entries, list):
        logger.warning(
            "ignoring legacy errors for %s: expected a list, got %s",
            entity_type,
            type(entries).__name__,
            extra={"entity_type": entity_type},
        )
        return

    for index, entry in enumerate(entries):
        if entry is None:
            continue
        if not isinstance(entry, dict):
            logger.warning(
                "ignoring malformed legacy error for %s #%d: expected an object, got %s",
                entity_type,
                index,
                type(entry).__name__,
                extra={"entity_type": entity_type, "entity_key": index},
            )
            continue

        field_errors = list(_flatten_legacy_entry(entry, entity_type, index, logger))
        if not field_errors:
            continue

        owner = _resolve(resolver, logger, entity_type, index)
        if owner is None:
            continue
        for field, message in field_errors:
            collector.add(owner, field, message)


def _flatten_legacy_entry(
    entry: Dict[str, Any], entity_type: str, index: int, logger: logging.Logger
) -> Iterator[FieldError]:
    """
    Flatten one legacy element into ``(field path, message)`` pairs.

    Nested objects become dotted paths; a list of messages yields one pair
    per message under the same field; nested objects inside a list are
    addressed by position (``field[i].child``). Walked with an explicit
    stack; nesting depth is bounded only by the input.
    """
    stack: List[Tuple[str, Any]] = [(str(f), v) for f, v in reversed(list(entry.items()))]
    while stack:
        path, value = stack.pop()
        if value is None:
            continue
        if isinstance(value, dict):
            stack.extend((f"{path}.{f}", v) for f, v in reversed(list(value.items())))
        elif isinstance(value, list):
            stack.extend(
                (f"{path}[{i}]" if isinstance(item, (dict, list)) else path, item)
                for i, item in reversed(list(enumerate(value)))
            )
        elif isinstance(value, str):
            yield path, value
        else:
            logger.warning(
                "ignoring non-string legacy error at %s on %s #%d: got %s",
                path,
                entity_type,
                index,
                type(value).__name__,
                extra={"entity_type": entity_type, "entity_key": index},
            )


# ────────────────────────────────────────────────────────────────────────────
# Flattened shape:  {"flattened_errors": [{"entity_type": ..., "errors": [...]}]}
# ────────────────────────────────────────────────────────────────────────────


def _collect_flattened(
    collector: "_ProblemCollector",
    position: int,
    element: Any,
    logger: logging.Logger,
    resolver: OwnerResolver,
) -> None:
    try:
        entity_error = FlattenedEntityError.model_validate(element)
    except ValidationError as exc:
        logger.warning(
            "ignoring malformed flattened error #%d: %s",
            position,
            exc,
            extra={"entity_key": position},
        )
        return

    key = entity_error.key
    if key is None:
        logger.warning(
            "ignoring flattened error #%d for %s: entity has neither name nor id",
            position,
            entity_error.entity_type,
            extra={"entity_type": entity_error.entity_type, "entity_key": position},
        )
        return

    field_errors = list(_flattened_field_errors(entity_error, key, logger))
    if not field_errors:
        return

    owner = _resolve(resolver, logger, entity_error.entity_type, key)
    if owner is None:
        return
    for field, message in field_errors:
        collector.add(owner, field, message)


def _flattened_field_errors(
    entity_error: FlattenedEntityError, key: str, logger: logging.Logger
) -> Iterator[FieldError]:
    for problem in entity_error.errors:
        # Entity-level problems have no field; address them by the entity itself
        field = problem.field or f"{entity_error.entity_type}:{key}"

        if problem.message:
            yield field, problem.message
        for message in problem.messages:
            yield field, message

        if not problem.message and not problem.messages:
            logger.warning(
                "ignoring %s error without a message on %s %s",
                problem.type,
                entity_error.entity_type,
                key,
                extra={"entity_type": entity_error.entity_type, "entity_key": key},
            )


# ────────────────────────────────────────────────────────────────────────────
# Owner resolution + merge
# ────────────────────────────────────────────────────────────────────────────


def _resolve(
    resolver: OwnerResolver,
    logger: logging.Logger,
    entity_type: str,
    key: CorrelationKey,
) -> Optional[OwnerRef]:
    owner = resolver.lookup(entity_type, key)
    if owner is None:
        logger.warning(
            "could not resolve owning object for %s %r; dropping its errors",
            entity_type,
            key,
            extra={"entity_type": entity_type, "entity_key": key},
        )
    return owner


class _ProblemCollector:
    """Groups field errors by owner UID, preserving first-seen order."""

    def __init__(self) -> None:
        self._owners: Dict[str, OwnerRef] = {}
        self._problems: Dict[str, Dict[str, str]] = {}
        # (uid, field) → next bracketed ordinal to try
        self._next_ordinal: Dict[Tuple[str, str], int] = {}

    def add(self, owner: OwnerRef, field: str, message: str) -> None:
        self._owners.setdefault(owner.uid, owner)
        problems = self._problems.setdefault(owner.uid, {})

        key = field
        if key in problems:
            ordinal = self._next_ordinal.get((owner.uid, field), 0)
            while f"{field}[{ordinal}]" in problems:
                ordinal += 1
            key = f"{field}[{ordinal}]"
            self._next_ordinal[(owner.uid, field)] = ordinal + 1

        problems[key] = message

    def resource_errors(self) -> List[ResourceError]:
        return [
            self._owners[uid].to_resource_error(problems)
            for uid, problems in self._problems.items()
            if problems
        ]
