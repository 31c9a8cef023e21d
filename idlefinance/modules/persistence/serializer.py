"""
Save codec for player state.

Purpose
-------
Convert ``PlayerState`` to and from its JSON save payload. The payload is
the camelCase shape produced by ``PlayerState.to_dict``.

Responsibilities
----------------
- Serialize a snapshot to a JSON string
- Decode a stored payload, rejecting anything unusable

Non-Responsibilities
--------------------
- Storage backends (files, databases, browser storage)
- Migrating old schema versions

Design Notes
------------
Decoding never raises: a corrupt, foreign or outdated payload yields
``None`` and a WARNING log, and the driver starts a fresh state.
"""

from __future__ import annotations

import json
from typing import Optional

from idlefinance.core.logging.logger import get_logger
from idlefinance.domain.models.base import DomainValidationError
from idlefinance.domain.models.player import CURRENT_SCHEMA_VERSION, PlayerState

logger = get_logger(__name__)


def serialize_player_state(state: PlayerState) -> str:
    """
    Serialize a snapshot to a JSON string.

    Raises:
        ValueError: ``marketing`` or ``entitlements`` hold values JSON
            cannot represent
    """
    return json.dumps(state.to_dict(), ensure_ascii=False)


def deserialize_player_state(
    raw: Optional[str], expected_schema_version: int = CURRENT_SCHEMA_VERSION
) -> Optional[PlayerState]:
    """
    Decode a stored payload.

    Args:
        raw: JSON text as previously produced by ``serialize_player_state``
        expected_schema_version: Version the caller's engine understands

    Returns:
        The decoded PlayerState, or None when the payload is empty, not
        valid JSON, not an object, carries a missing/non-numeric/different
        ``schemaVersion``, or violates state invariants
    """
    if not raw:
        return None

    try:
        payload = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        logger.warning("Discarding save: invalid JSON", extra={"error": str(e)})
        return None

    if not isinstance(payload, dict):
        logger.warning(
            "Discarding save: payload is not an object",
            extra={"payload_type": type(payload).__name__},
        )
        return None

    version = payload.get("schemaVersion")
    if isinstance(version, bool) or not isinstance(version, (int, float)):
        logger.warning("Discarding save: missing schemaVersion")
        return None
    if version != expected_schema_version:
        logger.warning(
            "Discarding save: schema version mismatch",
            extra={"schema_version": version, "expected_schema_version": expected_schema_version},
        )
        return None

    try:
        return PlayerState.from_dict(payload)
    except DomainValidationError as e:
        logger.warning(
            "Discarding save: invalid player state",
            extra={"error": str(e), "field": e.field},
        )
        return None
