"""JSON framing for the backend WebSocket."""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def encode_frame(event: dict[str, Any]) -> str:
    return json.dumps(event, ensure_ascii=False)


def decode_frame(raw: str | bytes) -> dict[str, Any] | None:
    """Decode one inbound frame into an envelope.

    An envelope is a JSON object with a string ``type``. Anything else
    returns None.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Dropping non-UTF-8 frame")
            return None

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("Dropping unparseable frame: %.80s", raw)
        return None

    if not isinstance(data, dict) or not isinstance(data.get("type"), str):
        logger.debug("Dropping frame without a type: %.80s", raw)
        return None
    return data
