"""Decoding of the chat stream's ``data:`` frames."""

import logging

from pydantic import ValidationError

from ragdesk.models.schemas import StreamFrame

logger = logging.getLogger(__name__)

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


def _payload(line: str) -> str | None:
    if not line.startswith(DATA_PREFIX):
        return None
    return line[len(DATA_PREFIX):].strip()


def is_done(line: str) -> bool:
    """Return True if the line is the end-of-stream sentinel."""
    return _payload(line) == DONE_SENTINEL


def decode_frame(line: str) -> StreamFrame | None:
    """Decode one stream line into a frame.

    Lines without the ``data:`` prefix, empty payloads and payloads that are
    not a JSON object of the expected shape all decode to None. A frame can
    be split across network reads, so a bad payload is noise, not an error.

    Args:
        line: One line of the response body, without its newline.

    Returns:
        The decoded frame, or None when there is nothing to apply.
    """
    payload = _payload(line)
    if not payload or payload == DONE_SENTINEL:
        return None

    try:
        return StreamFrame.model_validate_json(payload)
    except ValidationError:
        logger.debug(f"Discarding malformed frame: {payload[:80]!r}")
        return None
