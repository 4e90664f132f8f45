"""Parsing of the model's spell-check reply.

The reply must contain one fenced block::

    ```json
    [ {...SpellError...}, ... ]
    ```

Anything else is either an empty reply (no errors) or a contract violation,
which is reported as a single sentinel :class:`SpellError` instead of raising.
"""

import json
import logging
import re
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from app.models.findings import SpellError
from app.services.prompt import NO_ERRORS_MESSAGE

logger = logging.getLogger(__name__)

# Opening marker, body, closing marker.  The body is matched lazily so a reply
# with several blocks yields the first one.
_FENCE_RE = re.compile(r"```json[ \t]*\r?\n(.*?)\r?\n[ \t]*```", re.DOTALL)

_ERROR_LIST = TypeAdapter(List[SpellError])


def extract_fenced_json(reply: str) -> Optional[str]:
    """Return the body of the first ```json fenced block, or None."""
    match = _FENCE_RE.search(reply or "")
    return match.group(1) if match else None


def _is_no_errors_reply(errors: List[SpellError]) -> bool:
    if len(errors) != 1:
        return False
    only = errors[0]
    return (
        only.error_word == ""
        and only.original_sentence == ""
        and only.corrected_sentence == ""
        and only.offset == 0
        and only.message == NO_ERRORS_MESSAGE
    )


def parse_reply(reply: str, source_text: str = "") -> List[SpellError]:
    """Turn the raw model reply into spell errors.

    *source_text* is the checked text; sentinels carry it as their sentence so
    the failure can be located in the log.
    """
    reply = reply or ""
    candidate = extract_fenced_json(reply)

    if candidate is None:
        if not reply.strip():
            logger.info("Model reply is empty; assuming no spelling errors.")
            return []
        logger.error("Model reply has no ```json block. Raw reply: %s", reply)
        return [
            SpellError.sentinel(
                f"Phản hồi từ AI không chứa khối JSON hợp lệ. Phản hồi thô: {reply}",
                source_text,
            )
        ]

    try:
        errors = _ERROR_LIST.validate_python(json.loads(candidate))
    except (ValueError, ValidationError) as exc:
        # json.JSONDecodeError is a ValueError
        logger.error(
            "Could not decode model reply: %s. Extracted JSON: %s. Raw reply: %s",
            exc,
            candidate,
            reply,
        )
        return [
            SpellError.sentinel(
                f"Lỗi phân tích phản hồi JSON từ AI: {exc}. "
                f"JSON trích xuất: {candidate}. Phản hồi thô: {reply}",
                source_text,
            )
        ]

    if _is_no_errors_reply(errors):
        logger.info("Model reported no spelling errors.")
        return []
    return errors
