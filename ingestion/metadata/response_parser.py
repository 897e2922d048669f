import json
import re
from typing import Any

from ingestion.logging.logger import Log
from ingestion.metadata.exceptions import ResponseParseError

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```")
_BRACED_SPAN = re.compile(r"\{[\s\S]*\}")


def decode_json_object(raw: str) -> dict[str, Any]:
    """Decode the JSON object embedded in an AI answer.

    A fenced ```json block is preferred, then the widest ``{...}`` span.

    Raises:
        ResponseParseError: if no span decodes to a JSON object.
    """
    match = _FENCED_JSON.search(raw) or _BRACED_SPAN.search(raw)
    if match is None:
        raise ResponseParseError("AI response contains no JSON object")
    candidate = match.group(1) if match.re is _FENCED_JSON else match.group(0)
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise ResponseParseError(f"AI response is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ResponseParseError("AI response JSON is not an object")
    return parsed


def parse_ai_response(raw: Any) -> dict[str, Any] | None:
    """Turn an AI answer into a JSON object without ever raising.

    An answer that is already a dict is returned as-is. Anything that does
    not decode to an object yields None.
    """
    if isinstance(raw, dict):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        return decode_json_object(raw)
    except ResponseParseError as exc:
        Log.warning(str(exc))
        return None
