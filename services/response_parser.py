"""Extraction of the plan JSON object from raw generator text"""

import json
import logging
import re
from typing import Any

from app.exceptions import MalformedResponseError

logger = logging.getLogger("nutrichat.parser")

JSON_FENCE = re.compile(r"```json([\s\S]*?)```", re.IGNORECASE)


def extract_json(text: Any) -> str:
    """
    Best-guess JSON object substring of a noisy reply.

    Uses the interior of a ```json fence when one is present, then slices from
    the first "{" to the last "}". Braces are not balanced or string-aware;
    json parsing of the slice is the real check.

    Raises:
        MalformedResponseError: text is empty or holds no "{...}" span
    """
    if not isinstance(text, str) or not text.strip():
        raise MalformedResponseError("DeepSeek 回傳為空字串。")

    fence = JSON_FENCE.search(text)
    candidate = fence.group(1) if fence else text
    start = candidate.find("{")
    end = candidate.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise MalformedResponseError("DeepSeek 回傳內容找不到 JSON 結構。")
    return candidate[start:end + 1]


def parse_plan(text: Any) -> Any:
    """Extract and decode the plan object; the decoded value may still be a non-object."""
    json_text = extract_json(text)
    try:
        return json.loads(json_text)
    except ValueError as e:
        # JSONDecodeError, or an integer literal past the int conversion limit
        logger.warning("Generator reply is not valid JSON: %s", e)
        raise MalformedResponseError(f"DeepSeek 回傳內容無法解析為 JSON：{e}") from e
