"""
NutriChat utility functions
"""

from __future__ import annotations
import math
import re
from typing import Any, Iterable, List, Mapping, Optional, Sequence


# Coercion utilities

TRUE_WORDS = {"true", "yes", "y", "1", "on", "是"}
FALSE_WORDS = {"false", "no", "n", "0", "off", "否"}


def coerce_number(value: Any) -> Optional[float]:
    """Best-effort conversion to a finite number; never raises.

    Integral values come back as ``int`` so they serialize as ``320`` rather than ``320.0``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        num = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(num):
        return None
    return int(num) if num.is_integer() else num


def coerce_string(value: Any) -> Optional[str]:
    """Trimmed, non-empty string form of value, else None."""
    if value is None:
        return None
    text = _to_text(value).strip()
    return text or None


def coerce_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in TRUE_WORDS:
            return True
        if word in FALSE_WORDS:
            return False
    return None


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_blank(value: Any) -> bool:
    return isinstance(value, str) and not value.strip()


def first_defined(
    source: Any, aliases: Sequence[str], skip_blank: bool = False
) -> Any:
    """Return the value of the first alias present in source.

    Aliases are tried in order; ``None`` counts as absent and, with
    ``skip_blank``, so do whitespace-only strings. Non-mapping sources yield None.
    """
    if not isinstance(source, Mapping):
        return None
    for key in aliases:
        value = source.get(key)
        if value is None:
            continue
        if skip_blank and _is_blank(value):
            continue
        return value
    return None


def unique_list(values: Iterable[Any]) -> List[str]:
    """Trim, drop empties and keep the first occurrence of each entry."""
    seen: set[str] = set()
    result: List[str] = []
    for value in values:
        if value is None:
            continue
        text = _to_text(value).strip()
        if not text or text in seen:
            continue
        seen.add(text)
        result.append(text)
    return result


# Text list utilities

LIST_DELIMITERS = re.compile(r"[\n,，;；、]")
STEP_NUMBER = re.compile(r"^\s*\d+\.\s*")
ANNOTATION = re.compile(r"\(.*?\)|（.*?）")


def _split_text(value: Iterable[Any]) -> List[str]:
    items = []
    for item in value:
        if item is None:
            continue
        text = _to_text(item).strip()
        if text:
            items.append(text)
    return items


def parse_ingredient_list(value: Any) -> List[str]:
    """Tolerant list split that keeps repeated entries.

    Arrays map element-wise, strings split on newline and (full-width) comma,
    semicolon and enumeration-comma delimiters, mappings recurse into their values.
    """
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return _split_text(value)
    if isinstance(value, str):
        return _split_text(LIST_DELIMITERS.split(value))
    if isinstance(value, Mapping):
        return parse_ingredient_list(list(value.values()))
    return _split_text([value])


def normalize_text_list(value: Any) -> List[str]:
    """Same splitting rules as parse_ingredient_list, deduplicated in first-seen order.

    Delimited strings are deduplicated too: the result never holds two equal
    trimmed entries, whatever the input shape.
    """
    return unique_list(parse_ingredient_list(value))


def normalize_steps(value: Any) -> List[str]:
    """Instruction steps: one step per line with any leading "1. " marker removed."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return _split_text(value)
    if isinstance(value, str):
        lines = (STEP_NUMBER.sub("", line, count=1) for line in value.splitlines())
        return _split_text(lines)
    if isinstance(value, Mapping):
        if isinstance(value.get("steps"), (list, tuple)):
            return normalize_steps(value["steps"])
        return normalize_steps(list(value.values()))
    return _split_text([value])


def strip_annotations(text: str) -> str:
    """Remove parenthesized notes: "雞胸肉(去皮)" -> "雞胸肉"."""
    return ANNOTATION.sub("", text).strip()
