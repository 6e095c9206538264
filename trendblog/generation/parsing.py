"""Recover article JSON from free-form model output.

Model replies are handled in a fixed order:

1. strip Markdown code fences
2. take the span from the first ``{`` to the last ``}``
3. strict ``json.loads``
4. apply the named repair stages in ``REPAIR_STAGES`` one after another,
   re-parsing after each
5. as a last resort, pull ``"field": "..."`` pairs out with regular
   expressions

Whatever strategy succeeds, all of ``REQUIRED_FIELDS`` must be present and
non-empty or the reply is rejected as a whole.
"""

import json
import re
from typing import Callable, Dict, List, Optional, Tuple

from ..errors import GenerationError
from .models import ParsedResponse

REQUIRED_FIELDS = ("title", "metaDescription", "content")

FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)
OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


def strip_code_fences(text: str) -> str:
    return FENCE_PATTERN.sub("", text).strip()


def extract_json_span(text: str) -> Optional[str]:
    match = OBJECT_PATTERN.search(text)
    return match.group(0) if match else None


def strip_trailing_commas(text: str) -> str:
    """Drop commas directly before a closing brace or bracket."""
    return re.sub(r",\s*([\]}])", r"\1", text)


def collapse_control_whitespace(text: str) -> str:
    """Replace raw newlines and tabs, which JSON forbids inside strings."""
    return re.sub(r"[\n\r\t]", " ", text)


def normalize_quote_commas(text: str) -> str:
    return re.sub(r'"\s*,\s*"', '","', text)


def unescape_quotes(text: str) -> str:
    return text.replace('\\"', '"')


def unescape_backslashes(text: str) -> str:
    return text.replace("\\\\", "\\")


REPAIR_STAGES: List[Tuple[str, Callable[[str], str]]] = [
    ("strip_trailing_commas", strip_trailing_commas),
    ("collapse_control_whitespace", collapse_control_whitespace),
    ("normalize_quote_commas", normalize_quote_commas),
    ("unescape_quotes", unescape_quotes),
    ("unescape_backslashes", unescape_backslashes),
]


def _load_object(text: str) -> Optional[dict]:
    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, dict) else None


def _string_fields(data: dict) -> Dict[str, str]:
    return {
        name: data[name].strip()
        for name in REQUIRED_FIELDS
        if isinstance(data.get(name), str) and data[name].strip()
    }


def extract_fields_by_pattern(text: str) -> Dict[str, str]:
    """
    Pull each required field out with a regular expression.

    A value runs up to the first double quote that is followed by another
    key or by the closing brace, so stray unescaped quotes inside the value
    survive.
    """
    fields = {}
    for name in REQUIRED_FIELDS:
        pattern = re.compile(
            rf'"{name}"\s*:\s*"(.*?)"\s*(?=,\s*"[A-Za-z_]+"\s*:|\}}|$)',
            re.DOTALL,
        )
        match = pattern.search(text)
        if match:
            value = match.group(1).replace('\\"', '"').strip()
            if value:
                fields[name] = value
    return fields


def _require_fields(fields: Dict[str, str]) -> None:
    missing = [name for name in REQUIRED_FIELDS if name not in fields]
    if missing:
        raise GenerationError(f"The generated content is missing required fields: {', '.join(missing)}")


def parse_article_response(text: str, accept_fallback: bool = False) -> ParsedResponse:
    """
    Parse a model reply into article fields.

    Args:
        text: Raw model output
        accept_fallback: Whether a regex-extracted result counts as valid

    Returns:
        Parsed fields and the strategy that produced them

    Raises:
        GenerationError: If no complete article can be recovered
    """
    if not text or not text.strip():
        raise GenerationError("No text found in the model response")

    cleaned = strip_code_fences(text)
    candidate = extract_json_span(cleaned)

    if candidate is not None:
        data = _load_object(candidate)
        if data is not None:
            fields = _string_fields(data)
            _require_fields(fields)
            return ParsedResponse(fields=fields, strategy="strict")

        applied: List[str] = []
        repaired = candidate
        for name, stage in REPAIR_STAGES:
            repaired = stage(repaired)
            applied.append(name)
            data = _load_object(repaired)
            if data is not None:
                fields = _string_fields(data)
                _require_fields(fields)
                return ParsedResponse(fields=fields, strategy="repaired", repairs_applied=applied)

    fields = extract_fields_by_pattern(cleaned)
    if not fields:
        raise GenerationError("No JSON object found in the model response")
    _require_fields(fields)

    if not accept_fallback:
        raise GenerationError("Model output was only recoverable by field extraction; discarded by policy")

    return ParsedResponse(fields=fields, strategy="fallback")


def clean_content(content: str) -> str:
    """Unescape and squeeze whitespace in generated HTML."""
    content = content.replace("\\n", "\n").replace('\\"', '"').replace("\\", "")
    content = re.sub(r"\n{2,}", "\n", content)
    content = re.sub(r"\s{2,}", " ", content)
    return content.strip()
