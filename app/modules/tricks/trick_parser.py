"""
Parse a generated magic trick out of a model reply.

The reply is free text with a JSON object somewhere inside it. The outermost
``{...}`` span is decoded; missing or empty fields get defaults, an unknown
difficulty becomes ``Easy``. When there is no object, the JSON is invalid, or a
field holds the wrong type, the whole reply is replaced by a fallback trick.
"""
import json
import logging
import re
from typing import Any, Dict, List

from app.config.tricks_config import DIFFICULTIES
from app.modules.tricks.schemas import GeneratedTrick

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

DEFAULT_TITLE = "Generated Magic Trick"
DEFAULT_DESCRIPTION = "A magical trick created just for you!"
DEFAULT_INSTRUCTIONS = ["Follow the magic!"]


class TrickParseError(ValueError):
    pass


def fallback_trick(requested_items: List[str]) -> GeneratedTrick:
    return GeneratedTrick(
        title="AI Generated Magic Trick",
        description="A magical trick created using artificial intelligence!",
        instructions=[
            "Gather your items",
            "Follow the magical steps",
            "Practice the routine",
            "Amaze your audience!",
        ],
        difficulty="Easy",
        items=list(requested_items),
    )


def extract_json_object(content: str) -> Dict[str, Any]:
    match = _JSON_OBJECT.search(content)
    if not match:
        raise TrickParseError("No JSON found in response")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise TrickParseError(f"Invalid JSON in response: {e}") from e
    if not isinstance(parsed, dict):
        raise TrickParseError("JSON in response is not an object")
    return parsed


def _text_field(parsed: Dict[str, Any], name: str, default: str) -> str:
    value = parsed.get(name)
    if value is None or value == "":
        return default
    if not isinstance(value, str):
        raise TrickParseError(f"'{name}' must be a string")
    return value


def _list_field(parsed: Dict[str, Any], name: str, default: List[str]) -> List[str]:
    value = parsed.get(name)
    if value is None:
        return list(default)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise TrickParseError(f"'{name}' must be a list of strings")
    return value


def _difficulty_field(parsed: Dict[str, Any]) -> str:
    value = parsed.get("difficulty")
    if value is None:
        return "Easy"
    if not isinstance(value, str):
        raise TrickParseError("'difficulty' must be a string")
    return value if value in DIFFICULTIES else "Easy"


def parse_generated_trick(content: str, requested_items: List[str]) -> GeneratedTrick:
    try:
        parsed = extract_json_object(content)
        return GeneratedTrick(
            title=_text_field(parsed, "title", DEFAULT_TITLE),
            description=_text_field(parsed, "description", DEFAULT_DESCRIPTION),
            instructions=_list_field(parsed, "instructions", DEFAULT_INSTRUCTIONS),
            difficulty=_difficulty_field(parsed),
            items=_list_field(parsed, "items", requested_items),
        )
    except TrickParseError as e:
        logger.error(f"Error parsing generated trick: {e}")
        return fallback_trick(requested_items)
