"""
Extraction of channel specifications from raw model output.

The model is asked for a bare JSON array, but replies often wrap it in prose
or code fences. Only the first bracket-delimited substring is parsed, and
every element is coerced field by field since the content is untrusted.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from .exceptions import MalformedResponse
from .logging import logger


# Spans from the first "[" to the last "]"
_ARRAY_PATTERN = re.compile(r"\[.*\]", re.DOTALL)

SPEC_FIELDS = ("name", "type", "topic", "parent")


@dataclass
class ChannelSpec:
    """A channel as described by the model, before normalization."""
    name: Optional[str] = None
    type: Optional[str] = None
    topic: Optional[str] = None
    parent: Optional[str] = None


def _coerce_field(value: Any) -> Optional[str]:
    """Coerce one untrusted field to an optional string."""
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _coerce_spec(index: int, element: Any) -> Optional[ChannelSpec]:
    """Validate a single array element, returning None when it must be rejected."""
    if not isinstance(element, dict):
        logger.warning(f"Skipping channel entry {index}: expected an object, got {type(element).__name__}")
        return None
    return ChannelSpec(**{field: _coerce_field(element.get(field)) for field in SPEC_FIELDS})


def find_array_text(raw_text: str) -> str:
    """Return the first bracket-delimited substring, or the whole text if none."""
    match = _ARRAY_PATTERN.search(raw_text)
    return match.group(0) if match else raw_text


def extract_channel_specs(raw_text: str) -> List[ChannelSpec]:
    """Parse raw model text into an ordered list of channel specs.

    Args:
        raw_text: The completion text, possibly surrounded by prose.

    Returns:
        The channel specs in the order the model listed them.

    Raises:
        MalformedResponse: If no JSON array can be parsed from the text.
    """
    json_text = find_array_text(raw_text or "")

    try:
        parsed = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Could not parse channel list: {e}") from e

    if not isinstance(parsed, list):
        raise MalformedResponse(
            f"Could not parse channel list: expected a JSON array, got {type(parsed).__name__}"
        )

    specs = []
    for index, element in enumerate(parsed, start=1):
        spec = _coerce_spec(index, element)
        if spec is not None:
            specs.append(spec)

    logger.info(f"Extracted {len(specs)} channel spec(s) from {len(parsed)} entries")
    return specs
