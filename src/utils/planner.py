"""
Execution planning for extracted channel specs.

Turns raw ChannelSpec entries into NormalizedChannel entries that are safe to
send to the directory API, and renders the dry-run preview.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set, Union

from .channel_specs import ChannelSpec
from .logging import logger
from .naming import sanitize_channel_name, make_unique


class ChannelKind(Enum):
    """Kind of directory entry to create."""
    TEXT = "text"
    VOICE = "voice"
    CATEGORY = "category"


@dataclass
class NormalizedChannel:
    """A channel ready for creation."""
    name: str
    type: ChannelKind
    topic: Optional[str] = None
    parent: Optional[str] = None


DRY_RUN_HEADER = "**Dry Run Preview:**"
EMPTY_PREVIEW = "_(no channels)_"


def coerce_kind(raw_type: Optional[str]) -> ChannelKind:
    """Map the model's type string to a ChannelKind.

    Matching is exact: only the lowercase tokens 'voice' and 'category' are
    recognized, everything else becomes a text channel.
    """
    if raw_type == "voice":
        return ChannelKind.VOICE
    if raw_type == "category":
        return ChannelKind.CATEGORY
    return ChannelKind.TEXT


def _base_name(spec: ChannelSpec, index: int) -> str:
    """Sanitized name for a spec, falling back to channel-<index>."""
    name = sanitize_channel_name(spec.name or "")
    return name or f"channel-{index}"


def normalize_channels(specs: Sequence[ChannelSpec]) -> List[NormalizedChannel]:
    """Normalize names, types and parent references of extracted specs.

    Args:
        specs: Channel specs in model order.

    Returns:
        Normalized channels in the same order. Category names are unique in
        the batch and channel names are unique among siblings; parents that
        do not name a category of the batch are dropped.
    """
    kinds = [coerce_kind(spec.type) for spec in specs]
    base_names = [_base_name(spec, index) for index, spec in enumerate(specs, start=1)]

    # First category wins when several sanitize to the same name
    categories: Dict[str, str] = {}
    taken_categories: Set[str] = set()
    final_names: List[Optional[str]] = [None] * len(specs)
    for i, kind in enumerate(kinds):
        if kind is ChannelKind.CATEGORY:
            unique = make_unique(base_names[i], taken_categories)
            categories.setdefault(base_names[i], unique)
            final_names[i] = unique

    taken_by_parent: Dict[Optional[str], Set[str]] = {}
    channels = []
    for i, spec in enumerate(specs):
        kind = kinds[i]
        if kind is ChannelKind.CATEGORY:
            channels.append(NormalizedChannel(name=final_names[i], type=kind, topic=spec.topic))
            continue

        parent = None
        if spec.parent:
            parent = categories.get(sanitize_channel_name(spec.parent))
            if parent is None:
                logger.warning(
                    f"Channel '{base_names[i]}' references unknown category '{spec.parent}', creating it without a parent"
                )

        name = make_unique(base_names[i], taken_by_parent.setdefault(parent, set()))
        channels.append(NormalizedChannel(name=name, type=kind, topic=spec.topic, parent=parent))

    return channels


def format_preview_line(channel: NormalizedChannel) -> str:
    """Format one dry-run line, e.g. '- TEXT: general (parent: team-alpha)'."""
    line = f"- {channel.type.value.upper()}: {channel.name}"
    if channel.parent:
        line += f" (parent: {channel.parent})"
    return line


def render_preview(channels: Sequence[NormalizedChannel]) -> str:
    """Render the dry-run preview for normalized channels."""
    lines = [format_preview_line(channel) for channel in channels] or [EMPTY_PREVIEW]
    return DRY_RUN_HEADER + "\n" + "\n".join(lines)


def plan(specs: Sequence[ChannelSpec], dry_run: bool) -> Union[List[NormalizedChannel], str]:
    """Normalize specs and either preview them or return them for execution.

    Args:
        specs: Extracted channel specs.
        dry_run: If True, return the preview text instead of the channels.

    Returns:
        Preview text in dry-run mode, otherwise the normalized channels.
    """
    channels = normalize_channels(specs)
    if dry_run:
        return render_preview(channels)
    return channels
