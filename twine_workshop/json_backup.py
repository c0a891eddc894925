#!/usr/bin/env python3
"""
JSON Backup Module

Lossless JSON serialization of a story, used for backups and round trips.

Format:
    {
        "title": "...",
        "startPassage": "Start",
        "passages": {
            "Start": {"name": "Start", "content": "...", "tags": [],
                      "x": 100, "y": 100, "width": 100, "height": 100}
        },
        "ifid": "...",
        "format": "...",
        "formatVersion": "...",
        "zoom": 1,
        "tags": "",
        "stylesheet": "",
        "javascript": "",
        "tagColors": {}
    }
"""

import json
import logging
import math
from typing import Any, Dict, Optional

from twine_workshop import config
from twine_workshop.coords import parse_zoom
from twine_workshop.identifiers import generate_ifid
from twine_workshop.model import Passage, Story, normalize_passage_names

logger = logging.getLogger(__name__)


class _WrongShape(ValueError):
    """Raised internally when a document is valid JSON but not a story"""


def _number(value: Any, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return default
    return value


def _text(value: Any, default: str = '') -> str:
    return value if isinstance(value, str) else default


def _tag_colors(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {k: v for k, v in value.items() if isinstance(v, str) and v}


# =============================================================================
# DICT CONVERSION
# =============================================================================

def passage_to_dict(passage: Passage) -> Dict:
    return {
        'name': passage.name,
        'content': passage.content,
        'tags': list(passage.tags),
        'x': passage.x,
        'y': passage.y,
        'width': passage.width,
        'height': passage.height,
    }


def story_to_dict(story: Story) -> Dict:
    """Convert a story to the JSON backup structure."""
    return {
        'title': story.title,
        'startPassage': story.start_passage,
        'passages': {name: passage_to_dict(p) for name, p in story.passages.items()},
        'ifid': story.ifid,
        'format': story.format,
        'formatVersion': story.format_version,
        'zoom': story.zoom,
        'tags': story.tags,
        'stylesheet': story.stylesheet,
        'javascript': story.javascript,
        'tagColors': dict(story.tag_colors),
    }


def _passage_from_dict(name: str, data: Any) -> Passage:
    if not isinstance(data, dict):
        raise _WrongShape(f"passage {name!r} is not an object")

    tags = data.get('tags') or []
    if isinstance(tags, str):
        tags = tags.split()
    elif not isinstance(tags, list):
        tags = []

    width = _number(data.get('width'), config.DEFAULT_SIZE)
    height = _number(data.get('height'), config.DEFAULT_SIZE)
    return Passage(
        # The map key is authoritative for the name
        name=name,
        content=_text(data.get('content')),
        tags=tuple(str(tag) for tag in tags),
        x=_number(data.get('x'), config.DEFAULT_POSITION),
        y=_number(data.get('y'), config.DEFAULT_POSITION),
        width=width if width > 0 else config.DEFAULT_SIZE,
        height=height if height > 0 else config.DEFAULT_SIZE,
    )


def story_from_dict(data: Any) -> Story:
    """Build a story from the JSON backup structure.

    Raises:
        ValueError: If data lacks a title or a passage map
    """
    if not isinstance(data, dict):
        raise _WrongShape("document is not an object")
    title = data.get('title')
    passages = data.get('passages')
    if not isinstance(title, str) or not title:
        raise _WrongShape("missing title")
    if not isinstance(passages, dict):
        raise _WrongShape("missing passages")

    return Story(
        title=title,
        start_passage=_text(data.get('startPassage')) or config.DEFAULT_START_PASSAGE,
        passages={name: _passage_from_dict(name, p) for name, p in passages.items()},
        ifid=_text(data.get('ifid')) or generate_ifid(),
        format=_text(data.get('format')),
        format_version=_text(data.get('formatVersion')),
        zoom=parse_zoom(data.get('zoom')),
        tags=_text(data.get('tags')),
        stylesheet=_text(data.get('stylesheet')),
        javascript=_text(data.get('javascript')),
        tag_colors=_tag_colors(data.get('tagColors')),
    )


# =============================================================================
# JSON CODEC
# =============================================================================

def parse_json(content: str) -> Optional[Story]:
    """Parse a JSON backup.

    Returns:
        The story, or None if the text is not JSON or not a story object
    """
    try:
        story = story_from_dict(json.loads(content))
    except (json.JSONDecodeError, ValueError, TypeError) as e:
        logger.debug("Not a JSON story backup: %s", e)
        return None
    return normalize_passage_names(story)


def generate_json(story: Story) -> str:
    """Pretty-printed JSON backup; every field is kept verbatim."""
    return json.dumps(story_to_dict(story), indent=2, ensure_ascii=False)
