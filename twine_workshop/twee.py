#!/usr/bin/env python3
"""
Twee Module

Reads and writes Twee 3, the plain-text story format:

    :: StoryTitle
    My Story

    :: StoryData
    {"ifid": "...", "format": "Harlowe", "start": "Start"}

    :: Start [tag1 tag2] {"position":"100,100","size":"100,100"}
    Passage text with [[links]].

StoryTitle and StoryData headers carry story metadata, and passages
tagged [stylesheet] or [script] hold the user stylesheet and script.
Every other header starts a passage.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from twine_workshop import config
from twine_workshop.coords import parse_int, parse_pair, parse_zoom, round_half_up
from twine_workshop.identifiers import generate_ifid
from twine_workshop.model import Passage, Story, normalize_passage_names, resolve_start_passage

logger = logging.getLogger(__name__)

# :: Name [tags] {metadata}; tags and metadata are optional
HEADER_PATTERN = re.compile(r'^::\s*(.+?)\s*(?:\[([^\]]*)\])?\s*(\{.*\})?\s*$')
LINE_BREAK = re.compile(r'\r?\n')

STORY_TITLE = 'StoryTitle'
STORY_DATA = 'StoryData'
STYLESHEET_TAG = 'stylesheet'
SCRIPT_TAG = 'script'

# Block kinds
TITLE, DATA, STYLESHEET, SCRIPT, PASSAGE = 'title', 'data', 'stylesheet', 'script', 'passage'


@dataclass
class _Block:
    """Header currently collecting lines"""
    kind: str
    name: str = ''
    tags: List[str] = field(default_factory=list)
    x: int = config.DEFAULT_POSITION
    y: int = config.DEFAULT_POSITION
    width: int = config.DEFAULT_SIZE
    height: int = config.DEFAULT_SIZE
    lines: List[str] = field(default_factory=list)
    parsed: bool = False


# =============================================================================
# TWEE PARSING
# =============================================================================

def grid_position(index: int) -> tuple:
    """Default canvas position for the index-th passage without metadata."""
    x = config.GRID_ORIGIN + (index % config.GRID_COLUMNS) * config.GRID_X_SPACING
    y = config.GRID_ORIGIN + (index // config.GRID_COLUMNS) * config.GRID_Y_SPACING
    return x, y


def _apply_metadata(block: _Block, metadata_str: Optional[str]) -> None:
    """Seed passage geometry from header metadata, ignoring anything malformed."""
    if not metadata_str:
        return
    try:
        metadata = json.loads(metadata_str)
    except json.JSONDecodeError:
        logger.warning("Ignoring unreadable metadata for passage %r: %s", block.name, metadata_str)
        return
    if not isinstance(metadata, dict):
        return

    position = metadata.get('position')
    if isinstance(position, str):
        parts = position.split(',')
        block.x = parse_int(parts[0], block.x)
        if len(parts) > 1:
            block.y = parse_int(parts[1], block.y)
    size = metadata.get('size')
    if isinstance(size, str):
        width, height = parse_pair(size, 0)
        block.width = width if width > 0 else block.width
        block.height = height if height > 0 else block.height


def _read_story_data(block: _Block, settings: Dict) -> None:
    """Try to read the StoryData lines collected so far as JSON.

    Called after every line so pretty-printed JSON is picked up as soon
    as it is complete.
    """
    if block.parsed:
        return
    try:
        data = json.loads('\n'.join(block.lines))
    except json.JSONDecodeError:
        return
    if not isinstance(data, dict):
        return

    block.parsed = True
    for key, setting in (('ifid', 'ifid'), ('format', 'format'),
                         ('format-version', 'format_version'), ('start', 'start_passage')):
        value = data.get(key)
        if isinstance(value, str) and value:
            settings[setting] = value
    if 'zoom' in data:
        settings['zoom'] = parse_zoom(data['zoom'])
    tag_colors = data.get('tag-colors')
    if isinstance(tag_colors, dict):
        settings['tag_colors'] = {str(k): str(v) for k, v in tag_colors.items()}


def parse_twee(content: str) -> Optional[Story]:
    """Parse Twee 3 source into a Story.

    Args:
        content: Twee source text

    Returns:
        The story, or None if the source holds no ordinary passages
    """
    settings = {
        'title': config.DEFAULT_TITLE,
        'start_passage': config.DEFAULT_START_PASSAGE,
        'ifid': None,
        'format': '',
        'format_version': '',
        'zoom': config.DEFAULT_ZOOM,
        'tag_colors': {},
    }
    stylesheet: List[str] = []
    javascript: List[str] = []
    passages: Dict[str, Passage] = {}
    passage_index = 0
    current = None

    def save_current() -> None:
        if current is not None and current.kind == PASSAGE:
            passages[current.name] = Passage(
                name=current.name,
                content='\n'.join(current.lines).strip(),
                tags=tuple(current.tags),
                x=current.x,
                y=current.y,
                width=current.width,
                height=current.height,
            )

    for line in LINE_BREAK.split(content or ''):
        header = HEADER_PATTERN.match(line)
        if header:
            save_current()
            name = header.group(1).strip()
            tags = (header.group(2) or '').split()

            if name == STORY_TITLE:
                current = _Block(TITLE)
            elif name == STORY_DATA:
                current = _Block(DATA)
            elif STYLESHEET_TAG in tags:
                current = _Block(STYLESHEET)
            elif SCRIPT_TAG in tags:
                current = _Block(SCRIPT)
            else:
                x, y = grid_position(passage_index)
                current = _Block(PASSAGE, name=name, tags=tags, x=x, y=y)
                _apply_metadata(current, header.group(3))
                passage_index += 1
            continue

        if current is None:
            continue
        if current.kind == TITLE:
            if line.strip():
                settings['title'] = line.strip()
        elif current.kind == DATA:
            current.lines.append(line)
            _read_story_data(current, settings)
        elif current.kind == STYLESHEET:
            stylesheet.append(line)
        elif current.kind == SCRIPT:
            javascript.append(line)
        else:
            current.lines.append(line)

    save_current()

    if not passages:
        logger.debug("Twee source has no ordinary passages")
        return None

    story = Story(
        title=settings['title'],
        start_passage=settings['start_passage'],
        passages=passages,
        ifid=settings['ifid'] or generate_ifid(),
        format=settings['format'],
        format_version=settings['format_version'],
        zoom=settings['zoom'],
        stylesheet='\n'.join(stylesheet).strip(),
        javascript='\n'.join(javascript).strip(),
        tag_colors=settings['tag_colors'],
    )
    return normalize_passage_names(story)


# =============================================================================
# TWEE GENERATION
# =============================================================================

def _json_number(value: float):
    """Whole floats are written as integers, as browsers serialize them."""
    return int(value) if float(value).is_integer() else value


def generate_twee(story: Story) -> str:
    """Generate Twee 3 source for a story.

    Text is written verbatim; Twee has no escaping.
    """
    story_data = {
        'ifid': story.ifid or generate_ifid(),
        'format': story.format or config.DEFAULT_FORMAT,
        'format-version': story.format_version or config.DEFAULT_FORMAT_VERSION,
        'start': resolve_start_passage(story),
        'zoom': _json_number(story.zoom or config.DEFAULT_ZOOM),
    }
    if story.tag_colors:
        story_data['tag-colors'] = dict(story.tag_colors)

    blocks = [
        f":: {STORY_TITLE}\n{story.title}",
        f":: {STORY_DATA}\n{json.dumps(story_data, indent=2, ensure_ascii=False)}",
    ]
    if story.stylesheet:
        blocks.append(f":: UserStylesheet [{STYLESHEET_TAG}]\n{story.stylesheet}")
    if story.javascript:
        blocks.append(f":: UserScript [{SCRIPT_TAG}]\n{story.javascript}")

    for passage in story.passages.values():
        tags = f" [{' '.join(passage.tags)}]" if passage.tags else ''
        metadata = json.dumps({
            'position': f"{round_half_up(passage.x)},{round_half_up(passage.y)}",
            'size': f"{round_half_up(passage.width)},{round_half_up(passage.height)}",
        }, separators=(',', ':'), ensure_ascii=False)
        blocks.append(f":: {passage.name}{tags} {metadata}\n{passage.content}")

    return '\n\n'.join(blocks).strip()
