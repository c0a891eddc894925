#!/usr/bin/env python3
"""
Archive Module

Reads and writes the Twine 2 archive format: a <tw-storydata> element with
story attributes, user stylesheet/script elements, <tw-tag> colors and one
<tw-passagedata> element per passage.

Archives may hold several stories; only the first <tw-storydata> is read.
"""

import logging
from html.parser import HTMLParser
from typing import Dict, List, Optional, Tuple

from twine_workshop import config
from twine_workshop.coords import format_number, parse_pair, parse_zoom, positive_size, round_half_up
from twine_workshop.escaping import escape_html
from twine_workshop.identifiers import generate_ifid
from twine_workshop.model import Passage, Story, normalize_passage_names, resolve_start_passage

logger = logging.getLogger(__name__)

STORY_TAG = 'tw-storydata'
PASSAGE_TAG = 'tw-passagedata'
COLOR_TAG = 'tw-tag'

# Selectors tried in order for the user stylesheet and script:
# type attribute, then id, then role
STYLESHEET_SELECTORS = (
    ('style', 'type', 'text/twine-css'),
    (None, 'id', 'twine-user-stylesheet'),
    ('style', 'role', 'stylesheet'),
)
SCRIPT_SELECTORS = (
    ('script', 'type', 'text/twine-javascript'),
    (None, 'id', 'twine-user-script'),
    ('script', 'role', 'script'),
)


# =============================================================================
# HTML PARSING
# =============================================================================

class TwineArchiveParser(HTMLParser):
    """Collect the first story's attributes, passages and user code blocks"""

    def __init__(self) -> None:
        super().__init__()
        self.story_data = None
        self.passages = []
        self.tag_colors = []
        self.code_blocks = []
        self.in_story = False
        self.current_passage = None
        self.current_block = None
        self.current_data = []

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        attrs_dict = {k: (v if v is not None else '') for k, v in attrs}

        if tag == STORY_TAG:
            if self.story_data is None:
                self.story_data = attrs_dict
                self.in_story = True
            return
        if not self.in_story:
            return

        if tag == PASSAGE_TAG:
            self.current_passage = attrs_dict
            self.current_data = []
        elif tag == COLOR_TAG:
            self.tag_colors.append(attrs_dict)
        elif tag in ('style', 'script') and self.current_passage is None:
            self.current_block = (tag, attrs_dict)
            self.current_data = []

    def handle_endtag(self, tag: str) -> None:
        if not self.in_story:
            return

        if tag == PASSAGE_TAG and self.current_passage is not None:
            self.passages.append((self.current_passage, ''.join(self.current_data)))
            self.current_passage = None
            self.current_data = []
        elif tag in ('style', 'script') and self.current_block is not None:
            block_tag, attrs_dict = self.current_block
            self.code_blocks.append((block_tag, attrs_dict, ''.join(self.current_data)))
            self.current_block = None
            self.current_data = []
        elif tag == STORY_TAG:
            self.in_story = False

    def handle_data(self, data: str) -> None:
        if self.current_passage is not None or self.current_block is not None:
            self.current_data.append(data)


def _find_code_block(code_blocks: List[Tuple[str, Dict, str]], selectors) -> str:
    """Return the text of the first block matching the selectors, in selector order."""
    for tag, attr, value in selectors:
        for block_tag, attrs_dict, text in code_blocks:
            if (tag is None or block_tag == tag) and attrs_dict.get(attr) == value:
                return text
    return ''


def parse_archive(html_content: str) -> Optional[Story]:
    """Parse a Twine 2 archive into a Story.

    Args:
        html_content: Archive or published story HTML

    Returns:
        The first story in the archive, or None if there is no
        <tw-storydata> element or it holds no passages
    """
    parser = TwineArchiveParser()
    parser.feed(html_content or '')
    parser.close()

    if parser.story_data is None:
        logger.debug("No <%s> element found", STORY_TAG)
        return None
    if not parser.passages:
        logger.debug("Archive story has no passages")
        return None

    story_data = parser.story_data
    start_pid = story_data.get('startnode')

    passages = {}
    start_passage = config.DEFAULT_START_PASSAGE
    for attrs_dict, text in parser.passages:
        name = attrs_dict.get('name', '')
        tags = attrs_dict.get('tags', '')
        x, y = parse_pair(attrs_dict.get('position'), config.DEFAULT_POSITION)
        width, height = parse_pair(attrs_dict.get('size'), config.DEFAULT_SIZE)

        passages[name] = Passage(
            name=name,
            content=text,
            tags=tuple(tags.split()),
            x=x,
            y=y,
            width=positive_size(width),
            height=positive_size(height),
        )
        if start_pid is not None and attrs_dict.get('pid') == start_pid:
            start_passage = name

    tag_colors = {}
    for attrs_dict in parser.tag_colors:
        tag_name = attrs_dict.get('name')
        color = attrs_dict.get('color')
        if tag_name and color:
            tag_colors[tag_name] = color

    story = Story(
        title=story_data.get('name') or config.DEFAULT_TITLE,
        start_passage=start_passage,
        passages=passages,
        ifid=story_data.get('ifid') or generate_ifid(),
        format=story_data.get('format', ''),
        format_version=story_data.get('format-version', ''),
        zoom=parse_zoom(story_data.get('zoom')),
        tags=story_data.get('tags', ''),
        stylesheet=_find_code_block(parser.code_blocks, STYLESHEET_SELECTORS),
        javascript=_find_code_block(parser.code_blocks, SCRIPT_SELECTORS),
        tag_colors=tag_colors,
    )
    return normalize_passage_names(story)


# =============================================================================
# ARCHIVE GENERATION
# =============================================================================

def generate_archive(story: Story) -> str:
    """Generate a Twine 2 archive for a story.

    Passages are numbered from 1 in insertion order; the numbers only
    serve as the start node reference.

    Returns:
        A single <tw-storydata> element as a string
    """
    start_name = resolve_start_passage(story)
    start_pid = '1'
    passage_elements = []

    for pid, (name, passage) in enumerate(story.passages.items(), start=1):
        if name == start_name:
            start_pid = str(pid)
        passage_elements.append(
            f'<{PASSAGE_TAG} pid="{pid}" name="{escape_html(name)}" '
            f'tags="{escape_html(" ".join(passage.tags))}" '
            f'position="{round_half_up(passage.x)},{round_half_up(passage.y)}" '
            f'size="{round_half_up(passage.width)},{round_half_up(passage.height)}">'
            f'{escape_html(passage.content)}</{PASSAGE_TAG}>'
        )

    tag_elements = [
        f'<{COLOR_TAG} name="{escape_html(tag_name)}" color="{escape_html(color)}"></{COLOR_TAG}>'
        for tag_name, color in story.tag_colors.items()
    ]

    ifid = story.ifid or generate_ifid()
    story_format = story.format or config.DEFAULT_FORMAT
    format_version = story.format_version or config.DEFAULT_FORMAT_VERSION
    zoom = story.zoom or config.DEFAULT_ZOOM

    # Stylesheet and script are written verbatim inside their elements
    return (
        f'<{STORY_TAG} name="{escape_html(story.title)}" startnode="{start_pid}" '
        f'creator="{config.CREATOR_NAME}" creator-version="{config.CREATOR_VERSION}" '
        f'format="{escape_html(story_format)}" format-version="{escape_html(format_version)}" '
        f'ifid="{escape_html(ifid)}" options="" tags="{escape_html(story.tags)}" '
        f'zoom="{format_number(zoom)}" hidden>'
        f'<style role="stylesheet" id="twine-user-stylesheet" type="text/twine-css">{story.stylesheet}</style>'
        f'<script role="script" id="twine-user-script" type="text/twine-javascript">{story.javascript}</script>'
        f'{"".join(tag_elements)}{"".join(passage_elements)}</{STORY_TAG}>'
    )
