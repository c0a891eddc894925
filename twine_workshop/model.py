#!/usr/bin/env python3
"""
Story Model Module

Canonical in-memory representation of a story and the editing operations
that keep it consistent.

Story and Passage are frozen values. Every operation returns a new Story;
the argument is never modified, so callers can hold on to older versions
or layer their own concurrency control on top.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

from twine_workshop import config
from twine_workshop.errors import InvalidName, LastPassage, NameCollision, PassageNotFound
from twine_workshop.identifiers import (
    generate_ifid,
    generate_passage_name,
    sanitize_passage_name,
    validate_passage_name,
)
from twine_workshop.rename import rewrite_story_links

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Passage:
    """A named unit of story text with its canvas position and size."""
    name: str
    content: str = ''
    tags: Tuple[str, ...] = ()
    x: float = config.DEFAULT_POSITION
    y: float = config.DEFAULT_POSITION
    width: int = config.DEFAULT_SIZE
    height: int = config.DEFAULT_SIZE


@dataclass(frozen=True)
class Story:
    """A titled collection of passages plus story-level metadata."""
    title: str
    start_passage: str = config.DEFAULT_START_PASSAGE
    passages: Dict[str, Passage] = field(default_factory=dict)
    ifid: str = field(default_factory=generate_ifid)
    format: str = ''
    format_version: str = ''
    zoom: float = config.DEFAULT_ZOOM
    tags: str = ''
    stylesheet: str = ''
    javascript: str = ''
    tag_colors: Dict[str, str] = field(default_factory=dict)


# =============================================================================
# HELPERS
# =============================================================================

def _require_title(title: str) -> str:
    title = (title or '').strip()
    if not title:
        raise ValueError("Story title must not be empty")
    return title


def _require_passage(story: Story, name: str) -> Passage:
    try:
        return story.passages[name]
    except KeyError:
        raise PassageNotFound(name) from None


def _check_new_name(story: Story, name: str) -> None:
    reason = validate_passage_name(name)
    if reason:
        raise InvalidName(name, reason)
    if name in story.passages:
        raise NameCollision(name)


def resolve_start_passage(story: Story) -> str:
    """Name of the start passage, falling back to the first passage.

    Stories without passages keep whatever start name they carry.
    """
    if story.start_passage in story.passages or not story.passages:
        return story.start_passage
    return next(iter(story.passages))


# =============================================================================
# STORY OPERATIONS
# =============================================================================

def create_empty(title: str) -> Story:
    """Create a new story containing a single 'Start' passage."""
    x, y = config.NEW_STORY_POSITION
    start = Passage(
        name=config.DEFAULT_START_PASSAGE,
        content=config.NEW_STORY_CONTENT,
        x=x,
        y=y,
    )
    return Story(
        title=_require_title(title),
        start_passage=start.name,
        passages={start.name: start},
    )


def rename_story(story: Story, title: str) -> Story:
    return replace(story, title=_require_title(title))


def duplicate_story(story: Story, title: Optional[str] = None) -> Story:
    """Copy a story under a new title. The copy gets its own IFID."""
    if title is None:
        title = f"{story.title} (Copy)"
    return replace(
        story,
        title=_require_title(title),
        passages=dict(story.passages),
        tag_colors=dict(story.tag_colors),
        ifid=generate_ifid(),
    )


def set_start_passage(story: Story, name: str) -> Story:
    _require_passage(story, name)
    return replace(story, start_passage=name)


# =============================================================================
# PASSAGE OPERATIONS
# =============================================================================

def add_passage(story: Story, name: Optional[str] = None, content: str = '',
                x: float = config.DEFAULT_POSITION,
                y: float = config.DEFAULT_POSITION) -> Tuple[Story, str]:
    """Add a passage, generating a free name when none is given.

    Returns:
        Tuple of (new story, name of the added passage)

    Raises:
        InvalidName: If an explicit name breaks the naming rules
        NameCollision: If an explicit name is already taken
    """
    if name is None:
        name = generate_passage_name(story.passages)
    else:
        _check_new_name(story, name)

    passages = dict(story.passages)
    passages[name] = Passage(name=name, content=content, x=x, y=y)
    return replace(story, passages=passages), name


def update_passage_content(story: Story, name: str, content: str) -> Story:
    passage = _require_passage(story, name)
    passages = dict(story.passages)
    passages[name] = replace(passage, content=content)
    return replace(story, passages=passages)


def rename_passage(story: Story, old_name: str, new_name: str) -> Story:
    """Rename a passage and repoint every link that targeted it.

    Args:
        story: Story to edit
        old_name: Current passage name
        new_name: Requested passage name

    Returns:
        New story with the passage under its new key, the start passage
        updated if it was the renamed one, and inbound links rewritten

    Raises:
        PassageNotFound: If old_name is not in the story
        InvalidName: If new_name breaks the naming rules
        NameCollision: If another passage already uses new_name
    """
    passage = _require_passage(story, old_name)
    if new_name == old_name:
        return story
    _check_new_name(story, new_name)

    # Keep the renamed passage in its original slot
    passages = {}
    for name, existing in story.passages.items():
        if name == old_name:
            passages[new_name] = replace(passage, name=new_name)
        else:
            passages[name] = existing
    passages = rewrite_story_links(passages, old_name, new_name, skip=new_name)

    start = new_name if story.start_passage == old_name else story.start_passage
    return replace(story, passages=passages, start_passage=start)


def delete_passage(story: Story, name: str) -> Tuple[Story, str]:
    """Remove a passage.

    If the deleted passage was the start passage, the first remaining
    passage becomes the new start.

    Returns:
        Tuple of (new story, start passage name of the new story)

    Raises:
        PassageNotFound: If name is not in the story
        LastPassage: If it is the only passage
    """
    _require_passage(story, name)
    if len(story.passages) <= 1:
        raise LastPassage(name)

    passages = {k: v for k, v in story.passages.items() if k != name}
    start = story.start_passage
    if start == name or start not in passages:
        start = next(iter(passages))
        logger.debug("Start passage %r deleted, start is now %r", name, start)
    return replace(story, passages=passages, start_passage=start), start


# =============================================================================
# IMPORT NORMALIZATION
# =============================================================================

def normalize_passage_names(story: Story) -> Story:
    """Replace passage names that break the naming rules.

    Parsers call this on freshly imported stories. Each invalid name is
    sanitized, made unique, and inbound links are rewritten to match.
    """
    if all(validate_passage_name(name) is None for name in story.passages):
        return story

    passages = dict(story.passages)
    start = story.start_passage
    for old_name in list(story.passages):
        reason = validate_passage_name(old_name)
        if reason is None:
            continue
        taken = [n for n in passages if n != old_name]
        new_name = generate_passage_name(taken, sanitize_passage_name(old_name))
        logger.warning("Renamed passage %r to %r on import: %s", old_name, new_name, reason)

        passages = {
            (new_name if n == old_name else n): (replace(p, name=new_name) if n == old_name else p)
            for n, p in passages.items()
        }
        passages = rewrite_story_links(passages, old_name, new_name)
        if start == old_name:
            start = new_name

    return replace(story, passages=passages, start_passage=start)
