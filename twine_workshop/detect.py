#!/usr/bin/env python3
"""
Format Detection Module

Chooses a parser for imported text, first by file extension and then by
sniffing the content.
"""

import logging
from typing import Callable, Dict, Optional

from twine_workshop.archive import STORY_TAG, parse_archive
from twine_workshop.json_backup import parse_json
from twine_workshop.model import Story
from twine_workshop.twee import parse_twee

logger = logging.getLogger(__name__)

ARCHIVE, TWEE, JSON = 'archive', 'twee', 'json'

PARSERS: Dict[str, Callable[[str], Optional[Story]]] = {
    ARCHIVE: parse_archive,
    TWEE: parse_twee,
    JSON: parse_json,
}

EXTENSIONS = {
    'json': JSON,
    'twee': TWEE,
    'tw': TWEE,
    'html': ARCHIVE,
    'htm': ARCHIVE,
}


def format_from_filename(filename: Optional[str]) -> Optional[str]:
    """Format implied by a file extension, or None.

    Examples:
        >>> format_from_filename("My Story.TWEE")
        'twee'
        >>> format_from_filename("notes.txt") is None
        True
    """
    if not filename or '.' not in filename:
        return None
    return EXTENSIONS.get(filename.rsplit('.', 1)[1].lower())


def sniff_format(content: str) -> Optional[str]:
    """Guess the format from the text itself."""
    if content.strip().startswith('{'):
        return JSON
    if f'<{STORY_TAG}' in content:
        return ARCHIVE
    if '::' in content:
        return TWEE
    return None


def detect_format(content: str, filename: Optional[str] = None) -> Optional[str]:
    """Format the extension points to, else the sniffed one. Does not parse."""
    return format_from_filename(filename) or sniff_format(content or '')


def parse_file(content: str, filename: Optional[str] = None) -> Optional[Story]:
    """Parse imported text in whichever supported format it uses.

    Args:
        content: File content
        filename: Original file name, used as a format hint

    Returns:
        The story, or None if no format could read it
    """
    content = content or ''
    hinted = format_from_filename(filename)
    if hinted:
        story = PARSERS[hinted](content)
        if story is not None:
            return story
        logger.info("%s did not parse as %s, sniffing content", filename, hinted)

    sniffed = sniff_format(content)
    if sniffed is None or sniffed == hinted:
        logger.debug("No format recognized for %s", filename or 'input')
        return None
    return PARSERS[sniffed](content)
