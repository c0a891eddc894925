#!/usr/bin/env python3
"""
Identifiers Module

Generates story IFIDs and enforces the passage naming rules.

Passage names double as keys in the story's passage map, so they may not
contain path or field separators, and may not shadow object-model
internals in runtimes that store passages in plain objects.
"""

import re
import uuid
from typing import Iterable, Optional

from twine_workshop import config

FORBIDDEN_NAME_CHARS = frozenset('.[]{}#$/')

RESERVED_NAMES = frozenset({
    '__proto__',
    'constructor',
    'prototype',
    'hasOwnProperty',
    'toString',
    'valueOf',
})

UNTITLED_PASSAGE = 'Untitled Passage'

_FORBIDDEN_PATTERN = re.compile('[' + re.escape(''.join(sorted(FORBIDDEN_NAME_CHARS))) + ']')


def generate_ifid() -> str:
    """Generate an IFID: a v4 UUID in uppercase hex (Twine 2 convention)."""
    return str(uuid.uuid4()).upper()


def validate_passage_name(name: str) -> Optional[str]:
    """Check a passage name against the naming rules.

    Args:
        name: Candidate passage name

    Returns:
        A short reason string if the name is rejected, None if it is valid

    Examples:
        >>> validate_passage_name("Cave 2") is None
        True
        >>> validate_passage_name("a.b")
        "contains forbidden character '.'"
    """
    if not isinstance(name, str) or not name:
        return 'name is empty'
    if len(name) > config.MAX_PASSAGE_NAME_LENGTH:
        return f'longer than {config.MAX_PASSAGE_NAME_LENGTH} characters'
    for char in name:
        if char in FORBIDDEN_NAME_CHARS:
            return f'contains forbidden character {char!r}'
    if name in RESERVED_NAMES:
        return 'reserved name'
    return None


def is_valid_passage_name(name: str) -> bool:
    return validate_passage_name(name) is None


def sanitize_passage_name(name: str) -> str:
    """Turn an arbitrary string into a valid passage name.

    Forbidden characters become underscores, surrounding whitespace is
    dropped, overlong names are cut, and reserved words get a trailing
    underscore. Uniqueness is not checked here.
    """
    cleaned = _FORBIDDEN_PATTERN.sub('_', name or '').strip()
    cleaned = cleaned[:config.MAX_PASSAGE_NAME_LENGTH].strip()
    if not cleaned:
        return UNTITLED_PASSAGE
    if cleaned in RESERVED_NAMES:
        cleaned += '_'
    return cleaned


def generate_passage_name(existing: Iterable[str], base_name: str = config.NEW_PASSAGE_NAME) -> str:
    """Pick the first free name among base_name, 'base_name 1', 'base_name 2', ...

    Args:
        existing: Names already in use
        base_name: Preferred name

    Returns:
        A name not in existing, never longer than the name limit
    """
    taken = set(existing)
    if base_name not in taken:
        return base_name

    counter = 1
    while True:
        suffix = f' {counter}'
        candidate = base_name[:config.MAX_PASSAGE_NAME_LENGTH - len(suffix)] + suffix
        if candidate not in taken:
            return candidate
        counter += 1
