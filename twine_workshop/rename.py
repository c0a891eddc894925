#!/usr/bin/env python3
"""
Rename Module

Rewrites inbound link markers when a passage is renamed so existing links
keep resolving. Only the target portion of a marker changes; display text
and the whitespace around the target are kept.
"""

import logging
import re
from dataclasses import replace
from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from twine_workshop.model import Passage

logger = logging.getLogger(__name__)

# Marker body characters: anything up to the closing ']]'
_BODY = r'(?:(?!\]\]).)'
# Same, but never the start of an arrow
_NO_ARROW = r'(?:(?!->|\]\]).)'

# [[display->target]]: display ends at the first arrow
ARROW_LINK = re.compile(r'\[\[(' + _NO_ARROW + r'*?->)(' + _BODY + r'*?)\]\]', re.DOTALL)
# [[display|target]]: no arrow anywhere, target after the last pipe
PIPE_LINK = re.compile(r'\[\[(' + _NO_ARROW + r'*\|)(' + r'(?:(?!->|\]\])[^|])' + r'*?)\]\]', re.DOTALL)
# [[target]]: no arrow, no pipe
BARE_LINK = re.compile(r'\[\[()(' + r'(?:(?!->|\]\])[^|])' + r'*?)\]\]', re.DOTALL)

_SURROUNDING_SPACE = re.compile(r'^(\s*)(.*?)(\s*)$', re.DOTALL)


def _retarget(match: re.Match, old_name: str, new_name: str) -> str:
    head, target_part = match.group(1), match.group(2)
    lead, target, trail = _SURROUNDING_SPACE.match(target_part).groups()
    if target != old_name:
        return match.group(0)
    return f'[[{head}{lead}{new_name}{trail}]]'


def rewrite_links(content: str, old_name: str, new_name: str) -> str:
    """Point every link to old_name at new_name instead.

    One pass per link syntax; markers with other targets are untouched.

    Examples:
        >>> rewrite_links("[[Go->Cave]] or [[Cave]]", "Cave", "Grotto")
        '[[Go->Grotto]] or [[Grotto]]'
    """
    if not content or old_name == new_name or '[[' not in content:
        return content

    def retarget(match: re.Match) -> str:
        return _retarget(match, old_name, new_name)

    for pattern in (ARROW_LINK, PIPE_LINK, BARE_LINK):
        content = pattern.sub(retarget, content)
    return content


def rewrite_story_links(passages: Dict[str, 'Passage'], old_name: str, new_name: str,
                        skip: Optional[str] = None) -> Dict[str, 'Passage']:
    """Rewrite inbound links across a passage map.

    Args:
        passages: Passage map to rewrite (not modified)
        old_name: Previous target name
        new_name: Replacement target name
        skip: Passage whose own content is left as is

    Returns:
        New passage map in the same order; unchanged passages are shared
    """
    rewritten = {}
    changed = 0
    for name, passage in passages.items():
        if name != skip:
            content = rewrite_links(passage.content, old_name, new_name)
            if content != passage.content:
                passage = replace(passage, content=content)
                changed += 1
        rewritten[name] = passage

    if changed:
        logger.debug("Rewrote links %r -> %r in %d passage(s)", old_name, new_name, changed)
    return rewritten
