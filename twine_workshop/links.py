#!/usr/bin/env python3
"""
Links Module

Finds link markers in passage text and builds the passage link graph.

Supports three link syntaxes:
- [[target]]
- [[display->target]]
- [[display|target]]
"""

import re
from typing import TYPE_CHECKING, Dict, List, Tuple

from twine_workshop import config

if TYPE_CHECKING:
    from twine_workshop.model import Story

# Non-greedy so a marker ends at the first ']]'; markers may span lines
LINK_PATTERN = re.compile(r'\[\[(.*?)\]\]', re.DOTALL)


# =============================================================================
# LINK PARSING
# =============================================================================

def parse_link(link_text: str) -> Tuple[str, str]:
    """Split the inside of a link marker into display text and target.

    Args:
        link_text: The marker content (without surrounding [[ ]])

    Returns:
        Tuple of (display, target), both trimmed

    Examples:
        >>> parse_link("Go->Cave")
        ('Go', 'Cave')
        >>> parse_link("a|b|Cave")
        ('a|b', 'Cave')
        >>> parse_link(" Cave ")
        ('Cave', 'Cave')
    """
    # [[display->target]], split on the first arrow
    if '->' in link_text:
        display, target = link_text.split('->', 1)
        return display.strip(), target.strip()
    # [[display|target]], split on the last pipe
    if '|' in link_text:
        display, target = link_text.rsplit('|', 1)
        return display.strip(), target.strip()
    # [[target]]
    target = link_text.strip()
    return target, target


def extract_links(passage_text: str) -> List[str]:
    """Extract all link targets from passage text.

    Duplicates are kept; empty markers yield an empty target.

    Args:
        passage_text: Raw passage text

    Returns:
        List of link targets in order of appearance
    """
    if not passage_text:
        return []
    return [parse_link(inner)[1] for inner in LINK_PATTERN.findall(passage_text)]


def unique_links(passage_text: str) -> List[str]:
    """Extract link targets with duplicates removed, preserving order."""
    seen = set()
    unique_targets = []
    for target in extract_links(passage_text):
        if target not in seen:
            seen.add(target)
            unique_targets.append(target)
    return unique_targets


def passage_preview(passage_text: str, limit: int = config.PREVIEW_LENGTH) -> str:
    """Short plain preview of a passage with link markers removed."""
    return LINK_PATTERN.sub('', passage_text or '').strip()[:limit]


# =============================================================================
# GRAPH CONSTRUCTION
# =============================================================================

def build_graph(story: 'Story') -> Dict[str, List[str]]:
    """Build a directed graph from passages.

    Targets that do not name an existing passage are skipped.

    Returns:
        Dict mapping passage name to its unique, resolvable link targets
    """
    graph = {}
    for name, passage in story.passages.items():
        graph[name] = [t for t in unique_links(passage.content) if t in story.passages]
    return graph


def find_broken_links(story: 'Story') -> Dict[str, List[str]]:
    """List link targets that do not resolve to any passage.

    Returns:
        Dict mapping passage name to its unresolved targets; passages
        whose links all resolve are left out
    """
    broken = {}
    for name, passage in story.passages.items():
        missing = [t for t in unique_links(passage.content) if t not in story.passages]
        if missing:
            broken[name] = missing
    return broken
