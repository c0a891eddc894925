#!/usr/bin/env python3
"""
Playable HTML Module

Generates a standalone, self-contained HTML document that plays a story
in the browser.

Passage text is escaped and rendered to markup here, at generation time.
The embedded runtime only swaps rendered passages in and follows links,
so no story text ever reaches the page unescaped.
"""

import json
import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from twine_workshop.escaping import escape_html
from twine_workshop.links import LINK_PATTERN
from twine_workshop.model import Story, resolve_start_passage

TEMPLATE_DIR = Path(__file__).parent / 'templates'
TEMPLATE_NAME = 'playable.html.jinja2'

# The arrow as it looks after escaping
ESCAPED_ARROW = '-&gt;'
PARAGRAPH_BREAK = re.compile(r'\r?\n[ \t]*\r?\n')
LINE_BREAK = re.compile(r'\r?\n')


def _render_link(match: re.Match) -> str:
    """Turn one (already escaped) link marker into a clickable span."""
    inner = match.group(1)
    if ESCAPED_ARROW in inner:
        display, target = inner.split(ESCAPED_ARROW, 1)
    elif '|' in inner:
        display, target = inner.rsplit('|', 1)
    else:
        display = target = inner
    display, target = display.strip(), target.strip()
    # Both halves are escaped already, so they are safe in text and attributes
    return f'<span class="link" data-target="{target}">{display}</span>'


def render_passage_html(content: str) -> str:
    """Render passage text as HTML paragraphs with clickable links.

    Escapes first, then rewrites link markers, so the markup inserted
    for links is never escaped twice.

    Examples:
        >>> render_passage_html("Go [[North->Hall]]")
        '<p>Go <span class="link" data-target="Hall">North</span></p>'
    """
    html = LINK_PATTERN.sub(_render_link, escape_html(content or ''))
    paragraphs = PARAGRAPH_BREAK.split(html)
    return ''.join(f'<p>{LINE_BREAK.sub("<br>", p)}</p>' for p in paragraphs)


def _script_json(data: Any) -> str:
    """JSON that is safe to place inside a <script> element."""
    return (json.dumps(data)
            .replace('<', '\\u003c')
            .replace('>', '\\u003e')
            .replace('&', '\\u0026'))


def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(['html', 'jinja2']),
    )


def generate_playable(story: Story) -> str:
    """Generate a standalone playable HTML document.

    Args:
        story: Story to publish (not modified)

    Returns:
        Complete HTML document as a string
    """
    template = _environment().get_template(TEMPLATE_NAME)
    rendered = {name: render_passage_html(p.content) for name, p in story.passages.items()}
    return template.render(
        title=story.title,
        passages_json=_script_json(rendered),
        start_json=_script_json(resolve_start_passage(story)),
    )
