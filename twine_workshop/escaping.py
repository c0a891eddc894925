"""
HTML entity escaping for the archive and playable formats.
"""

# Order matters: '&' must be replaced first so entities are not escaped twice
_ESCAPES = (
    ('&', '&amp;'),
    ('<', '&lt;'),
    ('>', '&gt;'),
    ('"', '&quot;'),
    ("'", '&#39;'),
)


def escape_html(text: str) -> str:
    """Escape the five HTML-significant characters.

    Examples:
        >>> escape_html('Tom & "Jerry" <3')
        'Tom &amp; &quot;Jerry&quot; &lt;3'
    """
    if not text:
        return ''
    for char, entity in _ESCAPES:
        text = text.replace(char, entity)
    return text
