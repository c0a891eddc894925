"""
Twine Workshop story conversion library.

Pure transformation core for branching-narrative stories: the in-memory
story model, link extraction, link-aware passage renaming, and codecs for
the Twine 2 archive, Twee 3 and JSON backup formats, plus a playable HTML
generator.

Modules:
- links: link marker parsing and the passage link graph
- identifiers: IFIDs and passage name rules
- model: Story/Passage values and editing operations
- rename: inbound link rewriting for passage renames
- archive / twee / json_backup: format codecs
- playable: standalone playable HTML document
- detect: format detection and dispatch
"""

__version__ = "1.0.0"

from twine_workshop.errors import (
    InvalidName,
    LastPassage,
    NameCollision,
    PassageNotFound,
    StoryError,
)
from twine_workshop.links import build_graph, extract_links
from twine_workshop.model import (
    Passage,
    Story,
    create_empty,
    delete_passage,
    rename_passage,
)
from twine_workshop.archive import generate_archive, parse_archive
from twine_workshop.twee import generate_twee, parse_twee
from twine_workshop.json_backup import generate_json, parse_json
from twine_workshop.playable import generate_playable
from twine_workshop.detect import parse_file
