"""
Defaults shared by the model and the codecs.

Values that an installation may want to change can be overridden through
environment variables, read once at import time.
"""

import logging
import os
import sys

# Advertised in generated archives
CREATOR_NAME = "Twine Workshop"
CREATOR_VERSION = "1.0.0"

# Story format written when a story does not name one
DEFAULT_FORMAT = os.environ.get("TWINE_WORKSHOP_DEFAULT_FORMAT", "Harlowe")
DEFAULT_FORMAT_VERSION = os.environ.get("TWINE_WORKSHOP_DEFAULT_FORMAT_VERSION", "3.3.9")

DEFAULT_TITLE = "Imported Story"
DEFAULT_START_PASSAGE = "Start"
DEFAULT_ZOOM = 1

# Passage geometry
DEFAULT_POSITION = 100
DEFAULT_SIZE = 100

# Grid used for Twee passages without position metadata
GRID_COLUMNS = 5
GRID_ORIGIN = 100
GRID_X_SPACING = 200
GRID_Y_SPACING = 150

# New story template
NEW_STORY_CONTENT = "Your story begins here.\n\nLink to passages: [[Next]]"
NEW_STORY_POSITION = (400, 300)
NEW_PASSAGE_NAME = "New Passage"

MAX_PASSAGE_NAME_LENGTH = 200
PREVIEW_LENGTH = 60

LOG_LEVEL = os.environ.get("TWINE_WORKSHOP_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr. Only the CLI calls this."""
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
