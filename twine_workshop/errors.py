"""
Errors raised by story editing operations.

Parsers never raise these: a format that cannot be read returns None so
callers can try the next format.
"""


class StoryError(Exception):
    """Base class for rejected story edits."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


class InvalidName(StoryError):
    """Passage name violates the naming rules."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(name, f"Invalid passage name {name!r}: {reason}")
        self.reason = reason


class NameCollision(StoryError):
    """Another passage already uses the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"A passage named {name!r} already exists")


class LastPassage(StoryError):
    """A story must keep at least one passage."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Cannot delete {name!r}: it is the only passage")


class PassageNotFound(StoryError):
    """No passage has the given name."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"No passage named {name!r}")
