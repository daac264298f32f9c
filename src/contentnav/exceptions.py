"""
Contentnav exception hierarchy.

ContentNavError (base, Exception)
├── NotFoundError(ContentNavError)                  ← lookup miss, caller renders a 404
├── MalformedInputError(ContentNavError, ValueError) ← caller precondition violation
├── DataIntegrityError(ContentNavError)             ← dangling content references
├── RecordLoadError(ContentNavError)                ← unreadable content file
└── ConfigError(ContentNavError, ValueError)         ← config validation
"""


class ContentNavError(Exception):
    """Base exception for all contentnav errors."""


class NotFoundError(ContentNavError):
    """Requested group/locale/href resolves to no record."""

    def __init__(self, path: str, reason: str = "Not found") -> None:
        super().__init__(f"{reason}: {path}")
        self.path = path
        self.reason = reason


class MalformedInputError(ContentNavError, ValueError):
    """Route segments are empty or not a sequence of strings."""


class DataIntegrityError(ContentNavError):
    """Content references a course, lesson, author or route that is missing or duplicated."""


class RecordLoadError(ContentNavError):
    """Content file could not be read or its frontmatter could not be parsed."""


class ConfigError(ContentNavError, ValueError):
    """Configuration validation error (compatible with ValueError)."""
