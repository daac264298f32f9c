"""Content record groups.

Each group maps to one directory of the content tree and one public
route prefix. Group dispatch goes through this enum so every group is
handled explicitly.
"""

from __future__ import annotations

from enum import Enum

COURSE_METADATA_FILES = ("metadata.json", "metadata.yml", "metadata.yaml")


class Group(Enum):
    """Top-level content category."""

    DOCS = "docs"
    RPC = "rpc"
    GUIDES = "guides"
    RESOURCES = "resources"
    WORKSHOPS = "workshops"
    COOKBOOK = "cookbook"
    COURSES = "courses"
    LESSONS = "lessons"
    AUTHORS = "authors"

    @property
    def record_root(self) -> str:
        """Normalized source directory holding this group's files."""
        if self is Group.DOCS:
            return "docs"
        if self is Group.RPC:
            return "docs/rpc"
        if self is Group.LESSONS:
            return "content/courses"
        return f"content/{self.value}"

    @property
    def route_root(self) -> str:
        """Public href prefix for this group's records."""
        if self is Group.DOCS:
            return "/docs"
        if self is Group.RPC:
            return "/docs/rpc"
        if self is Group.LESSONS:
            return "/developers/courses"
        return f"/developers/{self.value}"

    @classmethod
    def from_name(cls, name: str | None) -> Group | None:
        """Look up a group by its URL name.

        Accepts the stringified route alias "docs,rpc" for the RPC group.

        Args:
            name: Group name from a URL segment

        Returns:
            Group if known, None otherwise
        """
        if not name:
            return None
        normalized = name.strip().lower()
        if normalized == "docs,rpc":
            return cls.RPC
        for group in cls:
            if group.value == normalized:
                return group
        return None

    @classmethod
    def classify(cls, path: str, file_name: str) -> Group | None:
        """Assign a normalized record directory to its group.

        Args:
            path: Normalized source directory (locale prefix already removed)
            file_name: Source file name

        Returns:
            Group the record belongs to, None when outside every content root
        """
        if _is_under(path, Group.RPC.record_root):
            return cls.RPC
        if _is_under(path, Group.DOCS.record_root):
            return cls.DOCS

        courses_root = Group.COURSES.record_root
        if _is_under(path, courses_root):
            parts = path[len(courses_root) :].strip("/").split("/")
            if len(parts) == 1 and parts[0] and file_name.lower() in COURSE_METADATA_FILES:
                return cls.COURSES
            if len(parts) == 2 and parts[1] == "content":
                return cls.LESSONS
            return None

        for group in (cls.GUIDES, cls.RESOURCES, cls.WORKSHOPS, cls.COOKBOOK, cls.AUTHORS):
            if _is_under(path, group.record_root):
                return group
        return None


CONTENT_ROOTS = frozenset(group.record_root for group in Group)


# "docs" and "content": directories directly below these stay top-level
TOP_LEVEL_SEGMENTS = frozenset(root.split("/", 1)[0] for root in CONTENT_ROOTS)


def is_top_level_segment(path: str) -> bool:
    """Return True for the empty path or the first segment of a content root."""
    return not path or path in TOP_LEVEL_SEGMENTS


def _is_under(path: str, root: str) -> bool:
    return path == root or path.startswith(f"{root}/")
