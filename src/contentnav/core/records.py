"""Content records and the immutable record snapshot.

A RecordSnapshot is built once per content load and passed explicitly
to every builder and resolver call. Nothing here mutates after
construction.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import Any, TypedDict

from contentnav.core.groups import COURSE_METADATA_FILES, Group
from contentnav.core.keys import compute_path_and_id, strip_locale_prefix

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"

INDEX_FILE_NAMES = ("index.md", "index.mdx", *COURSE_METADATA_FILES)


@dataclass(frozen=True)
class ContentRecord:
    """One content file with its frontmatter metadata."""

    source_file_dir: str
    source_file_name: str
    locale: str = DEFAULT_LOCALE
    title: str | None = None
    description: str | None = None
    sidebar_label: str | None = None
    href: str | None = None
    sidebar_sort_order: int | float | None = None
    meta_only: bool = False
    alt_routes: tuple[str, ...] = ()
    featured: bool = False
    featured_priority: int | float | None = None
    author: str | None = None
    is_external: bool = False
    lessons: tuple[str, ...] = ()
    body: str = ""
    extra: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    @property
    def source_file_path(self) -> str:
        """Raw path of the source file."""
        if not self.source_file_dir:
            return self.source_file_name
        return f"{self.source_file_dir}/{self.source_file_name}"

    @property
    def file_stem(self) -> str:
        return self.source_file_name.split(".", 1)[0]

    @property
    def is_index(self) -> bool:
        """Whether this file supplies the metadata of its directory."""
        return self.source_file_name.lower() in INDEX_FILE_NAMES

    @property
    def flattened_path(self) -> str:
        """Source path without extension; index files collapse to their directory."""
        if self.is_index:
            return self.source_file_dir
        if not self.source_file_dir:
            return self.file_stem
        return f"{self.source_file_dir}/{self.file_stem}"

    @cached_property
    def group(self) -> Group | None:
        normalized = compute_path_and_id(self.source_file_dir).path
        return Group.classify(normalized, self.source_file_name)

    @property
    def slug(self) -> str:
        """Short identifier: the file stem, or the course directory for course metadata."""
        if self.source_file_name.lower() in COURSE_METADATA_FILES:
            return self.source_file_dir.rstrip("/").rsplit("/", 1)[-1]
        return self.file_stem

    @property
    def course_slug(self) -> str | None:
        """Owning course slug for lesson records."""
        if self.group is not Group.LESSONS:
            return None
        normalized = compute_path_and_id(self.source_file_dir).path
        return normalized.split("/")[-2]

    def to_dict(self, *, include_body: bool = True) -> dict[str, Any]:
        """Convert to a JSON-serializable dict with camelCase keys.

        The href is left to the NavItem that wraps this record.
        """
        result: dict[str, Any] = dict(self.extra)
        result.update(
            {
                "title": self.title,
                "slug": self.slug,
                "locale": self.locale,
            },
        )
        optional: dict[str, Any] = {
            "description": self.description,
            "sidebarLabel": self.sidebar_label,
            "sidebarSortOrder": self.sidebar_sort_order,
            "author": self.author,
        }
        result.update({key: value for key, value in optional.items() if value is not None})
        if self.alt_routes:
            result["altRoutes"] = list(self.alt_routes)
        if self.lessons:
            result["lessons"] = list(self.lessons)
        if self.featured:
            result["featured"] = True
            result["featuredPriority"] = self.featured_priority
        if self.meta_only:
            result["metaOnly"] = True
        if self.is_external:
            result["isExternal"] = True
        if include_body:
            result["body"] = self.body.strip()
            result["sourceFilePath"] = strip_locale_prefix(self.source_file_path)
            result["sourceFileDir"] = strip_locale_prefix(self.source_file_dir)
            result["sourceFileName"] = self.source_file_name
        return result


class RecordSnapshot:
    """Immutable set of content records for one content build."""

    __slots__ = ("_default_locale", "_records")

    def __init__(
        self,
        records: list[ContentRecord] | tuple[ContentRecord, ...],
        *,
        default_locale: str = DEFAULT_LOCALE,
    ) -> None:
        self._records = tuple(records)
        self._default_locale = default_locale

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> tuple[ContentRecord, ...]:
        return self._records

    @property
    def default_locale(self) -> str:
        return self._default_locale

    def locales(self) -> list[str]:
        """Locales present in the snapshot, default locale first."""
        found = {record.locale for record in self._records}
        found.discard(self._default_locale)
        return [self._default_locale, *sorted(found)]

    def all_for_group(self, group: Group) -> list[ContentRecord]:
        """Every record of a group, across all locales."""
        return [record for record in self._records if record.group is group]

    def has_locale(self, group: Group, locale: str) -> bool:
        return any(record.locale == locale for record in self.all_for_group(group))

    def effective_locale(self, group: Group, locale: str) -> str:
        """Locale actually served for a group.

        Falls back to the default locale when the group has no records at
        all in the requested locale.
        """
        if locale != self._default_locale and not self.has_locale(group, locale):
            logger.debug(f"No {group.value} records for locale {locale}, using {self._default_locale}")
            return self._default_locale
        return locale

    def for_group(self, group: Group, locale: str | None = None) -> list[ContentRecord]:
        """Get a group's records in one locale.

        The whole group falls back to the default locale when the requested
        locale has no records, so a listing never mixes translations.
        The RPC group also carries the docs root page so it appears in the
        RPC sidebar.

        Args:
            group: Record group
            locale: Requested locale (default locale when None)

        Returns:
            Records for the group in the effective locale
        """
        locale = self.effective_locale(group, locale or self._default_locale)
        records = [record for record in self.all_for_group(group) if record.locale == locale]

        if group is Group.RPC:
            docs_index = self._find_docs_index(locale)
            if docs_index is not None:
                records.append(docs_index)

        return records

    def find_course(self, slug: str, locale: str | None = None) -> ContentRecord | None:
        """Locate a course by slug, preferring the requested locale."""
        courses = self.for_group(Group.COURSES, locale)
        for course in courses:
            if course.slug.lower() == slug.lower():
                return course
        return None

    def find_author(self, slug: str) -> ContentRecord | None:
        for author in self.all_for_group(Group.AUTHORS):
            if author.slug == slug:
                return author
        return None

    def _find_docs_index(self, locale: str) -> ContentRecord | None:
        for record in self.all_for_group(Group.DOCS):
            if record.locale != locale or not record.is_index:
                continue
            if compute_path_and_id(record.source_file_dir).path == Group.DOCS.record_root:
                # featuredPriority 0 keeps the docs root first among featured RPC pages
                return _with_featured_priority(record, 0)
        return None


def _with_featured_priority(record: ContentRecord, priority: int) -> ContentRecord:
    return replace(record, featured_priority=priority)


class PaginationDict(TypedDict):
    """Pagination metadata for record listings."""

    page: int
    pageSize: int
    totalPages: int
    totalRecords: int
    hasNextPage: bool
    hasPreviousPage: bool


def paginate_records(
    records: list[dict[str, Any]],
    *,
    page: int = 1,
    page_size: int = 10,
    sort_field: str | None = None,
    sort_direction: str = "asc",
) -> tuple[list[dict[str, Any]], PaginationDict]:
    """Sort and slice a record listing.

    Sorting only applies when sort_field is present on the first record.
    Records missing the field sort last. Mixed value types sort numbers
    before strings before anything else.

    Args:
        records: Simplified record dicts
        page: 1-based page number
        page_size: Records per page
        sort_field: Optional field name to sort by
        sort_direction: "asc" or "desc"

    Returns:
        Tuple of (page of records, pagination metadata)

    Raises:
        ValueError: If page or page_size is not positive
    """
    if page < 1:
        raise ValueError("page must be a positive integer")
    if page_size < 1:
        raise ValueError("pageSize must be a positive integer")

    if sort_field and records and sort_field in records[0]:
        present = [r for r in records if r.get(sort_field) is not None]
        missing = [r for r in records if r.get(sort_field) is None]
        present.sort(key=lambda r: _sort_value(r[sort_field]), reverse=sort_direction == "desc")
        records = present + missing

    total_records = len(records)
    total_pages = math.ceil(total_records / page_size)
    start = (page - 1) * page_size

    pagination: PaginationDict = {
        "page": page,
        "pageSize": page_size,
        "totalPages": total_pages,
        "totalRecords": total_records,
        "hasNextPage": page < total_pages,
        "hasPreviousPage": page > 1,
    }
    return records[start : start + page_size], pagination


def _sort_value(value: Any) -> tuple[int, float, str]:
    if isinstance(value, int | float):
        return (0, float(value), "")
    if isinstance(value, str):
        return (1, 0.0, value)
    return (2, 0.0, str(value))
