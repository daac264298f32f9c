"""Route resolution.

Parses URL segments into a group, locale and href, then locates the
matching record together with its previous/next pages and breadcrumbs.
Navigation order always comes from the default locale so pagination is
stable across translations.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from contentnav.core.groups import Group
from contentnav.core.keys import compute_path_and_id, is_locale_segment, locale_free_id, parent_id
from contentnav.core.navigation import NavItem, build_navigation, flatten_navigation
from contentnav.core.records import ContentRecord, RecordSnapshot
from contentnav.core.types import URLPath
from contentnav.core.validation import check_courses, check_routes
from contentnav.exceptions import DataIntegrityError, MalformedInputError, NotFoundError

logger = logging.getLogger(__name__)

# Trailing "/index" and/or markdown extension on a requested path
_INDEX_SUFFIX_REGEX = re.compile(r"(?:(?:^|/)index)?(?:\.mdx?)?$", re.IGNORECASE)


@dataclass(frozen=True)
class RouteDetails:
    """Request context parsed from URL segments."""

    locale: str
    group: Group
    href: URLPath
    appendix: str


@dataclass(frozen=True)
class BreadcrumbItem:
    """Breadcrumb navigation item."""

    label: str
    href: str | None = None

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        result = {"label": self.label}
        if self.href is not None:
            result["href"] = self.href
        return result


@dataclass
class Resolution:
    """A resolved record with its navigation context."""

    group: Group
    locale: str
    record: ContentRecord
    current: NavItem
    prev: NavItem | None = None
    next: NavItem | None = None
    breadcrumbs: list[BreadcrumbItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Merge the nav item, the record and its navigation context."""
        result: dict[str, Any] = dict(self.current.to_dict())
        result.update(self.record.to_dict())
        if self.current.href is not None:
            result["href"] = self.current.href
        result["breadcrumbs"] = [crumb.to_dict() for crumb in self.breadcrumbs]
        result["next"] = self.next.to_dict() if self.next is not None else None
        result["prev"] = self.prev.to_dict() if self.prev is not None else None
        return result


def normalize_href(group: Group, appendix: str) -> URLPath:
    """Build the href to look up from the path below a group.

    Strips a trailing "/index" and markdown extension, lowercases and
    prefixes with the group's route root. Trailing slashes are removed.
    """
    relative = _INDEX_SUFFIX_REGEX.sub("", appendix.strip().lower(), count=1).strip("/")
    href = f"{group.route_root}/{relative}" if relative else group.route_root
    return URLPath(href.rstrip("/") or "/")


def parse_route(segments: Sequence[str], default_locale: str = "en") -> RouteDetails:
    """Parse URL segments into a request context.

    Args:
        segments: URL path segments, e.g. ["de", "docs", "rpc", "http"]
        default_locale: Locale used when the first segment is not a locale

    Returns:
        RouteDetails with locale, group, href and raw appendix

    Raises:
        MalformedInputError: If segments is empty or not a list of strings
        NotFoundError: If no known group is named
    """
    if isinstance(segments, str) or not isinstance(segments, Sequence):
        raise MalformedInputError("Route segments must be a sequence of strings")
    if not segments or not all(isinstance(segment, str) for segment in segments):
        raise MalformedInputError("Route segments must be a non-empty sequence of strings")

    remaining = [segment for segment in segments if segment]
    locale = default_locale
    if remaining and is_locale_segment(remaining[0]):
        locale = remaining.pop(0).lower()

    if not remaining:
        raise NotFoundError("/".join(segments), "No content group")

    name = remaining.pop(0)
    # public hrefs carry a "developers" prefix for non-docs groups
    if name.lower() == "developers" and remaining:
        name = remaining.pop(0)
    group = Group.from_name(name)
    if group is Group.DOCS and remaining and remaining[0].lower() == "rpc":
        remaining.pop(0)
        group = Group.RPC
    if group is None:
        raise NotFoundError(name, "Unknown content group")

    # lessons are addressed as courses/<course>/<lesson>
    if group is Group.COURSES and len(remaining) == 2:
        group = Group.LESSONS

    appendix = "/".join(remaining)
    return RouteDetails(
        locale=locale,
        group=group,
        href=normalize_href(group, appendix),
        appendix=appendix,
    )


def build_breadcrumbs(node_id: str, flat_items: Sequence[NavItem]) -> list[BreadcrumbItem]:
    """Build ancestor breadcrumbs by walking an id upward.

    Each shorter dash-separated prefix of the id is looked up in the flat
    listing by locale-free id, so a default locale id finds translated
    ancestors. Ancestors that do not exist are skipped. The node itself is
    never included.

    Args:
        node_id: Id of the current nav item
        flat_items: Flattened listing to look ancestors up in

    Returns:
        Breadcrumbs ordered root first
    """
    by_id: dict[str, NavItem] = {}
    for item in flat_items:
        by_id.setdefault(locale_free_id(item.path), item)

    breadcrumbs: list[BreadcrumbItem] = []
    ancestor = parent_id(node_id)
    while ancestor:
        item = by_id.get(ancestor)
        if item is not None:
            breadcrumbs.append(BreadcrumbItem(label=item.label, href=item.href))
        ancestor = parent_id(ancestor)

    breadcrumbs.reverse()
    return breadcrumbs


def find_neighbor(flat_items: Sequence[NavItem], index: int, step: int) -> NavItem | None:
    """Find the nearest linkable, internal item before (-1) or after (+1) index."""
    position = index + step
    while 0 <= position < len(flat_items):
        item = flat_items[position]
        if item.href and not item.is_external:
            return item
        position += step
    return None


class ContentResolver:
    """Builds navigation trees and resolves routes against one snapshot.

    Trees are memoized per (group, locale). A resolver is bound to a
    single immutable snapshot, so the memo never outlives its records.
    Returned trees are shared and must be treated as read-only.
    """

    def __init__(self, snapshot: RecordSnapshot, *, include_i18n: bool = False) -> None:
        self._snapshot = snapshot
        self._include_i18n = include_i18n
        self._trees: dict[tuple[Group, str], list[NavItem]] = {}
        self._flat: dict[tuple[Group, str], list[NavItem]] = {}

    @property
    def snapshot(self) -> RecordSnapshot:
        return self._snapshot

    @property
    def default_locale(self) -> str:
        return self._snapshot.default_locale

    def navigation(self, group: Group, locale: str | None = None) -> list[NavItem]:
        """Get the nav tree for a group in a locale (with whole-group fallback).

        Raises:
            DataIntegrityError: If the group has dangling references or
                ambiguous alternate routes
        """
        key = (group, self._snapshot.effective_locale(group, locale or self.default_locale))
        tree = self._trees.get(key)
        if tree is None:
            tree = self._build(*key)
        return tree

    def flat_navigation(self, group: Group, locale: str | None = None) -> list[NavItem]:
        """Get the depth-first flattened nav listing for a group."""
        key = (group, self._snapshot.effective_locale(group, locale or self.default_locale))
        if key not in self._flat:
            self._build(*key)
        return self._flat[key]

    def resolve(self, segments: Sequence[str]) -> Resolution:
        """Resolve URL segments to a record with prev/next and breadcrumbs.

        Args:
            segments: URL path segments

        Returns:
            Resolution for the first matching nav item

        Raises:
            MalformedInputError: If segments is empty or malformed
            NotFoundError: If no record matches
            DataIntegrityError: If the record's course or lesson order is broken
        """
        details = parse_route(segments, self.default_locale)
        group = details.group
        default_locale = self.default_locale

        base_flat = self.flat_navigation(group, default_locale)
        index = next((i for i, item in enumerate(base_flat) if item.matches_href(details.href)), None)
        if index is None:
            logger.debug(f"No {group.value} record for {details.href}")
            raise NotFoundError(details.href)

        current = base_flat[index]
        record = self._find_record(self._snapshot.for_group(group, default_locale), current)
        if record is None:
            raise NotFoundError(details.href)

        if group is Group.LESSONS:
            prev, next_ = self._lesson_neighbors(details, current, base_flat)
        else:
            prev = find_neighbor(base_flat, index, -1)
            next_ = find_neighbor(base_flat, index, 1)

        flat = base_flat
        if details.locale != default_locale:
            localized = self._find_record(self._snapshot.for_group(group, details.locale), current)
            if localized is not None:
                record = localized
            flat = self.flat_navigation(group, details.locale)
            prev = _localize(prev, flat)
            next_ = _localize(next_, flat)

        return Resolution(
            group=group,
            locale=details.locale,
            record=record,
            current=current,
            prev=prev,
            next=next_,
            breadcrumbs=build_breadcrumbs(locale_free_id(current.path), flat),
        )

    def _build(self, group: Group, locale: str) -> list[NavItem]:
        records = self._snapshot.for_group(group, locale)
        if group in (Group.COURSES, Group.LESSONS):
            check_courses(self._snapshot, locale)

        tree = build_navigation(records, include_i18n=self._include_i18n)
        flat = flatten_navigation(tree)
        check_routes(flat, group)

        logger.debug(f"Built {group.value} navigation for {locale}: {len(flat)} items")
        self._trees[(group, locale)] = tree
        self._flat[(group, locale)] = flat
        return tree

    def _find_record(self, records: list[ContentRecord], current: NavItem) -> ContentRecord | None:
        target = locale_free_id(current.path)
        for record in records:
            if locale_free_id(record.flattened_path) == target:
                return record
        return None

    def _lesson_neighbors(
        self,
        details: RouteDetails,
        current: NavItem,
        flat: list[NavItem],
    ) -> tuple[NavItem | None, NavItem | None]:
        """Order lessons by their course's lesson list instead of file order."""
        course_slug = details.appendix.split("/", 1)[0]
        course = self._snapshot.find_course(course_slug, self.default_locale)
        if course is None:
            logger.debug(f"No course {course_slug!r} for lesson {details.href}")
            raise NotFoundError(details.href, "Course not found")

        order = list(course.lessons)
        if current.slug not in order:
            raise DataIntegrityError(f"Lesson {current.slug!r} is not listed in course {course.slug!r}")

        course_dir = compute_path_and_id(course.source_file_dir, include_i18n=self._include_i18n).path
        position = order.index(current.slug)

        def lookup(slug: str) -> NavItem:
            for item in flat:
                if item.slug == slug and item.path.startswith(f"{course_dir}/"):
                    return item
            raise DataIntegrityError(f"Course {course.slug!r} references missing lesson {slug!r}")

        prev = lookup(order[position - 1]) if position > 0 else None
        next_ = lookup(order[position + 1]) if position + 1 < len(order) else None
        return prev, next_


def _localize(item: NavItem | None, flat: list[NavItem]) -> NavItem | None:
    """Swap a nav item for its same-id equivalent in another locale's listing."""
    if item is None:
        return None
    target = locale_free_id(item.path)
    for candidate in flat:
        if locale_free_id(candidate.path) == target:
            return candidate
    return item
