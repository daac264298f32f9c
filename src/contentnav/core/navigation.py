"""Navigation tree builder.

Groups flat content records into a category tree that mirrors the
content directory layout. A directory's index file supplies the
category's own metadata; directories without one get a synthesized
category node.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import TypedDict

from contentnav.core.groups import Group, is_top_level_segment
from contentnav.core.keys import (
    compute_path_and_id,
    label_from_file_name,
    label_from_key,
    locale_prefix,
    path_to_id,
    should_ignore_record,
)
from contentnav.core.records import ContentRecord
from contentnav.core.types import URLPath
from contentnav.exceptions import DataIntegrityError

logger = logging.getLogger(__name__)

DEFAULT_SORT_ORDER = 999


class NavItemDict(TypedDict, total=False):
    """Dictionary representation of a navigation item."""

    id: str
    slug: str
    label: str
    locale: str
    path: str
    href: str
    sidebarSortOrder: int | float
    metaOnly: bool
    altRoutes: list[str]
    items: list[NavItemDict]


@dataclass
class NavItem:
    """Navigation tree node.

    A node with an href is a linkable page. A node without one is a
    category or metadata-only entry that is still shown in the tree and
    used for breadcrumbs. ``items`` is None for plain pages and a list
    for directory categories.
    """

    id: str
    slug: str
    label: str
    path: str
    locale: str | None = None
    href: URLPath | None = None
    sidebar_sort_order: int | float | None = None
    alt_routes: tuple[str, ...] = ()
    meta_only: bool = False
    is_external: bool = False
    items: list[NavItem] | None = None

    def __post_init__(self) -> None:
        if self.meta_only and self.href is not None:
            raise ValueError(f"Metadata-only nav item {self.id!r} cannot have an href")

    @property
    def is_linkable(self) -> bool:
        return self.href is not None

    @property
    def is_category(self) -> bool:
        return self.items is not None

    @property
    def sort_key(self) -> int | float:
        if self.sidebar_sort_order is None:
            return DEFAULT_SORT_ORDER
        return self.sidebar_sort_order

    def matches_href(self, href: str) -> bool:
        """Check the href (with or without leading slash) and alt routes."""
        target = href.lower()
        if self.href is not None and target in (self.href, f"/{self.href}", self.href.lstrip("/")):
            return True
        return any(route.strip().lower() == target for route in self.alt_routes)

    def to_dict(self) -> NavItemDict:
        """Convert to dictionary for JSON serialization."""
        result: NavItemDict = {"id": self.id, "slug": self.slug, "label": self.label, "path": self.path}
        if self.locale is not None:
            result["locale"] = self.locale
        if self.href is not None:
            result["href"] = self.href
        if self.sidebar_sort_order is not None:
            result["sidebarSortOrder"] = self.sidebar_sort_order
        if self.meta_only:
            result["metaOnly"] = True
        if self.alt_routes:
            result["altRoutes"] = list(self.alt_routes)
        if self.items is not None:
            result["items"] = [child.to_dict() for child in self.items]
        return result


def compute_href(record: ContentRecord) -> URLPath:
    """Compute the public route for a record.

    An explicit href in the frontmatter wins. Otherwise the route is the
    group's route root followed by the record path below the group's
    content root. Lessons drop their "content" directory so they live
    under their course.

    Args:
        record: Content record

    Returns:
        Lowercased href without trailing slash
    """
    if record.href:
        return URLPath(record.href.strip().lower())

    path = compute_path_and_id(record.flattened_path).path
    group = record.group
    if group is None:
        return URLPath(f"/{path}")

    relative = path[len(group.record_root) :].strip("/")
    if group is Group.LESSONS:
        parts = relative.split("/")
        if len(parts) > 1 and parts[1] == "content":
            del parts[1]
        relative = "/".join(parts)

    href = f"{group.route_root}/{relative}".rstrip("/")
    return URLPath(href or "/")


def build_nav_item(record: ContentRecord, *, include_i18n: bool = False) -> NavItem:
    """Map one content record to a navigation node.

    Args:
        record: Content record
        include_i18n: Keep the "i18n/<locale>/" prefix in id and path

    Returns:
        NavItem for the record (no ``items``)
    """
    computed = compute_path_and_id(record.flattened_path, include_i18n=include_i18n)
    label = record.sidebar_label or record.title or label_from_file_name(record.source_file_name)

    return NavItem(
        id=computed.id,
        slug=record.slug,
        label=label,
        path=computed.path,
        locale=record.locale,
        href=None if record.meta_only else compute_href(record),
        sidebar_sort_order=record.sidebar_sort_order,
        alt_routes=record.alt_routes,
        meta_only=record.meta_only,
        is_external=record.is_external,
    )


def build_navigation(
    records: Iterable[ContentRecord],
    *,
    include_i18n: bool = False,
) -> list[NavItem]:
    """Build a sorted navigation tree from flat records.

    Pass one collects a node per directory (from its index file, or
    synthesized) plus the page items that live in it, and creates any
    missing intermediate directories. Pass two attaches every directory
    node to its parent, deepest first, so parents always receive fully
    assembled children. Directories directly below "docs" or "content"
    stay at the top level; group roots such as "content/guides" become
    the single category holding their sub-directories. Grouping ignores
    locale prefixes, so translated trees keep the default locale shape.

    Args:
        records: Content records of one group and locale
        include_i18n: Keep the "i18n/<locale>/" prefix in ids and paths

    Returns:
        Top-level NavItems, each possibly with nested items

    Raises:
        DataIntegrityError: If two pages in one directory share an id
    """
    nodes: dict[str, NavItem] = {}
    pages: dict[str, list[NavItem]] = {}
    prefixes: dict[str, str] = {}
    root_pages: list[NavItem] = []

    for record in records:
        if should_ignore_record(record.source_file_name):
            continue

        # structure always follows the locale-free path
        key = compute_path_and_id(record.source_file_dir).path
        item = build_nav_item(record, include_i18n=include_i18n)
        if include_i18n and key:
            prefixes.setdefault(key, locale_prefix(record.source_file_dir))

        if record.is_index and key:
            if key in nodes:
                logger.debug(f"Multiple index files in {key}, using {record.source_file_path}")
            nodes[key] = item
            pages.setdefault(key, [])
            continue

        siblings = root_pages if not key else pages.setdefault(key, [])
        if any(sibling.id == item.id for sibling in siblings):
            raise DataIntegrityError(f"Duplicate navigation id {item.id!r} from {record.source_file_path}")
        siblings.append(item)

    for key in list(pages):
        if key not in nodes:
            nodes[key] = _category_from_key(key, _first_locale(pages[key]), prefixes.get(key, ""))
        nodes[key].items = pages[key]

    # synthesize missing intermediate directories
    for key in list(nodes):
        child = key
        parent = _parent_key(child)
        while parent is not None and parent not in nodes:
            prefixes.setdefault(parent, prefixes.get(child, ""))
            nodes[parent] = _category_from_key(parent, nodes[child].locale, prefixes[parent], items=[])
            child = parent
            parent = _parent_key(child)

    roots: list[NavItem] = list(root_pages)
    for key in sorted(nodes, key=lambda k: k.count("/"), reverse=True):
        parent = _parent_key(key)
        if parent is None:
            continue
        _attach(nodes[parent], nodes[key])

    roots.extend(node for key, node in nodes.items() if _parent_key(key) is None)
    return sort_nav_items(roots)


def sort_nav_items(items: list[NavItem]) -> list[NavItem]:
    """Sort siblings by sidebar sort order, children first.

    Absent sort orders count as 999. Ties keep their insertion order.
    """
    for item in items:
        if item.items:
            item.items = sort_nav_items(item.items)
    return sorted(items, key=lambda item: item.sort_key)


def flatten_navigation(items: Iterable[NavItem]) -> list[NavItem]:
    """Flatten a tree depth-first, each category before its children.

    Returned nodes are copies without ``items``; the input is not modified.
    """
    flat: list[NavItem] = []
    for item in items:
        flat.append(replace(item, items=None))
        if item.items:
            flat.extend(flatten_navigation(item.items))
    return flat


def _attach(parent: NavItem, child: NavItem) -> None:
    """Attach a directory node to its parent, merging with a same-id sibling."""
    siblings = parent.items if parent.items is not None else []
    parent.items = siblings

    for sibling in siblings:
        if sibling.id != child.id:
            continue
        children = child.items or []
        if sibling.items is None:
            sibling.items = list(children)
        else:
            sibling.items.extend(children)
        return

    siblings.append(child)


def _parent_key(key: str) -> str | None:
    """Return the directory a key nests under, None for top-level keys."""
    if "/" not in key:
        return None
    parent = key.rsplit("/", 1)[0]
    if is_top_level_segment(parent):
        return None
    return parent


def _category_from_key(
    key: str,
    locale: str | None,
    prefix: str = "",
    items: list[NavItem] | None = None,
) -> NavItem:
    computed = compute_path_and_id(f"{prefix}{key}", include_i18n=True)
    return NavItem(
        id=path_to_id(computed.path),
        slug=computed.path.rsplit("/", 1)[-1],
        label=label_from_key(computed.path),
        path=computed.path,
        locale=locale,
        items=items,
    )


def _first_locale(items: list[NavItem]) -> str | None:
    for item in items:
        if item.locale is not None:
            return item.locale
    return None
