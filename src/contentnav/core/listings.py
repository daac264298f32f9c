"""Flat record listings for the records, paths and overview endpoints."""

import random
from collections.abc import Iterable
from dataclasses import replace
from typing import Any

from contentnav.core.groups import Group
from contentnav.core.keys import should_ignore_record
from contentnav.core.navigation import DEFAULT_SORT_ORDER, NavItem, NavItemDict, build_nav_item
from contentnav.core.records import ContentRecord

OVERVIEW_GROUPS = (Group.GUIDES, Group.RESOURCES, Group.WORKSHOPS)


def simplify_records(records: Iterable[ContentRecord]) -> list[dict[str, Any]]:
    """Merge each linkable record with its nav item, dropping internal fields.

    Ignored files and metadata-only records are skipped. Body and source
    file details are not included.

    Args:
        records: Content records

    Returns:
        JSON-serializable record dicts
    """
    listing: list[dict[str, Any]] = []
    for record in records:
        if should_ignore_record(record.source_file_name):
            continue
        nav_item = build_nav_item(record)
        if nav_item.href is None:
            continue

        entry: dict[str, Any] = dict(nav_item.to_dict())
        entry.update(record.to_dict(include_body=False))
        entry["href"] = nav_item.href
        listing.append(entry)
    return listing


def compute_path_listing(records: Iterable[ContentRecord], group: Group) -> list[NavItemDict]:
    """List every routable path of a group.

    External records are skipped. Each non-blank alternate route adds an
    extra entry pointing at the same record. The docs group leaves
    /docs/rpc to the RPC group.

    Args:
        records: Content records of one group and locale
        group: Group the records belong to

    Returns:
        Nav item dicts, one per route
    """
    listing: list[NavItem] = []
    for record in records:
        if should_ignore_record(record.source_file_name) or record.is_external:
            continue
        nav_item = build_nav_item(record)
        if nav_item.href is None:
            continue

        listing.append(nav_item)
        for route in record.alt_routes:
            route = route.strip()
            if route:
                listing.append(replace(nav_item, href=route, alt_routes=()))

    if group is Group.DOCS:
        listing = [item for item in listing if item.href not in ("/docs/rpc", "/docs/rpc/")]

    return [item.to_dict() for item in listing]


def extract_featured_records(
    records: list[ContentRecord],
    *,
    limit: int = 3,
    add_filler_records: bool = False,
    randomize_filler_records: bool = False,
) -> list[ContentRecord]:
    """Extract featured records ordered by featured priority.

    Args:
        records: Records to search
        limit: Maximum number of records to return
        add_filler_records: Top up with non-featured records to reach limit
        randomize_filler_records: Shuffle filler records before use

    Returns:
        At most ``limit`` records, featured ones first
    """
    featured = sorted(
        (record for record in records if record.featured),
        key=lambda record: DEFAULT_SORT_ORDER if record.featured_priority is None else record.featured_priority,
    )

    if add_filler_records and len(featured) < limit:
        fillers = [record for record in records if not record.featured]
        if randomize_filler_records:
            random.shuffle(fillers)
        featured.extend(fillers)

    return featured[:limit]
