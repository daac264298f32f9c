"""Content integrity checks.

Dangling course/lesson/author references and ambiguous routes are
authoring errors. They raise DataIntegrityError for the affected group
instead of producing a tree with broken links.
"""

import logging
from collections.abc import Iterable

from contentnav.core.groups import Group
from contentnav.core.navigation import NavItem, build_navigation, flatten_navigation
from contentnav.core.records import ContentRecord, RecordSnapshot
from contentnav.exceptions import DataIntegrityError

logger = logging.getLogger(__name__)


def find_duplicate_routes(flat_items: Iterable[NavItem]) -> list[str]:
    """Find alternate routes claimed by more than one nav item.

    An alternate route that equals another item's href is also reported.

    Args:
        flat_items: Flattened nav items of one group and locale

    Returns:
        Problem descriptions, empty when routes are unambiguous
    """
    items = list(flat_items)
    owners: dict[str, str] = {item.href: item.id for item in items if item.href is not None}
    claimed: dict[str, str] = {}
    problems: list[str] = []

    for item in items:
        for raw_route in item.alt_routes:
            route = raw_route.strip().lower()
            if not route:
                continue
            owner = owners.get(route)
            if owner is not None and owner != item.id:
                problems.append(f"Alternate route {route!r} of {item.id!r} is the href of {owner!r}")
            previous = claimed.setdefault(route, item.id)
            if previous != item.id:
                problems.append(f"Alternate route {route!r} is claimed by {previous!r} and {item.id!r}")

    return problems


def check_routes(flat_items: Iterable[NavItem], group: Group) -> None:
    """Raise DataIntegrityError when a group has ambiguous alternate routes."""
    problems = find_duplicate_routes(flat_items)
    if problems:
        raise DataIntegrityError(f"{group.value}: " + "; ".join(problems))


def find_course_problems(snapshot: RecordSnapshot, locale: str | None = None) -> list[str]:
    """Check that course lesson lists and lesson directories agree.

    Every slug in a course's ``lessons`` must exist as a lesson in that
    course, and every lesson must live under an existing course.

    Args:
        snapshot: Record snapshot
        locale: Locale to check (default locale when None)

    Returns:
        Problem descriptions, empty when references are intact
    """
    courses = snapshot.for_group(Group.COURSES, locale)
    lessons = snapshot.for_group(Group.LESSONS, locale)
    course_slugs = {course.slug for course in courses}
    lessons_by_course: dict[str, set[str]] = {}
    problems: list[str] = []

    for lesson in lessons:
        course_slug = lesson.course_slug or ""
        lessons_by_course.setdefault(course_slug, set()).add(lesson.slug)
        if course_slug not in course_slugs:
            problems.append(f"Lesson {lesson.source_file_path} references missing course {course_slug!r}")

    for course in courses:
        available = lessons_by_course.get(course.slug, set())
        for slug in course.lessons:
            if slug not in available:
                problems.append(f"Course {course.slug!r} references missing lesson {slug!r}")

    return problems


def check_courses(snapshot: RecordSnapshot, locale: str | None = None) -> None:
    """Raise DataIntegrityError when course/lesson references are broken."""
    problems = find_course_problems(snapshot, locale)
    if problems:
        raise DataIntegrityError("; ".join(problems))


def find_author_problems(records: Iterable[ContentRecord], snapshot: RecordSnapshot) -> list[str]:
    """Check that every referenced author slug has an author record."""
    problems: list[str] = []
    for record in records:
        if record.author and snapshot.find_author(record.author) is None:
            problems.append(f"Author not found: {record.author} (in {record.source_file_path})")
    return problems


def collect_problems(snapshot: RecordSnapshot) -> list[str]:
    """Run every integrity check over the whole snapshot.

    Args:
        snapshot: Record snapshot

    Returns:
        All problem descriptions, grouped by check
    """
    problems: list[str] = []

    for locale in snapshot.locales():
        for group in Group:
            records = [r for r in snapshot.all_for_group(group) if r.locale == locale]
            if not records:
                continue
            try:
                flat = flatten_navigation(build_navigation(records))
            except DataIntegrityError as e:
                problems.append(f"[{locale}] {e}")
                continue
            problems.extend(f"[{locale}] {group.value}: {p}" for p in find_duplicate_routes(flat))

        if snapshot.has_locale(Group.COURSES, locale) or snapshot.has_locale(Group.LESSONS, locale):
            problems.extend(f"[{locale}] {p}" for p in find_course_problems(snapshot, locale))

    problems.extend(find_author_problems(snapshot.records, snapshot))

    if problems:
        logger.warning(f"Found {len(problems)} content integrity problems")
    return problems
