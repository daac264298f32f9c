"""Path and id normalization.

Every grouping key, NavItem id and breadcrumb lookup goes through these
helpers so the tree assembler and the route resolver agree on ids.
"""

import re
from dataclasses import dataclass

GROUPING_KEY_SEPARATOR = "-"

# Leading "i18n/<xx>/" on content paths
I18N_LOCALE_REGEX = re.compile(r"^i18n/(\w{2})/", re.IGNORECASE)

# Two letter locale code in a URL segment
LOCALE_REGEX = re.compile(r"^\w{2}$")

ALLOWED_EXTENSIONS = ("md", "mdx", "yml", "yaml", "json")

_IGNORED_FILE_NAMES = frozenset({"readme.md"})


@dataclass(frozen=True)
class PathAndId:
    """Normalized record path with its derived id."""

    path: str
    id: str


def compute_path_and_id(path: str, *, include_i18n: bool = False) -> PathAndId:
    """Normalize a raw source path into a grouping path and id.

    Args:
        path: Raw source directory or flattened file path
        include_i18n: Keep the "i18n/<locale>/" prefix in the result

    Returns:
        PathAndId with a lowercased path and its "-" joined id
    """
    path = path.strip("/").lower()
    if not include_i18n:
        path = I18N_LOCALE_REGEX.sub("", path)
    return PathAndId(path=path, id=path_to_id(path))


def path_to_id(path: str) -> str:
    """Join path segments with the grouping key separator."""
    return path.replace("/", GROUPING_KEY_SEPARATOR)


def locale_free_id(path: str) -> str:
    """Id of a path with any "i18n/<locale>/" prefix removed.

    Translated nav items built with the prefix kept share this id with
    their default locale counterparts.
    """
    return compute_path_and_id(path).id


def locale_prefix(path: str) -> str:
    """Return the raw "i18n/<locale>/" prefix of a path, or an empty string."""
    match = I18N_LOCALE_REGEX.match(path.strip("/").lower())
    return match.group(0) if match else ""


def parent_id(node_id: str) -> str:
    """Drop the last separator-delimited segment of an id.

    Returns an empty string for single-segment ids.
    """
    head, sep, _ = node_id.rpartition(GROUPING_KEY_SEPARATOR)
    return head if sep else ""


def extract_locale(path: str) -> str | None:
    """Return the locale code from a leading "i18n/<xx>/" prefix, if any."""
    match = I18N_LOCALE_REGEX.match(path.strip("/"))
    if match is None:
        return None
    return match.group(1).lower()


def strip_locale_prefix(path: str) -> str:
    """Remove a leading "i18n/<xx>/" prefix from a raw path."""
    return I18N_LOCALE_REGEX.sub("", path.lstrip("/"))


def is_locale_segment(segment: str) -> bool:
    """Check whether a URL segment is a two letter locale code."""
    return bool(LOCALE_REGEX.match(segment))


def uc_first(label: str) -> str:
    """Upper case the first character of a string."""
    return label[:1].upper() + label[1:]


def label_from_key(path: str) -> str:
    """Derive a category label from the last segment of a directory path."""
    return uc_first(path.rstrip("/").rsplit("/", 1)[-1])


def label_from_file_name(file_name: str) -> str:
    """Derive a label from a file name with its extension stripped."""
    return uc_first(file_name.split(".", 1)[0])


def should_ignore_record(
    file_name: str,
    allowed_extensions: tuple[str, ...] = ALLOWED_EXTENSIONS,
) -> bool:
    """Determine if a content file should be skipped.

    Drafts (leading underscore), hidden files, readme files and files
    with unsupported extensions are ignored.

    Args:
        file_name: Source file name
        allowed_extensions: Extensions (without dot) that are content

    Returns:
        True if the file is not a content record
    """
    if not file_name or file_name.startswith(("_", ".")):
        return True
    if file_name.lower() in _IGNORED_FILE_NAMES:
        return True
    _, dot, extension = file_name.rpartition(".")
    if not dot:
        return True
    return extension.lower() not in allowed_extensions
