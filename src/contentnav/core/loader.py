"""Content record loader.

Walks the content directory and parses each markdown, YAML or JSON file
into a ContentRecord. Markdown frontmatter sits between ``---`` fences.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any

import yaml

from contentnav.core.keys import extract_locale, should_ignore_record
from contentnav.core.records import DEFAULT_LOCALE, ContentRecord, RecordSnapshot
from contentnav.exceptions import RecordLoadError

logger = logging.getLogger(__name__)

_FRONTMATTER_REGEX = re.compile(r"\A---\s*\n(.*?)\n---\s*(?:\n|\Z)", re.DOTALL)

# frontmatter key -> ContentRecord field
_FIELD_MAP = {
    "title": "title",
    "description": "description",
    "sidebarLabel": "sidebar_label",
    "href": "href",
    "sidebarSortOrder": "sidebar_sort_order",
    "metaOnly": "meta_only",
    "altRoutes": "alt_routes",
    "featured": "featured",
    "featuredPriority": "featured_priority",
    "author": "author",
    "isExternal": "is_external",
    "lessons": "lessons",
}

_BOOL_FIELDS = frozenset({"meta_only", "featured", "is_external"})
_NUMBER_FIELDS = frozenset({"sidebar_sort_order", "featured_priority"})
_LIST_FIELDS = frozenset({"alt_routes", "lessons"})
_STRING_FIELDS = frozenset({"title", "description", "sidebar_label", "href", "author"})


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split markdown text into frontmatter metadata and body.

    Args:
        text: Markdown file contents

    Returns:
        Tuple of (metadata dict, body text)

    Raises:
        yaml.YAMLError: If the frontmatter is not valid YAML
        ValueError: If the frontmatter is not a mapping
    """
    match = _FRONTMATTER_REGEX.match(text)
    if match is None:
        return {}, text

    data = yaml.safe_load(match.group(1)) or {}
    if not isinstance(data, dict):
        raise ValueError("frontmatter must be a mapping")
    return data, text[match.end() :]


def parse_record(
    relative_path: Path,
    text: str,
    *,
    default_locale: str = DEFAULT_LOCALE,
) -> ContentRecord:
    """Parse one content file into a record.

    Args:
        relative_path: File path relative to the content root
        text: File contents
        default_locale: Locale for files outside "i18n/<locale>/"

    Returns:
        ContentRecord

    Raises:
        RecordLoadError: If the metadata cannot be parsed or has wrong types
    """
    source_file_dir = relative_path.parent.as_posix()
    if source_file_dir == ".":
        source_file_dir = ""
    suffix = relative_path.suffix.lower()

    try:
        if suffix in (".md", ".mdx"):
            metadata, body = split_frontmatter(text)
        elif suffix == ".json":
            metadata, body = json.loads(text) if text.strip() else {}, ""
        else:
            metadata, body = yaml.safe_load(text) or {}, ""
    except (yaml.YAMLError, json.JSONDecodeError, ValueError) as e:
        raise RecordLoadError(f"Invalid metadata in {relative_path.as_posix()}: {e}") from e

    if not isinstance(metadata, dict):
        raise RecordLoadError(f"Metadata in {relative_path.as_posix()} must be a mapping")

    fields: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in metadata.items():
        name = _FIELD_MAP.get(key)
        if name is None:
            extra[str(key)] = _jsonable(value)
            continue
        if value is None:
            continue
        fields[name] = _coerce(name, value, relative_path)

    # markdown without content only carries metadata
    if suffix in (".md", ".mdx") and not body.strip():
        fields["meta_only"] = True

    return ContentRecord(
        source_file_dir=source_file_dir,
        source_file_name=relative_path.name,
        locale=extract_locale(source_file_dir + "/") or default_locale,
        body=body,
        extra=extra,
        **fields,
    )


class RecordLoader:
    """Loads every content record under a source directory."""

    def __init__(self, source_dir: Path, *, default_locale: str = DEFAULT_LOCALE) -> None:
        self._source_dir = source_dir
        self._default_locale = default_locale

    @property
    def source_dir(self) -> Path:
        return self._source_dir

    def load(self) -> RecordSnapshot:
        """Load a fresh snapshot from disk.

        Returns:
            RecordSnapshot of all content records (empty when the directory is missing)

        Raises:
            RecordLoadError: If a content file cannot be read or parsed
        """
        records: list[ContentRecord] = []
        if not self._source_dir.is_dir():
            logger.warning(f"Content directory not found: {self._source_dir}")
            return RecordSnapshot(records, default_locale=self._default_locale)

        for path in sorted(self._source_dir.rglob("*")):
            if not path.is_file():
                continue
            relative = path.relative_to(self._source_dir)
            if any(part.startswith((".", "_")) for part in relative.parts[:-1]):
                continue
            if should_ignore_record(path.name):
                continue

            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise RecordLoadError(f"Cannot read {relative.as_posix()}: {e}") from e

            records.append(parse_record(relative, text, default_locale=self._default_locale))

        logger.info(f"Loaded {len(records)} content records from {self._source_dir}")
        return RecordSnapshot(records, default_locale=self._default_locale)


def _coerce(name: str, value: Any, path: Path) -> Any:
    if name in _BOOL_FIELDS:
        if not isinstance(value, bool):
            raise RecordLoadError(f"{path.as_posix()}: {name} must be a boolean")
        return value
    if name in _NUMBER_FIELDS:
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise RecordLoadError(f"{path.as_posix()}: {name} must be a number")
        return value
    if name in _LIST_FIELDS:
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise RecordLoadError(f"{path.as_posix()}: {name} must be a list of strings")
        return tuple(value)
    if name in _STRING_FIELDS:
        return str(value)
    return value


def _jsonable(value: Any) -> Any:
    """Make YAML values (dates in particular) JSON-serializable."""
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    if isinstance(value, str | int | float | bool) or value is None:
        return value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)
