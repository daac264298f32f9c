"""Content store with lazy loading and invalidation.

Holds the current record snapshot and the resolver bound to it. A
content change drops both; the next request loads a new snapshot, so
memoized trees never outlive the records they were built from.
"""

import logging
from pathlib import Path

from contentnav.core.loader import RecordLoader
from contentnav.core.records import DEFAULT_LOCALE, RecordSnapshot
from contentnav.core.resolver import ContentResolver

logger = logging.getLogger(__name__)


class ContentStore:
    """Lazily loaded snapshot and resolver for a content directory."""

    def __init__(
        self,
        source_dir: Path,
        *,
        default_locale: str = DEFAULT_LOCALE,
        include_i18n: bool = False,
    ) -> None:
        """Initialize the store.

        Args:
            source_dir: Root of the content tree
            default_locale: Locale served when a request names none
            include_i18n: Keep "i18n/<locale>/" prefixes in nav ids and paths
        """
        self._loader = RecordLoader(source_dir, default_locale=default_locale)
        self._include_i18n = include_i18n
        self._resolver: ContentResolver | None = None

    @property
    def source_dir(self) -> Path:
        return self._loader.source_dir

    @property
    def snapshot(self) -> RecordSnapshot:
        return self.resolver.snapshot

    @property
    def resolver(self) -> ContentResolver:
        """Resolver for the current snapshot, loading it on first use."""
        if self._resolver is None:
            snapshot = self._loader.load()
            self._resolver = ContentResolver(snapshot, include_i18n=self._include_i18n)
        return self._resolver

    def invalidate(self) -> None:
        """Drop the current snapshot and all memoized trees."""
        if self._resolver is not None:
            logger.info("Content changed, snapshot invalidated")
        self._resolver = None
