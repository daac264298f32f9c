"""WebSocket-based live reload for content changes.

Watches the content directory, drops the content store's snapshot on
changes and notifies connected clients of the affected route.
"""

import asyncio
import contextlib
import logging
import weakref
from collections.abc import Iterable
from pathlib import Path

from aiohttp import WSMsgType, web
from watchfiles import awatch

from contentnav.config import DEFAULT_WATCH_PATTERNS
from contentnav.core.keys import should_ignore_record
from contentnav.core.loader import parse_record
from contentnav.core.navigation import compute_href
from contentnav.core.store import ContentStore
from contentnav.exceptions import RecordLoadError

logger = logging.getLogger(__name__)


class LiveReloadManager:
    """Keeps reload clients and the content watcher for one store."""

    def __init__(self, store: ContentStore, watch_patterns: list[str] | None = None) -> None:
        self._store = store
        self._root = store.source_dir
        self._patterns = watch_patterns or DEFAULT_WATCH_PATTERNS
        self._connections: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._watcher: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._watcher is None:
            logger.debug(f"Watching {self._root} for content changes")
            self._watcher = asyncio.create_task(self._watch())

    async def stop(self) -> None:
        """Cancel the watcher and disconnect every client."""
        watcher, self._watcher = self._watcher, None
        if watcher is not None:
            watcher.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await watcher

        for ws in list(self._connections):
            await ws.close()

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        self._connections.add(ws)
        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    logger.debug(f"Live reload socket error: {ws.exception()}")
                    break
        finally:
            self._connections.discard(ws)
        return ws

    async def handle_changes(self, paths: Iterable[Path]) -> None:
        """Invalidate the store once and notify clients per changed route.

        Files outside the content root or not matching the watch patterns
        are ignored.
        """
        watched = [path for path in paths if self._is_watched(path)]
        if not watched:
            return

        self._store.invalidate()
        hrefs = dict.fromkeys(self._to_href(path) for path in watched)
        logger.info(f"Content changed: {', '.join(hrefs)}")
        for href in hrefs:
            await self._notify({"type": "reload", "path": href})

    async def _watch(self) -> None:
        async for changes in awatch(self._root):
            await self.handle_changes(Path(changed) for _, changed in changes)

    def _is_watched(self, path: Path) -> bool:
        try:
            relative = path.relative_to(self._root)
        except ValueError:
            return False
        return any(relative.match(pattern) for pattern in self._patterns)

    def _to_href(self, file_path: Path) -> str:
        """Route served by a changed file.

        Deleted, ignored or unparseable files report their raw relative path.
        """
        relative = file_path.relative_to(self._root)
        fallback = f"/{relative.as_posix()}"
        if should_ignore_record(relative.name) or not file_path.is_file():
            return fallback
        try:
            record = parse_record(relative, file_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, RecordLoadError) as e:
            logger.debug(f"Cannot compute route for {relative}: {e}")
            return fallback
        return compute_href(record)

    async def _notify(self, message: dict[str, str]) -> None:
        for ws in [ws for ws in self._connections if not ws.closed]:
            try:
                await ws.send_json(message)
            except ConnectionResetError:
                logger.debug("Live reload client disconnected during send")


def create_live_reload_routes(manager: LiveReloadManager) -> list[web.RouteDef]:
    """Create routes for live reload WebSocket."""
    return [web.get("/ws/live-reload", manager.handle_websocket)]
