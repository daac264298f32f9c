"""aiohttp server for contentnav.

Application factory and route registration.
"""

import logging

from aiohttp import web

from contentnav.api.content import create_content_routes
from contentnav.api.navigation import create_navigation_routes
from contentnav.api.overview import create_overview_routes
from contentnav.api.paths import create_paths_routes
from contentnav.api.records import create_records_routes
from contentnav.app_keys import content_config_key, store_key, verbose_key
from contentnav.config import Config
from contentnav.core.store import ContentStore
from contentnav.live import LiveReloadManager
from contentnav.live.reload import create_live_reload_routes

logger = logging.getLogger(__name__)

live_reload_key = web.AppKey("live_reload_manager", LiveReloadManager)

_API_ROUTES = (
    create_navigation_routes,
    create_records_routes,
    create_paths_routes,
    create_overview_routes,
    create_content_routes,
)


def create_app(config: Config, *, verbose: bool = False) -> web.Application:
    """Build the API application around a lazily loaded content store.

    The live reload socket and watcher are only wired in when enabled.
    """
    app = web.Application()

    store = ContentStore(
        config.content.source_dir,
        default_locale=config.content.default_locale,
        include_i18n=config.content.i18n_include_in_paths,
    )

    app[store_key] = store
    app[content_config_key] = config.content
    app[verbose_key] = verbose

    for routes in _API_ROUTES:
        app.router.add_routes(routes())

    if config.live_reload.enabled:
        manager = LiveReloadManager(store, watch_patterns=config.live_reload.watch_patterns)
        app[live_reload_key] = manager
        app.router.add_routes(create_live_reload_routes(manager))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    return app


async def _start_live_reload(app: web.Application) -> None:
    await app[live_reload_key].start()


async def _stop_live_reload(app: web.Application) -> None:
    await app[live_reload_key].stop()


def run_server(config: Config, *, verbose: bool = False) -> None:
    """Serve the API until interrupted."""
    app = create_app(config, verbose=verbose)
    logger.info(f"Serving content from {config.content.source_dir}")
    web.run_app(app, host=config.server.host, port=config.server.port)
