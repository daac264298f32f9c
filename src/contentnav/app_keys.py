"""Application keys for type-safe app configuration access."""

from aiohttp import web

from contentnav.config import ContentConfig
from contentnav.core.store import ContentStore

store_key = web.AppKey("store", ContentStore)
content_config_key = web.AppKey("content_config", ContentConfig)
verbose_key = web.AppKey("verbose", bool)
