"""Shared helpers for API handlers."""

import logging

from aiohttp import web

from contentnav.app_keys import content_config_key, verbose_key
from contentnav.core.groups import Group
from contentnav.core.keys import is_locale_segment
from contentnav.core.resolver import RouteDetails, parse_route
from contentnav.exceptions import DataIntegrityError, MalformedInputError, NotFoundError, RecordLoadError

logger = logging.getLogger(__name__)


def split_segments(path: str) -> list[str]:
    """Split a matched URL path into non-empty segments."""
    return [segment for segment in path.split("/") if segment]


def route_details(request: web.Request, path: str) -> RouteDetails:
    """Parse a request path into route details.

    Raises:
        MalformedInputError: If the path has no segments
        NotFoundError: If the group or locale is unknown
    """
    content_config = request.app[content_config_key]
    details = parse_route(split_segments(path), content_config.default_locale)
    check_locale(request, details.locale)
    return details


def check_locale(request: web.Request, locale: str) -> None:
    """Reject locales that are not configured as supported."""
    supported = request.app[content_config_key].supported_locales
    if locale not in supported:
        raise NotFoundError(locale, "Unsupported locale")


def locale_from_path(request: web.Request, path: str) -> str:
    """Read an optional leading locale segment."""
    segments = split_segments(path)
    content_config = request.app[content_config_key]
    if segments and is_locale_segment(segments[0]):
        locale = segments[0].lower()
        check_locale(request, locale)
        return locale
    return content_config.default_locale


def error_response(request: web.Request, error: Exception, path: str) -> web.Response:
    """Translate a library error into a JSON error response.

    Misses are only logged at debug level unless the app runs verbose.
    """
    if isinstance(error, NotFoundError):
        if request.app[verbose_key]:
            logger.warning(f"{error.reason}: {path}")
        else:
            logger.debug(f"{error.reason}: {path}")
        return web.json_response({"error": error.reason, "path": path}, status=404)
    if isinstance(error, MalformedInputError):
        return web.json_response({"error": str(error), "path": path}, status=400)
    if isinstance(error, DataIntegrityError):
        logger.error(f"Content integrity error for {path}: {error}")
        return web.json_response({"error": "Content integrity error", "detail": str(error), "path": path}, status=500)
    if isinstance(error, RecordLoadError):
        logger.error(f"Cannot load content for {path}: {error}")
        return web.json_response({"error": "Content load error", "detail": str(error), "path": path}, status=500)
    raise error
