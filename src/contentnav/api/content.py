"""Content API endpoint.

Resolves a URL path to a single record with its breadcrumbs and
previous/next navigation.
"""

import json
from hashlib import md5

from aiohttp import web

from contentnav.api.common import check_locale, error_response, split_segments
from contentnav.app_keys import store_key
from contentnav.exceptions import ContentNavError


def create_content_routes() -> list[web.RouteDef]:
    return [web.get("/api/content/{path:.*}", get_content)]


async def get_content(request: web.Request) -> web.Response:
    path = request.match_info["path"]
    try:
        resolution = request.app[store_key].resolver.resolve(split_segments(path))
        check_locale(request, resolution.locale)
    except ContentNavError as e:
        return error_response(request, e, path)

    body = json.dumps(resolution.to_dict())
    etag = _compute_etag(body)

    if request.headers.get("If-None-Match") == etag:
        return web.Response(status=304)

    return web.Response(
        text=body,
        content_type="application/json",
        headers={"ETag": etag, "Cache-Control": "private, max-age=60"},
    )


def _compute_etag(content: str) -> str:
    # First 16 hex chars (64 bits) are enough for cache validation
    content_hash = md5(content.encode("utf-8"), usedforsecurity=False).hexdigest()[:16]
    return f'"{content_hash}"'
