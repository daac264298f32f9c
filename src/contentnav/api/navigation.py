"""Navigation API endpoint.

Returns the nested navigation tree for a content group.
"""

from aiohttp import web

from contentnav.api.common import error_response, route_details
from contentnav.app_keys import store_key
from contentnav.exceptions import ContentNavError


def create_navigation_routes() -> list[web.RouteDef]:
    return [web.get("/api/nav/{path:.*}", get_navigation)]


async def get_navigation(request: web.Request) -> web.Response:
    path = request.match_info["path"]
    try:
        details = route_details(request, path)
        nav_items = request.app[store_key].resolver.navigation(details.group, details.locale)
    except ContentNavError as e:
        return error_response(request, e, path)

    return web.json_response([item.to_dict() for item in nav_items])
