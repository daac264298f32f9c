"""Paths API endpoint.

Lists every routable href of a group, including alternate routes.
"""

from aiohttp import web

from contentnav.api.common import error_response, route_details
from contentnav.app_keys import store_key
from contentnav.core.listings import compute_path_listing
from contentnav.exceptions import ContentNavError


def create_paths_routes() -> list[web.RouteDef]:
    return [web.get("/api/paths/{path:.*}", get_paths)]


async def get_paths(request: web.Request) -> web.Response:
    path = request.match_info["path"]
    try:
        details = route_details(request, path)
        records = request.app[store_key].snapshot.for_group(details.group, details.locale)
    except ContentNavError as e:
        return error_response(request, e, path)

    return web.json_response(compute_path_listing(records, details.group))
