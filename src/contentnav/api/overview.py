"""Overview API endpoint.

Featured guides, resources and workshops for a locale.
"""

from aiohttp import web

from contentnav.api.common import error_response, locale_from_path
from contentnav.app_keys import store_key
from contentnav.core.listings import OVERVIEW_GROUPS, extract_featured_records, simplify_records
from contentnav.exceptions import ContentNavError

OVERVIEW_LIMIT = 6


def create_overview_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/overview", get_overview),
        web.get("/api/overview/{path:.*}", get_overview),
    ]


async def get_overview(request: web.Request) -> web.Response:
    path = request.match_info.get("path", "")
    try:
        locale = locale_from_path(request, path)
        snapshot = request.app[store_key].snapshot
    except ContentNavError as e:
        return error_response(request, e, path)

    return web.json_response(
        {
            group.value: simplify_records(
                extract_featured_records(snapshot.for_group(group, locale), limit=OVERVIEW_LIMIT),
            )
            for group in OVERVIEW_GROUPS
        },
    )
