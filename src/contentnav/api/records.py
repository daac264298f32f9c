"""Records API endpoint.

Returns a simplified, paginated listing of a group's records.
"""

from aiohttp import web

from contentnav.api.common import error_response, route_details
from contentnav.app_keys import store_key
from contentnav.core.listings import simplify_records
from contentnav.core.records import paginate_records
from contentnav.exceptions import ContentNavError


def create_records_routes() -> list[web.RouteDef]:
    return [web.get("/api/records/{path:.*}", get_records)]


async def get_records(request: web.Request) -> web.Response:
    path = request.match_info["path"]
    try:
        details = route_details(request, path)
        snapshot = request.app[store_key].snapshot
    except ContentNavError as e:
        return error_response(request, e, path)

    try:
        page = int(request.query.get("page", "1"))
        page_size = int(request.query.get("pageSize", "10"))
        sort_direction = request.query.get("sortDirection", "asc")
        if sort_direction not in ("asc", "desc"):
            raise ValueError("sortDirection must be 'asc' or 'desc'")
        records, pagination = paginate_records(
            simplify_records(snapshot.for_group(details.group, details.locale)),
            page=page,
            page_size=page_size,
            sort_field=request.query.get("sortField"),
            sort_direction=sort_direction,
        )
    except ValueError as e:
        return web.json_response({"error": str(e), "path": path}, status=400)

    return web.json_response({"records": records, "pagination": pagination})
