"""Development HTTP endpoints for the ticket store.

Routes:
    GET  /__pm/list?dir=D&prefix=P       → ticket records
    POST /__pm/create {dir, prefix, ...}  → created ticket record
    POST /__pm/update {url, updates}      → "ok"
    GET  /__pm/validate?dir=D&prefix=P   → issue records
    POST /__pm/fix {dir, prefix}          → applied issue records

Store calls run directly on the event loop, so one request's scan and
write finish before the next request is handled.
"""

import logging

from aiohttp import web

from pmboard.errors import BadRequest, NotFound
from pmboard.service import TicketService

logger = logging.getLogger(__name__)

ROUTE_PREFIX = "/__pm"
TICKET_FIELDS = ("title", "status", "priority", "tags", "body")

SERVICE_KEY = web.AppKey("service", TicketService)


@web.middleware
async def error_middleware(request: web.Request, handler):
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except BadRequest as exc:
        return web.Response(status=400, text=str(exc))
    except NotFound as exc:
        return web.Response(status=404, text=str(exc))
    except Exception as exc:
        logger.exception("%s %s failed", request.method, request.path)
        return web.Response(status=500, text=str(exc))


async def _json_object(request: web.Request) -> dict:
    try:
        data = await request.json()
    except ValueError:
        raise BadRequest("Invalid JSON body")
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data


async def handle_list(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    tickets = service.list_tickets(request.query.get("dir"), request.query.get("prefix"))
    return web.json_response([t.to_dict() for t in tickets])


async def handle_create(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    data = await _json_object(request)
    fields = {key: data.get(key) for key in TICKET_FIELDS}
    ticket = service.create_ticket(fields, data.get("dir"), data.get("prefix"))
    return web.json_response(ticket.to_dict())


async def handle_update(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    data = await _json_object(request)
    service.update_ticket(data.get("url"), data.get("updates"))
    return web.Response(text="ok")


async def handle_validate(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    issues = service.validate(request.query.get("dir"), request.query.get("prefix"))
    return web.json_response([i.to_dict() for i in issues])


async def handle_fix(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    data = await _json_object(request)
    issues = service.fix(data.get("dir"), data.get("prefix"))
    return web.json_response([i.to_dict() for i in issues])


def create_app(service: TicketService) -> web.Application:
    app = web.Application(middlewares=[error_middleware])
    app[SERVICE_KEY] = service
    app.router.add_get(f"{ROUTE_PREFIX}/list", handle_list)
    app.router.add_post(f"{ROUTE_PREFIX}/create", handle_create)
    app.router.add_post(f"{ROUTE_PREFIX}/update", handle_update)
    app.router.add_get(f"{ROUTE_PREFIX}/validate", handle_validate)
    app.router.add_post(f"{ROUTE_PREFIX}/fix", handle_fix)
    return app


def run_server(service: TicketService, host: str = "localhost", port: int = 5174) -> None:
    logger.info("serving tickets under %s at http://%s:%d%s", service.root, host, port, ROUTE_PREFIX)
    web.run_app(create_app(service), host=host, port=port, print=None)
