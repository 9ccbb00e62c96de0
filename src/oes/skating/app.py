"""Web application module."""
import argparse
from functools import partial
from http import HTTPStatus
from ipaddress import IPv4Network, IPv6Network
from pathlib import Path
from typing import Optional

import uvicorn
from blacksheep import Application, Content, HTTPException, Request, Response
from blacksheep.plugins import json
from blacksheep.server.remotes.forwarding import XForwardedHeadersMiddleware
from loguru import logger
from oes.skating.config import CommandLineConfig, load_config
from oes.skating.database import DBConfig, db_session_factory, db_session_middleware
from oes.skating.docs import docs
from oes.skating.log import setup_logging
from oes.skating.models.config import Config
from oes.skating.serialization import get_converter
from oes.skating.serialization.json import json_dumps, json_loads
from oes.skating.services.competition import CompetitionService
from oes.skating.services.event import EventService
from oes.skating.services.registration import RegistrationService
from oes.skating.services.user import UserService
from oes.skating.views.responses import (
    BodyValidationError,
    ErrorResponse,
    ExceptionDetails,
)
from sqlalchemy.ext.asyncio import AsyncSession

app = Application()

docs.bind_app(app)

json.use(
    loads=json_loads,
    dumps=lambda o: json_dumps(o).decode(),  # :(
)

app.services.add_scoped(UserService)
app.services.add_scoped(EventService)
app.services.add_scoped(CompetitionService)
app.services.add_scoped(RegistrationService)


def error_response(
    status: int, message: str, details: Optional[ExceptionDetails] = None
) -> Response:
    """Return a JSON error response."""
    return Response(
        status,
        content=Content(
            content_type=b"application/json",
            data=get_converter().dumps(ErrorResponse(message, details)),
        ),
    )


def created_response(obj: object) -> Response:
    """Return a JSON-encoded ``201 Created`` response."""
    return Response(
        201,
        content=Content(
            content_type=b"application/json",
            data=get_converter().dumps(obj),
        ),
    )


async def _validation_error_handler(
    app: Application, request: Request, exc: BodyValidationError
):
    return error_response(422, "Invalid request", ExceptionDetails.create(exc.exc))


async def _http_error_handler(app: Application, request: Request, exc: HTTPException):
    if len(exc.args) > 0 and isinstance(exc.args[0], str):
        message = exc.args[0]
    else:
        message = HTTPStatus(exc.status).phrase
    return error_response(exc.status, message)


async def _internal_error_middleware(request: Request, handler):
    """Middleware to log unexpected errors and hide their details."""
    try:
        return await handler(request)
    except (HTTPException, BodyValidationError):
        raise
    except Exception:
        logger.exception("Error handling {} {}", request.method, request.url.path)
        return error_response(500, "Internal server error")


app.exceptions_handlers[BodyValidationError] = _validation_error_handler
for status in (400, 404, 409, 422):
    app.exceptions_handlers[status] = _http_error_handler
app.middlewares.append(db_session_middleware)
app.middlewares.append(_internal_error_middleware)


async def _set_base_path(request, handler):
    """Middleware to set root_path from uvicorn."""
    request.base_path = request.scope.get("root_path", "")
    return await handler(request)


@app.on_middlewares_configuration
def _configure_forwarded_headers(app: Application):
    app.middlewares.insert(0, _set_base_path)
    app.middlewares.insert(
        0,
        XForwardedHeadersMiddleware(
            # Allow X-Forwarded headers from private networks
            known_networks=[
                IPv4Network("127.0.0.0/8"),
                IPv4Network("10.0.0.0/8"),
                IPv4Network("172.16.0.0/12"),
                IPv4Network("192.168.0.0/16"),
                IPv6Network("fc00::/7"),
                IPv6Network("::1/128"),
            ]
        ),
    )


async def _setup_app(config: Config, app: Application):
    db_config = DBConfig.create(config.database.url)
    app.services.add_instance(db_config)
    app.services.add_scoped_by_factory(db_session_factory, AsyncSession)


@app.on_stop
async def _shutdown_app(app: Application):
    db_config: DBConfig = app.service_provider[DBConfig]
    await db_config.close()


def app_factory():
    """Set up and return the ASGI app."""
    # There's no way to pass settings from the main uvicorn process to the worker
    # processes, but we can just parse the command line arguments again
    cmd_config = parse_args()

    config = load_config(cmd_config.config)
    app.services.add_instance(config)

    # pass the config to the on_start hook
    app.on_start(partial(_setup_app, config))

    # set up logging
    setup_logging(debug=cmd_config.debug)

    app.services.add_instance(cmd_config)

    app.use_cors(
        allow_methods=("GET", "POST", "PUT", "DELETE"),
        allow_origins=config.http.allowed_origins,
        allow_headers=("Content-Type",),
    )

    return app


def run():
    """Entry point for the console script."""
    args = parse_args()

    if args.reload:
        # for reload to work we have to run in single-worker mode
        uvicorn.run(
            "oes.skating.app:app_factory",
            factory=True,
            host=args.bind,
            port=args.port,
            root_path=args.root_path,
            reload=True,
            workers=1,
        )
    else:
        uvicorn.run(
            "oes.skating.app:app_factory",
            factory=True,
            host=args.bind,
            port=args.port,
            root_path=args.root_path,
        )


def parse_args() -> CommandLineConfig:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="OES Skating Competition HTTP API server",
    )

    parser.add_argument(
        "-p", "--port", type=int, help="the port to listen on", default=8000
    )
    parser.add_argument(
        "-b", "--bind", type=str, help="the address to bind to", default="127.0.0.1"
    )
    parser.add_argument(
        "--root-path",
        type=str,
        help="the URL root path",
        default="",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="enable debug settings and logging",
        default=False,
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="watch file changes and reload the server for development",
        default=False,
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="path to the config file",
        default=Path("config.yml"),
    )

    args = parser.parse_args()
    return CommandLineConfig(
        port=args.port,
        bind=args.bind,
        root_path=args.root_path,
        debug=args.debug,
        reload=args.reload,
        config=args.config,
    )


# Import views

import oes.skating.views.competition  # noqa
import oes.skating.views.dashboard  # noqa
import oes.skating.views.event  # noqa
import oes.skating.views.registration  # noqa
import oes.skating.views.user  # noqa
