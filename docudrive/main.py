import secrets

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Mount

from docudrive.config import REQUIRED_SETTINGS, get_settings
from docudrive.exceptions import ConfigurationError, KeyFormatError, RemoteAPIError, TokenExchangeError
from docudrive.logger import setup_logger
from docudrive.mcp_server import mcp
from docudrive.routers.drive import router as drive_router


# --- Shared-secret middleware ---

class SharedSecretMiddleware(BaseHTTPMiddleware):
    """Reject requests that do not carry 'Authorization: Bearer <SHARED_SECRET>'."""

    async def dispatch(self, request: Request, call_next):
        expected = get_settings().shared_secret
        supplied = request.headers.get("authorization", "").removeprefix("Bearer ").strip()
        if not expected or not secrets.compare_digest(supplied, expected):
            return JSONResponse(
                status_code=401,
                content={"error_code": "unauthorized", "message": "Missing or invalid shared secret"},
            )
        return await call_next(request)


# --- FastAPI app ---

api = FastAPI(title="Docudrive", version="0.1.0")
api.include_router(drive_router)


@api.get("/api/status")
def api_status() -> dict:
    settings = get_settings()
    configured = {name.upper(): bool(getattr(settings, name)) for name in REQUIRED_SETTINGS}
    return {"configured": configured, "ready": all(configured.values())}


# --- Exception handlers ---

@api.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    return JSONResponse(status_code=500, content={"error_code": "config_error", "message": str(exc)})


@api.exception_handler(KeyFormatError)
async def key_format_error_handler(request: Request, exc: KeyFormatError):
    return JSONResponse(status_code=500, content={"error_code": "key_format_error", "message": str(exc)})


@api.exception_handler(TokenExchangeError)
async def token_exchange_error_handler(request: Request, exc: TokenExchangeError):
    return JSONResponse(status_code=401, content={"error_code": "token_exchange_error", "message": str(exc)})


@api.exception_handler(RemoteAPIError)
async def remote_api_error_handler(request: Request, exc: RemoteAPIError):
    return JSONResponse(
        status_code=502,
        content={"error_code": "remote_api_error", "message": str(exc), "upstream_status": exc.status_code},
    )


# --- Starlette root app ---

mcp_app = mcp.http_app(path="/", stateless_http=True)

app = Starlette(
    middleware=[Middleware(SharedSecretMiddleware)],
    routes=[
        Mount("/mcp", app=mcp_app),
        Mount("/", app=api),
    ],
    lifespan=mcp_app.lifespan,
)


def run():
    settings = get_settings()
    setup_logger()
    uvicorn.run(
        "docudrive.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
