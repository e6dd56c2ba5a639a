# access gates in front of the routers
# IpAllowListMiddleware runs first, then ApiKeyMiddleware checks the shared secret

import ipaddress
import logging
import secrets
from typing import Iterable, Optional

from fastapi import Request
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"
PUBLIC_PATHS = {"/health", "/docs", "/docs/oauth2-redirect", "/redoc", "/openapi.json"}


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        candidate = forwarded.split(",")[0].strip()
        try:
            ipaddress.ip_address(candidate)
            ip = candidate
        except ValueError:
            ip = request.client.host if request.client else None
    else:
        ip = request.client.host if request.client else None
    if ip == "::1":
        return "127.0.0.1"
    return ip


class IpAllowListMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, allow_list: str = "*"):
        super().__init__(app)
        self.allow_all = allow_list.strip() == "*"
        self.allowed = {ip.strip() for ip in allow_list.split(",") if ip.strip()}

    async def dispatch(self, request: Request, call_next):
        if self.allow_all:
            return await call_next(request)
        ip = client_ip(request)
        if ip is not None and ip not in self.allowed:
            logger.warning("blocked request from unlisted ip %s", ip)
            return PlainTextResponse(f"Access Denied: Your IP {ip} is not allowed.", status_code=403)
        return await call_next(request)


class ApiKeyMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, api_key: str = "", public_paths: Iterable[str] = PUBLIC_PATHS):
        super().__init__(app)
        self.api_key = api_key
        self.public_paths = set(public_paths)

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.public_paths:
            return await call_next(request)
        if not self.api_key:
            return PlainTextResponse("Server Error: API key not configured.", status_code=500)
        supplied = request.headers.get(API_KEY_HEADER, "")
        if not secrets.compare_digest(supplied.encode(), self.api_key.encode()):
            return PlainTextResponse("Unauthorized: Invalid or missing API key.", status_code=401)
        return await call_next(request)
