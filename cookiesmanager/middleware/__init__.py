from __future__ import annotations

from starlette.middleware import Middleware

from cookiesmanager.middleware.cookies_manager import CookiesManagerMiddleware, create_middleware

__all__ = [
    "Middleware",
    "CookiesManagerMiddleware",
    "create_middleware",
]
