import datetime
import pytest
import typing
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.testclient import TestClient
from starlette.types import ASGIApp, Receive, Scope, Send

from cookiesmanager.cookies import SameSite
from cookiesmanager.middleware import CookiesManagerMiddleware
from cookiesmanager.rules import CookieRule, MergeMode, RuleSet


async def echo_app(scope: Scope, receive: Receive, send: Send) -> None:
    """Respond with the cookie headers the app has received."""
    request = Request(scope, receive)
    response = JSONResponse(
        {
            "cookie": request.headers.get("cookie"),
            "set_cookie": request.headers.get("set-cookie"),
            "cookies": list(request.cookies.items()),
            "cookie_headers": len(request.headers.getlist("cookie")),
        }
    )
    await response(scope, receive, send)


class ClientFactory(typing.Protocol):  # pragma: nocover
    def __call__(
        self,
        adders: typing.Iterable[typing.Any] = (),
        removers: typing.Iterable[typing.Any] = (),
        mode: MergeMode | str = MergeMode.OVERLAY,
        app: ASGIApp = echo_app,
    ) -> TestClient:
        ...


@pytest.fixture
def test_client_factory() -> ClientFactory:
    def factory(
        adders: typing.Iterable[typing.Any] = (),
        removers: typing.Iterable[typing.Any] = (),
        mode: MergeMode | str = MergeMode.OVERLAY,
        app: ASGIApp = echo_app,
    ) -> TestClient:
        rules = RuleSet(adders=tuple(adders), removers=tuple(removers), mode=MergeMode(mode))
        return TestClient(CookiesManagerMiddleware(app, rules, name="test"))

    return typing.cast(ClientFactory, factory)


@pytest.fixture
def full_rule() -> CookieRule:
    return CookieRule(
        name="test1",
        value="foo",
        path="/",
        domain="localhost",
        expires=datetime.datetime(2014, 2, 5, tzinfo=datetime.timezone.utc),
        max_age=3600,
        secure=True,
        http_only=True,
        same_site=SameSite.STRICT,
    )
