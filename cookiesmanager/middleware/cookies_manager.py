from __future__ import annotations

import logging
import typing
from starlette.types import ASGIApp, Receive, Scope, Send

from cookiesmanager.config import Config, Settings
from cookiesmanager.rewriting import HeaderRewriter
from cookiesmanager.rules import MergeMode, RuleSet

logger = logging.getLogger(__name__)


class CookiesManagerMiddleware:
    """
    Rewrite request cookies using adder and remover rules.

    The request is always passed to the wrapped app, responses are left untouched.
    """

    def __init__(
        self,
        app: ASGIApp,
        rules: RuleSet,
        name: str = "cookiesmanager",
        mode: MergeMode | str | None = None,
    ) -> None:
        self.app = app
        self.name = name
        self.rewriter = HeaderRewriter(rules, mode)
        logger.debug("Middleware %s uses %s merge mode.", name, self.rewriter.mode)
        for rule in rules:
            logger.debug("Middleware %s loaded rule %s.", name, rule)

    @classmethod
    def from_config(cls, app: ASGIApp, config: Config | None = None) -> CookiesManagerMiddleware:
        settings = Settings.from_config(config or Config())
        return cls(app, settings.load_rules(), name=settings.name)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        scope = dict(scope)
        scope["headers"] = self.rewriter.rewrite(list(scope.get("headers", [])))
        await self.app(scope, receive, send)


def create_middleware(
    rules: RuleSet, name: str = "cookiesmanager", mode: MergeMode | str | None = None
) -> typing.Callable[[ASGIApp], CookiesManagerMiddleware]:
    """Return a factory that wraps an ASGI app with the cookies middleware."""

    def factory(app: ASGIApp) -> CookiesManagerMiddleware:
        return CookiesManagerMiddleware(app, rules, name=name, mode=mode)

    return factory
