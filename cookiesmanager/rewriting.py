from __future__ import annotations

import logging
import typing

from cookiesmanager.cookies import (
    Cookie,
    parse_cookie_header,
    parse_set_cookie_header,
    serialize_cookie_header,
    serialize_set_cookie,
)
from cookiesmanager.merging import apply_token_rules, merge
from cookiesmanager.rules import MergeMode, RuleSet

__all__ = ["RawHeaders", "HeaderRewriter"]

logger = logging.getLogger(__name__)

RawHeaders = list[tuple[bytes, bytes]]

COOKIE_HEADER = b"cookie"
SET_COOKIE_HEADER = b"set-cookie"


class HeaderRewriter:
    """Apply a rule set to the cookie headers of a single request."""

    def __init__(self, rules: RuleSet, mode: MergeMode | str | None = None) -> None:
        self.rules = rules
        self.mode = MergeMode.parse(mode or rules.mode)
        self._adders = tuple(rule.to_cookie() for rule in rules.adders)
        self._removers = tuple(rule.to_cookie() for rule in rules.removers)

    def rewrite_cookies(self, cookies: typing.Iterable[Cookie]) -> list[Cookie]:
        if self.mode == MergeMode.TOKEN:
            return apply_token_rules(cookies, self.rules.adders, self.rules.removers)

        added = merge(cookies, self._adders)
        return merge(added, self._removers)

    def rewrite_set_cookie(self, cookie: Cookie) -> Cookie:
        """Overlay rules that target this cookie's name only."""
        adders = [adder for adder in self._adders if adder.name == cookie.name]
        removers = [remover for remover in self._removers if remover.name == cookie.name]
        return merge(merge([cookie], adders), removers)[0]

    def rewrite(self, headers: RawHeaders) -> RawHeaders:
        """Return a new header list with rewritten cookie headers.

        Original ``Cookie`` headers are replaced by a single one. In overlay
        mode an inbound ``Set-Cookie`` header is rewritten too.
        """
        handle_set_cookie = self.mode == MergeMode.OVERLAY
        cookie_values: list[str] = []
        set_cookie_value: str | None = None
        result: RawHeaders = []
        for key, value in headers:
            name = key.lower()
            if name == COOKIE_HEADER:
                cookie_values.append(value.decode("latin-1"))
            elif name == SET_COOKIE_HEADER and handle_set_cookie:
                if set_cookie_value is None:
                    set_cookie_value = value.decode("latin-1")
            else:
                result.append((key, value))

        cookies = self.rewrite_cookies(parse_cookie_header("; ".join(cookie_values)))
        cookie_header = serialize_cookie_header(cookies)
        if cookie_header:
            result.append((COOKIE_HEADER, cookie_header.encode("latin-1")))

        if handle_set_cookie:
            set_cookie = self.rewrite_set_cookie(parse_set_cookie_header(set_cookie_value or ""))
            set_cookie_header = serialize_set_cookie(set_cookie)
            if set_cookie_header:
                result.append((SET_COOKIE_HEADER, set_cookie_header.encode("latin-1")))

        logger.debug("Rewrote cookie header %r to %r.", "; ".join(cookie_values), cookie_header)
        return result
