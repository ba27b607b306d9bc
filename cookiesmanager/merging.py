"""Merge engine.

Two policies are implemented:

* ``merge`` overlays cookie attributes by name, only set attributes of the
  overlay cookie replace the base cookie ones;
* ``apply_token_rules`` treats cookie values as text and appends or strips
  substrings.

Both functions return new cookie objects and never touch their inputs.
"""

from __future__ import annotations

import dataclasses
import typing

from cookiesmanager.cookies import Cookie, is_set
from cookiesmanager.rules import Rule

__all__ = ["merge", "add_token", "remove_token", "apply_token_rules"]


def merge(base: typing.Iterable[Cookie], overlay: typing.Iterable[Cookie]) -> list[Cookie]:
    """Merge overlay cookies into base cookies.

    Cookies unknown to base are appended, known ones receive every set
    attribute of the overlay cookie. Result holds one cookie per name.
    """
    jar: dict[str, Cookie] = {}
    for cookie in base:
        if cookie.name in jar:
            jar[cookie.name] = dataclasses.replace(jar[cookie.name], **cookie.set_attributes())
        else:
            jar[cookie.name] = cookie

    for cookie in overlay:
        current = jar.get(cookie.name)
        if current is None:
            jar[cookie.name] = cookie
            continue
        jar[cookie.name] = dataclasses.replace(current, **cookie.set_attributes())
    return list(jar.values())


def add_token(value: str, token: str) -> str:
    """Append token separated by a space unless value already contains it."""
    if token in value:
        return value
    return f"{value} {token}"


def remove_token(value: str, token: str) -> str:
    """Delete every occurrence of token from value."""
    if not token:
        return value
    return value.replace(token, "")


def _index(rules: typing.Iterable[Rule]) -> dict[str, str]:
    # last rule for a name wins
    return {rule.name: rule.value for rule in rules if is_set(rule.value)}


def apply_token_rules(
    cookies: typing.Iterable[Cookie],
    adders: typing.Iterable[Rule],
    removers: typing.Iterable[Rule],
) -> list[Cookie]:
    """Edit cookie values as text.

    For each cookie the adder token is appended first, then the remover token
    is stripped. Adders for names missing from ``cookies`` become new cookies.
    """
    to_add = _index(adders)
    to_remove = _index(removers)

    result: list[Cookie] = []
    seen: set[str] = set()
    for cookie in cookies:
        seen.add(cookie.name)
        value = cookie.value if is_set(cookie.value) else ""
        if cookie.name in to_add:
            value = add_token(value, to_add[cookie.name])
        if cookie.name in to_remove:
            value = remove_token(value, to_remove[cookie.name])
        result.append(dataclasses.replace(cookie, value=value) if value != cookie.value else cookie)

    for name, value in to_add.items():
        if name not in seen:
            result.append(Cookie(name=name, value=value))
    return result
