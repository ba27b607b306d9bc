"""Cookie model, ``Cookie``/``Set-Cookie`` parsing and serialization.

Every attribute except the name may be left ``unset``. Unset and an empty or
false value are different things: only set attributes take part in merges
and only set attributes are rendered into a ``Set-Cookie`` header.
"""

from __future__ import annotations

import dataclasses
import datetime
import email.utils
import enum
import re
import typing

__all__ = [
    "unset",
    "is_set",
    "is_token",
    "CookieAttribute",
    "SameSite",
    "Cookie",
    "parse_cookie_header",
    "parse_set_cookie_header",
    "serialize_cookie",
    "serialize_cookie_header",
    "serialize_set_cookie",
]


class _Unset:
    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "unset"


unset: typing.Final = _Unset()

_T = typing.TypeVar("_T")
CookieAttribute = typing.Union[_T, _Unset]

_TOKEN_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def is_set(value: typing.Any) -> bool:
    """Test if an attribute has been explicitly given a value."""
    return not isinstance(value, _Unset)


class SameSite(enum.StrEnum):
    LAX = "lax"
    STRICT = "strict"
    NONE = "none"
    DEFAULT = "default"

    @classmethod
    def from_string(cls, value: str) -> SameSite:
        """Map a config or header value to a mode, unknown values become DEFAULT."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.DEFAULT


@dataclasses.dataclass(frozen=True)
class Cookie:
    name: str
    value: CookieAttribute[str] = unset
    path: CookieAttribute[str] = unset
    domain: CookieAttribute[str] = unset
    expires: CookieAttribute[datetime.datetime] = unset
    max_age: CookieAttribute[int] = unset
    secure: CookieAttribute[bool] = unset
    http_only: CookieAttribute[bool] = unset
    same_site: CookieAttribute[SameSite] = unset

    def set_attributes(self) -> dict[str, typing.Any]:
        """Return attributes (except the name) that carry a value."""
        return {
            field.name: getattr(self, field.name)
            for field in dataclasses.fields(self)
            if field.name != "name" and is_set(getattr(self, field.name))
        }


def is_token(name: str) -> bool:
    """Test if name is a valid HTTP token, the only form a cookie name may take."""
    return bool(_TOKEN_RE.match(name))


def _unquote(value: str) -> str:
    if len(value) > 1 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def _sanitize(value: str) -> str:
    # cookie values never carry controls, non-ASCII, quotes, semicolons or backslashes
    return "".join(char for char in value if " " <= char < "\x7f" and char not in "\";\\")


def _quote(value: str) -> str:
    value = _sanitize(value)
    if " " in value or "," in value:
        return f'"{value}"'
    return value


def parse_cookie_header(text: str) -> list[Cookie]:
    """Parse a ``Cookie`` header value into cookies, in header order.

    Segments without ``=`` or with an invalid name are skipped.
    """
    cookies: list[Cookie] = []
    for segment in text.split(";"):
        name, separator, value = segment.strip().partition("=")
        name = name.strip()
        if not separator or not is_token(name):
            continue
        cookies.append(Cookie(name=name, value=_unquote(value.strip())))
    return cookies


def parse_set_cookie_header(text: str) -> Cookie:
    """Parse a single ``Set-Cookie`` value.

    Returns a placeholder cookie with an empty name when the input is empty
    or has no valid ``name=value`` pair.
    """
    first, *attributes = text.split(";")
    name, separator, value = first.strip().partition("=")
    name = name.strip()
    if not separator or not is_token(name):
        return Cookie(name="")

    fields: dict[str, typing.Any] = {}
    for attribute in attributes:
        key, _, raw = attribute.strip().partition("=")
        raw = raw.strip()
        match key.strip().lower():
            case "path":
                fields["path"] = raw
            case "domain":
                fields["domain"] = raw
            case "expires":
                try:
                    fields["expires"] = email.utils.parsedate_to_datetime(raw)
                except (TypeError, ValueError):
                    continue
            case "max-age":
                try:
                    fields["max_age"] = int(raw)
                except ValueError:
                    continue
            case "secure":
                fields["secure"] = True
            case "httponly":
                fields["http_only"] = True
            case "samesite":
                fields["same_site"] = SameSite.from_string(raw)
    return Cookie(name=name, value=_unquote(value.strip()), **fields)


def serialize_cookie(cookie: Cookie) -> str:
    """Render a cookie in request form, ``name=value``."""
    value = cookie.value if is_set(cookie.value) else ""
    return f"{cookie.name}={_quote(value)}"


def serialize_cookie_header(cookies: typing.Iterable[Cookie]) -> str:
    return "; ".join(serialize_cookie(cookie) for cookie in cookies if cookie.name)


def _format_expires(value: datetime.datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return email.utils.format_datetime(value.astimezone(datetime.timezone.utc), usegmt=True)


def serialize_set_cookie(cookie: Cookie) -> str:
    """Render a cookie in ``Set-Cookie`` form. Unset attributes are omitted."""
    if not cookie.name:
        return ""

    parts = [serialize_cookie(cookie)]
    if is_set(cookie.path):
        parts.append(f"Path={cookie.path}")
    if is_set(cookie.domain):
        parts.append(f"Domain={cookie.domain}")
    if is_set(cookie.expires):
        parts.append(f"Expires={_format_expires(cookie.expires)}")
    if is_set(cookie.max_age):
        parts.append(f"Max-Age={max(cookie.max_age, 0)}")
    if cookie.http_only is True:
        parts.append("HttpOnly")
    if cookie.secure is True:
        parts.append("Secure")
    if is_set(cookie.same_site) and cookie.same_site != SameSite.DEFAULT:
        parts.append(f"SameSite={cookie.same_site.value.title()}")
    return "; ".join(parts)
