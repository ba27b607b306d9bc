from __future__ import annotations

import dataclasses
import datetime
import enum
import logging
import typing

from cookiesmanager.cookies import Cookie, CookieAttribute, SameSite, is_set, is_token, unset
from cookiesmanager.exceptions import InvalidModeError, InvalidRuleError

__all__ = ["MergeMode", "CookieRule", "TokenRule", "Rule", "RuleSet", "rule_from_dict", "rule_set_from_dict"]

logger = logging.getLogger(__name__)


class MergeMode(enum.StrEnum):
    OVERLAY = "overlay"
    TOKEN = "token"

    @classmethod
    def parse(cls, value: str | MergeMode) -> MergeMode:
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(mode.value for mode in cls)
            raise InvalidModeError(f'Unsupported merge mode "{value}", expected one of: {choices}.') from None


def _validate(rule: typing.Any) -> None:
    if not isinstance(rule.name, str) or not is_token(rule.name):
        raise InvalidRuleError(f"Cookie rule requires a valid cookie name, got {rule.name!r}.")
    for field in dataclasses.fields(rule):
        value = getattr(rule, field.name)
        if isinstance(value, str) and not value.isascii():
            try:
                value.encode("latin-1")
            except UnicodeEncodeError:
                raise InvalidRuleError(
                    f'Field "{field.name}" of cookie rule "{rule.name}" must be latin-1 text, got {value!r}.'
                ) from None


def _render(label: str, value: typing.Any) -> str:
    if not is_set(value):
        return ""
    if isinstance(value, bool):
        value = "true" if value else "false"
    elif isinstance(value, datetime.datetime):
        value = value.isoformat()
    return f"{label}={value}"


@dataclasses.dataclass(frozen=True)
class CookieRule:
    """A full-attribute rule. Unset attributes never override a cookie."""

    name: str
    value: CookieAttribute[str] = unset
    path: CookieAttribute[str] = unset
    domain: CookieAttribute[str] = unset
    expires: CookieAttribute[datetime.datetime] = unset
    max_age: CookieAttribute[int] = unset
    secure: CookieAttribute[bool] = unset
    http_only: CookieAttribute[bool] = unset
    same_site: CookieAttribute[SameSite] = unset

    def __post_init__(self) -> None:
        _validate(self)

    def to_cookie(self) -> Cookie:
        return Cookie(**{field.name: getattr(self, field.name) for field in dataclasses.fields(self)})

    def __str__(self) -> str:
        fields = ", ".join(
            [
                _render("value", self.value),
                _render("path", self.path),
                _render("domain", self.domain),
                _render("expires", self.expires),
                _render("maxAge", self.max_age),
                _render("secure", self.secure),
                _render("httpOnly", self.http_only),
                _render("sameSite", self.same_site),
            ]
        )
        return f"CookieRule{{name={self.name}, {fields}}}"


@dataclasses.dataclass(frozen=True)
class TokenRule:
    """A name and value pair used to edit cookie values as text."""

    name: str
    value: CookieAttribute[str] = unset

    def __post_init__(self) -> None:
        _validate(self)

    def to_cookie(self) -> Cookie:
        return Cookie(name=self.name, value=self.value)

    def __str__(self) -> str:
        return f"TokenRule{{name={self.name}, {_render('value', self.value)}}}"


Rule = typing.Union[CookieRule, TokenRule]


@dataclasses.dataclass(frozen=True)
class RuleSet:
    adders: tuple[Rule, ...] = ()
    removers: tuple[Rule, ...] = ()
    mode: MergeMode = MergeMode.OVERLAY

    @classmethod
    def from_dict(cls, data: typing.Mapping[str, typing.Any]) -> RuleSet:
        return rule_set_from_dict(data)

    def __iter__(self) -> typing.Iterator[Rule]:
        yield from self.adders
        yield from self.removers


def _as_str(value: typing.Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    value.encode("latin-1")
    return value


def _as_bool(value: typing.Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected a boolean, got {type(value).__name__}")
    return value


def _as_int(value: typing.Any) -> int:
    if isinstance(value, bool):
        raise TypeError("expected an integer, got bool")
    return int(value)


def _as_datetime(value: typing.Any) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        return value
    return datetime.datetime.fromisoformat(_as_str(value))


def _as_same_site(value: typing.Any) -> SameSite:
    return SameSite.from_string(_as_str(value))


# config key -> (attribute name, converter)
_RULE_FIELDS: dict[str, tuple[str, typing.Callable[[typing.Any], typing.Any]]] = {
    "value": ("value", _as_str),
    "path": ("path", _as_str),
    "domain": ("domain", _as_str),
    "expires": ("expires", _as_datetime),
    "maxAge": ("max_age", _as_int),
    "secure": ("secure", _as_bool),
    "httpOnly": ("http_only", _as_bool),
    "sameSite": ("same_site", _as_same_site),
}
_TOKEN_FIELDS = {"value"}


def rule_from_dict(data: typing.Any, kind: type[Rule] = CookieRule) -> Rule:
    """Build a rule from its config mapping.

    Absent or null fields stay unset. A field holding a value of the wrong
    type is logged and left unset as well.
    """
    if not isinstance(data, typing.Mapping):
        raise InvalidRuleError(f"Cookie rule must be a mapping, got {type(data).__name__}.")

    name = data.get("name")
    if not isinstance(name, str) or not is_token(name):
        raise InvalidRuleError(f"Cookie rule requires a valid cookie name: {dict(data)!r}.")

    allowed = _TOKEN_FIELDS if kind is TokenRule else _RULE_FIELDS.keys()
    attributes: dict[str, typing.Any] = {}
    for key, raw in data.items():
        if key == "name" or raw is None:
            continue
        if key not in allowed:
            logger.warning('Ignoring unsupported field "%s" of cookie rule "%s".', key, name)
            continue

        attribute, converter = _RULE_FIELDS[key]
        try:
            attributes[attribute] = converter(raw)
        except (TypeError, ValueError) as ex:
            logger.warning('Ignoring field "%s" of cookie rule "%s": %s.', key, name, ex)
    return kind(name=name, **attributes)


def _rules_from_list(data: typing.Mapping[str, typing.Any], key: str, kind: type[Rule]) -> tuple[Rule, ...]:
    items = data.get(key)
    if items is None:
        return ()
    if not isinstance(items, list):
        raise InvalidRuleError(f'"{key}" must be a list of cookie rules.')
    return tuple(rule_from_dict(item, kind) for item in items)


def rule_set_from_dict(data: typing.Any, mode: str | MergeMode | None = None) -> RuleSet:
    """Build a rule set from a ``{"adder": [...], "remover": [...], "mode": ...}`` document.

    The ``mode`` argument, when given, takes precedence over the document's one.
    """
    if not isinstance(data, typing.Mapping):
        raise InvalidRuleError(f"Rules document must be a mapping, got {type(data).__name__}.")

    merge_mode = MergeMode.parse(mode or data.get("mode") or MergeMode.OVERLAY)
    kind: type[Rule] = TokenRule if merge_mode == MergeMode.TOKEN else CookieRule
    return RuleSet(
        adders=_rules_from_list(data, "adder", kind),
        removers=_rules_from_list(data, "remover", kind),
        mode=merge_mode,
    )
