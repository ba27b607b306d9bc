from cookiesmanager.cookies import Cookie, SameSite, is_set, unset
from cookiesmanager.exceptions import CookiesManagerError, InvalidModeError, InvalidRuleError
from cookiesmanager.merging import apply_token_rules, merge
from cookiesmanager.middleware import CookiesManagerMiddleware, create_middleware
from cookiesmanager.rewriting import HeaderRewriter
from cookiesmanager.rules import CookieRule, MergeMode, RuleSet, TokenRule

__all__ = [
    "Cookie",
    "SameSite",
    "unset",
    "is_set",
    "CookieRule",
    "TokenRule",
    "RuleSet",
    "MergeMode",
    "merge",
    "apply_token_rules",
    "HeaderRewriter",
    "CookiesManagerMiddleware",
    "create_middleware",
    "CookiesManagerError",
    "InvalidRuleError",
    "InvalidModeError",
]
