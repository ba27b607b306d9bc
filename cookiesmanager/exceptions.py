class CookiesManagerError(Exception):
    """Base class for cookiesmanager errors."""


class InvalidRuleError(ValueError, CookiesManagerError):
    """Raised if a rules document cannot be turned into a rule set."""


class InvalidModeError(InvalidRuleError):
    """Raised if the merge mode is not one of the supported modes."""
