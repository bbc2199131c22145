"""Exception classes for gittag.

Contains:
- GitTagError: Base exception for all gittag errors
- ConfigError: Invalid or unreadable configuration
- ConfigTemplateError: Message template with unresolved placeholders
- InvalidTicketFormatError: User supplied ticket does not match the ticket format
- RemoteBranchSafetyError: Branch has a remote and --force was not given
"""


class GitTagError(Exception):
    """Base exception for gittag errors."""

    pass


class ConfigError(GitTagError):
    """Raised when the configuration cannot be loaded or validated."""

    pass


class ConfigTemplateError(ConfigError):
    """Raised when the message template cannot be resolved."""

    pass


class InvalidTicketFormatError(GitTagError):
    """Raised when a ticket given on the command line is malformed."""

    pass


class RemoteBranchSafetyError(GitTagError):
    """Raised when rewriting a pushed branch without --force."""

    pass
