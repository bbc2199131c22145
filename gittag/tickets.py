"""Ticket matching and commit message formatting.

Contains functions for:
- Extracting ticket keys from branch names
- Validating user supplied tickets
- Detecting tickets in commit subjects
- Adding or replacing the ticket prefix of a subject

Everything here is a pure string operation driven by a TagConfig.
"""

from typing import Optional

from gittag.config import TagConfig, check_message_format
from gittag.exceptions import ConfigTemplateError


def extract_ticket(branch_name: str, config: TagConfig) -> Optional[str]:
    """Extract ticket key from branch name.

    The branch pattern may match anywhere, so ``feat/JIRA-123-desc`` yields
    ``JIRA-123``.

    Args:
        branch_name: The branch name.
        config: Active configuration.

    Returns:
        The extracted ticket key or None.
    """
    match = config.branch_re.search(branch_name)
    if not match:
        return None
    if match.re.groups:
        return match.group(1)
    return match.group(0)


def is_valid_ticket(candidate: str, config: TagConfig) -> bool:
    """Check a --ticket value against the strict ticket format."""
    return config.ticket_format_re.fullmatch(candidate) is not None


def subject_line(message: str) -> str:
    """Return the first line of a commit message."""
    return message.split("\n", 1)[0]


def has_prefix(message: str, config: TagConfig) -> bool:
    """Check if the commit subject contains a ticket anywhere."""
    return config.ticket_re.search(subject_line(message)) is not None


def format_commit_message(prefix: str, message: str, config: TagConfig) -> str:
    """Format a commit subject with the given prefix.

    Raises:
        ConfigTemplateError: If message_format has unresolved placeholders.
    """
    template = check_message_format(config.message_format)
    try:
        return template.format(prefix=prefix, message=message)
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigTemplateError(f"Cannot apply message_format {template!r}: {e}")


def strip_ticket(message: str, config: TagConfig) -> str:
    """Remove the first ticket-shaped substring and the whitespace after it."""
    return config.ticket_strip_re.sub("", message, count=1)


def apply_prefix(message: str, prefix: str, config: TagConfig) -> str:
    """Add ``prefix`` unless the subject already carries a ticket."""
    if has_prefix(message, config):
        return message
    return format_commit_message(prefix, message, config)


def replace_prefix(message: str, prefix: str, config: TagConfig) -> str:
    """Swap the first ticket in the subject for ``prefix``.

    ``"TOOL-123 fix bug"`` with ``JIRA-124`` becomes ``"JIRA-124 fix bug"``.
    """
    return format_commit_message(prefix, strip_ticket(message, config), config)
