"""Configuration for gittag.

Configuration is layered, later layers overriding earlier ones key by key:
1. DEFAULT_CONFIG below
2. ~/.gittag/config.yaml (global)
3. <repo>/.gittag/config.yaml (repository)

The merged result is validated into an immutable TagConfig which is then
passed explicitly to every component.
"""

import logging
import os
import re
import string
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from gittag.exceptions import ConfigError, ConfigTemplateError

LOG = logging.getLogger("gittag")

CONFIG_DIR_NAME = ".gittag"
CONFIG_FILE_NAME = "config.yaml"

TEMPLATE_FIELDS = ("prefix", "message")


# ============================================================
# DEFAULT VALUES
# ============================================================

DEFAULT_CONFIG: Dict[str, Any] = {
    # Ticket anywhere in a commit subject: JIRA-123, NFOR-45, ABC-9999
    "ticket_pattern": r"[A-Z]{2,10}-\d{2,10}",
    # Ticket inside a branch name: feat/JIRA-123-description
    "branch_pattern": r"([A-Z]{2,10}-\d{2,10})",
    # Shape a --ticket value must have
    "ticket_format": r"^[A-Z]{2,10}-\d{2,10}$",
    # "JIRA-123 commit message"
    "message_format": "{prefix} {message}",
    "base_branches": ["main", "master"],
}


def _template_fields(template: str) -> list[str]:
    """Return the placeholder names used in a message template."""
    try:
        return [name for _, name, _, _ in string.Formatter().parse(template) if name is not None]
    except ValueError as e:
        raise ConfigTemplateError(f"Invalid message_format {template!r}: {e}")


def check_message_format(template: str) -> str:
    """Validate a message template.

    Only ``{prefix}`` and ``{message}`` are allowed, and ``{message}`` must
    be present so that the original subject is never dropped.

    Raises:
        ConfigTemplateError: If the template cannot be fully resolved.
    """
    fields = _template_fields(template)
    unknown = [name for name in fields if name not in TEMPLATE_FIELDS]
    if unknown:
        raise ConfigTemplateError(
            f"Unresolved placeholder(s) in message_format {template!r}: "
            + ", ".join("{" + name + "}" for name in unknown)
        )
    if "message" not in fields:
        raise ConfigTemplateError(f"message_format {template!r} must contain {{message}}")
    return template


class TagConfig(BaseModel):
    """Validated, immutable gittag configuration.

    Attributes:
        ticket_pattern: Regex matched anywhere in a commit subject.
        branch_pattern: Regex applied to branch names; group 1 is the ticket.
        ticket_format: Regex a user supplied --ticket must fully match.
        message_format: Template with {prefix} and {message} placeholders.
        base_branches: Base branch candidates, tried in order.
    """

    model_config = ConfigDict(frozen=True)

    ticket_pattern: str = DEFAULT_CONFIG["ticket_pattern"]
    branch_pattern: str = DEFAULT_CONFIG["branch_pattern"]
    ticket_format: str = DEFAULT_CONFIG["ticket_format"]
    message_format: str = DEFAULT_CONFIG["message_format"]
    base_branches: tuple[str, ...] = tuple(DEFAULT_CONFIG["base_branches"])

    @field_validator("ticket_pattern", "branch_pattern", "ticket_format")
    @classmethod
    def ensure_regex_compiles(cls, v: str) -> str:
        """Ensure patterns are valid regular expressions."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid regular expression {v!r}: {e}")
        return v

    @field_validator("base_branches", mode="before")
    @classmethod
    def ensure_branch_list(cls, v):
        """Accept a single branch name as well as a list."""
        if isinstance(v, str):
            return (v,)
        return v

    @model_validator(mode="after")
    def ensure_base_branches(self) -> "TagConfig":
        if not self.base_branches:
            raise ValueError("base_branches must name at least one branch")
        return self

    @property
    def ticket_re(self) -> re.Pattern:
        return re.compile(self.ticket_pattern)

    @property
    def ticket_strip_re(self) -> re.Pattern:
        return re.compile(f"(?:{self.ticket_pattern})\\s*")

    @property
    def branch_re(self) -> re.Pattern:
        return re.compile(self.branch_pattern)

    @property
    def ticket_format_re(self) -> re.Pattern:
        return re.compile(self.ticket_format)


# ============================================================
# CONFIG FILE LOCATIONS
# ============================================================


def get_global_config_file() -> Path:
    """Get path to the global config file.

    Returns:
        Path to ~/.gittag/config.yaml
    """
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def get_repo_config_file(repo_root: Path) -> Path:
    """Get path to the repository config file.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Path to <repo>/.gittag/config.yaml
    """
    return repo_root / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_config_file(config_file: Path) -> Dict[str, Any]:
    """Load one YAML config layer.

    Returns:
        Dictionary with configuration values. Empty dict if file doesn't exist.

    Raises:
        ConfigError: If the file is unreadable or not a mapping.
    """
    if not config_file.exists():
        return {}

    try:
        with open(config_file, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config from {config_file}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_file} must contain a mapping")
    return data


def save_config_file(config_file: Path, data: Dict[str, Any]) -> None:
    """Write a config layer to disk, creating its directory."""
    config_file.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(config_file, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
    except OSError as e:
        raise ConfigError(f"Failed to save config to {config_file}: {e}")


def build_config(data: Dict[str, Any]) -> TagConfig:
    """Validate a raw config mapping into a TagConfig.

    Raises:
        ConfigTemplateError: If message_format is unusable.
        ConfigError: For any other invalid value.
    """
    known = {key: value for key, value in data.items() if key in TagConfig.model_fields}
    if "message_format" in known:
        check_message_format(str(known["message_format"]))
    try:
        return TagConfig(**known)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration:\n{e}")


def merge_layers(*layers: Dict[str, Any]) -> Dict[str, Any]:
    """Merge config layers, later layers winning."""
    merged: Dict[str, Any] = {}
    for layer in layers:
        merged.update(layer)
    return merged


def load_config(repo_root: Optional[Path] = None) -> TagConfig:
    """Load the effective configuration.

    Args:
        repo_root: Repository root; its .gittag/config.yaml is applied last.

    Returns:
        The validated TagConfig.
    """
    layers = [DEFAULT_CONFIG, load_config_file(get_global_config_file())]
    if repo_root is not None:
        layers.append(load_config_file(get_repo_config_file(repo_root)))
    return build_config(merge_layers(*layers))


# ============================================================
# LOGGING
# ============================================================


def setup_logging(verbose: bool = False) -> None:
    """Enable debug logging when GITTAG_DEBUG=1 or --verbose."""
    level = logging.DEBUG if (verbose or os.getenv("GITTAG_DEBUG")) else logging.WARNING
    LOG.setLevel(level)
    if level == logging.DEBUG and not LOG.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setLevel(logging.DEBUG)
        h.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        LOG.addHandler(h)
