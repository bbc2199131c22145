"""Ticket prefixer for git branch commits."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("gittag")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
