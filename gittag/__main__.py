"""Allow ``python -m gittag``."""

from gittag.cli import app

if __name__ == "__main__":
    app()
