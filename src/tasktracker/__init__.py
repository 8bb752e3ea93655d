"""Declaration of the root package tasktracker."""

from tasktracker.app import app
from tasktracker.server import run

__all__ = ["app", "main"]


def main() -> None:
    """Run the application server."""
    run()
