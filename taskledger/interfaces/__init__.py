"""Interfaces layer for taskledger.

Adapters for external interactions. Currently only the command-line
interface built with Typer. Interfaces accept user input, call the
application use cases and format the results.
"""

from taskledger.interfaces.cli import app

__all__ = ["app"]
