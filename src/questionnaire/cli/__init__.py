"""CLI package - Typer-based command-line interface.

Usage:
    python -m questionnaire --help
    questionnaire validate schemas/family.json answers.json --lang tr
"""

from questionnaire.cli._app import app

# Register command modules (side-effect imports)
import questionnaire.cli.cmd_check  # noqa: F401
import questionnaire.cli.cmd_validate  # noqa: F401
import questionnaire.cli.cmd_process  # noqa: F401
import questionnaire.cli.cmd_items  # noqa: F401

__all__ = ["app"]
