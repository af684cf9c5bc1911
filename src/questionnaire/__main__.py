"""Allow running as ``python -m questionnaire``."""

from questionnaire.cli import app

if __name__ == "__main__":
    app()
