"""Entry point for running the CLI directly.

Usage:
    python -m unixhttp /var/run/app.sock /health
"""

from .cli.app import app

if __name__ == "__main__":
    app()
