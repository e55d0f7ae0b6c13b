"""Entry point for ``python -m demiurge_studio``."""

from demiurge_studio.cli.commands import app

if __name__ == "__main__":
    app()
