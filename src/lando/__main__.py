"""Allow running Lando with ``python -m lando``."""

from lando.cli import app

if __name__ == "__main__":
	app()
