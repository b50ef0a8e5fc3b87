"""Allow ``python -m ezkonnect``."""

from ezkonnect.cli.app import app

if __name__ == "__main__":
    app()
