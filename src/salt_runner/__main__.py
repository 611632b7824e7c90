"""Allow ``python -m salt_runner``."""

from salt_runner.cli import app

if __name__ == "__main__":
    app(prog_name="salt")
