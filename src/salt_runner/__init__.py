"""salt-runner: run the commands a project declares in its SALT.md."""

__version__ = "0.1.0"
