"""CI pipeline for building, packaging and verifying coder-cli releases."""

__version__ = "0.1.0"
