"""doctrine-check: validate a repository against the doctrine conventions."""

__version__ = "0.1.0"
