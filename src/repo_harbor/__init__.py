"""repo_harbor: local repository checkout service."""

__version__ = "0.1.0"
