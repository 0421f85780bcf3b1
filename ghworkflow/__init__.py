"""ghworkflow — bootstrap and upgrade a repository's AI issue workflow."""

__version__ = "0.1.0"
