"""seedkit - bootstrap new projects from a template repository."""

__version__ = "0.1.0"
