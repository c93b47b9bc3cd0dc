"""Exception root for seedkit."""


class SeedkitError(Exception):
    """Base exception for every error seedkit reports to the user."""
    pass
