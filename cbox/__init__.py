"""cbox - cycle inline `[CB]:` value annotations across a workspace."""

__version__ = "0.1.0"
