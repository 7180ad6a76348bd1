"""audiocat — embedded catalog of short audio clips with full-text search."""

__version__ = "0.3.0"
