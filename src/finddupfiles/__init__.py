"""finddupfiles - locate files with identical content using a persistent digest index."""

__version__ = "0.1.0"
