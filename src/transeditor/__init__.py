"""Side-by-side editor for page/resource XML translation files."""

__version__ = "0.1.0"
