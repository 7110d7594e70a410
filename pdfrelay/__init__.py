"""pdfrelay - HTML to PDF rendering service backed by WeasyPrint."""

__version__ = "0.1.0"
