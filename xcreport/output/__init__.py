"""Output layer: rendering reports as Markdown or JSON."""

from .formatter import DEFAULT_GLYPHS, format_report

__all__ = ["DEFAULT_GLYPHS", "format_report"]
