"""Desktop sticky notes with dense, ID-keyed per-note records."""

__version__ = "1.0.0"
