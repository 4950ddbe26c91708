"""Parse ICC colour profile headers, tag tables and tag data."""

__version__ = "0.1.0"

__all__ = [
    "common",
    "header",
    "tag_headers",
    "tags_misc",
    "tags_text",
    "tags_curve",
    "tags_matrix",
    "tags_clut",
    "tags_mft",
    "tags",
]