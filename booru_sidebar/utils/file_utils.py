"""Helpers for converting between local paths and file:// URLs."""

FILE_PROTOCOL = "file://"


def trim_file_protocol(path: str) -> str:
    """Strip a leading file:// from the path."""
    return path[len(FILE_PROTOCOL):] if path.startswith(FILE_PROTOCOL) else path


def to_file_url(path: str) -> str:
    """
    Build a file:// URL from a local path.

    The path is not percent-encoded; the image loader accepts raw spaces
    and special characters.
    """
    if not path:
        return ""
    return FILE_PROTOCOL + path
