"""Small string formatting and escaping helpers."""
import re
from typing import Any, Optional


_PLACEHOLDER = re.compile(r"{(\d+)}")
_DOMAIN = re.compile(r"^(?:https?://)?(?:www\.)?([^/]+)")
_BASE_URL = re.compile(r"^(https?://[^/]+)(/.*)?$")

_HTML_ESCAPES = [
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
]


def format_string(template: str, *args: Any) -> str:
    """
    Replace positional placeholders like {0} with the matching argument.

    Placeholders without a matching argument are left untouched.
    """
    def _replace(match: re.Match) -> str:
        index = int(match.group(1))
        if index < len(args):
            return str(args[index])
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, template)


def get_domain(url: str) -> Optional[str]:
    """Return the host of a URL without scheme and leading www., or None."""
    match = _DOMAIN.match(url)
    return match.group(1) if match else None


def get_base_url(url: str) -> Optional[str]:
    """Return scheme://host of an http(s) URL, or None."""
    match = _BASE_URL.match(url)
    return match.group(1) if match else None


def shell_single_quote_escape(value: Any) -> str:
    """Escape single quotes for embedding in a single-quoted shell string."""
    return str(value).replace("'", "'\\''")


def escape_html(value: Any) -> Any:
    """Escape HTML special characters. Non-strings are returned unchanged."""
    if not isinstance(value, str):
        return value
    for char, entity in _HTML_ESCAPES:
        value = value.replace(char, entity)
    return value
