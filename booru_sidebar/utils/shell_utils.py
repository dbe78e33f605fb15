"""Shell command construction with single-quote escaping."""
from typing import Optional

from .string_utils import format_string, shell_single_quote_escape


DEFAULT_USER_AGENT = "Mozilla/5.0 BooruSidebar/1.0"

CURL_TEMPLATE = "curl -fsSL -A '{0}' '{1}' -o '{2}'"
MKDIR_TEMPLATE = "mkdir -p '{0}'"


def shell_escape(value: Optional[str]) -> str:
    """
    Escape a string for a single-quoted shell argument.

    Uses the pattern 'foo'bar' -> 'foo'\\''bar' (close quote, escaped
    quote, reopen quote).
    """
    if not value:
        return ""
    return shell_single_quote_escape(value)


def build_curl_command(url: str, output_path: str, user_agent: Optional[str] = None) -> str:
    """Build a curl command that downloads url to output_path."""
    return format_string(
        CURL_TEMPLATE,
        shell_escape(user_agent or DEFAULT_USER_AGENT),
        shell_escape(url),
        shell_escape(output_path),
    )


def build_download_command(
    url: str,
    dir_path: str,
    file_name: str,
    user_agent: Optional[str] = None
) -> str:
    """Build a mkdir + curl chain that downloads url into dir_path/file_name."""
    mkdir = format_string(MKDIR_TEMPLATE, shell_escape(dir_path))
    curl = build_curl_command(url, f"{dir_path}/{file_name}", user_agent)
    return f"{mkdir} && {curl}"
