"""Extraction of the src and title attributes from pasted embed code."""

import html
import re
from urllib.parse import urlparse

from config import DEFAULT_EMBED_TITLE
from core.exceptions import InvalidEmbedCodeError
from schemas.embed import EmbedSource

SRC_REGEX = re.compile(r"""\bsrc\s*=\s*(?:"([^"]*)"|'([^']*)')""", re.IGNORECASE)
TITLE_REGEX = re.compile(r"""\btitle\s*=\s*(?:"([^"]*)"|'([^']*)')""", re.IGNORECASE)

ALLOWED_SCHEMES = ("http", "https")


def _first_attribute(pattern: re.Pattern, embed_code: str) -> str:
    match = pattern.search(embed_code)
    if not match:
        return ""
    value = match.group(1) if match.group(1) is not None else match.group(2)
    return html.unescape(value).strip()


def extract_src_and_title(embed_code: str) -> EmbedSource:
    """Pull the embed URL and title out of an iframe/embed snippet.

    Args:
        embed_code: Raw HTML pasted by the user.

    Returns:
        EmbedSource with the src URL and the title (DEFAULT_EMBED_TITLE when
        the snippet has none).

    Raises:
        InvalidEmbedCodeError: If the code is empty, has no src attribute, or
            the src is not an absolute http(s) URL.
    """
    if not embed_code or not embed_code.strip():
        raise InvalidEmbedCodeError("Embed code cannot be empty.")

    src = _first_attribute(SRC_REGEX, embed_code)
    if not src:
        raise InvalidEmbedCodeError(
            "Could not find a valid 'src' attribute in the embed code."
        )

    parsed = urlparse(src)
    if parsed.scheme.lower() not in ALLOWED_SCHEMES or not parsed.netloc:
        raise InvalidEmbedCodeError(
            "The 'src' attribute must be an absolute http(s) URL."
        )

    title = _first_attribute(TITLE_REGEX, embed_code) or DEFAULT_EMBED_TITLE
    return EmbedSource(src=src, title=title)
