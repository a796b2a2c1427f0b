"""Text-only thumbnail derivation from rendered template markup."""

import base64
import re
from typing import Optional

THUMBNAIL_TEXT_LENGTH = 120
THUMBNAIL_PREFIX = "data:text/plain;base64,"

_STYLE_BLOCK = re.compile(r"<style[\s\S]*?</style>", re.IGNORECASE)
_SCRIPT_BLOCK = re.compile(r"<script[\s\S]*?</script>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


def html_to_preview_text(html: str, limit: int = THUMBNAIL_TEXT_LENGTH) -> str:
    """Strip style/script blocks and tags, collapse whitespace and truncate."""
    text = _STYLE_BLOCK.sub("", html)
    text = _SCRIPT_BLOCK.sub("", text)
    text = _TAG.sub(" ", text)
    text = _WHITESPACE.sub(" ", text).strip()
    return text[:limit]


def derive_thumbnail(html: str) -> Optional[str]:
    """
    Build a textual preview payload for a template.

    This is a fallback for galleries, not a rendered image. Returns None
    when the text cannot be encoded.

    Args:
        html: Rendered markup of the template

    Returns:
        ``data:text/plain;base64,...`` string, or None
    """
    try:
        text = html_to_preview_text(html)
        encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
    except (TypeError, UnicodeError):
        return None
    return THUMBNAIL_PREFIX + encoded


def decode_thumbnail(thumbnail: str) -> Optional[str]:
    """Return the preview text stored in a thumbnail, or None if it is not a text preview."""
    if not thumbnail or not thumbnail.startswith(THUMBNAIL_PREFIX):
        return None
    try:
        return base64.b64decode(thumbnail[len(THUMBNAIL_PREFIX):]).decode("utf-8")
    except (ValueError, UnicodeError):
        return None
