"""
HTML sanitization for untrusted feed content.

Wraps bleach behind a single markup -> safe markup function. Everything a
publisher controls (text constructs, ids, person names, media titles) goes
through here before it lands in a record.
"""
import html
import re
from typing import Dict, FrozenSet, List, Optional

import bleach
import structlog

from .config import SanitizerSettings, get_sanitizer_settings

logger = structlog.get_logger(__name__)

# bleach strips these tags but keeps their bodies; an unclosed block runs to the end
_PAYLOAD_BLOCKS = re.compile(r"<(script|style)\b[^>]*>.*?(?:</\1\s*>|$)", re.IGNORECASE | re.DOTALL)


class HtmlSanitizer:
    """Allow-list HTML sanitizer backed by bleach."""

    def __init__(
        self,
        allowed_tags: List[str],
        allowed_attributes: Dict[str, List[str]],
        allowed_protocols: List[str],
        strip: bool = True,
        strip_comments: bool = True
    ):
        self.logger = logger.bind(component="html_sanitizer")
        self.allowed_tags: FrozenSet[str] = frozenset(allowed_tags)
        self.allowed_attributes = {tag: list(attrs) for tag, attrs in allowed_attributes.items()}
        self.allowed_protocols: FrozenSet[str] = frozenset(allowed_protocols)
        self.strip = strip
        self.strip_comments = strip_comments

    @classmethod
    def from_settings(cls, settings: SanitizerSettings) -> "HtmlSanitizer":
        """Build a sanitizer from configuration."""
        return cls(
            allowed_tags=settings.allowed_tags,
            allowed_attributes=settings.allowed_attributes,
            allowed_protocols=settings.allowed_protocols,
            strip=settings.strip,
            strip_comments=settings.strip_comments
        )

    def sanitize(self, markup: str) -> str:
        """
        Remove script-capable constructs from a markup string.

        Args:
            markup: Untrusted HTML or text

        Returns:
            Markup containing only allow-listed tags, attributes and protocols
        """
        if not markup:
            return ""

        if self.strip:
            markup = _PAYLOAD_BLOCKS.sub("", markup)

        try:
            return bleach.clean(
                markup,
                tags=self.allowed_tags,
                attributes=self.allowed_attributes,
                protocols=self.allowed_protocols,
                strip=self.strip,
                strip_comments=self.strip_comments
            )
        except Exception as e:
            # Escaping everything is always safe, just less pretty
            self.logger.warning("HTML sanitization failed, escaping instead", error=str(e))
            return html.escape(markup)

    __call__ = sanitize


# Global sanitizer instance
_sanitizer: Optional[HtmlSanitizer] = None


def get_sanitizer() -> HtmlSanitizer:
    """Get the global sanitizer instance."""
    global _sanitizer
    if _sanitizer is None:
        _sanitizer = HtmlSanitizer.from_settings(get_sanitizer_settings())
    return _sanitizer


def sanitize_html(markup: str) -> str:
    """Sanitize markup using the global sanitizer."""
    return get_sanitizer().sanitize(markup)
