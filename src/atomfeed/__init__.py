"""
atomfeed - sanitizing Atom feed parser.

Converts untrusted Atom XML (including the media:group extension used by
YouTube feeds) into immutable, typed, sanitized records.
"""
from .feed_parser import AtomFeedParser, FeedParsingError, MissingRootElementError, parse_atom_feed
from .guards import AtomLinkRel, AtomTextType, is_atom_link_rel_type, is_atom_text_type
from .models import (
    AtomCategory, AtomContent, AtomEntry, AtomFeed, AtomGenerator, AtomLink,
    AtomMediaCommunity, AtomMediaGroup, AtomMediaLink, AtomPerson, AtomSource,
    AtomText, MediaStarRating, MediaStatistics
)
from .sanitizer import HtmlSanitizer, sanitize_html

__version__ = "1.0.0"

__all__ = [
    "AtomCategory",
    "AtomContent",
    "AtomEntry",
    "AtomFeed",
    "AtomFeedParser",
    "AtomGenerator",
    "AtomLink",
    "AtomLinkRel",
    "AtomMediaCommunity",
    "AtomMediaGroup",
    "AtomMediaLink",
    "AtomPerson",
    "AtomSource",
    "AtomText",
    "AtomTextType",
    "FeedParsingError",
    "HtmlSanitizer",
    "MediaStarRating",
    "MediaStatistics",
    "MissingRootElementError",
    "is_atom_link_rel_type",
    "is_atom_text_type",
    "parse_atom_feed",
    "sanitize_html",
]
