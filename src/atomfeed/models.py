"""
Typed, immutable records produced by the Atom feed parser.

Every string field has already passed through the HTML sanitizer, with one
exception: AtomEntry.raw_content holds the untouched <content> element for
callers that need the original markup. Treat it as untrusted.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from lxml import etree

from .guards import AtomLinkRel, AtomTextType


def _enum_value(value):
    return value.value if value is not None else None


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class AtomText:
    """A text construct: declared encoding plus sanitized value."""
    type: Optional[AtomTextType] = None
    value: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {'type': _enum_value(self.type), 'value': self.value}


@dataclass(frozen=True)
class AtomContent:
    """Entry body. A set `src` means the content lives out of line."""
    type: Optional[AtomTextType] = None
    src: Optional[str] = None
    value: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {'type': _enum_value(self.type), 'src': self.src, 'value': self.value}


@dataclass(frozen=True)
class AtomPerson:
    """An author or contributor."""
    name: str = ""
    uri: Optional[str] = None
    email: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'uri': self.uri, 'email': self.email}


@dataclass(frozen=True)
class AtomLink:
    """A reference to a related resource."""
    href: str = ""
    rel: Optional[AtomLinkRel] = None
    type: Optional[str] = None
    hreflang: Optional[str] = None
    title: Optional[str] = None
    length: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'href': self.href,
            'rel': _enum_value(self.rel),
            'type': self.type,
            'hreflang': self.hreflang,
            'title': self.title,
            'length': self.length
        }


@dataclass(frozen=True)
class AtomCategory:
    term: str = ""
    scheme: Optional[str] = None
    label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'term': self.term, 'scheme': self.scheme, 'label': self.label}


@dataclass(frozen=True)
class AtomGenerator:
    value: str = ""
    uri: Optional[str] = None
    version: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'value': self.value, 'uri': self.uri, 'version': self.version}


@dataclass(frozen=True)
class AtomSource:
    """Provenance of a republished entry (not a full feed)."""
    id: str
    title: str
    updated: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'title': self.title, 'updated': _isoformat(self.updated)}


@dataclass(frozen=True)
class AtomMediaLink:
    """A media:content or media:thumbnail reference.

    Numeric fields are NaN when the attribute is missing or not a number.
    """
    url: str
    type: Optional[str]
    width: float
    height: float

    def to_dict(self) -> Dict[str, Any]:
        return {'url': self.url, 'type': self.type, 'width': self.width, 'height': self.height}


@dataclass(frozen=True)
class MediaStarRating:
    count: float
    average: float
    min: float
    max: float

    def to_dict(self) -> Dict[str, Any]:
        return {'count': self.count, 'average': self.average, 'min': self.min, 'max': self.max}


@dataclass(frozen=True)
class MediaStatistics:
    views: float

    def to_dict(self) -> Dict[str, Any]:
        return {'views': self.views}


@dataclass(frozen=True)
class AtomMediaCommunity:
    """Engagement data from media:community."""
    star_rating: MediaStarRating
    statistics: MediaStatistics

    def to_dict(self) -> Dict[str, Any]:
        return {'star_rating': self.star_rating.to_dict(), 'statistics': self.statistics.to_dict()}


@dataclass(frozen=True)
class AtomMediaGroup:
    """Payload of a media:group element (YouTube style video entries)."""
    title: str = ""
    content: Optional[AtomMediaLink] = None
    thumbnail: Optional[AtomMediaLink] = None
    description: str = ""
    community: Optional[AtomMediaCommunity] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'content': self.content.to_dict() if self.content else None,
            'thumbnail': self.thumbnail.to_dict() if self.thumbnail else None,
            'description': self.description,
            'community': self.community.to_dict() if self.community else None
        }


@dataclass(frozen=True)
class AtomEntry:
    """A single feed entry."""
    id: str
    title: AtomText
    updated: datetime
    author: Tuple[AtomPerson, ...] = ()
    content: AtomContent = field(default_factory=AtomContent)
    # Unsanitized source element; identity differs per parse
    raw_content: Optional[etree._Element] = field(default=None, compare=False, repr=False)
    link: Tuple[AtomLink, ...] = ()
    summary: AtomText = field(default_factory=AtomText)
    category: Tuple[AtomCategory, ...] = ()
    contributor: Tuple[AtomPerson, ...] = ()
    published: Optional[datetime] = None
    rights: AtomText = field(default_factory=AtomText)
    source: Optional[AtomSource] = None
    media_group: Optional[AtomMediaGroup] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'id': self.id,
            'title': self.title.to_dict(),
            'updated': _isoformat(self.updated),
            'author': [person.to_dict() for person in self.author],
            'content': self.content.to_dict(),
            'raw_content': (
                etree.tostring(self.raw_content, encoding="unicode", with_tail=False)
                if self.raw_content is not None else None
            ),
            'link': [link.to_dict() for link in self.link],
            'summary': self.summary.to_dict(),
            'category': [category.to_dict() for category in self.category],
            'contributor': [person.to_dict() for person in self.contributor],
            'published': _isoformat(self.published),
            'rights': self.rights.to_dict(),
            'source': self.source.to_dict() if self.source else None,
            'media_group': self.media_group.to_dict() if self.media_group else None
        }


@dataclass(frozen=True)
class AtomFeed:
    """A completely parsed Atom feed.

    `entries` is always sorted by `updated`, most recent first.
    """
    id: str
    title: AtomText
    updated: datetime
    entries: Tuple[AtomEntry, ...] = ()
    author: Tuple[AtomPerson, ...] = ()
    link: Tuple[AtomLink, ...] = ()
    category: Tuple[AtomCategory, ...] = ()
    contributor: Tuple[AtomPerson, ...] = ()
    generator: AtomGenerator = field(default_factory=AtomGenerator)
    icon: Optional[str] = None
    logo: Optional[str] = None
    rights: AtomText = field(default_factory=AtomText)
    subtitle: AtomText = field(default_factory=AtomText)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'id': self.id,
            'title': self.title.to_dict(),
            'updated': _isoformat(self.updated),
            'entries': [entry.to_dict() for entry in self.entries],
            'author': [person.to_dict() for person in self.author],
            'link': [link.to_dict() for link in self.link],
            'category': [category.to_dict() for category in self.category],
            'contributor': [person.to_dict() for person in self.contributor],
            'generator': self.generator.to_dict(),
            'icon': self.icon,
            'logo': self.logo,
            'rights': self.rights.to_dict(),
            'subtitle': self.subtitle.to_dict(),
            'entry_count': len(self.entries)
        }
