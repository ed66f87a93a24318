"""
Atom Feed Parser

This module turns raw Atom XML into sanitized, typed feed records.
Every value a publisher controls is treated as hostile: text constructs are
decoded according to their declared type and then passed through the HTML
sanitizer. Missing data falls back to documented defaults; the only fatal
condition is a document without a <feed> root.
"""
from datetime import datetime, timezone
from typing import Optional, Union

from dateutil import parser as date_parser
from lxml import etree
import structlog

from .config import SanitizerSettings
from .guards import AtomTextType, to_link_rel, to_text_type
from .media_group import MediaGroupParserMixin
from .models import (
    AtomCategory, AtomContent, AtomEntry, AtomFeed, AtomGenerator, AtomLink,
    AtomPerson, AtomSource, AtomText
)
from .sanitizer import HtmlSanitizer, get_sanitizer
from .xml_utils import (
    filter_child_tags, find_child_tag, inner_markup, node_name,
    sanitize_text_attribute, sanitize_text_content, text_content
)

logger = structlog.get_logger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_DATE_DEFAULTS = datetime(1970, 1, 1)

# Untrusted input: never fetch DTDs or expand external entities
_STR_XML_PARSER = etree.XMLParser(
    encoding="utf-8",
    recover=True,
    collect_ids=False,
    resolve_entities=False,
    no_network=True,
)
_BYTES_XML_PARSER = etree.XMLParser(
    recover=True,
    collect_ids=False,
    resolve_entities=False,
    no_network=True,
)


class FeedParsingError(Exception):
    """Raised when feed parsing fails."""
    pass


class MissingRootElementError(FeedParsingError):
    """Raised when the document has no <feed> root element."""
    pass


class AtomFeedParser(MediaGroupParserMixin):
    """
    Atom 1.0 feed parser with sanitization and tolerant defaults.

    Features:
    - Direct-child element lookup, immune to same-named nested elements
    - Text construct decoding for text, html and xhtml content
    - Sanitization of every text value through an allow-list sanitizer
    - Media RSS (media:group) extension support
    - Entries ordered by update time, most recent first
    """

    def __init__(self, sanitizer: Optional[HtmlSanitizer] = None):
        self.sanitizer = sanitizer or get_sanitizer()
        self.logger = logger.bind(component="feed_parser")

    @classmethod
    def from_settings(cls, settings: SanitizerSettings) -> "AtomFeedParser":
        """Create a parser whose sanitizer follows the given settings."""
        return cls(HtmlSanitizer.from_settings(settings))

    def parse_feed(self, xml_content: Union[str, bytes]) -> AtomFeed:
        """
        Parse an Atom feed from XML content.

        Args:
            xml_content: Raw XML of the feed

        Returns:
            AtomFeed with entries sorted by `updated`, most recent first

        Raises:
            MissingRootElementError: If the document has no <feed> root
        """
        self.logger.info("Starting feed parsing", size=len(xml_content))

        feed = self._find_feed_root(xml_content)
        if feed is None:
            self.logger.warning("No <feed> tag found")
            raise MissingRootElementError("No <feed> tag found.")

        generator = find_child_tag(feed, 'generator')
        entries = [self.parse_entry(entry) for entry in filter_child_tags(feed, 'entry')]
        entries.sort(key=lambda entry: entry.updated, reverse=True)

        parsed = AtomFeed(
            id=sanitize_text_content(find_child_tag(feed, 'id'), self.sanitizer) or "",
            title=self.parse_text(find_child_tag(feed, 'title')),
            updated=self.parse_timestamp(find_child_tag(feed, 'updated')),
            entries=tuple(entries),
            author=tuple(self.parse_person(author) for author in filter_child_tags(feed, 'author')),
            link=tuple(self.parse_link(link) for link in filter_child_tags(feed, 'link')),
            category=tuple(self.parse_category(category) for category in filter_child_tags(feed, 'category')),
            contributor=tuple(
                self.parse_person(contributor) for contributor in filter_child_tags(feed, 'contributor')
            ),
            generator=AtomGenerator(
                value=sanitize_text_content(generator, self.sanitizer) or "",
                uri=sanitize_text_attribute(generator, 'uri'),
                version=sanitize_text_attribute(generator, 'version')
            ),
            icon=sanitize_text_content(find_child_tag(feed, 'icon'), self.sanitizer),
            logo=sanitize_text_content(find_child_tag(feed, 'logo'), self.sanitizer),
            rights=self.parse_text(find_child_tag(feed, 'rights')),
            subtitle=self.parse_text(find_child_tag(feed, 'subtitle'))
        )

        self.logger.info("Feed parsed", feed_id=parsed.id, entry_count=len(parsed.entries))
        return parsed

    def _clean_xml(self, xml_content: Union[str, bytes]) -> Union[str, bytes]:
        """Clean and prepare XML content for parsing."""
        if isinstance(xml_content, bytes):
            if xml_content.startswith(b'\xef\xbb\xbf'):
                xml_content = xml_content[3:]
            return xml_content.strip().replace(b'&nbsp;', b'&#160;')

        # Remove BOM if present
        if xml_content.startswith('\ufeff'):
            xml_content = xml_content[1:]

        # &nbsp; is common in feeds but undefined in XML
        return xml_content.strip().replace('&nbsp;', '&#160;')

    def _find_feed_root(self, xml_content: Union[str, bytes]) -> Optional[etree._Element]:
        """Parse the document and return its root if it is a <feed>."""
        xml_content = self._clean_xml(xml_content)
        if not xml_content:
            return None

        try:
            if isinstance(xml_content, bytes):
                root = etree.fromstring(xml_content, parser=_BYTES_XML_PARSER)
            else:
                root = etree.fromstring(xml_content.encode("utf-8"), parser=_STR_XML_PARSER)
        except etree.XMLSyntaxError as e:
            self.logger.debug("XML could not be recovered", error=str(e))
            return None

        if root is None or node_name(root) != 'feed':
            return None
        return root

    def parse_entry(self, entry: etree._Element) -> AtomEntry:
        """Build an entry record from an <entry> element."""
        content = find_child_tag(entry, 'content')
        published = find_child_tag(entry, 'published')

        return AtomEntry(
            id=sanitize_text_content(find_child_tag(entry, 'id'), self.sanitizer) or "",
            title=self.parse_text(find_child_tag(entry, 'title')),
            updated=self.parse_timestamp(find_child_tag(entry, 'updated')),
            author=tuple(self.parse_person(author) for author in filter_child_tags(entry, 'author')),
            content=self.parse_content(content),
            raw_content=content,
            link=tuple(self.parse_link(link) for link in filter_child_tags(entry, 'link')),
            summary=self.parse_text(find_child_tag(entry, 'summary')),
            category=tuple(self.parse_category(category) for category in filter_child_tags(entry, 'category')),
            contributor=tuple(
                self.parse_person(contributor) for contributor in filter_child_tags(entry, 'contributor')
            ),
            published=self.parse_timestamp(published) if published is not None else None,
            rights=self.parse_text(find_child_tag(entry, 'rights')),
            source=self.parse_source(find_child_tag(entry, 'source')),
            media_group=self.parse_media_group(find_child_tag(entry, 'media:group'))
        )

    def decode_text(self, text_type: Optional[AtomTextType], element: Optional[etree._Element]) -> str:
        """
        Extract and sanitize the value of a text construct.

        xhtml and text take the inner markup, html and unknown types take the
        text content (which un-escapes entity encoded HTML). Both paths end
        in the sanitizer.
        """
        if element is None:
            return self.sanitizer.sanitize("")

        if text_type is AtomTextType.XHTML:
            # Inline XHTML, normally wrapped in a <div>
            return self.sanitizer.sanitize(inner_markup(element))
        elif text_type is AtomTextType.HTML:
            return self.sanitizer.sanitize(text_content(element))
        elif text_type is AtomTextType.TEXT:
            # Meant to be plain text; sanitized anyway in case it is not
            return self.sanitizer.sanitize(inner_markup(element))
        return self.sanitizer.sanitize(text_content(element))

    def parse_text(self, text: Optional[etree._Element]) -> AtomText:
        text_type = to_text_type(sanitize_text_attribute(text, 'type'))
        return AtomText(type=text_type, value=self.decode_text(text_type, text))

    def parse_content(self, content: Optional[etree._Element]) -> AtomContent:
        content_type = to_text_type(sanitize_text_attribute(content, 'type'))
        return AtomContent(
            type=content_type,
            src=sanitize_text_attribute(content, 'src'),
            value=self.decode_text(content_type, content)
        )

    def parse_person(self, person: etree._Element) -> AtomPerson:
        return AtomPerson(
            name=sanitize_text_content(find_child_tag(person, 'name'), self.sanitizer) or "",
            uri=sanitize_text_content(find_child_tag(person, 'uri'), self.sanitizer),
            email=sanitize_text_content(find_child_tag(person, 'email'), self.sanitizer)
        )

    def parse_link(self, link: etree._Element) -> AtomLink:
        return AtomLink(
            href=sanitize_text_attribute(link, 'href') or "",
            rel=to_link_rel(sanitize_text_attribute(link, 'rel')),
            type=sanitize_text_attribute(link, 'type'),
            hreflang=sanitize_text_attribute(link, 'hreflang'),
            title=sanitize_text_attribute(link, 'title'),
            length=sanitize_text_attribute(link, 'length')
        )

    def parse_category(self, category: etree._Element) -> AtomCategory:
        return AtomCategory(
            term=sanitize_text_attribute(category, 'term') or "",
            scheme=sanitize_text_attribute(category, 'scheme'),
            label=sanitize_text_attribute(category, 'label')
        )

    def parse_source(self, source: Optional[etree._Element]) -> Optional[AtomSource]:
        """Build the provenance stub of a republished entry, if any."""
        if source is None:
            return None
        return AtomSource(
            id=sanitize_text_content(find_child_tag(source, 'id'), self.sanitizer) or "",
            title=sanitize_text_content(find_child_tag(source, 'title'), self.sanitizer) or "",
            updated=self.parse_timestamp(find_child_tag(source, 'updated'))
        )

    def parse_timestamp(self, element: Optional[etree._Element]) -> datetime:
        """Parse the element text as a date; the epoch when absent or unparseable."""
        if element is None:
            return EPOCH

        date_str = text_content(element).strip()
        try:
            # Missing date parts come from the epoch, not from today
            dt = date_parser.parse(date_str, default=_DATE_DEFAULTS)
            # If no timezone info, assume UTC
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            # Offsets of a day or more only fail once compared, so convert now
            dt = dt.astimezone(timezone.utc)
        except (ValueError, OverflowError):
            self.logger.debug("Failed to parse date", date_str=date_str)
            return EPOCH
        return dt


def parse_atom_feed(xml_content: Union[str, bytes], settings: Optional[SanitizerSettings] = None) -> AtomFeed:
    """
    Parse an Atom feed.

    Args:
        xml_content: Raw XML of the feed
        settings: Sanitizer settings; the global configuration when omitted

    Returns:
        AtomFeed record

    Raises:
        MissingRootElementError: If the document has no <feed> root
    """
    parser = AtomFeedParser.from_settings(settings) if settings is not None else AtomFeedParser()
    return parser.parse_feed(xml_content)
