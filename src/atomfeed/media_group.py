"""
Builders for the Media RSS extension (media:group and friends).

YouTube channel feeds carry the video title, player URL, thumbnail,
description and engagement counters in a media:group child of each entry.
Tags are matched by their literal "media:" prefixed names.
"""
from typing import Optional

from lxml import etree

from .models import AtomMediaCommunity, AtomMediaGroup, AtomMediaLink, MediaStarRating, MediaStatistics
from .sanitizer import HtmlSanitizer
from .xml_utils import find_child_tag, numeric_attribute, sanitize_text_attribute, sanitize_text_content


class MediaGroupParserMixin:
    """Media extension builders; expects `self.sanitizer`."""

    sanitizer: HtmlSanitizer

    def parse_media_group(self, media_group: Optional[etree._Element]) -> Optional[AtomMediaGroup]:
        """Build a media group record, or None when the entry has none."""
        if media_group is None:
            return None

        content = find_child_tag(media_group, 'media:content')
        thumbnail = find_child_tag(media_group, 'media:thumbnail')

        return AtomMediaGroup(
            title=sanitize_text_content(find_child_tag(media_group, 'media:title'), self.sanitizer) or "",
            content=self.parse_media_link(content) if content is not None else None,
            thumbnail=self.parse_media_link(thumbnail) if thumbnail is not None else None,
            description=sanitize_text_content(find_child_tag(media_group, 'media:description'), self.sanitizer) or "",
            community=self.parse_media_community(find_child_tag(media_group, 'media:community'))
        )

    def parse_media_community(self, media_community: Optional[etree._Element]) -> Optional[AtomMediaCommunity]:
        """
        Build engagement data from media:community.

        A missing media:starRating or media:statistics child still produces
        a record; its numbers are all NaN.
        """
        if media_community is None:
            return None

        star_rating = find_child_tag(media_community, 'media:starRating')
        statistics = find_child_tag(media_community, 'media:statistics')

        return AtomMediaCommunity(
            star_rating=MediaStarRating(
                count=numeric_attribute(star_rating, 'count'),
                average=numeric_attribute(star_rating, 'average'),
                min=numeric_attribute(star_rating, 'min'),
                max=numeric_attribute(star_rating, 'max')
            ),
            statistics=MediaStatistics(
                views=numeric_attribute(statistics, 'views')
            )
        )

    def parse_media_link(self, link: etree._Element) -> AtomMediaLink:
        return AtomMediaLink(
            url=sanitize_text_attribute(link, 'url') or "",
            type=sanitize_text_attribute(link, 'type'),
            width=numeric_attribute(link, 'width'),
            height=numeric_attribute(link, 'height')
        )
