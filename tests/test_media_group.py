"""
Unit tests for the Media RSS (media:group) builders.
"""
import math

import pytest
from lxml import etree

from atomfeed import AtomFeedParser


MEDIA_NS = 'xmlns:media="http://search.yahoo.com/mrss/"'


def media(xml: str) -> etree._Element:
    """Parse a fragment with the media prefix bound."""
    return etree.fromstring(f'<wrapper {MEDIA_NS}>{xml}</wrapper>')[0]


class TestMediaGroup:
    """Test media:group parsing."""

    @pytest.fixture
    def parser(self):
        return AtomFeedParser()

    @pytest.fixture
    def youtube_feed(self):
        """Trimmed YouTube channel feed."""
        return f'''<?xml version="1.0" encoding="UTF-8"?>
        <feed xmlns:yt="http://www.youtube.com/xml/schemas/2015" {MEDIA_NS} xmlns="http://www.w3.org/2005/Atom">
            <id>yt:channel:UC123</id>
            <title>Example Channel</title>
            <entry>
                <id>yt:video:abc123</id>
                <yt:videoId>abc123</yt:videoId>
                <title>Video Title</title>
                <link rel="alternate" href="https://www.youtube.com/watch?v=abc123"/>
                <published>2024-02-01T10:00:00+00:00</published>
                <updated>2024-02-02T10:00:00+00:00</updated>
                <media:group>
                    <media:title>Video Title</media:title>
                    <media:content url="https://www.youtube.com/v/abc123?version=3" type="application/x-shockwave-flash" width="640" height="390"/>
                    <media:thumbnail url="https://i1.ytimg.com/vi/abc123/hqdefault.jpg" width="480" height="360"/>
                    <media:description>First line &lt;script&gt;alert(1)&lt;/script&gt;</media:description>
                    <media:community>
                        <media:starRating count="120" average="4.75" min="1" max="5"/>
                        <media:statistics views="98765"/>
                    </media:community>
                </media:group>
            </entry>
        </feed>'''

    def test_youtube_entry(self, parser, youtube_feed):
        entry = parser.parse_feed(youtube_feed).entries[0]
        group = entry.media_group

        assert entry.title.value == "Video Title"
        assert group.title == "Video Title"
        assert group.content.url == "https://www.youtube.com/v/abc123?version=3"
        assert group.content.type == "application/x-shockwave-flash"
        assert group.content.width == 640
        assert group.content.height == 390
        assert group.thumbnail.url == "https://i1.ytimg.com/vi/abc123/hqdefault.jpg"
        assert group.thumbnail.type is None
        assert group.community.star_rating.count == 120
        assert group.community.star_rating.average == 4.75
        assert group.community.star_rating.min == 1
        assert group.community.star_rating.max == 5
        assert group.community.statistics.views == 98765

    def test_description_is_sanitized(self, parser, youtube_feed):
        group = parser.parse_feed(youtube_feed).entries[0].media_group

        assert group.description.startswith("First line")
        assert "<script" not in group.description

    def test_missing_group(self, parser):
        assert parser.parse_media_group(None) is None

    def test_empty_group_defaults(self, parser):
        group = parser.parse_media_group(media('<media:group/>'))

        assert group.title == ""
        assert group.description == ""
        assert group.content is None
        assert group.thumbnail is None
        assert group.community is None

    def test_unprefixed_children_are_ignored(self, parser):
        group = parser.parse_media_group(media(
            '<media:group><title>Wrong</title><description>Wrong</description></media:group>'
        ))

        assert group.title == ""
        assert group.description == ""

    def test_other_prefix_is_not_recognised(self, parser):
        xml = '''<feed xmlns:m="http://search.yahoo.com/mrss/">
            <entry><m:group><m:title>Hidden</m:title></m:group></entry>
        </feed>'''

        assert parser.parse_feed(xml).entries[0].media_group is None

    def test_to_dict(self, parser, youtube_feed):
        data = parser.parse_feed(youtube_feed).entries[0].to_dict()['media_group']

        assert data['title'] == "Video Title"
        assert data['content']['width'] == 640
        assert data['community']['statistics'] == {'views': 98765}
        assert data['community']['star_rating']['average'] == 4.75


class TestMediaCommunity:
    """Test media:community numeric parsing."""

    @pytest.fixture
    def parser(self):
        return AtomFeedParser()

    def test_missing_count_is_nan(self, parser):
        community = parser.parse_media_community(media(
            '<media:community><media:starRating average="4.5" min="1" max="5"/>'
            '<media:statistics views="10"/></media:community>'
        ))

        assert math.isnan(community.star_rating.count)
        assert community.star_rating.average == 4.5
        assert community.statistics.views == 10

    def test_missing_children_are_nan(self, parser):
        community = parser.parse_media_community(media('<media:community/>'))

        rating = community.star_rating
        assert all(math.isnan(value) for value in (rating.count, rating.average, rating.min, rating.max))
        assert math.isnan(community.statistics.views)

    def test_invalid_numbers_are_nan(self, parser):
        community = parser.parse_media_community(media(
            '<media:community><media:starRating count="lots" average="" min=" 2 " max="5"/></media:community>'
        ))

        assert math.isnan(community.star_rating.count)
        assert math.isnan(community.star_rating.average)
        assert community.star_rating.min == 2
        assert community.star_rating.max == 5

    def test_missing_community(self, parser):
        assert parser.parse_media_community(None) is None


class TestMediaLink:
    """Test media:content / media:thumbnail parsing."""

    @pytest.fixture
    def parser(self):
        return AtomFeedParser()

    def test_full_link(self, parser):
        link = parser.parse_media_link(media(
            '<media:content url="https://example.com/v.mp4" type="video/mp4" width="1280" height="720"/>'
        ))

        assert link.url == "https://example.com/v.mp4"
        assert link.type == "video/mp4"
        assert link.width == 1280.0
        assert link.height == 720.0

    def test_defaults(self, parser):
        link = parser.parse_media_link(media('<media:thumbnail width="wide"/>'))

        assert link.url == ""
        assert link.type is None
        assert math.isnan(link.width)
        assert math.isnan(link.height)
