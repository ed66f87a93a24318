"""
Unit tests for HTML sanitization and type guards.
"""
import pytest
from unittest.mock import patch

from atomfeed import AtomLinkRel, AtomTextType, is_atom_link_rel_type, is_atom_text_type
from atomfeed.config import SanitizerSettings
from atomfeed.guards import to_link_rel, to_text_type
from atomfeed.sanitizer import HtmlSanitizer, get_sanitizer, sanitize_html


class TestHtmlSanitizer:
    """Test HtmlSanitizer functionality."""

    @pytest.fixture
    def sanitizer(self):
        return HtmlSanitizer.from_settings(SanitizerSettings())

    def test_plain_text_unchanged(self, sanitizer):
        assert sanitizer.sanitize("Hello world") == "Hello world"

    def test_empty_input(self, sanitizer):
        assert sanitizer.sanitize("") == ""

    def test_script_tags_removed(self, sanitizer):
        value = sanitizer.sanitize("<script>alert(1)</script>Hello")

        assert "<script" not in value
        assert value.endswith("Hello")

    @pytest.mark.parametrize("markup", [
        "<script>steal(document.cookie)</script>Hi",
        "<SCRIPT type='text/javascript'>\nsteal(\n document.cookie)\n</SCRIPT >Hi",
        "<style>body { background: url(steal) }</style>Hi",
    ])
    def test_script_and_style_bodies_dropped(self, sanitizer, markup):
        assert sanitizer.sanitize(markup) == "Hi"

    def test_unclosed_script_drops_the_rest(self, sanitizer):
        assert sanitizer.sanitize("Hi<script>steal(document.cookie)") == "Hi"

    def test_allowed_markup_kept(self, sanitizer):
        assert sanitizer.sanitize("<p>Hello <b>world</b></p>") == "<p>Hello <b>world</b></p>"

    def test_event_handlers_removed(self, sanitizer):
        value = sanitizer.sanitize('<p onclick="steal()">Hi</p>')

        assert value == "<p>Hi</p>"

    def test_javascript_urls_removed(self, sanitizer):
        value = sanitizer.sanitize('<a href="javascript:alert(1)">click</a>')

        assert "javascript" not in value
        assert "click" in value

    def test_safe_links_kept(self, sanitizer):
        value = sanitizer.sanitize('<a href="https://example.com">click</a>')

        assert value == '<a href="https://example.com">click</a>'

    def test_comments_stripped(self, sanitizer):
        assert sanitizer.sanitize("a<!-- hidden -->b") == "ab"

    def test_bare_ampersand_escaped(self, sanitizer):
        assert sanitizer.sanitize("Fish & Chips") == "Fish &amp; Chips"

    def test_escape_mode(self):
        sanitizer = HtmlSanitizer.from_settings(SanitizerSettings(strip=False))

        value = sanitizer.sanitize("<script>alert(1)</script>")

        assert "<script" not in value
        assert "&lt;script&gt;" in value

    def test_custom_allow_list(self):
        sanitizer = HtmlSanitizer(allowed_tags=["em"], allowed_attributes={}, allowed_protocols=["https"])

        assert sanitizer.sanitize("<em>a</em><p>b</p>") == "<em>a</em>b"

    def test_failure_falls_back_to_escaping(self, sanitizer):
        with patch("atomfeed.sanitizer.bleach.clean", side_effect=RuntimeError("boom")):
            value = sanitizer.sanitize("<b>x</b>")

        assert value == "&lt;b&gt;x&lt;/b&gt;"

    def test_callable(self, sanitizer):
        assert sanitizer("<b>x</b>") == "<b>x</b>"

    def test_global_sanitizer(self):
        assert get_sanitizer() is get_sanitizer()
        assert sanitize_html("<script>x</script>ok").endswith("ok")


class TestGuards:
    """Test closed enumeration guards."""

    @pytest.mark.parametrize("value", ["text", "html", "xhtml"])
    def test_known_text_types(self, value):
        assert is_atom_text_type(value)
        assert to_text_type(value) is AtomTextType(value)

    @pytest.mark.parametrize("value", [None, "", "HTML", "markdown", "text/html", " text"])
    def test_unknown_text_types(self, value):
        assert not is_atom_text_type(value)
        assert to_text_type(value) is None

    @pytest.mark.parametrize("value", ["alternate", "related", "self", "enclosure", "via"])
    def test_known_link_rels(self, value):
        assert is_atom_link_rel_type(value)
        assert to_link_rel(value) is AtomLinkRel(value)

    @pytest.mark.parametrize("value", [None, "", "Self", "edit", "hub", "http://example.com/rel"])
    def test_unknown_link_rels(self, value):
        assert not is_atom_link_rel_type(value)
        assert to_link_rel(value) is None
