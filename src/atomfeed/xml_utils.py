"""
Element lookup and sanitized accessors over an lxml tree.

Lookups only ever inspect the direct children of a node. An <entry> and a
nested media:group can both hold a child called "title"; searching
descendants would pick the wrong one.

Tag names are compared as literal, prefixed strings ("media:group"), the
way a namespace-unaware DOM reports them. A feed binding the media
namespace to another prefix is therefore not recognised.
"""
import html
import math
from typing import Iterator, List, Optional, TYPE_CHECKING

from lxml import etree

if TYPE_CHECKING:
    from .sanitizer import HtmlSanitizer

NAN = float("nan")


def node_name(element: etree._Element) -> str:
    """Return the tag name as written in the document, prefix included."""
    # Recovered documents can hold unbound prefixes verbatim, e.g. "media:group"
    localname = element.tag.rsplit("}", 1)[-1]
    if element.prefix:
        return f"{element.prefix}:{localname}"
    return localname


def child_elements(parent: etree._Element) -> Iterator[etree._Element]:
    """Yield the element children of a node, skipping comments and PIs."""
    for child in parent:
        if isinstance(child.tag, str):
            yield child


def find_child_tag(parent: Optional[etree._Element], tag_name: str) -> Optional[etree._Element]:
    """Find the first direct child with a matching tag name."""
    if parent is None:
        return None
    for child in child_elements(parent):
        if node_name(child) == tag_name:
            return child
    return None


def filter_child_tags(parent: Optional[etree._Element], tag_name: str) -> List[etree._Element]:
    """Return every direct child with a matching tag name, in document order."""
    if parent is None:
        return []
    return [child for child in child_elements(parent) if node_name(child) == tag_name]


def text_content(element: etree._Element) -> str:
    """Concatenated text of the element and its descendants.

    Character references and predefined entities are already decoded by the
    parser, so escaped HTML comes back as literal markup.
    """
    return etree.tostring(element, method="text", encoding="unicode", with_tail=False)


def inner_markup(element: etree._Element) -> str:
    """Serialize the children of an element, without the element itself."""
    parts = [html.escape(element.text, quote=False)] if element.text else []
    for child in element:
        parts.append(etree.tostring(child, encoding="unicode", with_tail=True))
    return "".join(parts)


def sanitize_text_content(element: Optional[etree._Element], sanitizer: "HtmlSanitizer") -> Optional[str]:
    """Sanitized text content, or None when the element is missing."""
    if element is None:
        return None
    return sanitizer.sanitize(text_content(element))


def sanitize_text_attribute(element: Optional[etree._Element], attribute_name: str) -> Optional[str]:
    """Raw attribute value, or None when the element or attribute is missing.

    Attribute values are not passed through the markup sanitizer.
    """
    if element is None:
        return None
    return element.get(attribute_name)


def numeric_attribute(element: Optional[etree._Element], attribute_name: str) -> float:
    """Attribute value as a float.

    Missing, empty and non-numeric values give NaN rather than zero.
    """
    value = sanitize_text_attribute(element, attribute_name)
    # float() also takes digit separators ("1_000"), which are not numbers here
    if value is None or not value.strip() or "_" in value:
        return NAN
    try:
        number = float(value.strip())
    except ValueError:
        return NAN
    return NAN if math.isnan(number) else number
