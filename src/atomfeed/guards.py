"""
Closed enumerations for Atom attribute values and their type guards.

Raw attribute values from a feed are only accepted into enum-typed fields
after passing the matching predicate; anything else is discarded to None.
"""
from enum import Enum
from typing import Optional


class AtomTextType(str, Enum):
    """Encodings an Atom text construct may declare."""
    TEXT = "text"
    HTML = "html"
    XHTML = "xhtml"


class AtomLinkRel(str, Enum):
    """Link relations defined by RFC 4287."""
    ALTERNATE = "alternate"
    RELATED = "related"
    SELF = "self"
    ENCLOSURE = "enclosure"
    VIA = "via"


_TEXT_TYPES = frozenset(member.value for member in AtomTextType)
_LINK_RELS = frozenset(member.value for member in AtomLinkRel)


def is_atom_text_type(value: Optional[str]) -> bool:
    """Check whether a raw value is a known text construct type."""
    return isinstance(value, str) and value in _TEXT_TYPES


def is_atom_link_rel_type(value: Optional[str]) -> bool:
    """Check whether a raw value is a known link relation."""
    return isinstance(value, str) and value in _LINK_RELS


def to_text_type(value: Optional[str]) -> Optional[AtomTextType]:
    """Convert a raw type attribute, discarding unknown values."""
    return AtomTextType(value) if is_atom_text_type(value) else None


def to_link_rel(value: Optional[str]) -> Optional[AtomLinkRel]:
    """Convert a raw rel attribute, discarding unknown values."""
    return AtomLinkRel(value) if is_atom_link_rel_type(value) else None
