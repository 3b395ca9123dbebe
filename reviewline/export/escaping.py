"""
reviewline.export.escaping - Format-specific text escaping.

Escaping is applied exactly once, while serializing. These functions are
not idempotent: escaping already-escaped text escapes it again.
"""

from __future__ import annotations

import re

_XML_ENTITIES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&apos;",
    }
)

# Code points outside the XML 1.0 Char production
_INVALID_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

_CSV_SPECIAL = (",", '"', "\n", "\r")


def escape_xml(text: str) -> str:
    """Escape the five XML-reserved characters in a single pass.

    Args:
        text: Raw text

    Returns:
        Text safe for XML element content and quoted attribute values
    """
    return text.translate(_XML_ENTITIES)


def strip_invalid_xml_chars(text: str) -> str:
    """Remove characters that cannot appear in an XML 1.0 document at all.

    Covers C0 controls other than tab, LF and CR, lone surrogates, and
    U+FFFE/U+FFFF. These cannot be escaped, only dropped.
    """
    return _INVALID_XML_CHARS.sub("", text)


def escape_csv_field(text: str) -> str:
    """Quote a CSV field when RFC 4180 requires it.

    A field containing a comma, double quote, line break, or leading or
    trailing whitespace is wrapped in double quotes, with internal double
    quotes doubled. Any other field is returned unchanged.

    Args:
        text: Raw field value

    Returns:
        Field ready to be joined with commas
    """
    needs_quotes = any(ch in text for ch in _CSV_SPECIAL) or (
        text != "" and (text[0].isspace() or text[-1].isspace())
    )
    if not needs_quotes:
        return text
    return '"' + text.replace('"', '""') + '"'
