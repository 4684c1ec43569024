"""Markup stripping for free-text profile fields (display name, address)."""

import html

import nh3


def strip_markup(value: str) -> str:
    """Remove every HTML tag from value and return plain text.

    nh3 escapes entities while cleaning; they are unescaped again so that a
    literal "&" in an address survives unchanged.
    """
    if not value:
        return value
    return html.unescape(nh3.clean(value, tags=set(), attributes={})).strip()
