"""RFC 5322 character classes for addr-spec parsing.

Every predicate takes a single byte value (``0``-``255``) and is total:
values outside a class, including anything above ``0x7F``, return False.
"""

from __future__ import annotations

# Punctuation allowed in atext besides ASCII letters and digits.
ATEXT_SPECIALS = frozenset(b"!#$%&'*+/=?^_`{|}~-")

SPACE = 0x20
HTAB = 0x09
CR = 0x0D
LF = 0x0A
NUL = 0x00


def is_wsp(c: int) -> bool:
    """Space or horizontal tab."""
    return c == SPACE or c == HTAB


def is_vchar(c: int) -> bool:
    """Visible (printing) ASCII character."""
    return 0x21 <= c <= 0x7E


def is_obs_no_ws_ctl(c: int) -> bool:
    """US-ASCII control characters that are not CR, LF or whitespace."""
    return (
        0x01 <= c <= 0x08
        or 0x0B <= c <= 0x0C
        or 0x0E <= c <= 0x1F
        or c == 0x7F
    )


def is_alnum(c: int) -> bool:
    """ASCII letter or digit."""
    return 0x30 <= c <= 0x39 or 0x41 <= c <= 0x5A or 0x61 <= c <= 0x7A


def is_atom_text(c: int) -> bool:
    return is_alnum(c) or c in ATEXT_SPECIALS


def is_domain_text(c: int) -> bool:
    # Excludes "[", "\" and "]".
    return 0x21 <= c <= 0x5A or 0x5E <= c <= 0x7E or is_obs_no_ws_ctl(c)


def is_quoted_text(c: int) -> bool:
    # Excludes DQUOTE and "\".
    return (
        c == 0x21
        or 0x23 <= c <= 0x5B
        or 0x5D <= c <= 0x7E
        or is_obs_no_ws_ctl(c)
    )


def is_comment_text(c: int) -> bool:
    # Excludes "(", ")" and "\".
    return (
        0x21 <= c <= 0x27
        or 0x2A <= c <= 0x5B
        or 0x5D <= c <= 0x7E
        or is_obs_no_ws_ctl(c)
    )
