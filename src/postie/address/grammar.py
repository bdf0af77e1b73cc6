"""Recursive-descent parser for the RFC 5322 addr-spec grammar.

Implements the productions used by ``addr-spec`` including the obsolete
syntax (obs-no-ws-ctl, quoted-pairs of control characters)::

    addr-spec      = local-part "@" domain
    local-part     = dotted-atoms
    domain         = dotted-atoms / domain-literal
    dotted-atoms   = segment *("." segment)
    segment        = [CFWS] (atom / quoted-string) [CFWS]
    quoted-string  = DQUOTE *([FWS] qcontent) [FWS] DQUOTE
    domain-literal = [CFWS] "[" *([FWS] 1*dtext) [FWS] "]" [CFWS]
    CFWS           = *(comment / FWS)
    comment        = "(" *(1*ctext / quoted-pair / comment / FWS) ")"
    FWS            = 1*WSP [CRLF 1*WSP] / 1*(CRLF 1*WSP)

Every production takes a :class:`Cursor`, advances it past what it
matched and either returns the extracted content or raises
:class:`~postie.address.errors.GrammarError`.  Ordered choice and
optional productions restore the cursor before trying the next
alternative.  Whitespace and comments are discarded; quoted-pairs are
kept verbatim, backslash included.
"""

from __future__ import annotations

from typing import Callable, NoReturn, TypeVar

from postie.address.chars import (
    CR,
    LF,
    NUL,
    is_atom_text,
    is_comment_text,
    is_domain_text,
    is_obs_no_ws_ctl,
    is_quoted_text,
    is_vchar,
    is_wsp,
)
from postie.address.config import DEFAULT_SETTINGS, ParserSettings
from postie.address.errors import CommentTooDeepError, GrammarError

T = TypeVar("T")

AT = ord("@")
DOT = ord(".")
DQUOTE = ord('"')
LPAREN = ord("(")
RPAREN = ord(")")
LBRACKET = ord("[")
RBRACKET = ord("]")
BACKSLASH = ord("\\")

_NO_MATCH = object()


class Cursor:
    """Read position over an immutable byte string."""

    __slots__ = ("data", "pos", "settings")

    def __init__(
        self,
        data: bytes,
        pos: int = 0,
        settings: ParserSettings = DEFAULT_SETTINGS,
    ) -> None:
        self.data = data
        self.pos = pos
        self.settings = settings

    def peek(self) -> int | None:
        """Return the byte at the current position, or None at end of input."""
        if self.pos < len(self.data):
            return self.data[self.pos]
        return None

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.data)

    def fail(self, expected: str) -> NoReturn:
        raise GrammarError(expected, self.pos)

    def __repr__(self) -> str:
        return f"Cursor(pos={self.pos}, rest={self.data[self.pos:]!r})"


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


def optional(cur: Cursor, production: Callable[[Cursor], T], default=None):
    """Run *production*; on mismatch rewind and return *default*.

    :class:`CommentTooDeepError` is a limit violation rather than a
    mismatch and is never rewound.
    """
    start = cur.pos
    try:
        return production(cur)
    except CommentTooDeepError:
        raise
    except GrammarError:
        cur.pos = start
        return default


def matched(cur: Cursor, production: Callable[[Cursor], object]) -> bool:
    """Run *production* optionally and report whether it matched."""
    return optional(cur, production, _NO_MATCH) is not _NO_MATCH


def many(cur: Cursor, production: Callable[[Cursor], T]) -> list[T]:
    """Zero or more repetitions of *production*."""
    results: list[T] = []
    while True:
        start = cur.pos
        result = optional(cur, production, _NO_MATCH)
        if result is _NO_MATCH or cur.pos == start:
            return results
        results.append(result)


def sep_by1(
    cur: Cursor,
    production: Callable[[Cursor], T],
    separator: Callable[[Cursor], object],
) -> list[T]:
    """One or more *production* separated by *separator*.

    A separator that is not followed by another item is left unconsumed.
    """
    results = [production(cur)]
    while True:
        start = cur.pos
        try:
            separator(cur)
            results.append(production(cur))
        except CommentTooDeepError:
            raise
        except GrammarError:
            cur.pos = start
            return results


def choice(cur: Cursor, *alternatives: Callable[[Cursor], T], expected: str) -> T:
    """Ordered choice: the first alternative that matches wins."""
    start = cur.pos
    for alternative in alternatives:
        result = optional(cur, alternative, _NO_MATCH)
        if result is not _NO_MATCH:
            return result
    raise GrammarError(expected, start)


# ---------------------------------------------------------------------------
# Lexical primitives
# ---------------------------------------------------------------------------


def satisfy(cur: Cursor, predicate: Callable[[int], bool], expected: str) -> int:
    """Consume one byte matching *predicate* and return it."""
    c = cur.peek()
    if c is None or not predicate(c):
        cur.fail(expected)
    cur.pos += 1
    return c


def char(cur: Cursor, value: int) -> int:
    """Consume exactly the byte *value*."""
    return satisfy(cur, lambda c: c == value, repr(chr(value)))


def cr(cur: Cursor) -> int:
    return char(cur, CR)


def lf(cur: Cursor) -> int:
    return char(cur, LF)


def crlf(cur: Cursor) -> None:
    cr(cur)
    lf(cur)


def null_char(cur: Cursor) -> int:
    return char(cur, NUL)


def vchar(cur: Cursor) -> int:
    return satisfy(cur, is_vchar, "VCHAR")


def wsp(cur: Cursor) -> int:
    return satisfy(cur, is_wsp, "WSP")


def obs_no_ws_ctl(cur: Cursor) -> int:
    return satisfy(cur, is_obs_no_ws_ctl, "obs-NO-WS-CTL")


def take_while1(cur: Cursor, predicate: Callable[[int], bool], expected: str) -> bytes:
    """Consume the longest non-empty run of bytes matching *predicate*."""
    data = cur.data
    start = end = cur.pos
    while end < len(data) and predicate(data[end]):
        end += 1
    if end == start:
        cur.fail(expected)
    cur.pos = end
    return data[start:end]


def skip_while1(cur: Cursor, predicate: Callable[[int], bool], expected: str) -> None:
    take_while1(cur, predicate, expected)


# ---------------------------------------------------------------------------
# Folding whitespace and comments
# ---------------------------------------------------------------------------


def _wsp1(cur: Cursor) -> None:
    skip_while1(cur, is_wsp, "WSP")


def _crlf_wsp1(cur: Cursor) -> None:
    crlf(cur)
    _wsp1(cur)


def fws(cur: Cursor) -> None:
    """Folding whitespace.  Matches at least one byte, produces nothing."""
    c = cur.peek()
    if c is not None and is_wsp(c):
        _wsp1(cur)
        optional(cur, _crlf_wsp1)
        return
    _crlf_wsp1(cur)
    while matched(cur, _crlf_wsp1):
        pass


def _enter_comment(cur: Cursor, depth: int) -> int:
    start = cur.pos
    char(cur, LPAREN)
    limit = cur.settings.max_comment_depth
    if limit is not None and depth + 1 > limit:
        raise CommentTooDeepError(f"comment nesting of at most {limit}", start)
    return depth + 1


def comment(cur: Cursor) -> None:
    """A possibly nested comment, discarded.

    Nesting is tracked with a depth counter instead of recursion, so
    deeply nested input cannot exhaust the interpreter stack.  Any
    mismatch inside a nested comment fails the outermost one.
    """
    depth = _enter_comment(cur, 0)
    while depth:
        c = cur.peek()
        if c is None:
            cur.fail("')'")
        if is_comment_text(c):
            skip_while1(cur, is_comment_text, "ctext")
        elif c == BACKSLASH:
            quoted_pair(cur)
        elif c == LPAREN:
            depth = _enter_comment(cur, depth)
        elif c == RPAREN:
            char(cur, RPAREN)
            depth -= 1
        else:
            fws(cur)


def cfws(cur: Cursor) -> None:
    """Optional comments and folding whitespace.  Always succeeds."""
    while matched(cur, comment) or matched(cur, fws):
        pass


# ---------------------------------------------------------------------------
# Content-bearing productions
# ---------------------------------------------------------------------------


def quoted_pair(cur: Cursor) -> bytes:
    """A backslash escape, returned with the backslash preserved."""
    char(cur, BACKSLASH)
    c = choice(
        cur, vchar, wsp, lf, cr, obs_no_ws_ctl, null_char,
        expected="quoted-pair character",
    )
    return bytes((BACKSLASH, c))


def atom(cur: Cursor) -> bytes:
    return take_while1(cur, is_atom_text, "atom")


def _qtext(cur: Cursor) -> bytes:
    return take_while1(cur, is_quoted_text, "qtext")


def _quoted_content(cur: Cursor) -> bytes:
    optional(cur, fws)
    return choice(cur, _qtext, quoted_pair, expected="qcontent")


def quoted_string(cur: Cursor) -> bytes:
    """A quoted string, returned with its quotes and without its FWS."""
    char(cur, DQUOTE)
    parts = many(cur, _quoted_content)
    optional(cur, fws)
    char(cur, DQUOTE)
    return b'"' + b"".join(parts) + b'"'


def _dtext(cur: Cursor) -> bytes:
    optional(cur, fws)
    return take_while1(cur, is_domain_text, "dtext")


def domain_literal(cur: Cursor) -> bytes:
    """A bracketed domain literal, returned with its brackets and without FWS."""
    cfws(cur)
    char(cur, LBRACKET)
    parts = many(cur, _dtext)
    optional(cur, fws)
    char(cur, RBRACKET)
    cfws(cur)
    return b"[" + b"".join(parts) + b"]"


def _segment(cur: Cursor) -> bytes:
    cfws(cur)
    value = choice(cur, atom, quoted_string, expected="atom or quoted-string")
    cfws(cur)
    return value


def _dot(cur: Cursor) -> int:
    return char(cur, DOT)


def dotted_atoms(cur: Cursor) -> bytes:
    """Atoms or quoted strings joined by dots; CFWS around them is dropped."""
    return b".".join(sep_by1(cur, _segment, _dot))


# ---------------------------------------------------------------------------
# Grammar assembly
# ---------------------------------------------------------------------------


def local(cur: Cursor) -> bytes:
    return dotted_atoms(cur)


def domain(cur: Cursor) -> bytes:
    return choice(cur, dotted_atoms, domain_literal, expected="domain")


def addr_spec(cur: Cursor) -> tuple[bytes, bytes]:
    """Parse ``local-part "@" domain`` and return both parts.

    Input after the domain is left unconsumed.
    """
    local_part = local(cur)
    char(cur, AT)
    domain_part = domain(cur)
    return local_part, domain_part
