"""Tests for postie.address.grammar module."""

from __future__ import annotations

import pytest

from postie.address.config import ParserSettings
from postie.address.errors import CommentTooDeepError, GrammarError
from postie.address.grammar import (
    Cursor,
    addr_spec,
    atom,
    cfws,
    char,
    choice,
    comment,
    crlf,
    domain,
    domain_literal,
    dotted_atoms,
    fws,
    many,
    null_char,
    obs_no_ws_ctl,
    optional,
    quoted_pair,
    quoted_string,
    vchar,
)


class TestLexicalPrimitives:
    def test_char_consumes_one_byte(self):
        cur = Cursor(b"@x")
        assert char(cur, ord("@")) == ord("@")
        assert cur.pos == 1

    def test_char_mismatch(self):
        with pytest.raises(GrammarError, match="expected '@' at offset 0"):
            char(Cursor(b"x"), ord("@"))

    def test_char_at_end_of_input(self):
        with pytest.raises(GrammarError):
            char(Cursor(b""), ord("."))

    def test_crlf(self):
        cur = Cursor(b"\r\n")
        crlf(cur)
        assert cur.pos == 2

    def test_bare_cr_is_not_crlf(self):
        with pytest.raises(GrammarError):
            crlf(Cursor(b"\rx"))

    def test_bare_lf_is_not_crlf(self):
        with pytest.raises(GrammarError):
            crlf(Cursor(b"\n"))

    def test_null_char(self):
        assert null_char(Cursor(b"\x00")) == 0

    def test_vchar(self):
        assert vchar(Cursor(b"~")) == 0x7E
        with pytest.raises(GrammarError):
            vchar(Cursor(b" "))

    def test_obs_no_ws_ctl(self):
        assert obs_no_ws_ctl(Cursor(b"\x7f")) == 0x7F
        with pytest.raises(GrammarError):
            obs_no_ws_ctl(Cursor(b"\t"))


class TestCombinators:
    def test_optional_rewinds_on_mismatch(self):
        cur = Cursor(b"\r\nx")
        assert optional(cur, fws) is None
        assert cur.pos == 0

    def test_many_stops_at_first_mismatch(self):
        cur = Cursor(b"aaab")
        assert many(cur, lambda c: char(c, ord("a"))) == [0x61, 0x61, 0x61]
        assert cur.pos == 3

    def test_choice_reports_start_position(self):
        cur = Cursor(b"xx(")
        cur.pos = 2
        with pytest.raises(GrammarError) as excinfo:
            choice(cur, atom, quoted_string, expected="word")
        assert excinfo.value.position == 2
        assert excinfo.value.expected == "word"
        assert cur.pos == 2


class TestFoldingWhitespace:
    def test_plain_whitespace(self):
        cur = Cursor(b"  \t x")
        fws(cur)
        assert cur.pos == 4

    def test_whitespace_then_fold(self):
        cur = Cursor(b" \r\n x")
        fws(cur)
        assert cur.pos == 4

    def test_leading_folds(self):
        cur = Cursor(b"\r\n \r\n\tx")
        fws(cur)
        assert cur.pos == 6

    def test_fold_without_continuation_is_left(self):
        cur = Cursor(b" \r\nx")
        fws(cur)
        assert cur.pos == 1

    def test_crlf_requires_following_whitespace(self):
        with pytest.raises(GrammarError):
            fws(Cursor(b"\r\nx"))

    def test_bare_lf_rejected(self):
        with pytest.raises(GrammarError):
            fws(Cursor(b"\n x"))

    def test_empty_rejected(self):
        with pytest.raises(GrammarError):
            fws(Cursor(b""))


class TestComment:
    def test_simple_comment(self):
        cur = Cursor(b"(hello world)rest")
        comment(cur)
        assert cur.pos == 13

    def test_nested_comment(self):
        cur = Cursor(b"(a(b(c))d)x")
        comment(cur)
        assert cur.pos == 10

    def test_escaped_paren(self):
        cur = Cursor(b"(a\\)b)x")
        comment(cur)
        assert cur.pos == 6

    def test_folded_comment(self):
        cur = Cursor(b"(a\r\n b)")
        comment(cur)
        assert cur.at_end

    def test_fold_without_whitespace_rejected(self):
        with pytest.raises(GrammarError):
            comment(Cursor(b"(a\r\nb)"))

    def test_unterminated(self):
        with pytest.raises(GrammarError):
            comment(Cursor(b"(abc"))

    def test_unterminated_nested(self):
        with pytest.raises(GrammarError):
            comment(Cursor(b"(a(b)"))

    def test_invalid_escape(self):
        with pytest.raises(GrammarError):
            comment(Cursor(b"(a\\\xffb)"))

    def test_deep_nesting_does_not_recurse(self):
        depth = 50_000
        cur = Cursor(b"(" * depth + b")" * depth)
        comment(cur)
        assert cur.at_end

    def test_depth_limit(self):
        cur = Cursor(b"((x))", settings=ParserSettings(max_comment_depth=1))
        with pytest.raises(CommentTooDeepError) as excinfo:
            comment(cur)
        assert excinfo.value.position == 1

    def test_depth_within_limit(self, shallow_settings):
        cur = Cursor(b"((x))", settings=shallow_settings)
        comment(cur)
        assert cur.at_end


class TestCfws:
    def test_mixed_comments_and_whitespace(self):
        cur = Cursor(b" (c) \r\n (d)x")
        cfws(cur)
        assert cur.pos == 11

    def test_always_succeeds(self):
        cur = Cursor(b"x")
        cfws(cur)
        assert cur.pos == 0

    def test_depth_limit_is_not_backtracked(self):
        cur = Cursor(b" ((x))", settings=ParserSettings(max_comment_depth=1))
        with pytest.raises(CommentTooDeepError):
            cfws(cur)


class TestQuotedPair:
    def test_escaped_quote_kept_verbatim(self):
        assert quoted_pair(Cursor(b'\\"')) == b'\\"'

    def test_escaped_null(self):
        assert quoted_pair(Cursor(b"\\\x00")) == b"\\\x00"

    def test_escaped_space(self):
        assert quoted_pair(Cursor(b"\\ ")) == b"\\ "

    def test_escaped_control(self):
        assert quoted_pair(Cursor(b"\\\x01")) == b"\\\x01"

    def test_high_byte_rejected(self):
        with pytest.raises(GrammarError):
            quoted_pair(Cursor(b"\\\x80"))

    def test_requires_backslash(self):
        with pytest.raises(GrammarError):
            quoted_pair(Cursor(b"x"))


class TestAtom:
    def test_stops_at_dot(self):
        cur = Cursor(b"abc.def")
        assert atom(cur) == b"abc"
        assert cur.pos == 3

    def test_empty_rejected(self):
        with pytest.raises(GrammarError):
            atom(Cursor(b".abc"))


class TestQuotedString:
    def test_interior_whitespace_removed(self):
        assert quoted_string(Cursor(b'"quoted local"')) == b'"quotedlocal"'

    def test_empty(self):
        assert quoted_string(Cursor(b'""')) == b'""'

    def test_quoted_pair_preserved(self):
        assert quoted_string(Cursor(b'"a\\"b"')) == b'"a\\"b"'

    def test_leading_and_trailing_whitespace(self):
        assert quoted_string(Cursor(b'" a "')) == b'"a"'

    def test_folded(self):
        assert quoted_string(Cursor(b'"a\r\n b"')) == b'"ab"'

    def test_at_sign_is_quoted_text(self):
        assert quoted_string(Cursor(b'"a@b"')) == b'"a@b"'

    def test_unterminated(self):
        with pytest.raises(GrammarError):
            quoted_string(Cursor(b'"abc'))


class TestDomainLiteral:
    def test_ipv4(self):
        assert domain_literal(Cursor(b"[192.168.0.1]")) == b"[192.168.0.1]"

    def test_surrounding_cfws_and_whitespace(self):
        cur = Cursor(b" (c) [ 10.0.0.1 ] (d)")
        assert domain_literal(cur) == b"[10.0.0.1]"
        assert cur.at_end

    def test_interior_whitespace_removed(self):
        assert domain_literal(Cursor(b"[a b]")) == b"[ab]"

    def test_empty(self):
        assert domain_literal(Cursor(b"[]")) == b"[]"

    def test_nested_bracket_rejected(self):
        with pytest.raises(GrammarError):
            domain_literal(Cursor(b"[a[b]"))

    def test_unterminated(self):
        with pytest.raises(GrammarError):
            domain_literal(Cursor(b"[unterminated"))


class TestDottedAtoms:
    def test_plain(self):
        assert dotted_atoms(Cursor(b"a.b.c")) == b"a.b.c"

    def test_cfws_around_dots_dropped(self):
        assert dotted_atoms(Cursor(b" a (x) . b ")) == b"a.b"

    def test_quoted_segment(self):
        assert dotted_atoms(Cursor(b'"x y".z')) == b'"xy".z'

    def test_trailing_dot_left_unconsumed(self):
        cur = Cursor(b"a.@")
        assert dotted_atoms(cur) == b"a"
        assert cur.pos == 1

    def test_leading_dot_rejected(self):
        with pytest.raises(GrammarError):
            dotted_atoms(Cursor(b".a"))


class TestDomain:
    def test_dotted(self):
        assert domain(Cursor(b"example.com")) == b"example.com"

    def test_literal_after_dotted_fails(self):
        assert domain(Cursor(b"[1.2.3.4]")) == b"[1.2.3.4]"

    def test_neither(self):
        with pytest.raises(GrammarError) as excinfo:
            domain(Cursor(b"@"))
        assert excinfo.value.expected == "domain"


class TestAddrSpec:
    def test_parts(self):
        cur = Cursor(b"user@example.com")
        assert addr_spec(cur) == (b"user", b"example.com")
        assert cur.at_end

    def test_trailing_input_left(self):
        cur = Cursor(b"user@example.com>")
        addr_spec(cur)
        assert cur.pos == 16

    def test_missing_at(self):
        with pytest.raises(GrammarError) as excinfo:
            addr_spec(Cursor(b"userexample.com"))
        assert excinfo.value.expected == "'@'"
