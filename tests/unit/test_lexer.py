#!/usr/bin/env python3
"""
InfluxQL Lexer Unit Tests
"""

import logging

import pytest

from core.errors import (
    ErrorCode,
    LexError,
    UnclosedParenthesisError,
    UnmatchedQuoteError,
    WrongBackslashError,
)
from core.lexer import (
    InfluxQLLexer,
    find_end_with_quote,
    head_statement,
    normalize_query,
    scan_token,
    scan_tokens,
)

@pytest.mark.unit
class TestFindEndWithQuote:
    """Quoted literal scanning"""

    def test_simple_literal(self):
        assert find_end_with_quote('"abc" rest', 0, '"') == (5, '"abc"')

    def test_starts_mid_string(self):
        assert find_end_with_quote("x 'abc'", 2, "'") == (7, "'abc'")

    def test_escaped_quote_is_unescaped(self):
        end, unquoted = find_end_with_quote(r'"a\"b"', 0, '"')
        assert end == 6
        assert unquoted == '"a"b"'

    def test_escaped_backslash_is_unescaped(self):
        assert find_end_with_quote(r'"a\\b"', 0, '"') == (6, '"a\\b"')

    def test_other_quote_needs_no_escape(self):
        assert find_end_with_quote('"it\'s"', 0, '"') == (6, '"it\'s"')

    @pytest.mark.parametrize("raw", [
        r'"a\"b"',
        r"'it\'s'",
        r'"a\\b"',
        r'"x\\\"y\\"',
        '\'say "hi" \\\\ done\'',
    ])
    def test_reescaping_restores_input(self, raw):
        quote = raw[0]
        end, unquoted = find_end_with_quote(raw, 0, quote)
        assert end == len(raw)
        content = unquoted[1:-1]
        reescaped = content.replace('\\', '\\\\').replace(quote, '\\' + quote)
        assert reescaped == raw[1:-1]

    def test_wrong_backslash(self):
        with pytest.raises(WrongBackslashError) as exc_info:
            find_end_with_quote(r'"a\nb"', 0, '"')
        assert exc_info.value.code == ErrorCode.WRONG_BACKSLASH
        assert exc_info.value.position == 2

    def test_unmatched_quote(self):
        with pytest.raises(UnmatchedQuoteError):
            find_end_with_quote('"abc', 0, '"')

    def test_trailing_backslash_is_unmatched(self):
        with pytest.raises(UnmatchedQuoteError):
            find_end_with_quote('"abc\\', 0, '"')

@pytest.mark.unit
class TestScanToken:
    """Single token scanning"""

    def test_empty_input(self):
        assert scan_token("") == (0, None)

    def test_only_spaces(self):
        assert scan_token("    ") == (0, None)

    def test_skips_leading_spaces(self):
        assert scan_token("  foo bar") == (5, "foo")

    def test_bare_run_to_end(self):
        assert scan_token("foo") == (3, "foo")

    def test_bare_run_needs_more_input(self):
        assert scan_token("foo", at_eof=False) == (0, None)
        assert scan_token("foo bar", at_eof=False) == (3, "foo")

    def test_last_bare_token_waits_for_eof(self):
        assert scan_token(" bar", at_eof=False) == (0, None)
        assert scan_token(" bar", at_eof=True) == (4, "bar")
        # delimited tokens are complete without more input
        assert scan_token(" 'bar'", at_eof=False) == (6, "'bar'")

    def test_quoted_token(self):
        assert scan_token(" 'a b' c") == (6, "'a b'")

    def test_parenthesis_group(self):
        assert scan_token("(a (b) c) d") == (9, "(a (b) c)")

    def test_bracket_literal(self):
        assert scan_token("[a b] c") == (5, "[a b]")

    def test_brace_literal(self):
        assert scan_token("{a b} c") == (5, "{a b}")

    def test_dot_run(self):
        assert scan_token('.."cpu"') == (2, "..")

    @pytest.mark.parametrize("data", ["(a (b)", "[a b", "{a b"])
    def test_unclosed_groups(self, data):
        with pytest.raises(UnclosedParenthesisError):
            scan_token(data)

@pytest.mark.unit
class TestInfluxQLLexer:
    """Full statement tokenization"""

    def setup_method(self):
        self.lexer = InfluxQLLexer()

    def test_simple_select(self):
        assert self.lexer.tokenize("SELECT * FROM cpu") == ["SELECT", "*", "FROM", "cpu"]

    def test_collapses_spacing_and_trailing_semicolon(self):
        tokens = self.lexer.tokenize("  SELECT   *  FROM   cpu ;; ")
        assert tokens == ["SELECT", "*", "FROM", "cpu"]

    def test_empty_statement(self):
        assert self.lexer.tokenize("") == []
        assert self.lexer.tokenize("   ") == []

    def test_quoted_triple_is_split_on_dots(self):
        tokens = self.lexer.tokenize('SELECT * FROM "mydb"."rp1"."cpu"')
        assert tokens == ["SELECT", "*", "FROM", '"mydb"', ".", '"rp1"', ".", '"cpu"']

    def test_default_retention_policy_shorthand(self):
        assert self.lexer.tokenize("SELECT * FROM mydb..cpu")[3] == "mydb..cpu"
        tokens = self.lexer.tokenize('SELECT * FROM "mydb".."cpu"')
        assert tokens[3:] == ['"mydb"', "..", '"cpu"']

    def test_escaped_quote_stays_one_token(self):
        tokens = self.lexer.tokenize(r'SELECT * FROM "a\"b"')
        assert tokens[3] == '"a"b"'

    def test_nested_subquery_is_one_token(self):
        query = "SELECT max(m) FROM (SELECT mean(v) AS m FROM (SELECT * FROM cpu)) WHERE x = 1"
        tokens = self.lexer.tokenize(query)
        assert tokens == [
            "SELECT", "max(m)", "FROM",
            "(SELECT mean(v) AS m FROM (SELECT * FROM cpu))",
            "WHERE", "x", "=", "1",
        ]

    def test_limit(self):
        assert self.lexer.tokenize("SHOW TAG KEYS FROM cpu", limit=2) == ["SHOW", "TAG"]

    def test_unclosed_parenthesis_keeps_partial_tokens(self):
        with pytest.raises(UnclosedParenthesisError) as exc_info:
            self.lexer.tokenize("SELECT * FROM (select 1")
        assert exc_info.value.tokens == ["SELECT", "*", "FROM"]
        assert exc_info.value.position == 14

    def test_wrong_backslash_keeps_partial_tokens(self):
        with pytest.raises(LexError) as exc_info:
            self.lexer.tokenize(r'SELECT * FROM "a\nb"')
        assert exc_info.value.code == ErrorCode.WRONG_BACKSLASH
        assert exc_info.value.tokens == ["SELECT", "*", "FROM"]

    def test_retokenizing_joined_tokens_is_stable(self):
        query = ('SELECT  mean("value")   FROM  "mydb"."rp"."cpu"  '
                 'WHERE time > now() - 1h GROUP BY time(1m)')
        tokens = self.lexer.tokenize(query)
        assert self.lexer.tokenize(" ".join(tokens)) == tokens

    def test_lexer_is_reusable(self):
        self.lexer.tokenize("SELECT * FROM cpu")
        assert self.lexer.tokenize("SHOW DATABASES") == ["SHOW", "DATABASES"]

@pytest.mark.unit
class TestScanTokens:
    """Lenient tokenization helpers"""

    def test_returns_tokens(self):
        assert scan_tokens("DROP MEASUREMENT cpu") == ["DROP", "MEASUREMENT", "cpu"]

    def test_limit(self):
        assert scan_tokens("SELECT * FROM cpu", 3) == ["SELECT", "*", "FROM"]

    def test_malformed_query_returns_partial_sequence(self, caplog):
        with caplog.at_level(logging.WARNING, logger="core.lexer"):
            tokens = scan_tokens('SELECT * FROM "cpu')
        assert tokens == ["SELECT", "*", "FROM"]
        assert "unmatched quote" in caplog.text

    def test_normalize_query(self):
        assert normalize_query("\n SHOW DATABASES; ") == "SHOW DATABASES"

@pytest.mark.unit
class TestHeadStatement:
    """Head phrase helper"""

    def test_lowercases_prefix(self):
        assert head_statement(["SHOW", "TAG", "KEYS"], 2) == "show tag"

    @pytest.mark.parametrize("n", [0, -1, 3, 10])
    def test_out_of_range_uses_all_tokens(self, n):
        assert head_statement(["SHOW", "TAG", "KEYS"], n) == "show tag keys"

    def test_empty(self):
        assert head_statement([], 2) == ""
