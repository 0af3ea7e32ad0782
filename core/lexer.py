#!/usr/bin/env python3
"""
InfluxQL Lexical Scanner (Lexer)

This module splits raw InfluxQL text into the coarse tokens the router needs.
It does not classify tokens or build a syntax tree: each token is simply the
largest syntactic unit that can stand between two unescaped spaces.

The lexer is the first stage of query routing:
Raw Text → Lexer → Classifier → Extractor → Router

Token shapes, keyed on the first non-space character:
    "..." / '...'   quoted literal, returned unescaped (quotes kept)
    ( ... )         balanced parenthesis group (subqueries)
    [ ... ]         bracketed literal
    { ... }         braced literal
    . / ..          run of dots (db..measurement means the default policy)
    anything else   bare run up to the next space

Author: influxroute maintainers
Version: 1.0.0
"""

import logging
from typing import List, Optional, Tuple

from .errors import (
    LexError,
    UnclosedParenthesisError,
    UnmatchedQuoteError,
    WrongBackslashError,
)

# Configure logging
logger = logging.getLogger(__name__)

QUOTE_CHARS = ('"', "'")
ESCAPE_CHAR = '\\'
CLOSING_BRACKETS = {
    '[': ']',
    '{': '}',
}

def find_end_with_quote(data: str, start: int, endchar: str) -> Tuple[int, str]:
    """
    Scan a quoted literal that opens at ``data[start]``.

    Returns the index just past the closing quote and the unescaped literal,
    quotes included. Only the closing quote and the backslash itself may be
    escaped.

    Raises:
        WrongBackslashError: backslash followed by any other character
        UnmatchedQuoteError: the literal never closes
    """
    unquoted = [data[start]]
    end = start + 1
    while end < len(data):
        char = data[end]
        if char == endchar:
            unquoted.append(char)
            return end + 1, ''.join(unquoted)
        if char == ESCAPE_CHAR:
            if end + 1 >= len(data):
                raise UnmatchedQuoteError(start)
            following = data[end + 1]
            if following != endchar and following != ESCAPE_CHAR:
                raise WrongBackslashError(end)
            unquoted.append(following)
            end += 2
            continue
        unquoted.append(char)
        end += 1
    raise UnmatchedQuoteError(start)

def _skip_spaces(data: str, position: int) -> int:
    while position < len(data) and data[position] == ' ':
        position += 1
    return position

def _find_group_end(data: str, start: int) -> int:
    """Index just past the ``)`` that balances ``data[start]``"""
    depth = 0
    for index in range(start, len(data)):
        char = data[index]
        if char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
        if depth == 0:
            return index + 1
    raise UnclosedParenthesisError(start)

def _scan_at(data: str, position: int, at_eof: bool = True) -> Tuple[int, Optional[str]]:
    """
    Scan one token at or after ``position``.

    Returns the absolute end index and the token. ``(position, None)`` means
    there is nothing left but spaces, or (when ``at_eof`` is False) that a
    bare run touches the end of the buffer and more input is needed.
    """
    start = _skip_spaces(data, position)
    if start == len(data):
        return position, None

    char = data[start]
    if char in QUOTE_CHARS:
        return find_end_with_quote(data, start, char)

    if char == '(':
        end = _find_group_end(data, start)
    elif char in CLOSING_BRACKETS:
        close = data.find(CLOSING_BRACKETS[char], start)
        if close == -1:
            raise UnclosedParenthesisError(start)
        end = close + 1
    elif char == '.':
        end = start + 1
        while end < len(data) and data[end] == '.':
            end += 1
    else:
        space = data.find(' ', start)
        if space == -1:
            if not at_eof:
                return position, None
            end = len(data)
        else:
            end = space

    return end, data[start:end]

def scan_token(data: str, at_eof: bool = True) -> Tuple[int, Optional[str]]:
    """
    Scan the first token of ``data``.

    Returns ``(advance, token)`` where ``advance`` is the number of characters
    consumed. ``(0, None)`` means the buffer holds only spaces, or, when
    ``at_eof`` is False, that a bare token runs to the end of the buffer and
    more input is needed before it can be returned, even if it looks
    complete.

    Raises:
        LexError: on a malformed quoted literal or an unclosed group
    """
    if at_eof and not data:
        return 0, None
    return _scan_at(data, 0, at_eof)

def normalize_query(query: str) -> str:
    """Trim surrounding whitespace and trailing semicolons"""
    return query.strip().rstrip('; ')

class InfluxQLLexer:
    """
    InfluxQL Token Scanner

    Converts a single InfluxQL statement into an ordered list of string
    tokens. Scanning state lives on the instance, so use one lexer per
    thread (or the module-level helpers, which create their own).
    """

    def __init__(self):
        self.text = ""
        self.position = 0
        self.tokens: List[str] = []

    def tokenize(self, text: str, limit: int = 0) -> List[str]:
        """
        Main tokenization method

        Args:
            text: InfluxQL statement to tokenize
            limit: Stop after this many tokens when greater than zero

        Returns:
            List of tokens

        Raises:
            LexError: If the statement is malformed. ``error.tokens`` holds
                the tokens scanned before the failure.
        """
        self.text = normalize_query(text)
        self.position = 0
        self.tokens = []

        while self.position < len(self.text):
            try:
                end, token = _scan_at(self.text, self.position)
            except LexError as e:
                e.tokens = list(self.tokens)
                raise
            if token is None:
                break

            self.tokens.append(token)
            self.position = end
            if limit > 0 and len(self.tokens) == limit:
                break

        return list(self.tokens)

def scan_tokens(query: str, limit: int = 0) -> List[str]:
    """
    Tokenize ``query`` without raising.

    A malformed statement is logged and the tokens scanned so far are
    returned; callers must treat such a truncated sequence as unroutable.
    """
    try:
        return InfluxQLLexer().tokenize(query, limit)
    except LexError as e:
        logger.warning(f"scan token error: {e.message} at position {e.position}")
        return e.tokens

def head_statement(tokens: List[str], n: int) -> str:
    """Lowercase phrase made of the first ``n`` tokens (all of them if n is out of range)"""
    if n <= 0 or n > len(tokens):
        n = len(tokens)
    return ' '.join(tokens[:n]).lower()
