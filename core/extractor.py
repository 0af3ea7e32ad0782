#!/usr/bin/env python3
"""
InfluxQL Identifier Extractor

Finds the database, retention policy and measurement a statement targets so
the router can pick a backend without parsing the whole statement.

Each lookup scans the token list for an anchor keyword (ON, DATABASE, FROM,
MEASUREMENT) and derives the identifier from the tokens that follow it. The
compound form ``db.rp.measurement`` may arrive as one bare token
(``mydb.autogen.cpu``) or split by the lexer around quoted segments
(``"mydb" . "autogen" . "cpu"``). A parenthesized subquery in place of the
identifier is resolved recursively.

An empty string means "not given, use the default". A missing anchor raises
IllegalQueryError.
"""

import logging
from typing import Callable, List, Sequence

from .errors import IllegalQueryError
from .lexer import QUOTE_CHARS, ESCAPE_CHAR, scan_tokens

logger = logging.getLogger(__name__)

DATABASE_KEYWORDS = ("on", "database", "from")
RETENTION_POLICY_KEYWORDS = ("from",)
MEASUREMENT_KEYWORDS = ("from", "measurement")

SEPARATORS = (".", "..")

Deriver = Callable[[List[str], str], str]

def _is_quoted(m: str) -> bool:
    return m[:1] in QUOTE_CHARS

def _strip_quotes(m: str) -> str:
    return m[1:-1]

def _is_subquery(m: str) -> bool:
    return m.startswith("(") and m.lstrip("( ").lower().startswith("select")

def _subquery_body(m: str) -> str:
    if m.endswith(")"):
        return m[1:-1]
    return m[1:]

def find_last_index_with_ident(m: str) -> int:
    """
    Index of the separator in front of the last name component of ``m``.

    A quote-terminated string is scanned backwards to the quote that opens the
    final segment, skipping backslash-escaped quotes, and the index before that
    opening quote is returned. Otherwise the last ``.`` is used. Returns -1
    when there is no boundary.
    """
    if not m:
        return -1
    last = len(m) - 1
    quote = m[last]
    if quote not in QUOTE_CHARS:
        return m.rfind(".")

    escaped = False
    for i in range(last - 1, -1, -1):
        if escaped:
            escaped = False
            continue
        if m[i] == quote:
            if i > 0 and m[i - 1] == ESCAPE_CHAR:
                escaped = True
                continue
            return i - 1
    return -1

def get_database_from_segments(tokens: List[str], keyword: str) -> str:
    m = tokens[0]
    if m[0] == "(":
        return m
    if m[0] == "/":  # regex sources never name a database
        return ""

    if _is_quoted(m):
        # FROM "cpu" is a bare measurement, FROM "db".. or "db"."rp" names a database
        if keyword == "from" and (len(tokens) < 3 or tokens[1] not in SEPARATORS):
            return ""
        return _strip_quotes(m)

    index = m.find(".")
    if index == -1:
        return "" if keyword == "from" else m
    if index == len(m) - 1:
        return ""
    return m[:index]

def get_retention_policy_from_segments(tokens: List[str], keyword: str) -> str:
    if len(tokens) >= 3 and tokens[1] == "..":
        return ""

    if len(tokens) >= 5 and tokens[1] == "." and tokens[3] == ".":
        m = tokens[2]
        return _strip_quotes(m) if _is_quoted(m) else m
    if len(tokens) >= 3 and tokens[1] == ".":
        # rejoin a compound name the lexer split around a quoted segment
        m = "".join(tokens[:3])
    else:
        m = tokens[0]

    if m[0] == "(":
        return m
    if m[0] == "/":
        return ""

    index = m.find(".")
    if index == -1 or index == len(m) - 1:
        return ""
    last_index = find_last_index_with_ident(m)
    if last_index == -1:
        return ""

    if index == last_index:
        m = m[:index]
    elif index < last_index - 1:
        m = m[index + 1:last_index]
    else:
        return ""

    if _is_quoted(m):
        m = _strip_quotes(m)
    return m

def get_measurement_from_segments(tokens: List[str], keyword: str) -> str:
    if len(tokens) >= 3 and tokens[1] in SEPARATORS:
        if len(tokens) >= 5 and tokens[3] == ".":
            m = tokens[4]
        else:
            m = tokens[2]
    else:
        m = tokens[0]

    # subqueries and regex measurements are handed back untouched
    if m[0] in ("(", "/"):
        return m

    if _is_quoted(m):
        return _strip_quotes(m)

    index = find_last_index_with_ident(m)
    if index == -1:
        return m

    m = m[index + 1:]
    if _is_quoted(m):
        m = _strip_quotes(m).replace('\\"', '"')
    return m

def get_identifier_from_tokens(tokens: Sequence[str], keywords: Sequence[str],
                               derive: Deriver) -> str:
    """
    Derive an identifier from the tokens following the first anchor keyword.

    An anchor with nothing after it is skipped.

    Raises:
        IllegalQueryError: If no usable anchor keyword is present
    """
    for i, token in enumerate(tokens):
        keyword = token.lower()
        if keyword in keywords and i + 1 < len(tokens):
            return derive(list(tokens[i + 1:]), keyword)
    raise IllegalQueryError(keywords)

def _extract(tokens: Sequence[str], keywords: Sequence[str], derive: Deriver,
             kind: str) -> str:
    m = get_identifier_from_tokens(tokens, keywords, derive)
    if _is_subquery(m):
        logger.debug(f"Resolving {kind} from subquery")
        return _extract(scan_tokens(_subquery_body(m)), keywords, derive, kind)
    logger.debug(f"Extracted {kind}: '{m}'")
    return m

def get_database_from_tokens(tokens: Sequence[str]) -> str:
    return _extract(tokens, DATABASE_KEYWORDS, get_database_from_segments, "database")

def get_retention_policy_from_tokens(tokens: Sequence[str]) -> str:
    return _extract(tokens, RETENTION_POLICY_KEYWORDS,
                    get_retention_policy_from_segments, "retention policy")

def get_measurement_from_tokens(tokens: Sequence[str]) -> str:
    return _extract(tokens, MEASUREMENT_KEYWORDS, get_measurement_from_segments, "measurement")

def get_database(query: str) -> str:
    """Database named by ``query``; empty when the default applies"""
    return get_database_from_tokens(scan_tokens(query))

def get_retention_policy(query: str) -> str:
    """Retention policy named by ``query``; empty when the default applies"""
    return get_retention_policy_from_tokens(scan_tokens(query))

def get_measurement(query: str) -> str:
    """Measurement named by ``query``, or the regex literal when one is used"""
    return get_measurement_from_tokens(scan_tokens(query))
