#!/usr/bin/env python3
"""
InfluxQL Statement Classifier

Decides from the head of a statement whether the router can handle it
(``supported``) and whether it has to look up a database/measurement before
routing (``needs_target``).
"""

import logging
from typing import List, Sequence, Tuple

from .lexer import head_statement, scan_tokens

logger = logging.getLogger(__name__)

# Statement heads the router knows how to dispatch.
SUPPORT_COMMANDS = frozenset({
    "show measurements",
    "show field keys",
    "show tag keys",
    "show tag values",
    "show databases",
    "delete from",
    "drop measurement",
})

# Supported heads that always carry a measurement argument.
TARGETED_COMMANDS = frozenset({
    "delete from",
    "drop measurement",
})

Classification = Tuple[List[str], bool, bool]

def _classify_select(tokens: Sequence[str]) -> Tuple[bool, bool]:
    for token in tokens[2:]:
        keyword = token.lower()
        if keyword == "into":
            return False, False
        if keyword == "from":
            return True, True
    return False, False

def classify_tokens(tokens: List[str]) -> Classification:
    """
    Classify an already tokenized statement.

    Returns:
        (tokens, supported, needs_target)
    """
    if not tokens:
        return tokens, False, False

    stmt = tokens[0].lower()
    if stmt == "select":
        supported, needs_target = _classify_select(tokens)
        return tokens, supported, needs_target

    if stmt == "show":
        for i in range(2, len(tokens)):
            if tokens[i].lower() == "from":
                # tolerate one qualifier (e.g. ON db) between the head and FROM
                supported = (head_statement(tokens, i) in SUPPORT_COMMANDS or
                             head_statement(tokens, i - 2) in SUPPORT_COMMANDS)
                return tokens, supported, True

    stmt2 = head_statement(tokens, 2)
    if stmt2 in SUPPORT_COMMANDS:
        return tokens, True, stmt2 in TARGETED_COMMANDS
    if head_statement(tokens, 3) in SUPPORT_COMMANDS:
        return tokens, True, False
    return tokens, False, False

def classify(query: str) -> Classification:
    """Tokenize and classify ``query``"""
    tokens, supported, needs_target = classify_tokens(scan_tokens(query))
    logger.debug(f"Classified '{head_statement(tokens, 3)}': "
                 f"supported={supported} needs_target={needs_target}")
    return tokens, supported, needs_target

def is_show_databases(tokens: Sequence[str]) -> bool:
    return bool(tokens) and head_statement(list(tokens), 2) == "show databases"

def is_select_or_show(tokens: Sequence[str]) -> bool:
    return bool(tokens) and tokens[0].lower() in ("select", "show")

def is_delete_or_drop_measurement(tokens: Sequence[str]) -> bool:
    """True for DELETE FROM / DROP MEASUREMENT statements that name a target"""
    if len(tokens) < 3:
        return False
    return head_statement(list(tokens), 2) in TARGETED_COMMANDS
