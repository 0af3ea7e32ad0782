#!/usr/bin/env python3
"""
influxroute Error Hierarchy
Canonical exception classes for the InfluxQL routing core.
"""

from enum import Enum
from typing import List, Optional

class ErrorCode(Enum):
    UNKNOWN = "UNKNOWN_ERROR"
    WRONG_BACKSLASH = "WRONG_BACKSLASH"
    UNMATCHED_QUOTE = "UNMATCHED_QUOTE"
    UNCLOSED_PARENTHESIS = "UNCLOSED_PARENTHESIS"
    ILLEGAL_QUERY = "ILLEGAL_QUERY"
    QUERY_TOO_LONG = "QUERY_TOO_LONG"

class InfluxRouteError(Exception):
    """Base class for all influxroute exceptions"""
    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

class LexError(InfluxRouteError):
    """Raised when a query cannot be split into tokens.

    ``tokens`` holds whatever was scanned before the failure so callers can
    still inspect the partial sequence.
    """
    def __init__(self, message: str, code: ErrorCode, position: int = None,
                 tokens: Optional[List[str]] = None):
        super().__init__(message, code, {'position': position})
        self.position = position
        self.tokens = tokens if tokens is not None else []

class WrongBackslashError(LexError):
    """A backslash inside a quoted literal escapes something other than the quote or a backslash"""
    def __init__(self, position: int = None, tokens: Optional[List[str]] = None):
        super().__init__("wrong backslash", ErrorCode.WRONG_BACKSLASH, position, tokens)

class UnmatchedQuoteError(LexError):
    """A quoted literal never closes"""
    def __init__(self, position: int = None, tokens: Optional[List[str]] = None):
        super().__init__("unmatched quote", ErrorCode.UNMATCHED_QUOTE, position, tokens)

class UnclosedParenthesisError(LexError):
    """A (, [ or { group never closes"""
    def __init__(self, position: int = None, tokens: Optional[List[str]] = None):
        super().__init__("unclosed parenthesis", ErrorCode.UNCLOSED_PARENTHESIS, position, tokens)

class IllegalQueryError(InfluxRouteError):
    """Raised when no anchor keyword is present for an identifier lookup"""
    def __init__(self, keywords: Optional[List[str]] = None):
        super().__init__("illegal InfluxQL", ErrorCode.ILLEGAL_QUERY,
                         {'keywords': list(keywords or [])})

class QueryTooLongError(InfluxRouteError):
    """Raised when a query exceeds the configured maximum length"""
    def __init__(self, length: int, max_length: int):
        super().__init__(f"query length {length} exceeds limit of {max_length}",
                         ErrorCode.QUERY_TOO_LONG,
                         {'length': length, 'max_length': max_length})
