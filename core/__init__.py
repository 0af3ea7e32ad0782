#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
influxroute Core Package Initialization
Exports all main components for clean imports

Author: influxroute maintainers
Version: 1.0.0
"""

from .errors import (
    ErrorCode,
    InfluxRouteError,
    LexError,
    WrongBackslashError,
    UnmatchedQuoteError,
    UnclosedParenthesisError,
    IllegalQueryError,
    QueryTooLongError,
)
from .lexer import InfluxQLLexer, scan_token, scan_tokens, find_end_with_quote, head_statement
from .extractor import (
    find_last_index_with_ident,
    get_identifier_from_tokens,
    get_database,
    get_retention_policy,
    get_measurement,
    get_database_from_tokens,
    get_retention_policy_from_tokens,
    get_measurement_from_tokens,
)
from .classifier import (
    SUPPORT_COMMANDS,
    classify,
    classify_tokens,
    is_show_databases,
    is_select_or_show,
    is_delete_or_drop_measurement,
)
from .router import RoutingDecision, inspect_query

# Export everything
__all__ = [
    # Lexer
    'InfluxQLLexer',
    'scan_token',
    'scan_tokens',
    'find_end_with_quote',
    'head_statement',

    # Identifier extraction
    'find_last_index_with_ident',
    'get_identifier_from_tokens',
    'get_database',
    'get_retention_policy',
    'get_measurement',
    'get_database_from_tokens',
    'get_retention_policy_from_tokens',
    'get_measurement_from_tokens',

    # Classification
    'SUPPORT_COMMANDS',
    'classify',
    'classify_tokens',
    'is_show_databases',
    'is_select_or_show',
    'is_delete_or_drop_measurement',

    # Routing
    'RoutingDecision',
    'inspect_query',

    # Errors
    'ErrorCode',
    'InfluxRouteError',
    'LexError',
    'WrongBackslashError',
    'UnmatchedQuoteError',
    'UnclosedParenthesisError',
    'IllegalQueryError',
    'QueryTooLongError',
]

# Version info
__version__ = '1.0.0'
__description__ = 'influxroute - InfluxQL statement introspection for sharding proxies'
