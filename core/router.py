#!/usr/bin/env python3
"""
Routing Decision

Bundles everything the proxy needs to route one statement: the tokens, the
classifier verdict and, for targeted statements, the database / retention
policy / measurement triple. Failures are recorded on the decision instead of
raised so a caller can fall back to default routing or reject the query.

A statement-level failure (malformed text, query too long, no measurement
for a targeted statement) lands in ``error`` and makes the statement
unroutable. A failed database or retention policy lookup only lands in
``lookup_errors``: DROP MEASUREMENT cpu has no database in its text, and the
proxy takes that one from the request instead.
"""

import logging
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from .classifier import classify_tokens
from .errors import ErrorCode, InfluxRouteError, LexError, QueryTooLongError
from .extractor import (
    get_database_from_tokens,
    get_measurement_from_tokens,
    get_retention_policy_from_tokens,
)
from .lexer import InfluxQLLexer

logger = logging.getLogger(__name__)

@dataclass
class RoutingDecision:
    """Outcome of inspecting a single statement"""
    query: str
    tokens: List[str] = field(default_factory=list)
    supported: bool = False
    needs_target: bool = False
    database: Optional[str] = None
    retention_policy: Optional[str] = None
    measurement: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None
    lookup_errors: Dict[str, str] = field(default_factory=dict)

    @property
    def routable(self) -> bool:
        """Supported and understood well enough to route on the fast path"""
        return self.supported and self.error is None

    def record_error(self, error: InfluxRouteError) -> None:
        self.error = error.message
        self.error_code = error.code

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result['error_code'] = self.error_code.value if self.error_code else None
        result['routable'] = self.routable
        return result

_TARGET_LOOKUPS = (
    ('database', get_database_from_tokens),
    ('retention_policy', get_retention_policy_from_tokens),
    ('measurement', get_measurement_from_tokens),
)

def inspect_query(query: str, max_length: int = 0) -> RoutingDecision:
    """
    Tokenize, classify and, when required, extract the routing target.

    Args:
        query: A single InfluxQL statement
        max_length: Refuse longer queries when greater than zero

    Returns:
        RoutingDecision describing the statement
    """
    decision = RoutingDecision(query=query)

    if max_length > 0 and len(query) > max_length:
        error = QueryTooLongError(len(query), max_length)
        logger.warning(error.message)
        decision.record_error(error)
        return decision

    try:
        tokens = InfluxQLLexer().tokenize(query)
    except LexError as e:
        logger.warning(f"scan token error: {e.message} at position {e.position}")
        decision.tokens = e.tokens
        decision.record_error(e)
        return decision

    decision.tokens, decision.supported, decision.needs_target = classify_tokens(tokens)
    if not decision.needs_target:
        return decision

    for name, lookup in _TARGET_LOOKUPS:
        try:
            setattr(decision, name, lookup(tokens))
        except InfluxRouteError as e:
            logger.debug(f"{name} lookup failed: {e.message}")
            decision.lookup_errors[name] = e.message
            # the measurement is the shard key; without it there is no fast path
            if name == 'measurement':
                decision.record_error(e)

    return decision
