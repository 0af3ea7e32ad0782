#!/usr/bin/env python3
"""
influxroute - Production Entry Point
This is the canonical way to use influxroute programmatically

Also supports command-line usage:
    python influxroute.py 'SELECT * FROM "mydb"."autogen"."cpu"'
    python influxroute.py --interactive
    python influxroute.py --help
"""

from typing import Optional, Dict, Any, List, Tuple
import sys
import time
import argparse
import json
import logging
import threading

from core.classifier import classify_tokens
from core.lexer import InfluxQLLexer
from core.router import RoutingDecision, inspect_query
from config.router_config import RouterConfig, get_config

logger = logging.getLogger(__name__)

INFLUXROUTE_VERSION = "1.0.0"


class InfluxRoute:
    """
    Blessed API for influxroute

    Example:
        >>> from influxroute import InfluxRoute
        >>>
        >>> router = InfluxRoute()
        >>> decision = router.inspect('SELECT * FROM "mydb"."rp1"."cpu"')
        >>> decision.database, decision.retention_policy, decision.measurement
        ('mydb', 'rp1', 'cpu')
    """

    def __init__(self, config: Optional[RouterConfig] = None):
        """
        Initialize the router front end

        Args:
            config: Settings to use (default: the global configuration)
        """
        self.config = config if config is not None else get_config()
        self._lock = threading.Lock()
        self._start_time = time.time()
        self._inspected = 0
        self._routable = 0
        self._errors = 0

    def inspect(self, query: str) -> RoutingDecision:
        """
        Work out whether and where ``query`` can be routed

        Args:
            query: A single InfluxQL statement

        Returns:
            RoutingDecision with tokens, verdict and target identifiers
        """
        decision = inspect_query(query, self.config.max_query_length)
        with self._lock:
            self._inspected += 1
            if decision.routable:
                self._routable += 1
            if decision.error is not None:
                self._errors += 1
        return decision

    def tokenize(self, query: str) -> List[str]:
        """Split ``query`` into tokens, raising LexError on malformed input"""
        return InfluxQLLexer().tokenize(query)

    def classify(self, query: str) -> Tuple[List[str], bool, bool]:
        """Return (tokens, supported, needs_target), raising LexError on malformed input"""
        return classify_tokens(self.tokenize(query))

    def get_stats(self) -> Dict[str, Any]:
        """Counters since this instance was created"""
        with self._lock:
            return {
                'version': INFLUXROUTE_VERSION,
                'uptime_seconds': time.time() - self._start_time,
                'queries_inspected': self._inspected,
                'queries_routable': self._routable,
                'errors': self._errors,
            }


def _format_identifier(value: Optional[str]) -> str:
    if value is None:
        return "-"
    if value == "":
        return "(default)"
    return value


def format_decision(decision: RoutingDecision, show_tokens: bool = False) -> str:
    """Human readable rendering of a decision"""
    lines = []
    if show_tokens:
        lines.append(f"Tokens ({len(decision.tokens)}):")
        for token in decision.tokens:
            lines.append(f"  {token}")
    lines.append(f"Supported:        {'yes' if decision.supported else 'no'}")
    lines.append(f"Needs target:     {'yes' if decision.needs_target else 'no'}")
    if decision.needs_target:
        lines.append(f"Database:         {_format_identifier(decision.database)}")
        lines.append(f"Retention policy: {_format_identifier(decision.retention_policy)}")
        lines.append(f"Measurement:      {_format_identifier(decision.measurement)}")
    for name, message in decision.lookup_errors.items():
        lines.append(f"Lookup failed:    {name} ({message})")
    if decision.error:
        lines.append(f"Error:            {decision.error}")
    return '\n'.join(lines)


def _print_decision(decision: RoutingDecision, json_output: bool, show_tokens: bool):
    if json_output:
        print(json.dumps(decision.to_dict(), indent=2))
    else:
        print(format_decision(decision, show_tokens))


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface for influxroute."""
    parser = argparse.ArgumentParser(
        description='influxroute - InfluxQL routing inspector',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python influxroute.py 'SELECT * FROM mydb..cpu'
  python influxroute.py -t 'SHOW TAG KEYS FROM cpu'
  python influxroute.py -i  # Interactive mode
        """
    )

    parser.add_argument('query', nargs='?', help='Statement to inspect')

    # Output options
    parser.add_argument(
        '--json', '-j',
        action='store_true',
        help='Output the decision as JSON'
    )
    parser.add_argument(
        '--tokens', '-t',
        action='store_true',
        help='Also list the scanned tokens'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    # Mode options
    parser.add_argument(
        '--interactive', '-i',
        action='store_true',
        help='Start interactive REPL mode'
    )
    parser.add_argument(
        '--version',
        action='store_true',
        help='Show version'
    )

    args = parser.parse_args(argv)

    if args.version:
        print(f"influxroute {INFLUXROUTE_VERSION}")
        return 0

    config = get_config()
    level = 'DEBUG' if args.debug or config.debug_mode else config.log_level
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    router = InfluxRoute(config)

    if args.interactive:
        print(f"influxroute {INFLUXROUTE_VERSION} interactive mode")
        print("Type 'exit' to quit, 'help' for commands")
        print()

        json_output = args.json
        show_tokens = args.tokens

        while True:
            try:
                query = input("influxql> ").strip()
            except (EOFError, KeyboardInterrupt):
                print("\nGoodbye!")
                break

            if not query:
                continue
            command = query.lower()
            if command in ('exit', 'quit', 'q'):
                print("Goodbye!")
                break
            if command == 'help':
                print("Commands:")
                print("  .stats           - Show statistics")
                print("  .json on/off     - Toggle JSON output")
                print("  .tokens on/off   - Toggle token listing")
                print("  .config          - Show active configuration")
                print("  exit             - Exit interactive mode")
                continue
            if command in ('.json on', '.json off'):
                json_output = command.endswith('on')
                print(f"JSON output {'enabled' if json_output else 'disabled'}")
                continue
            if command in ('.tokens on', '.tokens off'):
                show_tokens = command.endswith('on')
                print(f"Token listing {'enabled' if show_tokens else 'disabled'}")
                continue
            if command == '.stats':
                print(json.dumps(router.get_stats(), indent=2, default=str))
                continue
            if command == '.config':
                print(json.dumps(config.get_safe_dict(), indent=2))
                continue

            _print_decision(router.inspect(query), json_output, show_tokens)
        return 0

    if not args.query:
        parser.print_help()
        return 0

    decision = router.inspect(args.query)
    _print_decision(decision, args.json, args.tokens)
    return 0 if decision.routable else 1


# Export public API
__all__ = ['InfluxRoute', 'RoutingDecision', 'format_decision', 'get_config', 'main',
           'INFLUXROUTE_VERSION']


if __name__ == '__main__':
    sys.exit(main())
