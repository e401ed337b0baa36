#!/usr/bin/env python3
"""
Command-line tool for running AlchemyLanguage calls.

Usage:
    alchemy-language language --text "Bonjour le monde"
    alchemy-language entities --url https://example.com/article --param maxRetrieve=10
    alchemy-language sentiment --text "..." --sentiment-type targeted --param targets="Apple|Google"
    alchemy-language text --html-file page.html --text-type title
    alchemy-language feeds

Environment Variables:
    ALCHEMY_API_KEY: AlchemyLanguage API key (required)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import httpx

from .app import AnalyzeRequest, run_operation
from .client import get_client, shutdown_client
from .endpoints import Operation, SentimentType, TextType
from .errors import AlchemyError

logger = logging.getLogger(__name__)


def parse_param_overrides(pairs: Optional[List[str]]) -> Dict[str, str]:
    """Turn ``key=value`` strings into an overrides mapping."""
    overrides: Dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid --param '{pair}', expected key=value")
        overrides[key.strip()] = value
    return overrides


def build_request(args: argparse.Namespace) -> AnalyzeRequest:
    html = Path(args.html_file).read_text(encoding="utf-8") if args.html_file else None
    return AnalyzeRequest(
        html=html,
        url=args.url,
        text=args.text,
        parameters=parse_param_overrides(args.param),
        sentiment_type=args.sentiment_type,
        text_type=args.text_type,
    )


async def cmd_run(args: argparse.Namespace) -> dict:
    """Run one call with the environment-configured client."""
    logger.debug("Running %s", args.operation)
    client = get_client()
    try:
        return await run_operation(client, Operation(args.operation), build_request(args))
    finally:
        await shutdown_client()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run AlchemyLanguage analysis calls from the command line"
    )
    parser.add_argument(
        "operation",
        choices=[operation.value for operation in Operation],
        help="Analysis call to run",
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--html-file", help="Path to an HTML file to analyse")
    source.add_argument("--url", help="URL the service should fetch")
    source.add_argument("--text", help="Plain text to analyse")

    parser.add_argument(
        "--param",
        action="append",
        metavar="KEY=VALUE",
        help="Override an optional setting (repeatable), e.g. --param maxRetrieve=10",
    )
    parser.add_argument(
        "--sentiment-type",
        choices=[t.value for t in SentimentType],
        default=SentimentType.NORMAL.value,
        help="Sentiment variant (default: normal)",
    )
    parser.add_argument(
        "--text-type",
        choices=[t.value for t in TextType],
        default=TextType.NORMAL.value,
        help="Text extraction variant (default: normal)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        result = asyncio.run(cmd_run(args))
    except (AlchemyError, ValueError, OSError, httpx.HTTPError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
