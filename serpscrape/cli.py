"""Command line entry point: run searches and inspect the tool schema."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from http.cookiejar import CookieJar
from pathlib import Path
from typing import Any

from loguru import logger

from serpscrape.config.loader import load_config
from serpscrape.config.schema import Config
from serpscrape.search import (
    HttpPageFetcher,
    SearchConfigError,
    SearchSettings,
    UserAgentProvider,
    build_home_url,
    lucky,
    search,
)
from serpscrape.tools.factory import build_tool_registry

EXIT_OK = 0
EXIT_NO_RESULTS = 1
EXIT_CONFIG_ERROR = 2


def _add_search_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("query")
    parser.add_argument("--tld", default=None)
    parser.add_argument("--lang", default=None)
    parser.add_argument("--tbs", default=None)
    parser.add_argument("--safe", choices=("on", "off"), default=None)
    parser.add_argument("--country", default=None)
    parser.add_argument("--pause", type=float, default=None, help="seconds to wait before each page")
    parser.add_argument("--user-agent", default=None)
    parser.add_argument("--param", action="append", default=[], metavar="KEY=VALUE",
                        help="extra GET parameter (repeatable)")
    parser.add_argument("--include-provider-links", action="store_true", default=None)
    parser.add_argument("--warm-up", action="store_true",
                        help="visit the provider home page first to collect cookies")
    parser.add_argument("--json", action="store_true", help="print results as JSON lines")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="serpscrape", description=__doc__)
    parser.add_argument("--config", default=None, help="path to config.json")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    search_parser = sub.add_parser("search", help="stream results for a query")
    _add_search_options(search_parser)
    search_parser.add_argument("--num", type=int, default=None)
    search_parser.add_argument("--start", type=int, default=None)
    search_parser.add_argument("--stop", type=int, default=None)

    lucky_parser = sub.add_parser("lucky", help="print the first result only")
    _add_search_options(lucky_parser)

    sub.add_parser("schema", help="print tool definitions")
    return parser


def _parse_params(pairs: list[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise SearchConfigError(f"--param expects KEY=VALUE, got {pair!r}")
        params[key] = value
    return params


def _settings_from_args(config: Config, args: argparse.Namespace) -> SearchSettings:
    overrides: dict[str, Any] = {
        "tld": args.tld,
        "lang": args.lang,
        "tbs": args.tbs,
        "safe": args.safe,
        "country": args.country,
        "pause": args.pause,
        "user_agent": args.user_agent,
        "include_provider_links": args.include_provider_links,
        "num": getattr(args, "num", None),
        "start": getattr(args, "start", None),
        "stop": getattr(args, "stop", None),
    }
    extra = _parse_params(args.param)
    if extra:
        overrides["extra_params"] = {**config.search.extra_params, **extra}
    return config.search.to_settings(**overrides)


def _print_item(index: int, item: Any, as_json: bool) -> None:
    if as_json:
        print(json.dumps(item.to_dict(), ensure_ascii=False))
    else:
        print(f"{index}. {item.title}\n   {item.link}")


async def _run_search(args: argparse.Namespace, settings: SearchSettings, user_agents: UserAgentProvider) -> int:
    fetcher = HttpPageFetcher(settings.cookie_jar, verify=settings.verify_ssl)
    if args.warm_up:
        await fetcher.warm_up(build_home_url(settings.tld), settings.user_agent or user_agents.next(), settings.timeout)

    if args.command == "lucky":
        item = await lucky(args.query, settings, fetcher=fetcher, user_agents=user_agents)
        if item is None:
            print(f"No lucky result found for {args.query!r}", file=sys.stderr)
            return EXIT_NO_RESULTS
        _print_item(1, item, args.json)
        return EXIT_OK

    count = 0
    async for item in search(args.query, settings, fetcher=fetcher, user_agents=user_agents):
        count += 1
        _print_item(count, item, args.json)
    logger.info("Standard search finished. Found {} results.", count)
    return EXIT_OK if count else EXIT_NO_RESULTS


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "WARNING")

    config = load_config(Path(args.config).expanduser() if args.config else None)

    if args.command == "schema":
        print(json.dumps(build_tool_registry(config).get_definitions(), indent=2, ensure_ascii=False))
        return EXIT_OK

    try:
        settings = _settings_from_args(config, args)
    except (SearchConfigError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    # One jar for warm-up and every page of this run.
    if settings.cookie_jar is None:
        settings = settings.replace(cookie_jar=CookieJar())

    user_agents = UserAgentProvider(config.search.user_agents_file or None)
    return asyncio.run(_run_search(args, settings, user_agents))


if __name__ == "__main__":
    raise SystemExit(main())
