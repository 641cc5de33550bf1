import argparse
import json
import os
import sys
from typing import Any, Optional, Sequence

from suffixguard.config import Settings, load_config
from suffixguard.log import configure_logging
from suffixguard.registry_fetcher import FetchError, fetch_rules
from suffixguard.rules_io import export_rules
from suffixguard.suffix_list import PublicSuffixList


def _print_json(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=True))
    sys.stdout.write("\n")


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = load_config(args.config)
    overrides = {}
    if args.source:
        overrides["source"] = args.source
    if args.rules_file:
        overrides["rules_path"] = args.rules_file
        overrides.setdefault("source", "file")
    if args.log_level:
        overrides["log_level"] = args.log_level
    if overrides:
        settings = Settings(**{**settings.model_dump(), **overrides})
    return settings


def check(suffix_list: PublicSuffixList, hosts: Sequence[str]) -> int:
    for host in hosts:
        _print_json({"host": host, "unrestricted": suffix_list.is_unrestricted(host)})
    return 0


def show_match(suffix_list: PublicSuffixList, host: str) -> int:
    result = suffix_list.match(host)
    if result is None:
        _print_json({"status": "no_match", "host": host})
        return 1
    payload = result.model_dump()
    payload["host"] = host
    _print_json(payload)
    return 0


def update(settings: Settings, output: str, url: Optional[str] = None) -> int:
    try:
        rules = fetch_rules(url or settings.registry.url, settings.registry.timeout_s)
        export_rules(rules, output)
    except (FetchError, OSError) as exc:
        _print_json({"status": "error", "error": str(exc)})
        return 1
    _print_json({"status": "ok", "rules": len(rules), "output": output})
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="suffixctl")
    parser.add_argument(
        "--config",
        default=os.getenv("SUFFIXGUARD_CONFIG"),
        help="Path to a YAML settings file",
    )
    parser.add_argument(
        "--source",
        choices=["embedded", "file", "online_registry"],
        help="Where to load rules from",
    )
    parser.add_argument("--rules-file", help="JSON rule file to load")
    parser.add_argument("--log-level", help="Logging level, e.g. INFO")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Report whether hosts are unrestricted")
    check_parser.add_argument("hosts", nargs="+")
    match_parser = subparsers.add_parser("match", help="Show the rules matching a host")
    match_parser.add_argument("host")
    update_parser = subparsers.add_parser(
        "update", help="Download the online registry into a JSON rule file"
    )
    update_parser.add_argument("--output", required=True, help="Destination JSON file")
    update_parser.add_argument("--url", help="Registry URL to download")

    args = parser.parse_args(argv)
    try:
        settings = _settings_from_args(args)
    except Exception as exc:
        _print_json({"status": "error", "error": f"Invalid config: {exc}"})
        raise SystemExit(1)
    configure_logging(settings.log_level)

    if args.command == "update":
        raise SystemExit(update(settings, args.output, args.url))

    try:
        suffix_list = PublicSuffixList.from_source(settings.rule_source())
    except ValueError as exc:
        _print_json({"status": "error", "error": str(exc)})
        raise SystemExit(1)
    if args.command == "check":
        raise SystemExit(check(suffix_list, args.hosts))
    raise SystemExit(show_match(suffix_list, args.host))


if __name__ == "__main__":
    main()
