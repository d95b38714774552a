import argparse
import json
import logging
import os
import sys
import time

from stylewalker.analyzer import analyze_many
from stylewalker.config import ALL_RULE_GROUPS, load_config, parse_groups
from stylewalker.engine_factory import build_rule_set
from stylewalker.errors import ConfigError, ParseSourceError
from stylewalker.loader import load_tree
from stylewalker.reporter import format_result, to_payload


logger = logging.getLogger("stylewalker")

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stylewalker",
        description="Check ESTree JSON or C/C++ sources against clean-code style rules.",
    )
    parser.add_argument("files", nargs="+", help="ESTree .json files or C/C++ sources")
    parser.add_argument("--config", default=None, help="Path to a JSON rule configuration")
    parser.add_argument(
        "--groups",
        default=None,
        help="Comma-separated rule groups to enable (" + ", ".join(sorted(ALL_RULE_GROUPS)) + ")",
    )
    parser.add_argument("--text", action="store_true", help="Print a text report instead of JSON")
    parser.add_argument("--jobs", type=int, default=None, help="Number of files analyzed in parallel")
    parser.add_argument(
        "--clang-arg",
        action="append",
        default=[],
        dest="clang_args",
        help="Extra argument passed to libclang (repeatable)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _configure_logging(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _error_payload(message):
    return {"ok": False, "error": message}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.jobs is not None and args.jobs < 1:
        parser.error("--jobs must be at least 1")

    try:
        config = load_config(args.config)
        groups = parse_groups(args.groups) if args.groups is not None else None
        rule_set = build_rule_set(config, groups)
    except ConfigError as exc:
        if args.text:
            print(f"Configuration error: {exc}", file=sys.stderr)
        else:
            print(json.dumps(_error_payload(str(exc))))
        return EXIT_USAGE

    selected_groups = sorted(groups if groups is not None else config.groups)
    overall_start = time.perf_counter()

    entries = []
    trees = []
    for filename in args.files:
        entry = {"file": os.path.basename(filename), "path": os.path.realpath(filename)}
        try:
            tree = load_tree(filename, clang_args=args.clang_args)
        except ParseSourceError as exc:
            logger.debug("Failed to load %s", filename, exc_info=True)
            entry.update({"ok": False, "error": f"Failed to parse {entry['file']}: {exc}"})
        else:
            entry.update({"ok": True, "error": None})
            trees.append(tree)
        entries.append(entry)

    results = iter(analyze_many(trees, rule_set, max_workers=args.jobs))
    exit_code = EXIT_OK
    for entry in entries:
        if not entry["ok"]:
            exit_code = EXIT_FINDINGS
            continue
        entry["result"] = next(results)
        if entry["result"].has_errors:
            exit_code = EXIT_FINDINGS

    if args.text:
        for idx, entry in enumerate(entries):
            if len(entries) > 1:
                print(f"=== {entry['file']} ===")
            if entry["ok"]:
                print(format_result(entry["result"]))
            else:
                print(entry["error"])
            if idx < len(entries) - 1:
                print()
        return exit_code

    payload_results = []
    for entry in entries:
        item = {key: value for key, value in entry.items() if key != "result"}
        if entry["ok"]:
            item.update(to_payload(entry["result"]))
        else:
            item.update({"findings": [], "summary": None})
        payload_results.append(item)

    total_ms = round((time.perf_counter() - overall_start) * 1000.0, 3)
    print(
        json.dumps(
            {
                "ok": True,
                "results": payload_results,
                "rule_groups": selected_groups,
                "rules": list(rule_set.ids),
                "timing_ms": {"total": total_ms},
            }
        )
    )
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
