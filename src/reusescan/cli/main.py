# main.py
# SPDX-License-Identifier: MIT

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from ..core.config import ScanConfig, load_config_from_path
from ..core.control_file import read_control_file
from ..core.dep5 import Dep5
from ..core.log import configure_logging
from ..core.scanner import scan_directory
from ..sinks.sinks import FileResultJSONLSink, write_results_parquet


def _build_parser() -> argparse.ArgumentParser:
    """Build the top-level reusescan argument parser.

    Returns:
        argparse.ArgumentParser: Parser with the ``scan``, ``files`` and
        ``dep5`` subcommands.
    """
    parser = argparse.ArgumentParser(
        prog="reusescan",
        description="Resolve REUSE license and copyright information for a source tree.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help=(
            "Logging level (e.g., DEBUG, INFO, WARNING). Defaults to WARNING, "
            "or the config file's [logging] section when one is given."
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_p = subparsers.add_parser("scan", help="Print the combined licenses and copyrights of a tree.")
    scan_p.add_argument("root", help="Directory to scan.")
    scan_p.add_argument("-c", "--config", help="Path to config file (TOML or JSON).")
    scan_p.add_argument("--scope", help="Report only on this subdirectory of root.")
    scan_p.add_argument("--jsonl", type=Path, help="Also write per-file results as JSONL.")
    scan_p.add_argument("--parquet", type=Path, help="Also write per-file results as Parquet.")
    scan_p.add_argument("--max-workers", type=int, help="Override pipeline.max_workers.")

    files_p = subparsers.add_parser("files", help="Print per-file results of a tree as JSON.")
    files_p.add_argument("root", help="Directory to scan.")
    files_p.add_argument("-c", "--config", help="Path to config file (TOML or JSON).")
    files_p.add_argument("--max-workers", type=int, help="Override pipeline.max_workers.")

    dep5_p = subparsers.add_parser("dep5", help="Parse a dep5 file and print its entries.")
    dep5_p.add_argument("path", type=Path, help="Path to the dep5 file.")

    return parser


def _load_config(args: argparse.Namespace) -> ScanConfig:
    if getattr(args, "config", None):
        cfg = load_config_from_path(args.config)
        if args.log_level is None:
            cfg.logging.apply()
    else:
        cfg = ScanConfig()
    if getattr(args, "max_workers", None) is not None:
        cfg.pipeline.max_workers = int(args.max_workers)
    return cfg


def _cmd_scan(args: argparse.Namespace) -> int:
    cfg = _load_config(args)
    report = scan_directory(args.root, cfg)
    scoped = report.in_scope(args.scope)
    if args.jsonl:
        with FileResultJSONLSink(args.jsonl, root=report.root) as sink:
            sink.write_all(scoped)
    if args.parquet:
        write_results_parquet(scoped, args.parquet, root=report.root)
    combined = report.combined(args.scope)
    payload = {
        "root": str(report.root),
        "scope": args.scope or ".",
        "files": len(scoped),
        **combined.to_dict(),
    }
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


def _cmd_files(args: argparse.Namespace) -> int:
    cfg = _load_config(args)
    report = scan_directory(args.root, cfg)
    print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    return 0


def _cmd_dep5(args: argparse.Namespace) -> int:
    dep5 = Dep5.from_control_file(read_control_file(args.path))
    entries = [
        {
            "files": list(entry.patterns.patterns),
            "copyright": list(entry.copyright),
            "license": entry.license,
        }
        for entry in dep5
    ]
    print(json.dumps(entries, indent=2, ensure_ascii=False))
    return 0


def _dispatch(args: argparse.Namespace) -> int:
    """Run the selected subcommand and return its exit code."""
    configure_logging(level=args.log_level or "WARNING")
    cmd = args.command
    if cmd == "scan":
        return _cmd_scan(args)
    if cmd == "files":
        return _cmd_files(args)
    if cmd == "dep5":
        return _cmd_dep5(args)
    print(f"Unknown command: {cmd}", file=sys.stderr)
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the reusescan command-line interface.

    Args:
        argv (Sequence[str] | None): Optional list of argument strings to
            parse instead of ``sys.argv[1:]``. Primarily useful for tests.

    Returns:
        int: Process exit code, 0 on success and 1 on failure.
    """
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    try:
        return _dispatch(args)
    except Exception as exc:  # noqa: BLE001
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
