"""Command line interface for gamedat."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .api import (
    CreateOptions,
    create_archive,
    extract_archive,
    inspect_archive,
    list_entries,
)
from .config import load_pack_list
from .logging import configure_logging, step
from .packing.errors import GameDatError
from .reporting import (
    PlainReporter,
    REPORTERS,
    get_reporter,
    set_reporter,
    set_verbosity,
)


def _list_cmd(args: argparse.Namespace) -> int:
    entries = list_entries(args.archive)
    if args.json:
        print(json.dumps(entries, indent=2, ensure_ascii=False))
    else:
        for e in entries:
            print(f"{e['offset']:#010x} {e['size']:>10} {e['name']}")
    get_reporter().status(
        f"List summary: entries={len(entries)} archive={args.archive.name}"
    )
    return 0


def _extract_cmd(args: argparse.Namespace) -> int:
    step(f"extracting {args.archive}")
    extract_archive(args.archive, args.output_dir, args.names or None)
    return 0


def _create_cmd(args: argparse.Namespace) -> int:
    files = list(args.files)
    version = args.version
    if args.pack_list is not None:
        pack_list = load_pack_list(args.pack_list)
        files.extend(pack_list.files)
        if version is None:
            version = pack_list.version
    step(f"creating {args.output} ({len(files)} files)")
    create_archive(
        CreateOptions(output_path=args.output, files=files, version=version)
    )
    return 0


def _inspect_cmd(args: argparse.Namespace) -> int:
    info = inspect_archive(args.archive)
    # Finalize any progress UI before writing JSON to stdout
    get_reporter().flush()
    print(json.dumps(info, indent=2, sort_keys=True, ensure_ascii=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="gamedat", description="GAMEDAT PAC archive tool"
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=sorted(REPORTERS),
        default="plain",
        help="Select reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    ls = sub.add_parser("list", help="List archive entries")
    ls.add_argument("archive", type=Path)
    ls.add_argument("--json", action="store_true", help="Emit JSON listing")
    ls.set_defaults(func=_list_cmd)

    x = sub.add_parser("extract", help="Extract entries to a directory")
    x.add_argument("archive", type=Path)
    x.add_argument("output_dir", type=Path)
    x.add_argument("names", nargs="*", help="Entry names (default: all)")
    x.set_defaults(func=_extract_cmd)

    c = sub.add_parser("create", help="Create an archive from files")
    c.add_argument("output", type=Path)
    c.add_argument("files", nargs="*", type=Path)
    c.add_argument(
        "--version",
        type=int,
        choices=[1, 2],
        help="Archive version: 1 (16-byte names) or 2 (32-byte names)",
    )
    c.add_argument(
        "--list",
        dest="pack_list",
        type=Path,
        help="JSON/YAML pack list with 'files' (and optional 'version')",
    )
    c.set_defaults(func=_create_cmd)

    i = sub.add_parser("inspect", help="Dump header, layout and entries as JSON")
    i.add_argument("archive", type=Path)
    i.set_defaults(func=_inspect_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.reporter == "rich" and not sys.stderr.isatty():
        # Fallback quietly to plain if no TTY
        set_reporter(PlainReporter())
    else:
        set_reporter(REPORTERS[args.reporter]())
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    try:
        return args.func(args)
    except GameDatError as e:
        get_reporter().error(str(e), code=e.code, context=e.context or {})
        return 1
    finally:
        get_reporter().flush()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
