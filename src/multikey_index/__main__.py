"""CLI entry point: python -m multikey_index <command>."""

from __future__ import annotations

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="multikey-index",
        description="Build a multi-key index from YAML and query it",
    )
    sub = parser.add_subparsers(dest="command")

    lk = sub.add_parser("lookup", help="Find the record owning a key")
    lk.add_argument("--config", required=True, help="Path to index config YAML")
    lk.add_argument("--records", required=True, help="Path to records YAML")
    lk.add_argument("key", help="Key to look up (any facet)")
    lk.add_argument("--json", action="store_true", default=False, help="Output as JSON")
    lk.add_argument(
        "--verbose", action="store_true", default=False, help="Log index events"
    )

    ins = sub.add_parser("inspect", help="Summarize facets and key collisions")
    ins.add_argument("--config", required=True, help="Path to index config YAML")
    ins.add_argument("--records", required=True, help="Path to records YAML")
    ins.add_argument("--json", action="store_true", default=False, help="Output as JSON")
    ins.add_argument(
        "--verbose", action="store_true", default=False, help="Log duplicate keys"
    )

    args = parser.parse_args(argv)

    if getattr(args, "verbose", False):
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "lookup":
        from multikey_index.cli.lookup import run_lookup
        run_lookup(args)
    elif args.command == "inspect":
        from multikey_index.cli.summary import run_inspect
        run_inspect(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
