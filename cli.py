"""
Command line interface for ChainErr.

Examples
--------
Render a sample cause chain in every format::

    python cli.py demo

Inspect the configuration schema::

    python cli.py describe-config --section rendering
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from chainerr import ChainedError, extend_native_error, print_cause_chain, version
from chainerr.diagnostics.doctor import run_doctor
from chainerr.utils import config_reference
from chainerr.utils.profiles import list_profiles
from chainerr.utils.settings import configure


def build_demo_error() -> ChainedError:
    """Raise and wrap a root failure the way application code would."""
    try:
        try:
            raise RuntimeError("Root failure")
        except RuntimeError as inner:
            raise ChainedError("Wrapping error", {"cause": inner})
    except ChainedError as err:
        return err


def _version_command(_: argparse.Namespace) -> None:
    print(version())


def _demo_command(args: argparse.Namespace) -> None:
    if args.profile:
        configure(profile=args.profile)
    extend_native_error()
    err = build_demo_error()
    if args.json:
        print(json.dumps(err.to_json(), indent=2, default=str))
        return
    print(err.to_string())
    print()
    print(err.full_stack)
    print()
    print(json.dumps(err.to_json(), indent=2, default=str))
    print()
    print(print_cause_chain(err))


def _doctor_command(_: argparse.Namespace) -> None:
    results = run_doctor()
    for item in results:
        status = item.get("status", "unknown").upper()
        check = item.get("check", "")
        details = item.get("details")
        print(f"[{status}] {check}")
        if details:
            print(f"  {details}")


def _describe_config_command(args: argparse.Namespace) -> None:
    if args.key:
        print(config_reference.explain(args.key))
        return
    if args.markdown:
        print(config_reference.to_markdown(section=args.section))
        return
    print(json.dumps(config_reference.as_dict(section=args.section), indent=2))


def _generate_config_docs_command(args: argparse.Namespace) -> None:
    output = Path(args.output)
    path = config_reference.write_markdown(output)
    print(f"Configuration reference generated at {path.resolve()}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chainerr", description="ChainErr chained error toolkit CLI")
    subparsers = parser.add_subparsers(dest="command")

    profile_choices = sorted(list_profiles().keys())

    version_parser = subparsers.add_parser("version", help="Print the library version.")
    version_parser.set_defaults(func=_version_command)

    demo_parser = subparsers.add_parser("demo", help="Render a sample cause chain in every format.")
    demo_parser.add_argument("--profile", choices=profile_choices, help="Apply a configuration profile first.")
    demo_parser.add_argument("--json", action="store_true", help="Only print the JSON record.")
    demo_parser.set_defaults(func=_demo_command)

    doctor_parser = subparsers.add_parser("doctor", help="Run environment diagnostics.")
    doctor_parser.set_defaults(func=_doctor_command)

    describe_parser = subparsers.add_parser("describe-config", help="Display the ChainErr configuration schema.")
    describe_parser.add_argument("--section", help="Optional configuration section to filter.")
    describe_parser.add_argument("--markdown", action="store_true", help="Render the output as markdown.")
    describe_parser.add_argument("--key", help="Explain a single configuration key instead of listing the table.")
    describe_parser.set_defaults(func=_describe_config_command)

    config_doc_parser = subparsers.add_parser("generate-config-docs", help="Write CONFIG.md from the schema.")
    config_doc_parser.add_argument("--output", default="CONFIG.md", help="Destination markdown file (default: CONFIG.md).")
    config_doc_parser.set_defaults(func=_generate_config_docs_command)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        parser.print_help()
        return
    parsed = parser.parse_args(argv)
    if not hasattr(parsed, "func"):
        parser.print_help()
        return
    parsed.func(parsed)


if __name__ == "__main__":
    main()
