import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from hilbert.check import check_theory
from hilbert.config import Settings, configure_logging
from hilbert.library import PROP_MM0
from hilbert.load import load_proofs, load_theory
from hilbert.render import render_theory
from hilbert.report import (
    check_report_json,
    format_check_report,
    format_verify_report,
    verify_report_json,
)
from hilbert.result import Err, Ok, Result
from hilbert.serialization import dumps, loads
from hilbert.theory import Theory
from hilbert.verify import verify_theory


def positive_int(text: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{text}'") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{text}'")
    return value


def _load(path: str) -> Result[Theory, Exception]:
    """Load a declaration file, or a theory previously written by ``dump``."""
    if path.endswith(".json"):
        try:
            return Ok(loads(Path(path).read_text(encoding="utf-8")))
        except (OSError, ValueError, KeyError, TypeError) as e:
            return Err(e)
    return load_theory(path)


def handle_check(path: str, *, as_json: bool) -> int:
    match _load(path):
        case Ok(theory):
            pass
        case Err(e):
            print(f"Error loading {path}: {e}", file=sys.stderr)
            return 1

    result = check_theory(theory)
    if as_json:
        print(json.dumps(check_report_json(theory, result), indent=2))
    else:
        print(format_check_report(theory, result))
    return 0 if result.is_well_formed else 1


def handle_verify(
    path: str, proofs_path: str | None, *, as_json: bool, max_depth: int
) -> int:
    match _load(path):
        case Ok(theory):
            pass
        case Err(e):
            print(f"Error loading {path}: {e}", file=sys.stderr)
            return 1

    proofs_path = proofs_path or str(Path(path).with_suffix(".mmp"))
    match load_proofs(proofs_path, theory, max_depth=max_depth):
        case Ok(proofs):
            pass
        case Err(e):
            print(f"Error loading {proofs_path}: {e}", file=sys.stderr)
            return 1

    checked = check_theory(theory)
    if not checked.is_well_formed:
        print(format_check_report(theory, checked), file=sys.stderr)
        return 1

    result = verify_theory(theory, proofs, max_depth=max_depth)
    if as_json:
        print(json.dumps(verify_report_json(result), indent=2))
    else:
        print(format_verify_report(result))
    return 0 if result.all_verified else 1


def handle_render(path: str) -> int:
    match _load(path):
        case Ok(theory):
            sys.stdout.write(render_theory(theory))
            return 0
        case Err(e):
            print(f"Error loading {path}: {e}", file=sys.stderr)
            return 1


def handle_dump(path: str) -> int:
    match _load(path):
        case Ok(theory):
            print(dumps(theory))
            return 0
        case Err(e):
            print(f"Error loading {path}: {e}", file=sys.stderr)
            return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hilbert",
        description="Parse, check and verify MM0-style theories and Hilbert-style proofs",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    file_help = "Declaration file (.mm0) or dumped theory (.json). Default: the bundled prop.mm0."

    # Command: check
    check_parser = subparsers.add_parser(
        "check", help="Check that a theory is well-formed."
    )
    check_parser.add_argument("file", nargs="?", default=str(PROP_MM0), help=file_help)
    check_parser.add_argument(
        "--json", action="store_true", default=False, help="Print a JSON report."
    )

    # Command: verify
    verify_parser = subparsers.add_parser(
        "verify", help="Verify the proofs of every theorem in a theory."
    )
    verify_parser.add_argument("file", nargs="?", default=str(PROP_MM0), help=file_help)
    verify_parser.add_argument(
        "--proofs",
        metavar="FILE",
        help="Proof file (.mmp). Default: FILE with the .mmp suffix.",
    )
    verify_parser.add_argument(
        "--json", action="store_true", default=False, help="Print a JSON report."
    )
    verify_parser.add_argument(
        "--max-depth",
        type=positive_int,
        metavar="N",
        help="Maximum proof nesting depth (default: HILBERT_MAX_PROOF_DEPTH).",
    )

    # Command: render
    render_parser = subparsers.add_parser(
        "render", help="Print a theory in declaration syntax."
    )
    render_parser.add_argument("file", nargs="?", default=str(PROP_MM0), help=file_help)

    # Command: dump
    dump_parser = subparsers.add_parser("dump", help="Print a theory as JSON.")
    dump_parser.add_argument("file", nargs="?", default=str(PROP_MM0), help=file_help)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the console script."""
    match Settings.from_env():
        case Ok(settings):
            pass
        case Err(e):
            print(f"Invalid configuration: {e}", file=sys.stderr)
            return 1
    configure_logging(settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        match args.command:
            case "check":
                return handle_check(args.file, as_json=args.json)
            case "verify":
                return handle_verify(
                    args.file,
                    args.proofs,
                    as_json=args.json,
                    max_depth=(
                        args.max_depth
                        if args.max_depth is not None
                        else settings.max_proof_depth
                    ),
                )
            case "render":
                return handle_render(args.file)
            case "dump":
                return handle_dump(args.file)
            case None:
                parser.print_help()
                return 1
            case _:
                print(f"Unknown command: {args.command}", file=sys.stderr)
                parser.print_help()
                return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
