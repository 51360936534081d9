"""Command-line tool for JASN and JAML files.

Usage:
    jasn format config.jasn
    jasn format config.jaml --indent "    " -o out.jaml
    jasn format --compact < data.jasn
    jasn format config.jasn --check-format
    jasn check a.jasn b.jaml -v
"""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .block import parse_jaml
from .errors import JasnError
from .formatter import format_jaml, to_string_opts
from .options import BinaryEncoding, FormatOptions, QuoteStyle
from .parser import parse
from .value import Value

logger = logging.getLogger(__name__)

STDIN = "-"
SYNTAXES = ("jasn", "jaml")


def detect_syntax(path: str, override: str | None = None) -> str:
    """Pick the syntax from ``--syntax`` or the file suffix (JASN by default)."""
    if override:
        return override
    if path != STDIN and Path(path).suffix.lower() == ".jaml":
        return "jaml"
    return "jasn"


def read_source(path: str) -> str:
    if path == STDIN:
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def parse_source(text: str, syntax: str) -> Value:
    if syntax == "jaml":
        return parse_jaml(text)
    return parse(text)


def build_options(args: argparse.Namespace, syntax: str) -> FormatOptions:
    if args.compact:
        opts = FormatOptions.compact()
    elif syntax == "jaml":
        opts = FormatOptions.block()
    else:
        opts = FormatOptions.pretty()

    if args.indent is not None:
        opts = opts.with_indent(args.indent)
    if args.quotes:
        opts = opts.with_quote_style(QuoteStyle(args.quotes))
    if args.binary:
        opts = opts.with_binary_encoding(BinaryEncoding(args.binary))
    if args.no_trailing_commas:
        opts = opts.with_trailing_commas(False)
    if args.quote_keys:
        opts = opts.with_unquoted_keys(False)
    if args.no_sort_keys:
        opts = opts.with_sort_keys(False)
    if args.escape_unicode:
        opts = opts.with_escape_unicode(True)
    return opts


def render(value: Value, syntax: str, opts: FormatOptions) -> str:
    text = format_jaml(value, opts) if syntax == "jaml" else to_string_opts(value, opts)
    return text if text.endswith("\n") else text + "\n"


def cmd_format(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    syntax = detect_syntax(args.file, args.syntax)
    try:
        opts = build_options(args, syntax)
    except ValidationError as e:
        parser.error(str(e.errors()[0]["msg"]))

    name = "<stdin>" if args.file == STDIN else args.file
    try:
        source = read_source(args.file)
        value = parse_source(source, syntax)
    except (OSError, JasnError) as e:
        print(f"Error: {name}: {e}", file=sys.stderr)
        return 1

    output = render(value, syntax, opts)

    if args.check_format:
        if source.strip() != output.strip():
            print(f"{name} is not formatted correctly", file=sys.stderr)
            return 1
        return 0

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        logger.debug("wrote %s", args.output)
    else:
        sys.stdout.write(output)
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    files = args.files or [STDIN]
    failed = 0

    for path in files:
        syntax = detect_syntax(path, args.syntax)
        try:
            value = parse_source(read_source(path), syntax)
        except (OSError, JasnError) as e:
            failed += 1
            if not args.quiet:
                print(f"✗ {path}: {e}")
            continue

        if args.quiet:
            continue
        if path == STDIN:
            print(f"Valid {syntax.upper()}")
        else:
            print(f"✓ {path}")
        if args.verbose:
            print(to_string_opts(value, FormatOptions.pretty()))

    if len(files) > 1 and not args.quiet:
        print()
        if failed:
            print(f"{failed} of {len(files)} file(s) failed")
        else:
            print(f"All {len(files)} file(s) are valid")
    return 1 if failed else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jasn", description="Format and validate JASN and JAML files")
    commands = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--debug", action="store_true", help="Log library debug messages to stderr")

    fmt = commands.add_parser("format", aliases=["fmt"], parents=[common], help="Reformat a file")
    fmt.add_argument("file", nargs="?", default=STDIN, help="Input file (default: stdin)")
    fmt.add_argument("--output", "-o", help="Write to this file instead of stdout")
    fmt.add_argument("--syntax", choices=SYNTAXES, help="Input syntax (default: from suffix)")
    fmt.add_argument("--compact", action="store_true", help="Single-line output")
    fmt.add_argument("--indent", help="Indentation string (default: two spaces)")
    fmt.add_argument("--quotes", choices=[s.value for s in QuoteStyle])
    fmt.add_argument("--binary", choices=[e.value for e in BinaryEncoding])
    fmt.add_argument("--no-trailing-commas", action="store_true")
    fmt.add_argument("--quote-keys", action="store_true", help="Always quote map keys")
    fmt.add_argument("--no-sort-keys", action="store_true", help="Keep keys in source order")
    fmt.add_argument("--escape-unicode", action="store_true", help="Write non-ASCII as \\uXXXX")
    fmt.add_argument(
        "--check-format",
        action="store_true",
        help="Exit 1 if the file is not already formatted",
    )

    check = commands.add_parser("check", aliases=["chk"], parents=[common], help="Validate files")
    check.add_argument("files", nargs="*", help="Files to check (default: stdin)")
    check.add_argument("--syntax", choices=SYNTAXES, help="Input syntax (default: from suffix)")
    check.add_argument("--verbose", "-v", action="store_true", help="Print each parsed value")
    check.add_argument("--quiet", "-q", action="store_true", help="Only set the exit status")
    return parser


def log_level(args: argparse.Namespace) -> int:
    return logging.DEBUG if args.debug else logging.WARNING


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=log_level(args),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command in ("format", "fmt"):
        return cmd_format(args, parser)
    return cmd_check(args)


if __name__ == "__main__":
    sys.exit(main())
