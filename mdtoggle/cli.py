import argparse
import json
import sys
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import structlog

from mdtoggle import __version__
from mdtoggle.buffer import TextBuffer
from mdtoggle.engine import FormatEngine
from mdtoggle.exceptions import InvalidFormat
from mdtoggle.formats import FORMATS
from mdtoggle.log_config import configure_logging

logger = structlog.get_logger(__name__)


def _parse_range(value: str) -> Tuple[int, int]:
    """'6:11' selects [6, 11); a single offset '6' is a caret."""
    try:
        if ":" in value:
            start, end = value.split(":", 1)
            return int(start), int(end)
        caret = int(value)
        return caret, caret
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid range {value!r}, expected START:END") from None


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()

    path = Path(source)
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _load_buffer(args: argparse.Namespace) -> TextBuffer:
    text = _read_input(args.input)
    buffer = TextBuffer(text)
    if args.range is None:
        buffer.select_all()
    else:
        buffer.set_selection(*args.range)
    return buffer


def _emit(args: argparse.Namespace, buffer: TextBuffer):
    start, end = buffer.get_selection()

    if args.json:
        output = json.dumps({"text": buffer.get_text(), "selection": [start, end]}, indent=2)
    else:
        output = buffer.get_text()

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        print(f"✅ Saved to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(output)
        if args.json:
            sys.stdout.write("\n")

    print(f"Selection: [{start}, {end}]", file=sys.stderr)


def _run(args: argparse.Namespace, action: Callable[[FormatEngine], object]):
    buffer = _load_buffer(args)
    action(FormatEngine(buffer))
    if not buffer.can_undo:
        print(f"⚠️  Selection does not carry format '{args.format}', nothing changed.", file=sys.stderr)
    _emit(args, buffer)


def handle_formats(args: argparse.Namespace):
    for name, fmt in FORMATS.items():
        flags = [flag for flag in ("multiline", "block") if getattr(fmt, flag)]
        prefix = fmt.prefix.pattern if fmt.prefix.is_generated else fmt.prefix.value
        suffix = fmt.suffix.pattern if fmt.suffix.is_generated else fmt.suffix.value
        print(f"{name:<14} prefix={prefix!r:<12} suffix={suffix!r:<14} {' '.join(flags)}".rstrip())


def handle_apply(args: argparse.Namespace):
    _run(args, lambda engine: engine.apply_format(args.format, *args.arg))


def handle_remove(args: argparse.Namespace):
    _run(args, lambda engine: engine.remove_format(args.format))


def handle_toggle(args: argparse.Namespace):
    _run(args, lambda engine: engine.toggle(args.format, *args.arg))


def handle_check(args: argparse.Namespace):
    engine = FormatEngine(_load_buffer(args))
    result = engine.has_format(args.format)
    print("true" if result else "false")
    sys.exit(0 if result else 1)


def _add_selection_args(parser: argparse.ArgumentParser, with_output: bool = True):
    parser.add_argument("format", help=f"Format name ({', '.join(FORMATS)})")
    parser.add_argument("input", help="Input text file, or '-' for stdin")
    parser.add_argument(
        "-r",
        "--range",
        type=_parse_range,
        help="Selection as START:END character offsets (default: whole text)",
    )
    if with_output:
        parser.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
        parser.add_argument("--json", action="store_true", help="Output text and new selection as JSON")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mdtoggle", description="Apply, remove and detect Markdown formatting")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", help="Log level (default: $MDTOGGLE_LOG_LEVEL or WARNING)")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Subcommands")

    p_formats = subparsers.add_parser("formats", help="List the built-in formats")
    p_formats.set_defaults(func=handle_formats)

    p_apply = subparsers.add_parser("apply", help="Wrap the selection in a format")
    _add_selection_args(p_apply)
    p_apply.add_argument(
        "-a",
        "--arg",
        action="append",
        default=[],
        help="Extra argument for generated markers, e.g. the URL of a link (repeatable)",
    )
    p_apply.set_defaults(func=handle_apply)

    p_remove = subparsers.add_parser("remove", help="Strip a format from the selection")
    _add_selection_args(p_remove)
    p_remove.set_defaults(func=handle_remove)

    p_toggle = subparsers.add_parser("toggle", help="Remove the format if present, apply it otherwise")
    _add_selection_args(p_toggle)
    p_toggle.add_argument("-a", "--arg", action="append", default=[], help="Extra argument for generated markers")
    p_toggle.set_defaults(func=handle_toggle)

    p_check = subparsers.add_parser("check", help="Exit 0 if the selection carries the format, 1 otherwise")
    _add_selection_args(p_check, with_output=False)
    p_check.set_defaults(func=handle_check)

    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        args.func(args)
    except InvalidFormat as e:
        logger.debug("cli_invalid_format", command=args.command, name=e.name)
        print(f"❌ {e}. Available: {', '.join(FORMATS)}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
