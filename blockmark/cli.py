"""Command-line interface for the block markup converter.

WHY: Editor integrators and parser developers need a simple way to turn
a source file and its parsed tree into a token stream file they can load
or diff. The CLI wires together the full pipeline — file validation,
tree loading, markup generation, stream building, pluggable formatter
output, and file saving — behind a single command.

HOW: Uses argparse to accept a source file, an optional tree path,
output format selection, and output directory. Status messages go to
stderr; output files are saved next to the source (or to --output-dir).

RULES:
- Positional argument: source file path
- --tree: JSON syntax tree; auto-discovers {stem}.tree.json next to the
  source when not given
- --formats: comma-separated formatter keys (default: all registered)
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-tokens-2.json)
- Status output goes to stderr (not stdout)
- Pipeline errors print "Error: ..." and exit with status 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from blockmark.adapters.tree_json import load_tree_file
from blockmark.config import LOG_LEVEL, TREE_SUFFIX
from blockmark.core.errors import BlockmarkError
from blockmark.core.pipeline import build_token_stream
from blockmark.formatters import FORMATTERS
from blockmark.formatters.base import FormatterOutput

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Progress line on stderr, flushed so it shows up before slow steps."""
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _resolve_tree_path(source_path: Path, explicit: Optional[str]) -> Path:
    """Pick the syntax tree file for a source file.

    RULES:
    - Explicit --tree wins
    - Otherwise {stem}.tree.json in the source's directory
    """
    if explicit:
        return Path(explicit).resolve()
    return source_path.with_name(source_path.stem + TREE_SUFFIX)


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Pick a free output path for one formatter output.

    WHY: Users rerun the converter on the same file while iterating on a
    parser. Overwriting previous output would lose the run they want to
    diff against.

    RULES:
    - First choice: {stem}{suffix} (program-tokens.json)
    - Taken: a counter from 2 upward goes before the extension
      (program-tokens-2.json); suffixes without an extension get it at
      the end (program-dump-2)
    """
    candidate = output_dir / (stem + suffix)

    name, dot, ext = suffix.rpartition(".")
    if dot and name:
        ext = dot + ext
    else:
        name, ext = suffix, ""

    counter = 2
    while candidate.exists():
        candidate = output_dir / "{}{}-{}{}".format(stem, name, counter, ext)
        counter += 1
    return candidate


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    """Write one formatter output as UTF-8 and return where it went."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _run_pipeline(args: argparse.Namespace) -> List[Path]:
    """Execute the full conversion for one source file.

    RULES:
    - Validate paths and format keys before reading anything
    - Status messages to stderr at each step
    - Returns the saved file paths
    """
    source_path = Path(args.source_file).resolve()
    if not source_path.is_file():
        _fail("File not found: {}".format(source_path))

    tree_path = _resolve_tree_path(source_path, args.tree)
    if not tree_path.is_file():
        _fail("Syntax tree not found: {} (pass --tree)".format(tree_path))

    output_dir = Path(args.output_dir).resolve() if args.output_dir else source_path.parent
    if not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    if args.formats:
        format_keys = [f.strip() for f in args.formats.split(",") if f.strip()]
        for key in format_keys:
            if key not in FORMATTERS:
                available = ", ".join(sorted(FORMATTERS.keys()))
                _fail("Unknown format '{}'. Available formats: {}".format(key, available))
    else:
        format_keys = list(FORMATTERS.keys())

    _status("Loading {}...".format(source_path.name))
    text = source_path.read_text(encoding="utf-8")
    nodes = load_tree_file(tree_path)
    _status("  {} top-level nodes from {}".format(len(nodes), tree_path.name))

    _status("Building token stream...")
    stream = build_token_stream(nodes, text)

    saved_files: List[Path] = []
    for key in format_keys:
        formatter = FORMATTERS[key]()
        _status("  Running {} formatter...".format(formatter.name))
        for output in formatter.format(stream):
            saved_path = _save_output(output, source_path.stem, output_dir)
            saved_files.append(saved_path)
            _status("  Saved: {}".format(saved_path.name))

    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))
    return saved_files


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the blockmark command.

    Kept apart from main() so tests can check options and defaults
    without running a conversion.
    """
    parser = argparse.ArgumentParser(
        prog="blockmark",
        description="Convert a source file and its parsed syntax tree into a "
                    "block-editor token stream.",
    )

    parser.add_argument(
        "source_file",
        help="Path to the source file the tree was parsed from.",
    )

    parser.add_argument(
        "--tree",
        default=None,
        help="Path to the JSON syntax tree (default: {{stem}}{} next to the source).".format(
            TREE_SUFFIX
        ),
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as source file).",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log pipeline details at DEBUG level.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Run the converter from the command line.

    RULES:
    - argv=None reads sys.argv; tests pass an explicit list
    - Exits with status 1 on any conversion error
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        _run_pipeline(args)
    except BlockmarkError as e:
        logger.debug("Conversion failed", exc_info=True)
        _fail(str(e))
    except ValueError as e:
        # Malformed tree JSON or bad configuration
        _fail(str(e))


if __name__ == "__main__":
    main()
